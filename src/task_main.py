"""Main entry point for task-cli."""
import sys
from typing import Optional, Sequence

from task_cli import CLI
from task_config import Settings
from task_logging import setup_logging
from task_store import TaskStore


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level_value)
    cli = CLI(TaskStore(settings.tasks_file))
    return cli.run(sys.argv[1:] if argv is None else argv)

if __name__ == "__main__":
    sys.exit(main())
