"""Command dispatch for `task-cli`.

Each invocation runs one command: validate the arguments, load the task
list, change or query it, save when something changed, print one result.
Argument problems are reported before the task file is touched.

Exit codes: 0 success (including no-op marks), 1 runtime failure or unknown
id, 2 bad usage.
"""
import logging
import re
import sys
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, TextIO

from task_errors import EXIT_OK, EXIT_USAGE, TaskError, not_found, usage_error
from task_models import STATUS_DONE, STATUS_IN_PROGRESS, STATUSES, Task, is_valid_status
from task_store import TaskStore, filter_by_status, find_index_by_id, next_id
from task_theme import ID_COLOR, STATUS_COLOR, color

PROG = "task-cli"
APP_NAME = "task-tracker-cli"
VERSION = "0.1.0"

HELP_FLAGS = ('-h', '--help', 'help')
VERSION_FLAGS = ('-v', '--version')

ID_RE = re.compile(r'[+-]?[0-9]+')

USAGE_TEXT = f"""{APP_NAME} {VERSION}

Usage:
  {PROG} <command> [options]

Commands:
  add <description...>       Add one task per description
  update <id> <description>  Update the description for the specified task
  delete <id>                Delete specified task
  mark-in-progress <id>      Update the status of specified task to in-progress
  mark-done <id>             Update the status of specified task to done
  list [status]              List all tasks or filtered tasks by status (todo/in-progress/done)

Global:
  -h, --help       Show this help
  -v, --version    Show version"""

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Handler = Callable[[List[str]], int]


class CLI:
    def __init__(self, store: TaskStore, out: Optional[TextIO] = None,
                 err: Optional[TextIO] = None, clock: Clock = datetime.now):
        self.store: TaskStore = store
        self.out: TextIO = out if out is not None else sys.stdout
        self.err: TextIO = err if err is not None else sys.stderr
        self.clock: Clock = clock
        self._commands: Dict[str, Handler] = {
            'add': self._cmd_add,
            'update': self._cmd_update,
            'delete': self._cmd_delete,
            'list': self._cmd_list,
            'mark-in-progress': lambda args: self._cmd_mark(args, STATUS_IN_PROGRESS),
            'mark-done': lambda args: self._cmd_mark(args, STATUS_DONE),
        }

    def run(self, argv: Sequence[str]) -> int:
        """Run one command line (without the program name); return the exit code."""
        if not argv:
            self._usage(self.err)
            return EXIT_USAGE
        cmd, args = argv[0], [_clean_text(arg) for arg in argv[1:]]
        if cmd in HELP_FLAGS:
            self._usage(self.out)
            return EXIT_OK
        if cmd in VERSION_FLAGS:
            self._say(f"{APP_NAME} {VERSION}")
            return EXIT_OK
        handler = self._commands.get(cmd)
        if handler is None:
            logger.debug("Unknown command %r", cmd)
            self._usage(self.err)
            return EXIT_USAGE
        logger.debug("Dispatching %s with %d args", cmd, len(args))
        try:
            return handler(args)
        except TaskError as exc:
            logger.debug("%s failed (%s)", cmd, exc.kind.value, exc_info=exc.cause is not None)
            self._fail(str(exc))
            if exc.usage:
                self._fail(exc.usage)
            return exc.exit_code

    # -------------------- command helpers --------------------
    def _cmd_add(self, args: List[str]) -> int:
        if not args:
            raise usage_error("Error: no task description provided.",
                              f"Usage: {PROG} add <description> [<description> ...]")
        tasks = self.store.load()
        nid = next_id(tasks)
        now = self.clock()
        for description in args:
            tasks.append(Task.new(nid, description, now))
            nid += 1
        self.store.save(tasks)
        self._say(f"Successfully added {len(args)} tasks")
        return EXIT_OK

    def _cmd_update(self, args: List[str]) -> int:
        usage = f"Usage: {PROG} update <id> <description>"
        if len(args) < 2:
            raise usage_error(usage)
        if len(args) > 2:
            raise usage_error("Error: too many arguments", usage)
        tid = _parse_id(args[0])
        tasks = self.store.load()
        task = tasks[self._require_index(tasks, tid)]
        task.description = args[1]
        task.touch(self.clock())
        self.store.save(tasks)
        self._say(f"Successfully updated task {tid}")
        return EXIT_OK

    def _cmd_delete(self, args: List[str]) -> int:
        tid = _single_id(args, f"Usage: {PROG} delete <id>")
        tasks = self.store.load()
        del tasks[self._require_index(tasks, tid)]
        self.store.save(tasks)
        self._say(f"Successfully deleted task {tid}")
        return EXIT_OK

    def _cmd_list(self, args: List[str]) -> int:
        usage = f"Usage: {PROG} list [{'|'.join(STATUSES)}]"
        if len(args) > 1:
            raise usage_error("Error: too many arguments", usage)
        status_filter = args[0].lower() if args else ''
        if args and not is_valid_status(status_filter):
            raise usage_error("Error: invalid status", usage)
        tasks = filter_by_status(status_filter, self.store.load())
        if not tasks:
            if status_filter:
                self._say(f"No tasks with status {status_filter}.")
            else:
                self._say("No tasks available")
            return EXIT_OK
        for task in tasks:
            self._say(_format_row(task))
        return EXIT_OK

    def _cmd_mark(self, args: List[str], new_status: str) -> int:
        tid = _single_id(args, f"Usage: {PROG} mark-{new_status} <id>")
        tasks = self.store.load()
        task = tasks[self._require_index(tasks, tid)]
        if task.status == new_status:
            # no-op: nothing is written
            self._say(f"Task {tid} is already {new_status}.")
            return EXIT_OK
        task.status = new_status
        task.touch(self.clock())
        self.store.save(tasks)
        self._say(f"Successfully updated task {tid} status to {new_status}")
        return EXIT_OK

    # -------------------- shared helpers --------------------
    @staticmethod
    def _require_index(tasks: List[Task], tid: int) -> int:
        idx = find_index_by_id(tasks, tid)
        if idx is None:
            raise not_found(tid)
        return idx

    def _usage(self, stream: TextIO) -> None:
        print(USAGE_TEXT, file=stream)

    def _say(self, line: str) -> None:
        print(line, file=self.out)

    def _fail(self, line: str) -> None:
        print(line, file=self.err)


def _clean_text(raw: str) -> str:
    """Replace undecodable argv bytes (surrogate escapes) with U+FFFD."""
    return raw.encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')


def _parse_id(raw: str) -> int:
    if not ID_RE.fullmatch(raw):
        raise usage_error("Error: first argument must be an integer task id.")
    return int(raw)


def _single_id(args: List[str], usage: str) -> int:
    """Validate the `<command> <id>` shape shared by delete and the mark commands."""
    if not args:
        raise usage_error("Error: no task id provided.", usage)
    if len(args) > 1:
        raise usage_error("Error: too many arguments", usage)
    return _parse_id(args[0])


def _format_row(task: Task) -> str:
    id_cell = color(f"{task.id:<4}", ID_COLOR)
    status_cell = color(f"{task.status:<12}", STATUS_COLOR.get(task.status, ''))
    return f"{id_cell} {status_cell} {task.description}"
