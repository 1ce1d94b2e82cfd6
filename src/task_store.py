"""Persistence helpers (load/save/lookup) for the task list.

The whole collection lives in one JSON array. Every command loads it in full,
changes it in memory and writes it back in a single write call. There is no
locking and no temp-file swap: two invocations racing on the same file can
lose an update, and a write that fails half way leaves the file truncated.
"""
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from task_errors import ErrorKind, TaskError
from task_models import Task

TASKS_FILE = Path('tasks.json')

logger = logging.getLogger(__name__)


class TaskStore:
    def __init__(self, path: Union[str, Path] = TASKS_FILE):
        self.path: Path = Path(path)

    def load(self) -> List[Task]:
        """Load the task list from disk, preserving file order.

        Missing file, empty file, whitespace only or a bare ``null`` -> [].
        Records are not validated beyond their JSON types.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("No task file at %s, starting empty", self.path)
            return []
        except OSError as exc:
            raise TaskError(ErrorKind.IO, f"Error opening {self.path.name}", exc) from exc
        try:
            text = raw.decode('utf-8')
            if not text.strip():
                return []
            data = json.loads(text)
            tasks = _decode_tasks(data)
        except (ValueError, TypeError) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise TaskError(ErrorKind.SERIALIZATION, "Error decoding json data", exc) from exc
        logger.debug("Loaded %d tasks from %s", len(tasks), self.path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """Overwrite the file with the full list (2-space indent).

        The bytes are built before the file is opened, so an encoding
        failure leaves the existing file alone.
        """
        records = [task.to_dict() for task in tasks]
        try:
            data = json.dumps(records, indent=2, ensure_ascii=False)
            payload = data.encode('utf-8')
        except (TypeError, ValueError) as exc:
            raise TaskError(ErrorKind.SERIALIZATION, "Error marshaling tasks", exc) from exc
        try:
            self.path.write_bytes(payload)
        except OSError as exc:
            raise TaskError(ErrorKind.IO, f"Error writing to {self.path.name}", exc) from exc
        logger.debug("Saved %d tasks to %s", len(records), self.path)


def _decode_tasks(data: object) -> List[Task]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array of tasks, got {type(data).__name__}")
    tasks: List[Task] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise TypeError(f"expected a JSON object per task, got {type(entry).__name__}")
        tasks.append(Task.from_dict(entry))
    return tasks


# -------------------- queries --------------------
def find_index_by_id(tasks: List[Task], task_id: int) -> Optional[int]:
    """Position of the first task with ``task_id``, or None."""
    for idx, task in enumerate(tasks):
        if task.id == task_id:
            return idx
    return None


def filter_by_status(status: str, tasks: List[Task]) -> List[Task]:
    """Tasks whose status equals ``status``, in list order.

    An empty filter returns the list itself, not a copy.
    """
    if not status:
        return tasks
    return [task for task in tasks if task.status == status]


def next_id(tasks: List[Task]) -> int:
    """Id for the next added task: last task's id + 1, or 1 when empty.

    Uses the last element rather than the maximum, so a hand-edited file
    with ids out of order can yield a duplicate id.
    """
    if not tasks:
        return 1
    return tasks[-1].id + 1
