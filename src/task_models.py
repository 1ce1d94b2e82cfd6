"""Data models for the task tracker.

Exposes the Task dataclass plus the status keys and timestamp format shared
by the store and the command line. Status is stored as a plain string so a
hand-edited file with an unknown status still loads; only the commands that
set a status restrict it to STATUSES.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

STATUS_TODO = "todo"
STATUS_IN_PROGRESS = "in-progress"
STATUS_DONE = "done"
STATUSES: Tuple[str, ...] = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Local time at second precision, e.g. 2024-05-01 09:30:00."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def is_valid_status(value: str) -> bool:
    return value in STATUSES


@dataclass
class Task:
    """A single tracked task.

    Fields:
        id: Positive integer, last id + 1 on add; a deleted last id can come back.
        description: Free text supplied on add/update.
        status: One of "todo", "in-progress", "done" (not enforced on load).
        created_at: Set once when the task is added.
        updated_at: Refreshed on every description or status change.
    """
    id: int
    description: str
    status: str = STATUS_TODO
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, task_id: int, description: str, now: datetime) -> "Task":
        stamp = format_timestamp(now)
        return cls(id=task_id, description=description, status=STATUS_TODO,
                   created_at=stamp, updated_at=stamp)

    def touch(self, now: datetime) -> None:
        self.updated_at = format_timestamp(now)

    # -------------------- serialization --------------------
    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from one decoded JSON object.

        Missing fields fall back to zero values and unknown keys are dropped.
        Raises TypeError when a field has the wrong JSON type.
        """
        tid = raw.get("id")
        if tid is None:
            tid = 0
        if isinstance(tid, bool) or not isinstance(tid, int):
            raise TypeError(f"id must be an integer, got {tid!r}")
        fields = {}
        for key in ("description", "status", "createdAt", "updatedAt"):
            value = raw.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise TypeError(f"{key} must be a string, got {value!r}")
            fields[key] = value
        return cls(
            id=tid,
            description=fields["description"],
            status=fields["status"],
            created_at=fields["createdAt"],
            updated_at=fields["updatedAt"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description}, status={self.status})"
