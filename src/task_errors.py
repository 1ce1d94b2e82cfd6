"""Error kinds raised by the store and the command handlers.

Every failure a command can report is a TaskError; the kind decides the exit
code, the message is what the user sees on stderr.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    NOT_FOUND = "not-found"
    INVALID_ARGUMENT = "invalid-argument"
    IO = "io"
    SERIALIZATION = "serialization"


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class TaskError(Exception):
    """A reportable failure carrying its kind and, optionally, the cause.

    ``usage`` is an extra hint line printed after the message for argument
    errors.
    """

    def __init__(self, kind: ErrorKind, message: str,
                 cause: Optional[BaseException] = None,
                 usage: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause
        self.usage = usage

    @property
    def exit_code(self) -> int:
        if self.kind is ErrorKind.INVALID_ARGUMENT:
            return EXIT_USAGE
        return EXIT_FAILURE

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


def usage_error(message: str, usage: Optional[str] = None) -> TaskError:
    return TaskError(ErrorKind.INVALID_ARGUMENT, message, usage=usage)


def not_found(task_id: int) -> TaskError:
    return TaskError(ErrorKind.NOT_FOUND, f"Error: id {task_id} not found in task list")
