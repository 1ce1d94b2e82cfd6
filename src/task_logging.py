"""Logging setup for the CLI.

Command results and errors are printed by the CLI itself; logging is a
diagnostic channel on stderr, quiet unless TASK_CLI_LOG_LEVEL asks for more.
"""
from __future__ import annotations
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.WARNING, stream: Optional[TextIO] = None) -> logging.Handler:
    """Install a single stderr handler on the root logger and return it.

    Call once, before the first command runs. Existing root handlers are
    removed to avoid duplicate lines.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    return handler
