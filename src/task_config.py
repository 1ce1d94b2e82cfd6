"""Runtime settings resolved from environment variables.

Nothing is required: with no variables set the CLI reads and writes
``tasks.json`` in the current directory and logs warnings only.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "TASK_CLI"
DEFAULT_TASKS_FILE = Path("tasks.json")
DEFAULT_LOG_LEVEL = "WARNING"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env_path(environ: Mapping[str, str], name: str, default: Path) -> Path:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_log_level(environ: Mapping[str, str], name: str, default: str) -> str:
    raw = (environ.get(name) or "").strip().upper()
    if raw and isinstance(logging.getLevelName(raw), int):
        return raw
    return default


@dataclass(frozen=True)
class Settings:
    tasks_file: Path = DEFAULT_TASKS_FILE
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return Settings(
            tasks_file=_env_path(env, _k("FILE"), DEFAULT_TASKS_FILE),
            log_level=_env_log_level(env, _k("LOG_LEVEL"), DEFAULT_LOG_LEVEL),
        )
