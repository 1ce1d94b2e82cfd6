import io
from datetime import datetime, timedelta
from pathlib import Path

import pytest

import task_theme
from task_cli import CLI
from task_store import TaskStore


class FakeClock:
    """Deterministic clock; advance() moves it forward in whole seconds."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 60) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class Runner:
    """Runs one CLI invocation per call and keeps the captured streams."""

    def __init__(self, store: TaskStore, clock: FakeClock) -> None:
        self.store = store
        self.clock = clock
        self.out = ""
        self.err = ""

    def __call__(self, *argv: str) -> int:
        out, err = io.StringIO(), io.StringIO()
        code = CLI(self.store, out=out, err=err, clock=self.clock).run(list(argv))
        self.out, self.err = out.getvalue(), err.getvalue()
        return code


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setattr(task_theme, "_ENABLE", False)


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.json"


@pytest.fixture()
def store(tasks_file: Path) -> TaskStore:
    return TaskStore(tasks_file)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 9, 30, 0))


@pytest.fixture()
def run(store: TaskStore, clock: FakeClock) -> Runner:
    return Runner(store, clock)
