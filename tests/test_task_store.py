import json
from datetime import datetime

import pytest

from task_errors import ErrorKind, TaskError
from task_models import Task
from task_store import TaskStore, filter_by_status, find_index_by_id, next_id


def _task(tid, status="todo", description=None):
    return Task(id=tid, description=description or f"task {tid}", status=status,
                created_at="2024-05-01 09:30:00", updated_at="2024-05-01 09:30:00")


def test_load_missing_file_is_empty(store, tasks_file):
    assert store.load() == []
    assert not tasks_file.exists()


@pytest.mark.parametrize("content", ["", "   \n\t", "null"])
def test_load_empty_content_is_empty(store, tasks_file, content):
    tasks_file.write_text(content)
    assert store.load() == []


def test_save_then_load_keeps_order_and_fields(store):
    tasks = [_task(3, "done"), _task(1), _task(2, "in-progress", "ünïcode ✓")]
    store.save(tasks)
    assert store.load() == tasks


def test_save_writes_two_space_indented_array(store, tasks_file):
    store.save([_task(1)])
    text = tasks_file.read_text(encoding="utf-8")
    assert text.startswith('[\n  {\n    "id": 1,')
    assert json.loads(text) == [{
        "id": 1,
        "description": "task 1",
        "status": "todo",
        "createdAt": "2024-05-01 09:30:00",
        "updatedAt": "2024-05-01 09:30:00",
    }]


def test_save_empty_list(store, tasks_file):
    store.save([])
    assert tasks_file.read_text() == "[]"
    assert store.load() == []


def test_load_accepts_unknown_status_and_missing_fields(store, tasks_file):
    tasks_file.write_text('[{"id": 7, "status": "blocked", "extra": true}]')
    [task] = store.load()
    assert task.id == 7
    assert task.status == "blocked"
    assert task.description == ""
    assert task.created_at == ""


@pytest.mark.parametrize("content", [
    "{not json",
    '{"id": 1}',
    '[1, 2]',
    '[{"id": "1"}]',
    '[{"id": 1, "description": 5}]',
])
def test_load_malformed_is_decode_error(store, tasks_file, content):
    tasks_file.write_text(content)
    with pytest.raises(TaskError) as info:
        store.load()
    assert info.value.kind is ErrorKind.SERIALIZATION
    assert str(info.value).startswith("Error decoding json data: ")
    assert info.value.exit_code == 1


def test_load_unreadable_path_is_io_error(tmp_path):
    # a directory cannot be read as a file
    store = TaskStore(tmp_path)
    with pytest.raises(TaskError) as info:
        store.load()
    assert info.value.kind is ErrorKind.IO
    assert str(info.value).startswith(f"Error opening {tmp_path.name}: ")


def test_save_into_missing_directory_is_io_error(tmp_path):
    store = TaskStore(tmp_path / "missing" / "tasks.json")
    with pytest.raises(TaskError) as info:
        store.save([_task(1)])
    assert info.value.kind is ErrorKind.IO
    assert str(info.value).startswith("Error writing to tasks.json: ")


def test_find_index_by_id():
    tasks = [_task(4), _task(9), _task(9, "done")]
    assert find_index_by_id(tasks, 9) == 1
    assert find_index_by_id(tasks, 4) == 0
    assert find_index_by_id(tasks, 5) is None
    assert find_index_by_id([], 1) is None


def test_filter_by_status_keeps_order():
    tasks = [_task(1, "done"), _task(2), _task(3, "done"), _task(4, "in-progress")]
    assert [t.id for t in filter_by_status("done", tasks)] == [1, 3]
    assert [t.id for t in filter_by_status("todo", tasks)] == [2]
    assert filter_by_status("in-progress", [_task(1)]) == []


def test_filter_by_empty_status_returns_same_list():
    tasks = [_task(1), _task(2, "done")]
    assert filter_by_status("", tasks) is tasks


def test_next_id():
    assert next_id([]) == 1
    assert next_id([_task(1), _task(2)]) == 3
    assert next_id([_task(1), _task(5)]) == 6


def test_next_id_follows_last_task_not_maximum():
    # Hand-edited file with ids out of order: the last id wins, so the
    # next id can collide with an existing one.
    tasks = [_task(3), _task(1), _task(2)]
    assert next_id(tasks) == 3
    assert find_index_by_id(tasks, 3) == 0


def test_task_new_sets_both_timestamps():
    task = Task.new(1, "buy milk", datetime(2024, 1, 2, 3, 4, 5, 999))
    assert task.status == "todo"
    assert task.created_at == task.updated_at == "2024-01-02 03:04:05"


def test_save_unencodable_text_leaves_file_untouched(store, tasks_file):
    store.save([_task(1), _task(2)])
    before = tasks_file.read_bytes()
    with pytest.raises(TaskError) as info:
        store.save([_task(1), _task(2), _task(3, description="bad \udcff")])
    assert info.value.kind is ErrorKind.SERIALIZATION
    assert str(info.value).startswith("Error marshaling tasks: ")
    assert tasks_file.read_bytes() == before


def test_load_null_id_is_zero(store, tasks_file):
    tasks_file.write_text('[{"id": null, "description": "x", "status": "todo"}]')
    [task] = store.load()
    assert task.id == 0
    assert task.description == "x"
