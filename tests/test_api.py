"""Unit tests for core/api.py"""
import pytest
from datetime import date, datetime, timezone

from core.api import TaskAPI
from core.exceptions import AmbiguousIdError, UnknownIdError
from core.models import Task
from core.storage import JsonTaskStorage
from parsers.command_parser import iter_programs
from parsers.program import AddProgram, EditProgram, EmptyProgram, RemoveProgram


class FakeStorage:
    """In-memory repository recording saves"""

    def __init__(self, tasks=None):
        self.tasks = list(tasks or [])
        self.saves = 0

    def load(self):
        return list(self.tasks)

    def save(self, tasks):
        self.tasks = list(tasks)
        self.saves += 1


class TestTaskAPI:
    """Tests for TaskAPI operations"""

    @pytest.fixture
    def api(self, temp_tasks_file):
        return TaskAPI.open(JsonTaskStorage(temp_tasks_file))

    def test_open_loads_tasks(self, api):
        assert len(api.tasks()) == 3
        assert not api.dirty

    def test_add_task(self, api):
        task = api.add_task("  New task ")
        assert task.name == "New task"
        assert task in api.tasks()
        assert api.dirty

    def test_remove_task_by_prefix(self, api):
        removed = api.remove_task("9b1c")
        assert removed.name == "Buy milk"
        assert len(api.tasks()) == 2

    def test_remove_ambiguous(self, api):
        with pytest.raises(AmbiguousIdError):
            api.remove_task("4df7")
        assert not api.dirty

    def test_edit_task(self, api):
        due = datetime(2022, 5, 4, 18, 0, tzinfo=timezone.utc)
        previous, updated = api.edit_task("4df78", "4th july dinner, not lunch", due)
        assert previous.name == "4th july dinner"
        assert updated.id == previous.id
        assert updated.due == due
        assert api.store.resolve_prefix("4df78") == updated

    def test_edit_unknown(self, api):
        with pytest.raises(UnknownIdError):
            api.edit_task("ffff", "x", None)

    def test_tasks_by_due(self, api):
        names = [t.name for t in api.tasks_by_due()]
        assert names == ["Buy milk", "4th july dinner", "Far future"]

    def test_today(self, api):
        names = [t.name for t in api.today(date(2023, 6, 1))]
        assert names == ["Buy milk", "4th july dinner"]

    def test_id_length(self, api):
        # 4df78a0c... and 4df7f00d... differ at index 4
        assert api.id_length(minimum=1) == 5
        assert api.id_length(minimum=8) == 8


class TestApplyPrograms:
    """Tests for applying the edit language"""

    @pytest.fixture
    def api(self, sample_tasks_data):
        return TaskAPI.open(FakeStorage(Task.from_dict(d) for d in sample_tasks_data))

    def test_apply_each_kind(self, api):
        task = Task(name="added")
        assert api.apply_program(AddProgram(task)) == task
        assert api.apply_program(EditProgram("9b1c", "Buy oat milk", None)).name == "Buy oat milk"
        assert api.apply_program(RemoveProgram("4df7f")).name == "Far future"
        assert api.apply_program(EmptyProgram()) is None
        assert len(api.tasks()) == 3

    def test_unknown_program_type(self, api):
        with pytest.raises(TypeError):
            api.apply_program("new Now x")

    def test_apply_programs_counts_and_skips(self, api):
        lines = [
            "new Now call mom",
            "9b1c edit Now Buy oat milk",
            "4df7 remove",
            "ffff remove",
            "4df7f remove",
            "",
        ]
        errors = []
        counts = api.apply_programs(iter_programs(lines), on_error=lambda p, e: errors.append(e))

        assert counts == {'added': 1, 'edited': 1, 'removed': 1, 'skipped': 2}
        assert isinstance(errors[0], AmbiguousIdError)
        assert isinstance(errors[1], UnknownIdError)
        assert sorted(t.name for t in api.tasks()) == ["4th july dinner", "Buy oat milk", "call mom"]


class TestSave:
    """Tests for conditional save"""

    def test_save_skipped_when_unchanged(self):
        storage = FakeStorage([Task(name="x")])
        api = TaskAPI.open(storage)
        assert api.save() is False
        assert storage.saves == 0

    def test_save_after_change(self):
        storage = FakeStorage()
        api = TaskAPI.open(storage)
        api.add_task("x")
        assert api.save() is True
        assert storage.saves == 1
        assert [t.name for t in storage.tasks] == ["x"]
        assert not api.dirty

    def test_force_save(self):
        storage = FakeStorage()
        api = TaskAPI.open(storage)
        assert api.save(force=True) is True
        assert storage.saves == 1

    def test_round_trip_through_file(self, temp_dir):
        import os
        path = os.path.join(temp_dir, "today.json")
        api = TaskAPI.open(JsonTaskStorage(path))
        api.add_task("persisted", datetime(2023, 1, 1, 9, 30, tzinfo=timezone.utc))
        api.save()

        reopened = TaskAPI.open(JsonTaskStorage(path))
        assert [t.name for t in reopened.tasks()] == ["persisted"]
        assert reopened.tasks()[0].due == datetime(2023, 1, 1, 9, 30, tzinfo=timezone.utc)
