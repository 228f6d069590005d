"""Unit tests for core/models.py"""
import pytest
from datetime import datetime, timezone, timedelta

from core.exceptions import InvalidTaskNameError
from core.models import Task, new_task_id, normalize_task_id, task_name


class TestTaskName:
    """Tests for task name construction"""

    def test_name_is_trimmed(self):
        assert task_name("  Meet Dave \t") == "Meet Dave"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", "　"])
    def test_blank_name_rejected(self, value):
        with pytest.raises(InvalidTaskNameError):
            task_name(value)

    def test_invalid_name_is_value_error(self):
        """InvalidTaskNameError can be handled as a plain ValueError"""
        with pytest.raises(ValueError):
            task_name(" ")

    def test_comparison_is_case_sensitive(self):
        assert task_name("Milk") != task_name("milk")
        assert task_name("B") < task_name("a")


class TestTaskId:
    """Tests for task identifiers"""

    def test_new_id_is_32_lowercase_hex(self):
        task_id = new_task_id()
        assert len(task_id) == 32
        assert task_id == task_id.lower()
        int(task_id, 16)

    def test_ids_are_random(self):
        assert new_task_id() != new_task_id()

    def test_hyphenated_uuid_is_normalized(self):
        assert normalize_task_id("4DF78A0C-1E2B-4D5F-9A8B-7C6D5E4F3A2B") == "4df78a0c1e2b4d5f9a8b7c6d5e4f3a2b"

    def test_invalid_id_rejected(self):
        with pytest.raises(ValueError):
            Task(id="not-an-id", name="x")


class TestTask:
    """Tests for Task model"""

    def test_default_values(self):
        task = Task(name="Meet Dave")
        assert task.name == "Meet Dave"
        assert task.due is None
        assert len(task.id) == 32

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            Task(name="   ")

    def test_naive_due_is_utc(self):
        task = Task(name="x", due=datetime(2020, 2, 23, 15, 30))
        assert task.due == datetime(2020, 2, 23, 15, 30, tzinfo=timezone.utc)
        assert task.due.utcoffset() == timedelta(0)

    def test_aware_due_is_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        task = Task(name="x", due=datetime(2020, 2, 23, 15, 30, tzinfo=plus_two))
        assert task.due == datetime(2020, 2, 23, 13, 30, tzinfo=timezone.utc)
        assert task.due.tzinfo == timezone.utc

    def test_task_is_immutable(self):
        task = Task(name="x")
        with pytest.raises(Exception):
            task.name = "y"

    def test_with_name_keeps_id(self):
        task = Task(name="Meet Dave")
        renamed = task.with_name("  Meet Bob ")
        assert renamed.id == task.id
        assert renamed.name == "Meet Bob"
        assert task.name == "Meet Dave"

    def test_with_name_validates(self):
        with pytest.raises(ValueError):
            Task(name="Meet Dave").with_name(" ")

    def test_with_due_keeps_id(self):
        task = Task(name="Meet Dave")
        due = datetime(2023, 6, 1, 12, 0, tzinfo=timezone.utc)
        rescheduled = task.with_due(due)
        assert rescheduled.id == task.id
        assert rescheduled.due == due
        assert rescheduled.with_due(None).due is None

    def test_sort_key_orders_by_id_then_name_then_due(self):
        due = datetime(2023, 1, 1, tzinfo=timezone.utc)
        a = Task(id="a" * 32, name="b")
        b = Task(id="a" * 32, name="b", due=due)
        c = Task(id="a" * 32, name="c")
        d = Task(id="b" * 32, name="a")
        assert sorted([d, c, b, a], key=Task.sort_key) == [a, b, c, d]

    def test_due_key_puts_asap_first(self):
        later = Task(name="later", due=datetime(2023, 1, 2, tzinfo=timezone.utc))
        sooner = Task(name="sooner", due=datetime(2023, 1, 1, tzinfo=timezone.utc))
        asap = Task(name="asap")
        assert sorted([later, sooner, asap], key=Task.due_key) == [asap, sooner, later]

    def test_equality_is_full_value(self):
        task = Task(name="x")
        assert task == Task(id=task.id, name="x")
        assert task != Task(id=task.id, name="y")


class TestTaskSerialization:
    """Tests for to_dict / from_dict"""

    def test_to_dict_uses_rfc3339_utc(self):
        task = Task(id="a" * 32, name="Christmas", due=datetime(2022, 12, 24, tzinfo=timezone.utc))
        assert task.to_dict() == {
            'id': "a" * 32,
            'name': "Christmas",
            'due': "2022-12-24T00:00:00Z",
        }

    def test_to_dict_asap_is_null(self):
        assert Task(name="x").to_dict()['due'] is None

    def test_from_dict(self, sample_tasks_data):
        task = Task.from_dict(sample_tasks_data[0])
        assert task.id == "4df78a0c1e2b4d5f9a8b7c6d5e4f3a2b"
        assert task.name == "4th july dinner"
        assert task.due == datetime(2022, 7, 4, 18, 0, tzinfo=timezone.utc)

    def test_from_dict_missing_due(self):
        task = Task.from_dict({'id': "b" * 32, 'name': "x"})
        assert task.due is None


class TestTaskNameWhitespace:
    """Trimming follows Unicode White_Space"""

    def test_information_separators_are_not_trimmed(self):
        assert task_name(" \x1f ") == "\x1f"

    def test_unicode_spaces_are_trimmed(self):
        assert task_name(" \xa0Meet Dave ") == "Meet Dave"
