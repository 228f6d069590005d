"""Unit tests for analysis/due_today.py"""
from datetime import date, datetime, timezone, timedelta

from analysis.due_today import due_today, is_due, utc_today
from core.models import Task

TODAY = date(2023, 6, 1)


def task_due(due, name="task"):
    return Task(name=name, due=due)


class TestIsDue:
    """Tests for the today rule"""

    def test_asap_is_always_due(self):
        assert is_due(task_due(None), TODAY)

    def test_past_is_due(self):
        assert is_due(task_due(datetime(2023, 5, 30, 12, 0, tzinfo=timezone.utc)), TODAY)

    def test_today_regardless_of_time(self):
        assert is_due(task_due(datetime(2023, 6, 1, 0, 0, tzinfo=timezone.utc)), TODAY)
        assert is_due(task_due(datetime(2023, 6, 1, 23, 59, tzinfo=timezone.utc)), TODAY)

    def test_tomorrow_is_not_due(self):
        assert not is_due(task_due(datetime(2023, 6, 2, 0, 0, tzinfo=timezone.utc)), TODAY)

    def test_date_is_taken_in_utc(self):
        # 2023-06-02 01:00 at +03:00 is 2023-06-01 22:00 UTC
        local = timezone(timedelta(hours=3))
        assert is_due(task_due(datetime(2023, 6, 2, 1, 0, tzinfo=local)), TODAY)


class TestDueToday:
    """Tests for the lazy today view"""

    def test_filters_and_keeps_order(self):
        tasks = [
            task_due(datetime(2023, 6, 2, tzinfo=timezone.utc), "tomorrow"),
            task_due(None, "asap"),
            task_due(datetime(2023, 5, 30, tzinfo=timezone.utc), "past"),
        ]
        assert [t.name for t in due_today(tasks, TODAY)] == ["asap", "past"]

    def test_is_one_shot(self):
        view = due_today([task_due(None)], TODAY)
        assert len(list(view)) == 1
        assert list(view) == []

    def test_snapshot_taken_at_call(self):
        tasks = [task_due(None, "first")]
        view = due_today(tasks, TODAY)
        tasks.append(task_due(None, "second"))
        assert [t.name for t in view] == ["first"]

    def test_default_today_is_utc_date(self):
        assert utc_today() == datetime.now(timezone.utc).date()
        tasks = [task_due(datetime(2999, 1, 1, tzinfo=timezone.utc)), task_due(None)]
        assert len(list(due_today(tasks))) == 1
