"""
Модуль задач на сегодня

Отбирает задачи со сроком сегодня или раньше, а также задачи без срока
"""

from datetime import date, datetime, timezone
from typing import Iterable, Iterator, Optional

from core.models import Task


def utc_today() -> date:
    """Текущая дата в UTC"""
    return datetime.now(timezone.utc).date()


def is_due(task: Task, today: date) -> bool:
    """Задача без срока всегда актуальна; время суток не учитывается"""
    if task.due is None:
        return True
    return task.due.astimezone(timezone.utc).date() <= today


def due_today(tasks: Iterable[Task], today: Optional[date] = None) -> Iterator[Task]:
    """
    Ленивая одноразовая последовательность задач на сегодня

    Дата "сегодня" и состав задач фиксируются в момент вызова,
    порядок задач сохраняется. Сортировка по сроку - забота отображения.

    Args:
        tasks: Задачи хранилища
        today: Дата отсчёта (по умолчанию текущая дата UTC)
    """
    if today is None:
        today = utc_today()
    snapshot = tuple(tasks)
    return (task for task in snapshot if is_due(task, today))
