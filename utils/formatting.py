"""Отображение задач через rich"""
from typing import Iterable

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from core.models import Task

ASAP_LABEL = "Now"
DUE_FORMAT = "%Y-%m-%d %H:%M"


def format_due(task: Task) -> str:
    """Срок в виде 'YYYY-MM-DD HH:MM' (UTC) или 'Now'"""
    return task.due.strftime(DUE_FORMAT) if task.due else ASAP_LABEL


def tasks_table(tasks: Iterable[Task], id_length: int, title: str = None) -> Table:
    """Таблица всех задач; идентификатор обрезан до уникального префикса"""
    tasks = list(tasks)
    table = Table(title=title or f"Список задач ({len(tasks)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Срок", style="red", no_wrap=True)
    table.add_column("Название", style="white")

    for task in tasks:
        table.add_row(task.id[:id_length], format_due(task), escape(task.name))

    return table


def today_text(tasks: Iterable[Task]) -> Text:
    """Список задач на сегодня: '<срок>: <название>' по строке на задачу"""
    text = Text()
    for i, task in enumerate(tasks):
        if i:
            text.append("\n")
        text.append(format_due(task), style="bright_red")
        text.append(f": {task.name}")
    return text
