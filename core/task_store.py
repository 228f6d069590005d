"""Хранилище задач в памяти: идентичность, порядок и правила редактирования"""
from datetime import date
from itertools import groupby
from typing import Iterable, Iterator, List, Optional

from analysis.due_today import due_today
from core.exceptions import AmbiguousIdError, DuplicateIdError, UnknownIdError
from core.models import Task
from utils.logging_config import get_logger

logger = get_logger('task_store')


class TaskStore:
    """Упорядоченная коллекция задач с уникальными идентификаторами"""

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = []
        if tasks:
            self.extend(tasks)

    def add(self, task: Task):
        """Добавление задачи в конец. Повторный идентификатор отклоняется"""
        if any(t.id == task.id for t in self._tasks):
            raise DuplicateIdError(task.id)
        self._tasks.append(task)
        logger.debug(f"Task added: {task.id[:8]}", extra={'task_id': task.id})

    def remove(self, task_id: str) -> int:
        """Удаление всех задач с данным идентификатором. Возвращает число удалённых"""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = before - len(self._tasks)
        logger.debug(f"Task removed: {task_id[:8]} ({removed})", extra={'task_id': task_id})
        return removed

    def edit(self, task: Task) -> Task:
        """
        Замена задачи с тем же идентификатором на месте.

        Returns:
            Предыдущее значение

        Raises:
            UnknownIdError: задачи с таким идентификатором нет (хранилище не меняется)
        """
        for i, existing in enumerate(self._tasks):
            if existing.id == task.id:
                self._tasks[i] = task
                logger.debug(f"Task edited: {task.id[:8]}", extra={'task_id': task.id})
                return existing
        raise UnknownIdError(task.id)

    def extend(self, tasks: Iterable[Task]):
        """
        Слияние внешнего набора задач.

        Всё хранилище сортируется по полному значению (id, название, срок),
        затем соседние полные дубликаты схлопываются. Порядок добавления
        после вызова не сохраняется.
        """
        merged = sorted([*self._tasks, *tasks], key=Task.sort_key)
        self._tasks = [task for task, _ in groupby(merged)]

        # Разные записи с одним id не адресуются даже полным идентификатором
        for task_id, group in groupby(self._tasks, key=lambda t: t.id):
            count = sum(1 for _ in group)
            if count > 1:
                logger.warning(
                    f"{count} different tasks share the id {task_id}; "
                    f"edit the file to make them addressable",
                    extra={'task_id': task_id}
                )

    def today(self, today: Optional[date] = None) -> Iterator[Task]:
        """Задачи на сегодня (см. analysis.due_today)"""
        return due_today(self._tasks, today)

    def find_by_prefix(self, prefix: str) -> List[Task]:
        """Задачи, идентификатор которых начинается с prefix"""
        prefix = prefix.strip().lower()
        return [t for t in self._tasks if t.id.startswith(prefix)]

    def resolve_prefix(self, prefix: str) -> Task:
        """
        Единственная задача по префиксу идентификатора.

        Raises:
            UnknownIdError: совпадений нет
            AmbiguousIdError: совпадений несколько
        """
        matching = self.find_by_prefix(prefix)
        if not matching:
            raise UnknownIdError(prefix)
        if len(matching) > 1:
            raise AmbiguousIdError(prefix, [t.id for t in matching])
        return matching[0]

    def ids(self) -> List[str]:
        return [t.id for t in self._tasks]

    def as_list(self) -> List[Task]:
        """Копия текущего содержимого в текущем порядке"""
        return list(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task: Task) -> bool:
        return task in self._tasks
