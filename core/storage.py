"""Менеджер хранения данных для Today"""
import json
import os
import tempfile
from pathlib import Path
from typing import List, Protocol, Sequence, Union

from pydantic import ValidationError

from core.exceptions import StorageError
from core.models import Task
from utils.logging_config import get_logger, LogTimer

logger = get_logger('storage')


class TaskRepository(Protocol):
    """Источник задач: загрузка при старте и сохранение при завершении"""

    def load(self) -> List[Task]:
        ...

    def save(self, tasks: Sequence[Task]) -> None:
        ...


class JsonTaskStorage:
    """Хранение задач в JSON файле (массив объектов {id, name, due})"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Task]:
        """Загрузка задач. Отсутствующий файл - пустой список"""
        with LogTimer(logger, "load_tasks", path=str(self.path)):
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except FileNotFoundError:
                return []
            except json.JSONDecodeError as e:
                raise StorageError(f"Could not parse '{self.path}': {e}", self.path) from e
            except OSError as e:
                raise StorageError(f"Could not read '{self.path}': {e}", self.path) from e

            if not isinstance(data, list):
                raise StorageError(f"Expected a JSON array of tasks in '{self.path}'", self.path)

            try:
                return [Task.from_dict(item) for item in data]
            except (ValidationError, TypeError) as e:
                raise StorageError(f"Invalid task record in '{self.path}': {e}", self.path) from e

    def save(self, tasks: Sequence[Task]) -> None:
        """Сохранение задач целиком. Запись атомарная: файл либо старый, либо новый"""
        payload = [task.to_dict() for task in tasks]

        with LogTimer(logger, "save_tasks", path=str(self.path)):
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
                )
            except OSError as e:
                raise StorageError(
                    f"Could not create directory '{self.path.parent}': {e}", self.path
                ) from e

            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except OSError as e:
                Path(tmp_name).unlink(missing_ok=True)
                raise StorageError(f"Could not save to file '{self.path}': {e}", self.path) from e

        logger.info(f"Saved {len(payload)} tasks to {self.path}")
