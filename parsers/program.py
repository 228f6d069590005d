"""Инструкции языка редактирования задач"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from core.models import Task


@dataclass(frozen=True)
class AddProgram:
    """new <DateTime> <Name>"""
    task: Task


@dataclass(frozen=True)
class EditProgram:
    """<IdPrefix> [edit] <DateTime> <Name>"""
    id_prefix: str
    name: str
    due: Optional[datetime]


@dataclass(frozen=True)
class RemoveProgram:
    """<IdPrefix> remove ..."""
    id_prefix: str


@dataclass(frozen=True)
class EmptyProgram:
    """Пустая строка или только пробелы"""


Program = Union[AddProgram, EditProgram, RemoveProgram, EmptyProgram]
