"""Иерархия исключений Today"""
from enum import Enum
from typing import List, Optional


class TodayError(Exception):
    """Базовое исключение приложения"""


class InvalidTaskNameError(TodayError, ValueError):
    """Название задачи пустое или состоит только из пробелов"""

    def __init__(self, value: str):
        self.value = value
        super().__init__("A task name must have at least one printable character")


class ParseErrorKind(Enum):
    """Вид ошибки разбора строки команды"""
    INVALID_TASK_NAME = "InvalidTaskName"
    INVALID_DUE = "InvalidDue"
    EXPECTED_EOF = "ExpectedEOF"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    UNEXPECTED_EOF = "UnexpectedEOF"


class ParseError(TodayError):
    """
    Ошибка разбора строки языка редактирования.

    column - смещение в байтах (UTF-8) от начала строки,
    char - встреченный символ для ExpectedEOF / UnexpectedToken.
    """

    def __init__(self, kind: ParseErrorKind, column: int, char: Optional[str] = None):
        self.kind = kind
        self.column = column
        self.char = char
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.char is not None:
            return f"{self.kind.value}({self.char!r}) at column {self.column}"
        return f"{self.kind.value} at column {self.column}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.kind, self.column, self.char) == (other.kind, other.column, other.char)

    def __hash__(self) -> int:
        return hash((self.kind, self.column, self.char))


class UnknownIdError(TodayError):
    """Задача с указанным идентификатором (или префиксом) не найдена"""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"No task found with the id '{task_id}'")


class AmbiguousIdError(TodayError):
    """Префикс идентификатора подходит к нескольким задачам"""

    def __init__(self, prefix: str, candidates: List[str]):
        self.prefix = prefix
        self.candidates = candidates
        super().__init__(
            f"More than one possible task was found with the id '{prefix}' "
            f"({len(candidates)} matches)"
        )


class DuplicateIdError(TodayError):
    """Задача с таким идентификатором уже есть в хранилище"""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"A task with the id '{task_id}' already exists")


class StorageError(TodayError):
    """Ошибка чтения или записи файла задач. Фатальна для текущего запуска"""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)
