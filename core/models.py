"""Data модели Today с Pydantic валидацией"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.exceptions import InvalidTaskNameError

TASK_ID_LENGTH = 32
TASK_ID_PATTERN = r'^[0-9a-f]{32}$'

# Минимально возможная дата для сортировки задач без срока
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)

# Пробельные символы Unicode (свойство White_Space). str.isspace() шире:
# он относит к пробелам ещё и разделители \x1c-\x1f
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def new_task_id() -> str:
    """Новый случайный 128-битный идентификатор в виде 32 hex-символов"""
    return uuid4().hex


def normalize_task_id(value: str) -> str:
    """Приведение идентификатора к виду без разделителей в нижнем регистре"""
    text = str(value).strip().lower()
    if re.fullmatch(r'[0-9a-f]{32}', text):
        return text
    # Формат с дефисами (8-4-4-4-12) и прочие представления UUID
    return UUID(text).hex


def task_name(value: str) -> str:
    """
    Построение названия задачи.

    Название хранится без пробелов по краям и должно содержать
    хотя бы один символ. Сравнение названий - обычное, с учётом регистра.
    """
    if not isinstance(value, str):
        raise InvalidTaskNameError(repr(value))
    trimmed = value.strip(WHITESPACE)
    if not trimmed:
        raise InvalidTaskNameError(value)
    return trimmed


def to_utc(value: datetime) -> datetime:
    """Наивное время считается UTC, остальное переводится в UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Task(BaseModel):
    """Задача: идентификатор, название и срок (None - как можно скорее)"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_task_id, pattern=TASK_ID_PATTERN)
    name: str
    due: Optional[datetime] = None

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v: Any) -> str:
        try:
            return normalize_task_id(v)
        except (ValueError, TypeError, AttributeError):
            raise ValueError(f'Invalid task id: {v!r}')

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return task_name(v)

    @field_validator('due')
    @classmethod
    def validate_due(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v) if v is not None else None

    def with_name(self, name: str) -> 'Task':
        """Копия задачи с новым названием (идентификатор сохраняется)"""
        return Task(id=self.id, name=name, due=self.due)

    def with_due(self, due: Optional[datetime]) -> 'Task':
        """Копия задачи с новым сроком (идентификатор сохраняется)"""
        return Task(id=self.id, name=self.name, due=due)

    def sort_key(self) -> Tuple[str, str, bool, datetime]:
        """Полный порядок: id, затем название, затем срок (без срока - раньше любого)"""
        return (self.id, self.name, self.due is not None, self.due or _EARLIEST)

    def due_key(self) -> Tuple[bool, datetime]:
        """Порядок по сроку для отображения: задачи "как можно скорее" первыми"""
        return (self.due is not None, self.due or _EARLIEST)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь для JSON"""
        return {
            'id': self.id,
            'name': self.name,
            'due': self.due.isoformat().replace('+00:00', 'Z') if self.due else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        """Десериализация из словаря"""
        return cls(**data)

    def __str__(self) -> str:
        due = self.due.strftime('%Y-%m-%d %H:%M') if self.due else 'Now'
        return f"[{self.id[:8]}] {self.name} ({due})"
