"""Core module for Today"""
from core.exceptions import (
    TodayError,
    InvalidTaskNameError,
    ParseError,
    ParseErrorKind,
    UnknownIdError,
    AmbiguousIdError,
    DuplicateIdError,
    StorageError,
)
from core.models import Task, new_task_id, task_name
from core.task_store import TaskStore
from core.storage import TaskRepository, JsonTaskStorage
from core.api import TaskAPI

__all__ = [
    # Errors
    'TodayError',
    'InvalidTaskNameError',
    'ParseError',
    'ParseErrorKind',
    'UnknownIdError',
    'AmbiguousIdError',
    'DuplicateIdError',
    'StorageError',
    # Models
    'Task',
    'new_task_id',
    'task_name',
    # Store
    'TaskStore',
    # Storage
    'TaskRepository',
    'JsonTaskStorage',
    # API
    'TaskAPI',
]
