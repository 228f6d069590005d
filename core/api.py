"""Functional API for Today - programmatic access to task management"""
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from core.exceptions import AmbiguousIdError, DuplicateIdError, TodayError, UnknownIdError
from core.models import Task
from core.storage import TaskRepository
from core.task_store import TaskStore
from analysis.id_prefix import IdDisambiguator
from parsers.program import AddProgram, EditProgram, EmptyProgram, Program, RemoveProgram
from utils.logging_config import get_logger, LogTimer

logger = get_logger('api')

# Recoverable errors while applying a program: reported, the program is skipped
RECOVERABLE_ERRORS = (UnknownIdError, AmbiguousIdError, DuplicateIdError)


class TaskAPI:
    """
    Functional API for Today.

    The backing file is read once when the API is opened and written once
    by save(), and only if something changed.

    Usage:
        api = TaskAPI.open(JsonTaskStorage(path))

        task = api.add_task("Review PR", due=datetime(2024, 1, 15, 18, 0))
        api.edit_task(task.id[:5], "Review PR #42", None)
        api.apply_programs(iter_programs(sys.stdin))

        api.save()
    """

    def __init__(self, storage: TaskRepository, store: Optional[TaskStore] = None):
        """
        Initialize the API.

        Args:
            storage: Repository used by save()
            store: Preloaded store. Empty store if not provided.
        """
        self._storage = storage
        self.store = store if store is not None else TaskStore()
        self._dirty = False

    @classmethod
    def open(cls, storage: TaskRepository) -> 'TaskAPI':
        """Load all tasks from storage"""
        store = TaskStore()
        store.extend(storage.load())
        logger.debug(f"Loaded {len(store)} tasks")
        return cls(storage, store)

    @property
    def dirty(self) -> bool:
        return self._dirty

    # ==================== Task Operations ====================

    def add_task(self, name: str, due: Optional[datetime] = None) -> Task:
        """Create and add a new task"""
        return self.add(Task(name=name, due=due))

    def add(self, task: Task) -> Task:
        self.store.add(task)
        self._dirty = True
        logger.info(f"Task created: {task.id[:8]} - {task.name}", extra={'task_id': task.id})
        return task

    def remove_task(self, id_prefix: str) -> Task:
        """
        Remove the single task matching id_prefix.

        Raises:
            UnknownIdError, AmbiguousIdError
        """
        task = self.store.resolve_prefix(id_prefix)
        self.store.remove(task.id)
        self._dirty = True
        logger.info(f"Task removed: {task.id[:8]} - {task.name}", extra={'task_id': task.id})
        return task

    def edit_task(self, id_prefix: str, name: str, due: Optional[datetime]) -> Tuple[Task, Task]:
        """
        Rename and reschedule the single task matching id_prefix.

        Returns:
            (previous, updated)
        """
        task = self.store.resolve_prefix(id_prefix)
        updated = task.with_name(name).with_due(due)
        previous = self.store.edit(updated)
        self._dirty = True
        logger.info(f"Task edited: {task.id[:8]}", extra={'task_id': task.id})
        return previous, updated

    # ==================== Edit Language ====================

    def apply_program(self, program: Program) -> Optional[Task]:
        """
        Apply one parsed instruction.

        Returns:
            Affected task, None for an empty line
        """
        if isinstance(program, AddProgram):
            return self.add(program.task)
        if isinstance(program, EditProgram):
            _, updated = self.edit_task(program.id_prefix, program.name, program.due)
            return updated
        if isinstance(program, RemoveProgram):
            return self.remove_task(program.id_prefix)
        if isinstance(program, EmptyProgram):
            return None
        raise TypeError(f"Unknown program: {program!r}")

    def apply_programs(
        self,
        programs: Iterable[Program],
        on_error: Optional[Callable[[Program, TodayError], None]] = None
    ) -> Dict[str, int]:
        """
        Apply instructions one by one; recoverable errors skip the instruction.

        Returns:
            Counters: 'added', 'edited', 'removed', 'skipped'
        """
        counts = {'added': 0, 'edited': 0, 'removed': 0, 'skipped': 0}
        kinds = {AddProgram: 'added', EditProgram: 'edited', RemoveProgram: 'removed'}

        with LogTimer(logger, "apply_programs"):
            for program in programs:
                try:
                    self.apply_program(program)
                except RECOVERABLE_ERRORS as e:
                    counts['skipped'] += 1
                    if on_error is not None:
                        on_error(program, e)
                    else:
                        logger.warning(f"Skipped instruction: {e}")
                    continue

                kind = kinds.get(type(program))
                if kind:
                    counts[kind] += 1

        return counts

    # ==================== Queries ====================

    def tasks(self) -> List[Task]:
        return self.store.as_list()

    def tasks_by_due(self) -> List[Task]:
        """All tasks sorted by due date, ASAP tasks first"""
        return sorted(self.store, key=Task.due_key)

    def today(self, today: Optional[date] = None) -> List[Task]:
        """Tasks due today or earlier, sorted by due date"""
        return sorted(self.store.today(today), key=Task.due_key)

    def id_length(self, minimum: Optional[int] = None) -> int:
        """Shortest prefix length that keeps all ids distinct"""
        return IdDisambiguator(minimum).shortest_length(self.store.ids())

    # ==================== Persistence ====================

    def save(self, force: bool = False) -> bool:
        """
        Write the store back to storage if it was modified.

        Returns:
            True if the file was written
        """
        if not (self._dirty or force):
            logger.debug("Nothing changed, skipping save")
            return False
        self._storage.save(self.store.as_list())
        self._dirty = False
        return True
