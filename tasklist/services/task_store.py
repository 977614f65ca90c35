"""Task store: the in-memory task list mirrored to local storage."""

import json
import logging
from typing import List, Optional, Sequence

from ..models.task import FilterMode, Task, TaskCounts
from . import queries
from .local_storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "taskList"


class TaskStore:
    """Ordered task collection persisted under a single storage key.

    ``add``, ``update``, ``remove``, ``remove_completed`` and ``clear`` only
    touch memory; callers follow each of them with ``persist``.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._tasks: List[Task] = []

    @property
    def key(self) -> str:
        return self._key

    def __len__(self) -> int:
        return len(self._tasks)

    # Persistence

    def load(self) -> List[Task]:
        """Replace the in-memory list with the persisted one.

        Missing or malformed content loads as an empty list.

        Returns:
            The loaded tasks
        """
        raw = self._storage.get_item(self._key)
        tasks: List[Task] = []

        if raw is not None:
            try:
                records = json.loads(raw)
                if not isinstance(records, list):
                    raise ValueError(f"expected a JSON array, got {type(records).__name__}")
                tasks = [Task.from_storage(record) for record in records]
            except ValueError as e:
                logger.warning(f"Discarding unreadable task data under '{self._key}': {str(e)}")
                tasks = []

        self._tasks = tasks
        logger.info(f"Loaded {len(tasks)} tasks from '{self._key}'")
        return list(tasks)

    def persist(self, tasks: Optional[Sequence[Task]] = None) -> None:
        """Write the whole collection to storage, replacing what was there."""
        if tasks is None:
            tasks = self._tasks
        payload = json.dumps([task.to_storage() for task in tasks], ensure_ascii=False)
        self._storage.set_item(self._key, payload)
        logger.debug(f"Persisted {len(tasks)} tasks to '{self._key}'")

    # In-memory mutation

    def add(self, task: Task) -> None:
        self._tasks.append(task)

    def update(self, task: Task) -> None:
        for index, existing in enumerate(self._tasks):
            if existing.id == task.id:
                self._tasks[index] = task
                return

    def remove(self, task_id: int) -> None:
        self._tasks = [task for task in self._tasks if task.id != task_id]

    def remove_completed(self) -> int:
        """Drop every completed task and return how many were dropped."""
        before = len(self._tasks)
        self._tasks = queries.active_tasks(self._tasks)
        return before - len(self._tasks)

    def clear(self) -> None:
        self._tasks = []

    # Queries

    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def all(self) -> List[Task]:
        return queries.all_tasks(self._tasks)

    def active(self) -> List[Task]:
        return queries.active_tasks(self._tasks)

    def completed(self) -> List[Task]:
        return queries.completed_tasks(self._tasks)

    def counts(self) -> TaskCounts:
        return queries.count_tasks(self._tasks)

    def filter_by_mode(self, mode: FilterMode) -> List[Task]:
        return queries.filter_by_mode(self._tasks, mode)
