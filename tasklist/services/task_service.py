"""Task service: the create/edit/toggle/delete/clear operations."""

import logging
from threading import RLock
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..config import Settings
from ..models.task import FilterMode, Task, TaskCounts
from .local_storage import JsonFileStorage
from .task_store import TaskStore
from .validation import TaskValidationError, validate_task_input

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this task?"

TaskData = Union[BaseModel, Mapping[str, Any]]
ConfirmPrompt = Callable[[str], bool]


class RenderState(BaseModel):
    """What a view needs to redraw itself after a change."""
    tasks: List[Task] = Field(default_factory=list, description="Every task, in store order")
    counts: TaskCounts = Field(default_factory=TaskCounts, description="Summary counts")


RenderListener = Callable[[RenderState], None]


class TaskService:
    """Task operations over a ``TaskStore``.

    Every mutation validates first, changes the store, persists the whole
    collection and then notifies render listeners. Operations are serialized
    with a lock so the store can be shared between threads.
    """

    def __init__(self, store: TaskStore):
        """Initialize the task service.

        Args:
            store: Store holding the task collection
        """
        self._store = store
        self._lock = RLock()
        self._editing_id: Optional[int] = None
        self._listeners: List[RenderListener] = []
        logger.info(f"Task service initialized with storage key '{store.key}'")

    @property
    def store(self) -> TaskStore:
        return self._store

    # Render signal

    def subscribe(self, listener: RenderListener) -> Callable[[], None]:
        """Register a render listener.

        Args:
            listener: Called with the current ``RenderState`` after each change

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def render_state(self) -> RenderState:
        with self._lock:
            return RenderState(tasks=self._store.all(), counts=self._store.counts())

    def _emit(self) -> None:
        state = RenderState(tasks=self._store.all(), counts=self._store.counts())
        for listener in list(self._listeners):
            listener(state)

    def _commit(self) -> None:
        self._store.persist()
        self._emit()

    # Loading

    def load(self) -> RenderState:
        """Load tasks from storage and render them.

        Returns:
            The loaded render state
        """
        with self._lock:
            self._store.load()
            self._editing_id = None
            self._emit()
            return RenderState(tasks=self._store.all(), counts=self._store.counts())

    # Create

    def create_task(self, data: TaskData) -> Task:
        """Create a new task.

        Args:
            data: Title, description, date and time

        Returns:
            Created task

        Raises:
            TaskValidationError: If a required field is missing
        """
        errors = validate_task_input(data)
        if errors:
            logger.warning(f"Rejected new task: {'; '.join(errors)}")
            raise TaskValidationError(errors)

        fields = data.model_dump() if isinstance(data, BaseModel) else dict(data)

        with self._lock:
            task = Task(
                title=fields["title"],
                description=fields["description"],
                date=fields["date"],
                time=fields["time"],
            )
            self._store.add(task)
            self._commit()

            logger.info(f"Created task {task.id}: {task.title}")
            return task

    # Edit

    @property
    def editing(self) -> Optional[Task]:
        """The task currently being edited, if any."""
        with self._lock:
            if self._editing_id is None:
                return None
            return self._store.get(self._editing_id)

    def begin_edit(self, task_id: int) -> Optional[Task]:
        """Start editing a task, replacing any edit already in progress.

        Args:
            task_id: Task ID

        Returns:
            The task to edit, or None if it does not exist
        """
        with self._lock:
            task = self._store.get(task_id)
            if not task:
                logger.warning(f"Task {task_id} not found for editing")
                return None

            if self._editing_id is not None and self._editing_id != task_id:
                logger.debug(f"Dropping edit of task {self._editing_id}")
            self._editing_id = task_id
            logger.debug(f"Editing task {task_id}")
            return task

    def cancel_edit(self) -> None:
        with self._lock:
            self._editing_id = None

    def edit_task(self, task_id: int, data: TaskData) -> Optional[Task]:
        """Apply new field values to an existing task.

        Args:
            task_id: Task ID
            data: New title, description, date and time

        Returns:
            Updated task if found, None otherwise

        Raises:
            TaskValidationError: If a required field is missing
        """
        errors = validate_task_input(data)
        if errors:
            logger.warning(f"Rejected edit of task {task_id}: {'; '.join(errors)}")
            raise TaskValidationError(errors)

        with self._lock:
            task = self._store.get(task_id)
            if not task:
                logger.warning(f"Task {task_id} not found for update")
                return None

            task.update(data)
            self._store.update(task)
            if self._editing_id == task_id:
                self._editing_id = None
            self._commit()

            logger.info(f"Updated task {task_id}: {task.title}")
            return task

    def submit(self, data: TaskData) -> Task:
        """Handle a form submission.

        Edits the task under edit when there is one, otherwise creates a
        new task. The edit session ends after a successful submit.

        Raises:
            TaskValidationError: If a required field is missing
        """
        with self._lock:
            target = self.editing
            if target is None:
                self._editing_id = None
                return self.create_task(data)

            updated = self.edit_task(target.id, data)
            self._editing_id = None
            return updated

    # Toggle

    def toggle_task(self, task_id: int) -> Optional[Task]:
        """Flip a task between active and completed.

        Args:
            task_id: Task ID

        Returns:
            Updated task if found, None otherwise
        """
        with self._lock:
            task = self._store.get(task_id)
            if not task:
                logger.warning(f"Task {task_id} not found for toggle")
                return None

            task.toggle_complete()
            self._commit()

            logger.info(f"Task {task_id} completed={task.completed}")
            return task

    # Delete

    def delete_task(self, task_id: int, confirm: ConfirmPrompt) -> bool:
        """Delete a task once the user confirms.

        Args:
            task_id: Task ID
            confirm: Asked with the prompt text; must return True to proceed

        Returns:
            True if the task was deleted, False if it was not found or the
            user declined
        """
        with self._lock:
            task = self._store.get(task_id)
            if not task:
                logger.warning(f"Task {task_id} not found for deletion")
                return False

            if not confirm(DELETE_PROMPT):
                logger.info(f"Deletion of task {task_id} cancelled")
                return False

            self._store.remove(task_id)
            if self._editing_id == task_id:
                self._editing_id = None
            self._commit()

            logger.info(f"Deleted task {task_id}: {task.title}")
            return True

    def clear_completed(self) -> int:
        """Remove every completed task.

        Returns:
            Number of tasks removed
        """
        with self._lock:
            if self._editing_id is not None:
                editing = self._store.get(self._editing_id)
                if editing is not None and editing.completed:
                    self._editing_id = None

            removed = self._store.remove_completed()
            self._commit()

            logger.info(f"Cleared {removed} completed tasks")
            return removed

    # Queries

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._lock:
            task = self._store.get(task_id)
            if not task:
                logger.debug(f"Task {task_id} not found")
            return task

    def list_tasks(self, mode: Union[FilterMode, str] = FilterMode.ALL) -> List[Task]:
        """List tasks for a filter mode, in store order."""
        with self._lock:
            tasks = self._store.filter_by_mode(mode)
            logger.debug(f"Listed {len(tasks)} tasks (filter={mode})")
            return tasks

    def get_counts(self) -> TaskCounts:
        with self._lock:
            return self._store.counts()


def initialize_task_service(settings: Settings) -> TaskService:
    """Build a task service over the file storage named in the settings.

    The returned service has already loaded its tasks.
    """
    storage = JsonFileStorage(settings.storage_file)
    service = TaskService(TaskStore(storage, key=settings.storage_key))
    service.load()
    return service
