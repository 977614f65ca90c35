"""Domain models for the task list."""

import time
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

EDITABLE_FIELDS = ("title", "description", "date", "time")
STORAGE_FIELDS = ("id", "title", "description", "date", "time", "completed", "createdAt")

_id_lock = Lock()
_last_id = 0


def next_task_id() -> int:
    """Return a fresh task id.

    Ids are millisecond timestamps, bumped past the last issued id so two
    tasks created within the same millisecond still get distinct ids.
    """
    global _last_id
    with _id_lock:
        now_ms = int(time.time() * 1000)
        _last_id = max(now_ms, _last_id + 1)
        return _last_id


def observe_task_id(task_id: int) -> None:
    """Make sure ids issued from now on are greater than ``task_id``."""
    global _last_id
    with _id_lock:
        if task_id > _last_id:
            _last_id = task_id


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FilterMode(str, Enum):
    """Which subset of tasks to show."""
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class TaskCounts(BaseModel):
    """Summary counts shown next to the filter buttons."""
    total: int = Field(0, ge=0, description="Number of tasks in the store")
    active: int = Field(0, ge=0, description="Number of tasks not yet completed")
    completed: int = Field(0, ge=0, description="Number of completed tasks")


class Task(BaseModel):
    """Task domain model.

    Field contents are not validated here; callers run
    ``validate_task_input`` before building or editing a task.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(default_factory=next_task_id, frozen=True, description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: str = Field(..., description="Task description")
    date: str = Field(..., description="Due date, ISO 8601 (YYYY-MM-DD)")
    time: str = Field(..., description="Due time of day (HH:MM)")
    completed: bool = Field(default=False, description="Completion flag")
    created_at: str = Field(
        default_factory=_utc_timestamp,
        alias="createdAt",
        frozen=True,
        description="Creation timestamp",
    )

    def toggle_complete(self) -> None:
        """Flip the completion flag."""
        self.completed = not self.completed

    def update(self, partial: Union[BaseModel, Mapping[str, Any]]) -> None:
        """Replace the editable fields that are present and non-empty in ``partial``."""
        if isinstance(partial, BaseModel):
            partial = partial.model_dump()

        for field in EDITABLE_FIELDS:
            value = partial.get(field)
            if value:
                setattr(self, field, value)

    def to_storage(self) -> Dict[str, Any]:
        """Return the record written to the persistent store."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_storage(cls, record: Mapping[str, Any]) -> "Task":
        """Rebuild a task from a persisted record, keeping its id, flag and timestamp.

        Raises:
            ValueError: If the record is not a mapping or lacks a stored field
        """
        if not isinstance(record, Mapping):
            raise ValueError(f"expected a task record, got {type(record).__name__}")

        missing = [key for key in STORAGE_FIELDS if key not in record]
        if missing:
            raise ValueError(f"task record is missing {', '.join(missing)}")

        task = cls.model_validate(record)
        observe_task_id(task.id)
        return task
