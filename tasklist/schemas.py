"""API request/response schemas for the task list."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models.task import FilterMode, TaskCounts


class TaskInput(BaseModel):
    """Form data for creating or editing a task.

    Every field is optional here so that missing values reach
    ``validate_task_input`` and come back as readable messages.
    """
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    date: Optional[str] = Field(None, description="Due date (YYYY-MM-DD)")
    time: Optional[str] = Field(None, description="Due time (HH:MM)")


class TaskResponse(BaseModel):
    """Schema for task API responses."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: str = Field(..., description="Task description")
    date: str = Field(..., description="Due date")
    time: str = Field(..., description="Due time")
    completed: bool = Field(..., description="Completion flag")
    created_at: str = Field(..., alias="createdAt", description="Creation timestamp")


class TaskListResponse(BaseModel):
    """Schema for task list API responses."""
    tasks: List[TaskResponse] = Field(..., description="Tasks matching the filter")
    counts: TaskCounts = Field(..., description="Counts over the whole store")
    filter: FilterMode = Field(..., description="Filter mode that was applied")


class ClearCompletedResponse(BaseModel):
    """Schema for clear-completed responses."""
    removed: int = Field(..., description="Number of completed tasks removed")
    counts: TaskCounts = Field(..., description="Counts after clearing")


class HealthResponse(BaseModel):
    """Schema for health check responses."""
    status: str = Field(default="healthy", description="Service health status")
    version: str = Field(default="1.0.0", description="Application version")
    tasks: int = Field(default=0, description="Number of tasks loaded")
