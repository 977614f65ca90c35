"""Read-only queries over a task collection."""

import logging
from typing import Any, List, Sequence, Union

from ..models.task import FilterMode, Task, TaskCounts

logger = logging.getLogger(__name__)


def all_tasks(tasks: Sequence[Task]) -> List[Task]:
    return list(tasks)


def active_tasks(tasks: Sequence[Task]) -> List[Task]:
    return [task for task in tasks if not task.completed]


def completed_tasks(tasks: Sequence[Task]) -> List[Task]:
    return [task for task in tasks if task.completed]


def count_tasks(tasks: Sequence[Task]) -> TaskCounts:
    """Count tasks by status; ``total`` is always ``active + completed``."""
    completed = sum(1 for task in tasks if task.completed)
    return TaskCounts(
        total=len(tasks),
        active=len(tasks) - completed,
        completed=completed,
    )


def filter_by_mode(tasks: Sequence[Task], mode: Union[FilterMode, str, Any]) -> List[Task]:
    """Select the tasks shown for a filter mode.

    Args:
        tasks: Tasks in store order
        mode: A ``FilterMode`` or its string value

    Returns:
        The matching tasks in store order. Unknown modes fall back to all
        tasks.
    """
    try:
        mode = FilterMode(mode)
    except ValueError:
        logger.warning(f"Unknown filter mode {mode!r}, showing all tasks")
        return all_tasks(tasks)

    if mode is FilterMode.ACTIVE:
        return active_tasks(tasks)
    if mode is FilterMode.COMPLETED:
        return completed_tasks(tasks)
    return all_tasks(tasks)
