"""Functional core - pure business logic with no I/O."""

from .categories import Category, all_categories, by_id, color_for, display_name_for
from .errors import NotFound, StoreOutcomeUnknown, StoreUnavailable, TaskError, ValidationFailed
from .forms import TaskForm
from .tasks import (
    CreatedTask,
    Direction,
    Draft,
    Outcome,
    Priority,
    Task,
    TaskStats,
    compute_stats,
    next_position,
    sort_by_position,
)

__all__ = [
    # Categories
    "Category",
    "all_categories",
    "by_id",
    "color_for",
    "display_name_for",
    # Errors
    "TaskError",
    "ValidationFailed",
    "StoreUnavailable",
    "StoreOutcomeUnknown",
    "NotFound",
    # Tasks
    "Task",
    "Draft",
    "CreatedTask",
    "TaskStats",
    "Priority",
    "Direction",
    "Outcome",
    "compute_stats",
    "next_position",
    "sort_by_position",
    # Forms
    "TaskForm",
]
