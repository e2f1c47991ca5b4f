"""Ports - interfaces/protocols for external dependencies."""

from .notifier import Notifier
from .task_repo import TaskRepository

__all__ = [
    "TaskRepository",
    "Notifier",
]
