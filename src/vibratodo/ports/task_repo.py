"""Task repository interface."""

from typing import Protocol

from vibratodo.core.tasks import CreatedTask, Draft, Task


class TaskRepository(Protocol):
    """Interface for persisting tasks in any backend."""

    def list(self, category: str | None = None) -> list[Task]:
        """Fetch tasks in descending position order, optionally for one category."""
        ...

    def create(self, draft: Draft) -> CreatedTask:
        """Create a task. Returns the store-assigned id and creation time."""
        ...

    def update(self, task_id: str, fields: dict) -> None:
        """Persist the given fields only; omitted fields are left untouched."""
        ...

    def delete(self, task_id: str) -> None:
        """Delete a task. Raises NotFound if it is already gone."""
        ...
