"""Local file task storage adapter."""

import json
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from vibratodo.core.errors import NotFound, StoreUnavailable
from vibratodo.core.tasks import (
    CreatedTask,
    Draft,
    Task,
    apply_fields,
    filter_by_category,
    sort_by_position,
    validate_title,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "vibraTodoTasks"


def _welcome_task() -> Task:
    return Task(
        id=uuid.uuid4().hex,
        title="Welcome to VibraToDo!",
        description="This is your first task. Try completing it with 'vibratodo done'.",
        position=1,
    )


class LocalTaskStore:
    """
    File-based task storage.

    Implements TaskRepository protocol. The whole list lives in one JSON blob
    under a fixed key, loaded once and rewritten on every mutation.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.path = self.data_dir / f"{STORAGE_KEY}.json"
        self._tasks = self._read()

    def _read(self) -> list[Task]:
        """Load the saved blob, seeding an example task when none exists."""
        if not self.path.exists():
            return [_welcome_task()]
        try:
            items = json.loads(self.path.read_text())
            tasks = [Task.from_dict(item) for item in items]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable task file {self.path}: {e}")
            return [_welcome_task()]

        if any("position" not in item for item in items):
            # Older blobs have no positions; their file order is the display order
            logger.info(f"Numbering {len(tasks)} tasks from {self.path} in file order")
            tasks = [replace(t, position=len(tasks) - i) for i, t in enumerate(tasks)]
        return tasks

    def _write(self, tasks: list[Task]) -> None:
        """Persist tasks, then make them the current list."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps([t.to_dict() for t in tasks], indent=2))
        except OSError as e:
            logger.error(f"Failed to save tasks to {self.path}: {e}")
            raise StoreUnavailable(f"Could not write {self.path}: {e}") from e
        self._tasks = tasks

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFound(task_id)

    def list(self, category: str | None = None) -> list[Task]:
        """Tasks in descending position order, optionally for one category."""
        return sort_by_position(filter_by_category(self._tasks, category))

    def create(self, draft: Draft) -> CreatedTask:
        """Add a task and persist the list."""
        validate_title(draft.title)
        fields = draft.fields()
        task = apply_fields(Task(id=uuid.uuid4().hex, title="", created_at=datetime.now()), fields)
        self._write([*self._tasks, task])
        return CreatedTask(id=task.id, created_at=task.created_at)

    def update(self, task_id: str, fields: dict) -> None:
        """Replace the given fields of one task and persist the list."""
        i = self._index_of(task_id)
        tasks = list(self._tasks)
        tasks[i] = apply_fields(tasks[i], fields)
        self._write(tasks)

    def delete(self, task_id: str) -> None:
        """Remove one task and persist the list."""
        i = self._index_of(task_id)
        self._write(self._tasks[:i] + self._tasks[i + 1:])
