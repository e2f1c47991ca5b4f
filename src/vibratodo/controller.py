"""Task list controller - optimistic task list kept in sync with a store.

The controller owns the in-memory list of tasks for the active category
filter. Mutations are applied locally and persisted through the repository;
when a store call fails the list is rebuilt from the store (rollback-by-reload)
instead of being patched back by hand.
"""

import logging
from dataclasses import replace

from .core.categories import is_known
from .core.errors import NotFound, StoreOutcomeUnknown, StoreUnavailable
from .core.tasks import (
    Direction,
    Draft,
    Outcome,
    Task,
    TaskStats,
    apply_fields,
    compute_stats,
    find_index,
    next_position,
    sort_by_position,
    swap_positions,
    validate_title,
)
from .ports import Notifier, TaskRepository

logger = logging.getLogger(__name__)

ALL = "all"

LOAD_FAILED = "Failed to load tasks. Please try again."
CREATE_FAILED = "Failed to create task. Please try again."
UPDATE_FAILED = "Failed to update task. Please try again."
DELETE_FAILED = "Failed to delete task. Please try again."
MOVE_FAILED = "Failed to reorder tasks. Please try again."


class LoggingNotifier:
    """Notifier that only writes to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class TaskListController:
    """
    Authoritative in-memory view of the tasks matching the current filter.

    Every mutating operation emits exactly one success or failure
    notification; the reload that recovers from a failure is silent.
    """

    def __init__(
        self,
        repository: TaskRepository,
        notifier: Notifier | None = None,
        filter: str = ALL,
    ):
        self.repository = repository
        self.notifier = notifier or LoggingNotifier()
        self.filter = self._check_filter(filter)
        self.tasks: list[Task] = []
        self.loading = False
        self._mounted = False
        self._closed = False
        self._generation = 0

    # ============== Loading ==============

    @staticmethod
    def _check_filter(value: str) -> str:
        if value != ALL and not is_known(value):
            raise ValueError(f"Unknown category filter: {value}")
        return value

    def load(self, filter: str | None = None) -> bool:
        """Replace the list with the store's tasks for the filter. Returns success."""
        if filter is not None:
            self.filter = self._check_filter(filter)
        return self._load(notify=True)

    def set_filter(self, filter: str) -> bool:
        """Switch the active category filter and reload."""
        return self.load(filter)

    def _load(self, notify: bool) -> bool:
        if self._closed:
            return False

        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            tasks = self.repository.list(None if self.filter == ALL else self.filter)
        except (StoreUnavailable, NotFound) as e:
            logger.error(f"Failed to load tasks (filter={self.filter}): {e}")
            if self._is_current(generation):
                self.tasks = []
                if notify:
                    self.notifier.error(LOAD_FAILED)
            return False
        finally:
            if self._is_current(generation):
                self.loading = False
                self._mounted = True

        if not self._is_current(generation):
            logger.debug("Discarding result of a superseded load")
            return False
        self.tasks = sort_by_position(tasks)
        return True

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def close(self) -> None:
        """Tear down the view. Results of calls still in flight are discarded."""
        self._closed = True
        self.loading = False

    # ============== Mutations ==============

    def _check_ready(self) -> None:
        if self._closed:
            raise RuntimeError("Task list has been closed")
        if self.loading and not self._mounted:
            raise RuntimeError("Task list is still loading")

    def _index(self, task_id: str) -> int:
        i = find_index(self.tasks, task_id)
        if i is None:
            raise NotFound(task_id)
        return i

    def _recover(self, message: str, error: Exception) -> Outcome:
        """Surface a failed store call and rebuild the list from the store."""
        outcome = Outcome.UNKNOWN if isinstance(error, StoreOutcomeUnknown) else Outcome.ROLLED_BACK
        logger.warning(f"{message} ({type(error).__name__}: {error}); reloading")
        self.notifier.error(message)
        self._load(notify=False)
        return outcome

    def create(self, draft: Draft) -> Outcome:
        """
        Create a task that sorts first.

        Raises ValidationFailed (without calling the store) for an empty
        title. On success the list is reloaded so store-assigned fields are
        authoritative.
        """
        self._check_ready()
        validate_title(draft.title)
        draft = replace(draft, position=next_position(self.tasks))

        try:
            created = self.repository.create(draft)
        except StoreOutcomeUnknown as e:
            return self._recover(CREATE_FAILED, e)
        except StoreUnavailable as e:
            logger.error(f"Failed to create task: {e}")
            self.notifier.error(CREATE_FAILED)
            return Outcome.ROLLED_BACK

        logger.info(f"Created task {created.id} at position {draft.position}")
        self.notifier.success("Task added successfully!")
        self._load(notify=False)
        return Outcome.APPLIED

    def toggle_complete(self, task_id: str) -> Outcome:
        """Flip a task's completed flag locally, then persist it."""
        self._check_ready()
        i = self._index(task_id)
        completed = not self.tasks[i].completed
        tasks = list(self.tasks)
        tasks[i] = replace(tasks[i], completed=completed)
        self.tasks = tasks

        try:
            self.repository.update(task_id, {"completed": completed})
        except (StoreUnavailable, NotFound) as e:
            return self._recover(UPDATE_FAILED, e)

        self.notifier.success("Task completed!" if completed else "Task reopened")
        return Outcome.APPLIED

    def edit(self, task_id: str, draft: Draft) -> Outcome:
        """Save an in-place edit. Position is left to move()."""
        self._check_ready()
        self._index(task_id)
        validate_title(draft.title)
        fields = draft.fields()
        fields.pop("position", None)

        try:
            self.repository.update(task_id, fields)
        except (StoreUnavailable, NotFound) as e:
            return self._recover(UPDATE_FAILED, e)

        if not self._closed:
            i = find_index(self.tasks, task_id)
            if i is not None:
                tasks = list(self.tasks)
                tasks[i] = apply_fields(tasks[i], fields)
                self.tasks = tasks
        self.notifier.success("Task updated successfully!")
        return Outcome.APPLIED

    def delete(self, task_id: str) -> Outcome:
        """Remove a task locally, then delete it from the store."""
        self._check_ready()
        self._index(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]

        try:
            self.repository.delete(task_id)
        except NotFound:
            logger.info(f"Task {task_id} was already deleted")
        except StoreUnavailable as e:
            return self._recover(DELETE_FAILED, e)

        self.notifier.success("Task deleted successfully!")
        return Outcome.APPLIED

    def move(self, task_id: str, direction: Direction | str) -> Outcome | None:
        """
        Swap a task's position with its neighbour in display order.

        Returns None without touching the store when the task is already at
        the top (up) or bottom (down). The two position updates are not
        atomic: if either fails the list is reloaded, never compensated. Tasks
        sharing a position are reordered by raising the upper one by 1.
        """
        self._check_ready()
        direction = Direction(direction)
        i = self._index(task_id)
        j = i - 1 if direction is Direction.UP else i + 1
        if j < 0 or j >= len(self.tasks):
            return None

        task, neighbour = self.tasks[i], self.tasks[j]
        tied = task.position == neighbour.position
        if tied:
            # Equal positions cannot be swapped; lift the task that ends up on top
            upper = task if direction is Direction.UP else neighbour
            updates = [(upper.id, upper.position + 1)]
        else:
            updates = [(task.id, neighbour.position), (neighbour.id, task.position)]

        try:
            for moved_id, position in updates:
                self.repository.update(moved_id, {"position": position})
        except (StoreUnavailable, NotFound) as e:
            return self._recover(MOVE_FAILED, e)

        if not self._closed:
            tasks = swap_positions(self.tasks, i, j)
            if tied:
                top = min(i, j)
                tasks[top] = replace(tasks[top], position=tasks[top].position + 1)
            self.tasks = tasks
        self.notifier.success(f"Task moved {direction.value}")
        return Outcome.APPLIED

    def stats(self) -> TaskStats:
        """Completion stats for the loaded list."""
        return compute_stats(self.tasks)
