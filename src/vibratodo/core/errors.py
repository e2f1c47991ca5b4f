"""Task error taxonomy."""


class TaskError(Exception):
    """Base class for task operation failures."""

    pass


class ValidationFailed(TaskError):
    """Raised when a draft fails local validation (e.g. empty title)."""

    pass


class StoreUnavailable(TaskError):
    """Raised when a store call cannot complete."""

    pass


class StoreOutcomeUnknown(StoreUnavailable):
    """Raised when a store call was sent but its result was lost."""

    pass


class NotFound(TaskError):
    """Raised when the targeted task does not exist."""

    def __init__(self, task_id: str, message: str | None = None):
        self.task_id = task_id
        super().__init__(message or f"Task {task_id} not found")
