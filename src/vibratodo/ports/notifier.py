"""User-facing notification interface."""

from typing import Protocol


class Notifier(Protocol):
    """Interface for success/failure messages shown to the user."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...
