"""Adapters - I/O implementations of ports."""

from .local_store import LocalTaskStore
from .record_store import AuthenticationError, RecordStoreAdapter

__all__ = [
    "RecordStoreAdapter",
    "AuthenticationError",
    "LocalTaskStore",
]
