"""Task repository selection from configuration."""

import logging

from .adapters.local_store import LocalTaskStore
from .adapters.record_store import RecordStoreAdapter
from .config import Config, Session
from .ports import TaskRepository

logger = logging.getLogger(__name__)


def resolve_backend(config: Config) -> str:
    """Return 'remote' or 'local' for the configured backend."""
    if config.store_backend == "remote":
        if not config.api_base:
            raise ValueError("STORE_BACKEND is 'remote' but API_BASE is not set")
        return "remote"
    if config.store_backend == "local":
        return "local"
    return "remote" if config.api_base else "local"


def build_repository(config: Config, session: Session | None = None) -> TaskRepository:
    """Build the task store selected by configuration."""
    backend = resolve_backend(config)
    logger.debug(f"Using {backend} task store")
    if backend == "remote":
        return RecordStoreAdapter(config, session or Session.load(config))
    return LocalTaskStore(config.data_path)
