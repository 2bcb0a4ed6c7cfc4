import logging

from students_api.core.config import Settings
from students_api.storage.base import Storage
from students_api.storage.memory import InMemoryStorage
from students_api.storage.sqlite import SqliteStorage

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> Storage:
    """Build the storage backend named by settings.storage_backend."""
    if settings.storage_backend == "memory":
        logger.info("Using in-memory storage")
        return InMemoryStorage()

    logger.info(f"Using sqlite storage at {settings.storage_path}")
    return SqliteStorage(settings.storage_path, echo=settings.db_echo_sql)
