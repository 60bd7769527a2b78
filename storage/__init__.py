import logging

from fastapi import Request

from core.database import create_db_engine, create_session_factory, init_db
from storage.base import Storage
from storage.fallback import FallbackStorage
from storage.memory import MemoryStorage
from storage.sql import SqlStorage

logger = logging.getLogger(__name__)


def build_storage(settings) -> Storage:
    """Pick the storage backend once, at startup."""
    if not settings.USE_DATABASE:
        logger.info("Using in-memory storage; data is lost on restart")
        return MemoryStorage()

    engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URI)
    init_db(engine)
    storage = SqlStorage(create_session_factory(engine))
    if settings.STORAGE_FALLBACK:
        logger.warning("Using SQL storage with in-memory fallback; failures switch to DEGRADED mode")
        return FallbackStorage(storage, MemoryStorage())
    logger.info(f"Using SQL storage at {engine.url.render_as_string(hide_password=True)}")
    return storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage
