from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from core.config import Settings
from core.database import create_db_engine, create_session_factory, init_db
from main import create_app
from storage.memory import MemoryStorage
from storage.sql import SqlStorage

DEV_USER_ID = "dev-user-123"


def make_settings(**overrides) -> Settings:
    values = {"ENVIRONMENT": "test", "AUTH_MODE": "dev", "LOG_LEVEL": "WARNING"}
    values.update(overrides)
    return Settings(**values)


def sqlite_storage() -> SqlStorage:
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return SqlStorage(create_session_factory(engine))


def broken_sql_storage() -> SqlStorage:
    # No tables: every query raises OperationalError.
    return SqlStorage(create_session_factory(create_db_engine("sqlite://")))


def make_client(storage=None, raise_server_exceptions=True, **overrides) -> TestClient:
    app = create_app(make_settings(**overrides), storage if storage is not None else MemoryStorage())
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


def db_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("database is down"))
