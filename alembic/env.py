import os
import sys
from logging.config import fileConfig
from alembic import context

# Ensure project root is on sys.path so `core` and `models` can be imported
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from core.config import settings
from core.database import create_db_engine
# Importing the package registers every table on Base.metadata
from models import Base

config = context.config

# DIRECT_URL (unpooled) wins over DATABASE_URL for migrations
config.set_main_option("sqlalchemy.url", settings.MIGRATION_DATABASE_URI)

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _skip_unknown_reflected(object, name, type_, reflected, compare_to):
    # Tables present in the database but not in our models are left alone.
    return not (reflected and compare_to is None)


def run_migrations_offline() -> None:
    context.configure(
        url=settings.MIGRATION_DATABASE_URI,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=settings.MIGRATION_DATABASE_URI.startswith("sqlite"),
        include_object=_skip_unknown_reflected,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_db_engine(settings.MIGRATION_DATABASE_URI)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
            include_object=_skip_unknown_reflected,
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
