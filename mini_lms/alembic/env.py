import os
import sys
from logging.config import fileConfig

# Make 'mini_lms' importable when alembic is run from a source checkout
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy import create_engine, pool

from alembic import context

from mini_lms.core.config import settings
from mini_lms.core.database import Base
import mini_lms.models  # noqa: F401  registers every table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    # DATABASE_URL from the environment wins over sqlalchemy.url in alembic.ini
    url = settings.DATABASE_URL or config.get_main_option("sqlalchemy.url")
    if not url:
        raise ValueError("DATABASE_URL is not set in the environment or alembic config.")
    return url


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without a live connection."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
