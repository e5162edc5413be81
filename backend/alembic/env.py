"""
Alembic migration environment for the menu scanner SQLite database.

The database URL comes from the programmatic sqlalchemy.url option set by
menu_scanner.db.ensure_schema, then the DATABASE_PATH env var, then the
packaged default menu_scanner/data/wines.db.
"""

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine

# Add backend to Python path so menu_scanner imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def get_database_url() -> str:
    """Resolve the SQLite URL (programmatic option, env var, default)."""
    config_url = config.get_main_option("sqlalchemy.url")
    if config_url:
        return config_url

    env_path = os.getenv("DATABASE_PATH")
    if env_path:
        return f"sqlite:///{env_path}"

    default_path = Path(__file__).parent.parent / "menu_scanner" / "data" / "wines.db"
    return f"sqlite:///{default_path}"


def run_migrations_offline() -> None:
    """Emit migration SQL without a live connection."""
    context.configure(
        url=get_database_url(),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the database."""
    engine = create_engine(get_database_url())

    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=None)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
