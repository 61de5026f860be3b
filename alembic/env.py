from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
import logging
import sys
from pathlib import Path

# Ensure the project root (which contains the 'ticketpro' package) is on sys.path even
# if Alembic is executed with CWD set to the 'alembic' directory.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)
logger = logging.getLogger("alembic.env")

from ticketpro.models.base import Base  # noqa: E402
from ticketpro.models import user, ticket_batch, booking  # noqa: F401,E402
from ticketpro.models import group_ticket, umrah_passenger  # noqa: F401,E402
from ticketpro.db.session import SQLALCHEMY_DATABASE_URL  # noqa: E402

target_metadata = Base.metadata

# Same URL the app uses (DATABASE_URL, psycopg driver normalised)
DB_URL = SQLALCHEMY_DATABASE_URL


def run_migrations_offline():
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        {"sqlalchemy.url": DB_URL},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        # Batch mode lets ALTERs run on SQLite as well
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


logger.info("Running migrations with driver %s", DB_URL.split("://", 1)[0])
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
