from logging.config import fileConfig

from sqlalchemy import create_engine

from alembic import context
from alembic.script import ScriptDirectory

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
import settings

config = context.config

# Interpret the config file for Python logging.
# This line sets up loggers basically.
fileConfig(config.config_file_name)

import database

target_metadata = database.Base.metadata


def process_revision_directives(context, _, directives):
    migration_script = directives[0]
    head_revision = ScriptDirectory.from_config(context.config).get_current_head()
    try:
        head_revision_int = int(head_revision)
    except (TypeError, ValueError):
        new_rev_id = 1
    else:
        new_rev_id = head_revision_int + 1

    migration_script.rev_id = "{0:012}".format(new_rev_id)


def run_migrations_offline():
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    url = get_url()
    print("\nrun migrations offline for url:", url)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        process_revision_directives=process_revision_directives,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode against a live connection."""
    url = get_url()
    print("\nrun migrations online for url:", url)
    connectable = create_engine(url)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            process_revision_directives=process_revision_directives,
        )
        with context.begin_transaction():
            context.run_migrations()


def get_url():
    # Migrations run with the sync psycopg driver
    if settings.DB_URL:
        return settings.DB_URL.replace("+psycopg_async", "+psycopg").replace(
            "+aiosqlite", ""
        )
    return "postgresql+psycopg://{}:{}@{}:{}/{}".format(
        settings.DB_USER,
        settings.DB_PASSWORD,
        settings.DB_HOST,
        settings.DB_PORT,
        settings.DB_DATABASE,
    )


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
