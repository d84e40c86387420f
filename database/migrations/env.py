from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from fanportal.config import get_db_url
from fanportal.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# The user's configured database wins over alembic.ini
if not context.get_x_argument(as_dictionary=True).get('use_ini_url'):
    config.set_main_option('sqlalchemy.url', get_db_url())

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
