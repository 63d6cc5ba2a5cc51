import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from translatable import create_app, db  # noqa: E402

config = context.config
fileConfig(config.config_file_name)

# Importing the package registers Translation on db.metadata
target_metadata = db.metadata


def database_url():
    """Database URL the app would connect to, with postgres:// normalised."""
    url = create_app().config['SQLALCHEMY_DATABASE_URI']
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


if context.is_offline_mode():
    context.configure(url=database_url(), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
