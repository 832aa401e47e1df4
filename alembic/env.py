# alembic/env.py
import sys
from os.path import abspath, dirname

sys.path.insert(0, abspath(dirname(dirname(__file__))))

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config
from sqlalchemy.pool import NullPool

from app.core.config import settings
from app.db.base import Base  # imports every model

target_metadata = Base.metadata

config = context.config

if config.config_file_name is not None:
	fileConfig(config.config_file_name)


def run_migrations_offline() -> None:
	context.configure(
		url=settings.DATABASE_URL,
		target_metadata=target_metadata,
		literal_binds=True,
		dialect_opts={"paramstyle": "named"},
		render_as_batch=settings.DATABASE_URL.startswith("sqlite"),
	)

	with context.begin_transaction():
		context.run_migrations()


def run_migrations_online() -> None:
	connectable = engine_from_config(
		{"sqlalchemy.url": settings.DATABASE_URL},
		prefix="sqlalchemy.",
		poolclass=NullPool,
	)

	with connectable.connect() as connection:
		context.configure(
			connection=connection,
			target_metadata=target_metadata,
			render_as_batch=connection.dialect.name == "sqlite",
		)

		with context.begin_transaction():
			context.run_migrations()


if context.is_offline_mode():
	run_migrations_offline()
else:
	run_migrations_online()
