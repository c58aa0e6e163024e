"""
Storage handle factory.
Builds the SQLAlchemy engine every catalog component receives explicitly.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from loguru import logger

from .config import Config


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
	# SQLite ignores ON DELETE CASCADE unless enforcement is on for the connection
	cursor = dbapi_connection.cursor()
	cursor.execute("PRAGMA foreign_keys=ON")
	cursor.close()


def create_catalog_engine(url: str = Config.DATABASE_URL, echo: bool = Config.ECHO_SQL) -> Engine:
	"""
	Create the engine for a database URL.
	In-memory SQLite shares one connection so every caller sees the same data.
	"""
	parsed = make_url(url)
	kwargs = {'echo': echo}
	is_sqlite = parsed.get_backend_name() == 'sqlite'
	if is_sqlite and parsed.database in (None, '', ':memory:'):
		kwargs['poolclass'] = StaticPool
		kwargs['connect_args'] = {'check_same_thread': False}

	engine = create_engine(url, **kwargs)
	if is_sqlite:
		event.listen(engine, 'connect', _enable_sqlite_foreign_keys)

	logger.info(f"[Database] Engine ready for {parsed.render_as_string(hide_password=True)}")
	return engine
