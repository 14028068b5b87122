import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from alembic import command
from dealdesk.settings import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_connection: Connection | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # bill_payments rows rely on ON DELETE CASCADE
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = settings.db_url
        if is_sqlite(url):
            _engine = create_engine(url)
            event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            _engine = create_engine(url, pool_pre_ping=True, pool_recycle=1800)
        logger.info("Database engine created (%s)", url.split(":", 1)[0])
    return _engine


def get_connection() -> Connection:
    """Return the shared connection the CLI works on."""
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("Shared DB connection opened")
    return _connection


def _get_alembic_config() -> Config:
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    return Config(ini_path)


def initialize_db() -> None:
    """Bring the schema up to the latest Alembic revision."""
    logger.info("Running Alembic migrations against %s", settings.db_url.split(":", 1)[0])
    command.upgrade(_get_alembic_config(), "head")
    logger.info("Migrations complete")
