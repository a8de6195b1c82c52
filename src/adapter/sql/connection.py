import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///todos.db"

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def normalize_database_url(url: str | None) -> str:
    """Turn the short ``sqlite:todos.db`` form into a SQLAlchemy URL."""
    url = (url or "").strip()
    if not url:
        return DEFAULT_DATABASE_URL
    if url.startswith("sqlite:") and not url.startswith("sqlite://"):
        return "sqlite:///" + url[len("sqlite:"):]
    return url


def create_db_engine(url: str | None) -> Engine:
    """Create a SQLAlchemy engine for the given database URL.

    SQLite connections are shared across FastAPI's worker threads, so
    check_same_thread is disabled; an in-memory database is pinned to a single
    connection or every checkout would see an empty database.
    """
    url = normalize_database_url(url)
    is_sqlite = url.startswith("sqlite")

    kwargs = {"pool_pre_ping": True}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in _IN_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    logger.info("Database engine created", extra={"dialect": engine.dialect.name})
    return engine
