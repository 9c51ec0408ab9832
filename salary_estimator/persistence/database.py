"""Engine and session lifecycle for the listing store.

One engine per process: ``init_database`` builds it and ensures the schema,
``get_session`` hands out transactional sessions and ``close_database``
disposes of it again.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker

from salary_estimator.logging import get_logger

from .exceptions import DatabaseConnectionError

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None

logger = get_logger(__name__, component="database")

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def init_database(database_url: str) -> None:
    """Create the engine for database_url and make sure the listings table exists.

    SQLite files get their parent directory created and run in WAL mode.
    Calling it again replaces the previous engine.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite:///./data/salary_estimator.db"

    Raises:
        DatabaseConnectionError: If the URL is invalid or the database cannot be reached
    """
    global _engine, _session_factory

    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    try:
        url = make_url(database_url)
    except ArgumentError as e:
        raise DatabaseConnectionError(f"Invalid database URL: {e}") from e

    logger.info(
        "Initializing database",
        extra={"event": "database.initializing", "database_url": _safe_url(url)},
    )

    try:
        is_sqlite = url.get_backend_name() == "sqlite"
        if is_sqlite:
            _ensure_sqlite_directory(url)

        engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT_SECONDS} if is_sqlite else {},
        )
        if is_sqlite:
            event.listen(engine, "connect", _enable_wal)

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        from .schema import create_schema

        create_schema(engine)
    except DatabaseConnectionError:
        raise
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise DatabaseConnectionError(f"Failed to initialize database {_safe_url(url)}: {e}") from e

    close_database()
    _engine = engine
    _session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    logger.info(
        "Database ready",
        extra={"event": "database.initialised", "database_url": _safe_url(url)},
    )


def _ensure_sqlite_directory(url: URL) -> None:
    if not url.database or url.database == ":memory:":
        return
    directory = Path(url.database).parent
    if not directory.exists():
        logger.info(f"Creating database directory: {directory}")
        directory.mkdir(parents=True, exist_ok=True)


def _enable_wal(dbapi_conn, connection_record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _safe_url(url: URL) -> str:
    """URL for logging, with any password masked."""
    return url.render_as_string(hide_password=True)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Transactional session: commit on success, roll back on error, always close.

    Raises:
        DatabaseConnectionError: If init_database() has not been called
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Rolled back database session: {e}",
            extra={"event": "database.session.rolled_back", "error_type": type(e).__name__},
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )
    return _engine


def close_database() -> None:
    """Dispose of the engine, if any."""
    global _engine, _session_factory

    if _engine is None:
        return
    logger.info("Closing database connections", extra={"event": "database.closing"})
    _engine.dispose()
    _engine = None
    _session_factory = None
