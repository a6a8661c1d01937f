import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def _enable_sqlite_foreign_keys(engine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed."""
    global _engine
    global _SessionLocal
    global _database_url
    database_url = os.getenv("DATABASE_URL", "sqlite:///./laundry.db")
    # If engine not created yet or DATABASE_URL changed, (re)create engine
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
            _SessionLocal = None

        if database_url.startswith("postgresql") or database_url.startswith(
            "postgres"
        ):
            _engine = create_engine(
                database_url,
                pool_size=10,
                max_overflow=20,
                pool_pre_ping=True,  # Detects and refreshes stale connections
                pool_recycle=3600,
                connect_args={
                    "application_name": "laundry_m",  # Visible in pg_stat_activity
                    "connect_timeout": 10,
                },
                echo=False,  # Controlled by logging config
            )
        elif database_url.startswith("sqlite") and ":memory:" in database_url:
            from sqlalchemy.pool import StaticPool

            # Use a single shared in-memory database across the process
            # so DDL persists across connections.
            _engine = create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            _engine = create_engine(database_url, echo=False)

        if _engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(_engine)

        logger.debug(
            "SQLAlchemy engine created",
            extra={
                "context": {
                    "dialect": _engine.dialect.name,
                    "database": _engine.url.database,
                }
            },
        )
        _database_url = database_url
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return _SessionLocal


def SessionLocal() -> Session:
    """Calling SessionLocal() returns a new Session instance."""
    return get_sessionmaker()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around one service operation.

    Commits when the block exits normally, rolls back when it raises, and
    always closes the session.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Ensure models are imported so Base.metadata is populated
    from laundry.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables():
    """Drop all tables (used by tests and the reset command)."""
    from laundry.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())
