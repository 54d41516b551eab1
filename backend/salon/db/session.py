import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from salon.core.config import get_database_url
from salon.core.db import register_query_timing

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite leaves foreign key enforcement off unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(database_url: str):
    url = make_url(database_url)
    if url.drivername.startswith("postgres"):
        return create_engine(
            database_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # Detects and refreshes stale connections
            pool_recycle=3600,
            connect_args={
                "application_name": "salon_backend",
                "connect_timeout": 10,
            },
            echo=False,
        )
    if url.drivername.startswith("sqlite"):
        options = {"echo": False, "connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared in-memory database so DDL persists across sessions
            options["poolclass"] = StaticPool
        engine = create_engine(database_url, **options)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, echo=False, pool_pre_ping=True)


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed."""
    global _engine, _SessionLocal, _database_url
    database_url = get_database_url()
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(database_url)
        _SessionLocal = None
        register_query_timing(_engine)
        logger.debug(
            "SQLAlchemy engine created",
            extra={
                "context": {
                    "url": _engine.url.render_as_string(hide_password=True),
                    "dialect": _engine.dialect.name,
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
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal():
    """Return a new Session bound to the current engine."""
    return get_sessionmaker()()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Import models so Base.metadata is populated
    from salon.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables():
    from salon.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())
