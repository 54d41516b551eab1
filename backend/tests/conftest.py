"""
Central pytest configuration for the salon backend tests.

Environment variables are set before any application import so the lazy
engine binds to an in-memory SQLite database and the app factory skips
rate limiting, metrics and log files.
"""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["METRICS_ENABLED"] = "0"  # Avoid duplicate Prometheus registrations
os.environ["LOG_TO_FILE"] = "0"
os.environ["ALERT_SLOW_QUERY_ENABLED"] = "false"

import pytest  # noqa: E402

from salon.db.session import SessionLocal, create_tables, drop_tables  # noqa: E402
from salon.main import create_app  # noqa: E402
from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)


@pytest.fixture(scope="session")
def app():
    """Flask application created once per test session."""
    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture
def clean_database():
    """Recreate every table so each test starts from an empty store."""
    drop_tables()
    create_tables()
    yield


@pytest.fixture
def db_session(clean_database):
    """SQLAlchemy session bound to the in-memory test database."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(app, clean_database):
    """Flask test client over an empty database."""
    return app.test_client()
