"""Shared plumbing for the SQLAlchemy repositories."""

import functools
import logging

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError

from salon.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

_CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, DisconnectionError)


def store_operation(func):
    """Translate connectivity failures into StoreUnavailableError.

    The session is rolled back so the caller can keep using it. Constraint
    and programming errors propagate unchanged.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except _CONNECTIVITY_ERRORS as exc:
            self.db.rollback()
            logger.error(
                "Store operation failed",
                extra={
                    "context": {
                        "repository": type(self).__name__,
                        "operation": func.__name__,
                        "error": str(exc.orig if hasattr(exc, "orig") else exc),
                    }
                },
                exc_info=True,
            )
            raise StoreUnavailableError("Database is unavailable") from exc

    return wrapper


class SqlAlchemyRepository:
    """Holds the session every repository method works with."""

    def __init__(self, db_session) -> None:
        self.db = db_session
