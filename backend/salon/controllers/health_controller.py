"""
Health controller - health check endpoints for monitoring.
"""

import logging

from flask import Blueprint
from sqlalchemy import text

from salon import __version__
from salon.core import config
from salon.core.api_utils import api_response
from salon.core.exceptions import StoreUnavailableError
from salon.db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix=f"{config.API_PREFIX}/health")


@health_bp.route("", methods=["GET"])
def health_check():
    """Liveness probe; never touches the database."""
    return api_response(
        True,
        "Service is running",
        {
            "status": "ok",
            "version": __version__,
            "time": config.local_now().isoformat(),
        },
    )


@health_bp.route("/db", methods=["GET"])
def database_health_check():
    """
    Check that the database answers a trivial query.

    Returns 200 with ``{"database": "ok"}`` or 503 through the
    StoreUnavailableError handler when the store cannot be reached.
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        logger.debug("Health check: database reachable")
        return api_response(True, "Database is reachable", {"database": "ok"})
    except Exception as exc:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"error": str(exc)}},
        )
        raise StoreUnavailableError("Database is unavailable") from exc
    finally:
        db.close()
