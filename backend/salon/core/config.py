"""
Centralized configuration module for application-wide settings.

Every value is read from the environment once at import time and cached in a
module-level global, mirroring how the rest of the application consumes it.
"""

import logging
import os
from datetime import datetime
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Asia/Kolkata', 'UTC')
            Default: 'UTC'
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


APP_TZ = get_app_timezone()


def local_now() -> datetime:
    """Current wall-clock time in APP_TZ as a naive datetime.

    All server-stamped columns (createdAt, updatedAt, lastVisit, paymentDate,
    nextAvailable) are local datetimes without offset.
    """
    return datetime.now(APP_TZ).replace(tzinfo=None)


def log_timezone_config():
    """Log the active timezone configuration."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "tz_env_var": os.getenv("TZ", "UTC"),
            }
        },
    )


# ===========================
# Database Configuration
# ===========================

DEFAULT_DATABASE_URL = "sqlite:///./salon.db"


def get_database_url() -> str:
    """Return the effective DATABASE_URL (SQLite file in development)."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


# ===========================
# API Configuration
# ===========================

API_PREFIX = "/api"


def get_rate_limit_enabled() -> bool:
    """
    Whether Flask-Limiter should enforce limits.

    Environment Variables:
        RATE_LIMIT_ENABLED: '0' disables rate limiting (tests, local scripts)
            Default: '1'
    """
    return _env_flag("RATE_LIMIT_ENABLED", "1")


def get_limiter_storage_uri() -> str:
    return os.getenv("LIMITER_STORAGE_URI", "memory://")


def get_metrics_enabled() -> bool:
    """Whether to expose the Prometheus /metrics endpoint."""
    return _env_flag("METRICS_ENABLED", "1")


def get_log_to_file() -> bool:
    """Whether logs are also written to rotating files under backend/logs."""
    return _env_flag("LOG_TO_FILE", "1")


def get_sql_echo() -> bool:
    """Whether every SQL statement is logged (development debugging)."""
    return _env_flag("SQL_ECHO", "0")


def is_testing() -> bool:
    return _env_flag("TESTING", "false")


def log_api_config():
    """Log API-level toggles at startup."""
    logger.info(
        "API configuration initialized",
        extra={
            "context": {
                "api_prefix": API_PREFIX,
                "rate_limit_enabled": get_rate_limit_enabled(),
                "metrics_enabled": get_metrics_enabled(),
                "log_to_file": get_log_to_file(),
            }
        },
    )


# ===========================
# Slow Query Alerts
# ===========================


def get_slow_query_alerts_enabled() -> bool:
    return _env_flag("ALERT_SLOW_QUERY_ENABLED", "true")


def get_slow_query_threshold_ms() -> int:
    """Duration in milliseconds above which a statement is reported as slow."""
    try:
        return int(os.getenv("ALERT_QUERY_MS_THRESHOLD", "100"))
    except ValueError:
        return 100
