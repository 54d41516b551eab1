"""
Logging setup for the salon backend.

Records carry structured data in ``extra={"context": {...}}``. The console
prints it as ``key=value`` pairs in development and as JSON lines in
production; the rotating files under ``backend/logs`` are always JSON.
Every record logged while a request is being served is tagged with that
request's id, which is also echoed back in the X-Request-ID header.
"""

import json
import logging
import logging.handlers
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from flask import Flask, g, has_request_context, request

LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5
QUIET_LOGGERS = ("werkzeug", "urllib3")


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or None) to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = g.get("request_id") if has_request_context() else None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line development output, level colored, context as key=value."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self):
        super().__init__(datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        line = (
            f"{self.formatTime(record, self.datefmt)} "
            f"{color}{record.levelname:<7}{self.RESET} "
            f"{record.name}: {record.getMessage()}"
        )
        context = getattr(record, "context", None)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            line = f"{line} [{pairs}]"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handlers(level: int) -> List[logging.Handler]:
    """app.log at the configured level, salon_errors.log for ERROR and up."""
    handlers: List[logging.Handler] = []
    targets = (("app.log", level), ("salon_errors.log", logging.ERROR))
    for filename, handler_level in targets:
        handler = logging.handlers.RotatingFileHandler(
            LOG_DIR / filename,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        handler.setLevel(handler_level)
        handler.setFormatter(JSONFormatter())
        handlers.append(handler)
    return handlers


def _register_request_hooks(app: Flask) -> None:
    request_logger = logging.getLogger("salon.http")

    @app.before_request
    def start_request():
        g.request_started = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        g.route = request.endpoint or request.path

    @app.after_request
    def finish_request(response):
        started = g.get("request_started")
        if started is not None:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            request_logger.info(
                f"{request.method} {request.path} -> {response.status_code}",
                extra={
                    "context": {
                        "route": g.get("route"),
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                        "remote_addr": request.remote_addr,
                    }
                },
            )
        response.headers.setdefault("X-Request-ID", g.get("request_id", ""))
        return response


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: bool = True,
    use_json_format: bool = False,
) -> None:
    """
    Configure the root logger and, when an app is given, per-request logging.

    Args:
        app: Flask application to register request hooks on
        log_level: Level as int (logging.INFO) or name ("INFO")
        enable_sql_echo: Log every SQL statement through ``sqlalchemy.engine``
        log_to_file: Also write rotating JSON files under backend/logs
        use_json_format: JSON lines on the console instead of colored text
    """
    level = _resolve_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    request_ids = RequestIdFilter()
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(JSONFormatter() if use_json_format else ConsoleFormatter())
    handlers: List[logging.Handler] = [console]

    file_error = None
    if log_to_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.extend(_file_handlers(level))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.addFilter(request_ids)
        root.addHandler(handler)

    if file_error is not None:
        root.warning(
            "File logging unavailable, using console only",
            extra={"context": {"log_dir": str(LOG_DIR), "error": str(file_error)}},
        )

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if enable_sql_echo else logging.WARNING
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        _register_request_hooks(app)

    logging.getLogger("salon").info(
        "Logging configured",
        extra={
            "context": {
                "level": logging.getLevelName(level),
                "sql_echo": enable_sql_echo,
                "log_to_file": log_to_file and file_error is None,
                "json_format": use_json_format,
            }
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; kept as the single entry point scripts import."""
    return logging.getLogger(name)


def log_performance(func_name: str, duration_ms: float, **kwargs) -> None:
    """Log how long an operation took, with any extra context given."""
    context = {"function": func_name, "duration_ms": round(duration_ms, 2), **kwargs}
    get_logger("salon.performance").info(
        f"{func_name} took {duration_ms:.2f}ms", extra={"context": context}
    )
