"""
Slow query alerts for the SQLAlchemy engine.

Statements slower than ALERT_QUERY_MS_THRESHOLD are logged on the
``sql.alerts`` logger with the request id, the route and masked bind
parameters. Customer contact details and payment references never reach
the log.
"""

import logging
import time
from typing import Any, Dict, Optional

from flask import g, has_request_context
from sqlalchemy import event
from sqlalchemy.engine import Engine

from salon.core import config

logger = logging.getLogger("sql.alerts")

MASKED_PARAM_MARKERS = ("phone", "email", "upi", "transaction")
STATEMENT_LIMIT = 500
PARAM_LIMIT = 200


def _clip(value: Any, limit: int) -> str:
    rendered = str(value)
    return rendered if len(rendered) <= limit else rendered[:limit] + "..."


def mask_params(params: Any) -> Any:
    """Copy of bind parameters with sensitive values replaced by ``***``."""
    if isinstance(params, dict):
        return {
            key: (
                "***"
                if any(m in str(key).lower() for m in MASKED_PARAM_MARKERS)
                else mask_params(value)
            )
            for key, value in params.items()
        }
    if isinstance(params, (list, tuple)):
        return [mask_params(item) for item in params]
    if isinstance(params, bytes):
        return "<binary>"
    return _clip(params, PARAM_LIMIT)


class SlowQueryMonitor:
    """Times cursor executions on one engine and reports the slow ones."""

    def __init__(self, engine: Engine, db_info: Optional[Dict[str, Any]] = None):
        url = engine.url
        self.db_info = db_info or {"db_host": url.host, "db_name": url.database}

    def before_execute(
        self, conn, cursor, statement, parameters, context, executemany
    ):
        context._salon_query_started = time.perf_counter()

    def after_execute(
        self, conn, cursor, statement, parameters, context, executemany
    ):
        started = getattr(context, "_salon_query_started", None)
        if started is None or not config.get_slow_query_alerts_enabled():
            return
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms < config.get_slow_query_threshold_ms():
            return

        compiled = getattr(context, "compiled_parameters", None)
        if compiled:
            parameters = compiled if executemany else compiled[0]

        logger.warning(
            "Slow query detected",
            extra={
                "context": {
                    "alert_type": "slow_query",
                    "duration_ms": round(duration_ms, 2),
                    "statement": _clip(statement or "", STATEMENT_LIMIT),
                    "params": mask_params(parameters),
                    **self._request_info(),
                }
            },
        )

    def _request_info(self) -> Dict[str, Any]:
        info = {k: v for k, v in self.db_info.items() if v}
        if has_request_context():
            info["request_id"] = g.get("request_id")
            info["route"] = g.get("route")
        return info


def register_query_timing(
    engine: Engine, db_info: Optional[Dict[str, Any]] = None
) -> None:
    """Attach a SlowQueryMonitor to the engine once."""
    if getattr(engine, "_salon_query_monitor", None) is not None:
        return
    monitor = SlowQueryMonitor(engine, db_info)
    event.listen(engine, "before_cursor_execute", monitor.before_execute)
    event.listen(engine, "after_cursor_execute", monitor.after_execute)
    engine._salon_query_monitor = monitor
