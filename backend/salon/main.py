import logging
import os

from dotenv import load_dotenv
from flask import Flask

# A .env file is only consulted when the process environment has no store configured
if not os.getenv("DATABASE_URL"):
    load_dotenv()

logger = logging.getLogger(__name__)

WEAK_SECRETS = ("dev-secret-change-me", "secret123")
MIN_SECRET_LENGTH = 32


def _init_sentry(env: str) -> None:
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        logger.info("Sentry disabled", extra={"context": {"environment": env}})
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=os.getenv("GIT_SHA", "unknown"),
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,  # customer phones and emails stay out
    )
    logger.info("Sentry enabled", extra={"context": {"environment": env}})


def _init_metrics(app: Flask, env: str) -> None:
    """Expose /metrics; registered before the limiter so scrapes are never limited."""
    from prometheus_flask_exporter import PrometheusMetrics

    metrics = PrometheusMetrics(app)
    try:
        metrics.info(
            "salon_app_info",
            "Salon backend build information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
    except ValueError as exc:
        # The default registry is process-wide; a second app reuses the gauge.
        logger.debug(
            "salon_app_info already registered", extra={"context": {"error": str(exc)}}
        )
    logger.info("Prometheus metrics enabled", extra={"context": {"path": "/metrics"}})


def _configure_secret_key(app: Flask, is_production: bool) -> None:
    secret_key = os.getenv("FLASK_SECRET_KEY", WEAK_SECRETS[0])
    if is_production and (
        secret_key in WEAK_SECRETS or len(secret_key) < MIN_SECRET_LENGTH
    ):
        raise ValueError(
            f"FLASK_SECRET_KEY must be set to at least {MIN_SECRET_LENGTH} "
            "characters in production."
        )
    app.config["SECRET_KEY"] = secret_key


def create_app() -> Flask:
    """Build the Flask app: logging, observability, limiter, routes and schema."""
    from salon.core import config
    from salon.core.logging_config import setup_logging
    from salon.core.validation import StoreIdConverter

    env = os.getenv("FLASK_ENV", "development")
    is_production = env == "production"

    app = Flask(__name__)
    app.url_map.converters["int"] = StoreIdConverter
    app.json.sort_keys = False
    app.config["TESTING"] = config.is_testing()

    setup_logging(
        app=app,
        log_level=logging.INFO if is_production else logging.DEBUG,
        enable_sql_echo=config.get_sql_echo(),
        log_to_file=config.get_log_to_file(),
        use_json_format=is_production,
    )
    config.log_timezone_config()
    config.log_api_config()

    _init_sentry(env)
    if config.get_metrics_enabled():
        _init_metrics(app, env)
    _configure_secret_key(app, is_production)

    from salon.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = config.get_limiter_storage_uri()
    app.config["RATELIMIT_ENABLED"] = config.get_rate_limit_enabled()
    limiter.init_app(app)
    if not config.get_rate_limit_enabled():
        limiter.enabled = False
        logger.info("Rate limiting disabled", extra={"context": {"environment": env}})

    from salon.controllers import ALL_BLUEPRINTS
    from salon.core.api_utils import register_error_handlers

    register_error_handlers(app)
    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint)

    from salon.db.session import create_tables, get_engine

    create_tables()
    engine = get_engine()
    logger.info(
        "Database ready",
        extra={
            "context": {
                "url": engine.url.render_as_string(hide_password=True),
                "dialect": engine.dialect.name,
            }
        },
    )
    return app
