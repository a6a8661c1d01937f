import logging
import os

from dotenv import load_dotenv
from flask import Flask
from flask_login import LoginManager
from werkzeug.exceptions import HTTPException

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

logger = logging.getLogger(__name__)


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def _register_error_handlers(app: Flask) -> None:
    from laundry.core.api_utils import api_response
    from laundry.core.exceptions import LaundryError

    @app.errorhandler(LaundryError)
    def handle_laundry_error(error: LaundryError):
        log = logger.info if error.status_code < 500 else logger.error
        log(
            "Request rejected",
            extra={
                "context": {
                    "error_code": error.error_code,
                    "status_code": error.status_code,
                    "error": error.message,
                }
            },
        )
        return api_response(False, error.message, None, error.status_code)

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        logger.info("Invalid request", extra={"context": {"error": str(error)}})
        return api_response(False, str(error), None, 400)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return api_response(False, error.description or error.name, None, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(
            "Unhandled error",
            extra={"context": {"error_type": type(error).__name__}},
            exc_info=True,
        )
        return api_response(False, "Internal server error", None, 500)


def _init_sentry(env: str) -> None:
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=env,
        release=os.getenv("GIT_SHA", "unknown"),
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info(
        "Sentry initialized",
        extra={"context": {"environment": env, "traces_sample_rate": 0.1}},
    )


def _init_metrics(app: Flask, env: str) -> None:
    """Expose /metrics for Prometheus scraping."""
    from prometheus_client import CollectorRegistry
    from prometheus_flask_exporter import PrometheusMetrics

    # Test apps are created repeatedly; each gets its own registry
    registry = CollectorRegistry() if app.testing else None
    metrics = PrometheusMetrics(app, registry=registry)
    try:
        metrics.info(
            "app_info",
            "Application information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
    except ValueError as e:
        logger.debug(
            "app_info metric already registered",
            extra={"context": {"error": str(e)}},
        )
    logger.info(
        "Prometheus metrics initialized",
        extra={"context": {"metrics_endpoint": "/metrics"}},
    )


def _init_security_headers(app: Flask) -> None:
    """HTTPS enforcement and security headers (production only)."""
    from flask_talisman import Talisman

    Talisman(
        app,
        # JSON only: nothing may be loaded or framed
        content_security_policy={"default-src": ["'none'"], "frame-ancestors": ["'none'"]},
        force_https=True,
        strict_transport_security=True,
        strict_transport_security_max_age=63072000,
        strict_transport_security_include_subdomains=True,
        frame_options="DENY",
        referrer_policy="no-referrer",
        session_cookie_secure=True,
    )
    logger.info(
        "Security headers enabled", extra={"context": {"force_https": True}}
    )


def create_app(testing: bool = False) -> Flask:
    """Application factory for the laundry booking API."""
    app = Flask(__name__)

    env = os.getenv("FLASK_ENV", "development")
    is_production = env == "production"
    if testing or _is_truthy(os.getenv("TESTING", "")):
        app.config["TESTING"] = True

    from laundry.core.logging_config import setup_logging

    setup_logging(
        app=app,
        log_level=logging.INFO if is_production else logging.DEBUG,
        log_to_file=_is_truthy(os.getenv("LOG_TO_FILE", "1")) and not app.testing,
        use_json_format=is_production,
        slow_query_ms=None if app.testing else 200.0,
    )

    from laundry.core.config import (
        HEALTH_CHECK_TOKEN,
        is_weak_secret,
        log_metapay_config,
        log_timezone_config,
    )

    log_timezone_config()
    log_metapay_config()

    _init_sentry(env)
    _init_metrics(app, env)

    app.config["SECRET_KEY"] = os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")
    app.config["HEALTH_CHECK_TOKEN"] = HEALTH_CHECK_TOKEN
    # Korean labels are returned as-is rather than \u escapes
    app.json.ensure_ascii = False

    # Production validation: fail fast if weak secrets are used
    if is_production:
        secret_key = app.config["SECRET_KEY"]
        if is_weak_secret(secret_key):
            raise ValueError(
                "Production deployment requires strong SECRET_KEY (min 32 chars). "
                "Set FLASK_SECRET_KEY environment variable."
            )
        from laundry.core.security import get_jwt_secret_key

        get_jwt_secret_key()
        _init_security_headers(app)

    app.config.setdefault("SESSION_COOKIE_SECURE", is_production)
    app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)
    app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")

    # Rate limiting
    from laundry.core.limiter_config import is_test_mode, limiter

    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URI", "memory://")
    limiter.init_app(app)
    if (app.testing or is_test_mode()) and os.getenv("RATE_LIMIT_ENABLED", "1") == "0":
        limiter.enabled = False
        logger.info(
            "Rate limiting disabled for testing", extra={"context": {"test_mode": True}}
        )

    # CSRF protection; the JSON blueprints use bearer tokens and are exempted below
    from laundry.core.csrf_config import csrf

    app.config["WTF_CSRF_SSL_STRICT"] = is_production
    csrf.init_app(app)

    # Flask-Login: every request is authenticated from its token
    from laundry.core.auth_decorators import load_user_from_request

    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.request_loader(load_user_from_request)

    from laundry.controllers.auth_controller import auth_bp
    from laundry.controllers.book_controller import book_bp
    from laundry.controllers.health_controller import health_bp
    from laundry.controllers.laundry_controller import laundry_bp
    from laundry.controllers.metapay_controller import metapay_bp
    from laundry.controllers.settlement_controller import settlement_bp
    from laundry.controllers.user_controller import user_bp

    for blueprint in (
        auth_bp,
        user_bp,
        laundry_bp,
        book_bp,
        metapay_bp,
        settlement_bp,
        health_bp,
    ):
        csrf.exempt(blueprint)
        app.register_blueprint(blueprint)

    limiter.exempt(health_bp)

    _register_error_handlers(app)

    from laundry.db.seed import ensure_admin_user
    from laundry.db.session import create_tables

    create_tables()
    ensure_admin_user()

    logger.info(
        "Application created",
        extra={
            "context": {
                "environment": env,
                "testing": app.testing,
                "blueprints": sorted(app.blueprints),
            }
        },
    )
    return app
