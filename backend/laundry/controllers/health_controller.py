"""
Health controller - liveness and readiness endpoints for monitoring.
"""

import logging

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from laundry.core.api_utils import api_response, verify_health_token
from laundry.db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
def liveness():
    """Process is up. No authentication, no database access."""
    return api_response(True, "ok", {"status": "ok"})


@health_bp.route("/ready", methods=["GET"])
def readiness():
    """
    Database round trip.

    When HEALTH_CHECK_TOKEN is configured the X-Health-Token header must
    match it. Returns 503 when the database cannot be reached.
    """
    if current_app.config.get("HEALTH_CHECK_TOKEN") and not verify_health_token():
        return api_response(False, "Invalid health token", None, 401)

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"endpoint": "/health/ready", "error": str(exc)}},
        )
        return api_response(False, "database unavailable", {"status": "error"}, 503)
    finally:
        db.close()

    return api_response(True, "ready", {"status": "ok", "database": "ok"})
