"""
Centralized configuration module for application-wide settings.

This module provides centralized configuration for timezone handling,
Metapay limits and the admin seed account, read once from the environment.
"""

import os
import logging
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to Asia/Seoul if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Asia/Seoul', 'UTC')
            Default: 'Asia/Seoul'

    Examples:
        >>> # In .env file:
        >>> # TZ=Asia/Seoul
        >>> tz = get_app_timezone()
        >>> print(tz)  # Asia/Seoul
    """
    tz_name = os.getenv("TZ", "Asia/Seoul")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


# Global timezone instance - initialized once at import time
APP_TZ = get_app_timezone()


def log_timezone_config():
    """Log the active timezone configuration during startup."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "tz_env_var": os.getenv("TZ", "Asia/Seoul"),
            }
        },
    )


# ===========================
# Metapay Configuration
# ===========================


def get_metapay_max_charge() -> int:
    """
    Get the largest amount (in won) accepted by a single Metapay charge.

    Environment Variables:
        METAPAY_MAX_CHARGE: Positive integer amount in won
            Default: 2000000
    """
    raw = os.getenv("METAPAY_MAX_CHARGE", "2000000")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning(
            "Invalid METAPAY_MAX_CHARGE, using default",
            extra={"context": {"value": raw}},
        )
        return 2000000
    if value <= 0:
        logger.warning(
            "METAPAY_MAX_CHARGE must be positive, using default",
            extra={"context": {"value": raw}},
        )
        return 2000000
    return value


METAPAY_MAX_CHARGE = get_metapay_max_charge()


# ===========================
# Admin Seed Configuration
# ===========================


def get_admin_credentials() -> Optional[tuple]:
    """
    Get the (user_id, password) pair of the admin account seeded at startup.

    Returns:
        tuple | None: Credentials, or None when ADMIN_USER_ID/ADMIN_PASSWORD are unset
    """
    user_id = os.getenv("ADMIN_USER_ID", "").strip()
    password = os.getenv("ADMIN_PASSWORD", "")
    if not user_id or not password:
        return None
    return user_id, password


# ===========================
# Secret Configuration
# ===========================

# Development defaults that production startup refuses
WEAK_SECRETS = ("dev-secret-change-me", "dev-jwt-secret-change-me", "secret123")
MIN_SECRET_LENGTH = 32


def is_weak_secret(secret: str) -> bool:
    return secret in WEAK_SECRETS or len(secret) < MIN_SECRET_LENGTH


# ===========================
# Health Check Configuration
# ===========================


def get_health_check_token() -> Optional[str]:
    """Get the token required by internal health checks (None disables them)."""
    return os.getenv("HEALTH_CHECK_TOKEN", None)


HEALTH_CHECK_TOKEN = get_health_check_token()


def log_metapay_config():
    """Log the active Metapay configuration during startup."""
    logger.info(
        "Metapay configuration initialized",
        extra={
            "context": {
                "max_charge": METAPAY_MAX_CHARGE,
                "env_var": os.getenv("METAPAY_MAX_CHARGE", "2000000 (default)"),
            }
        },
    )
