"""
Database seeding.

Administrators cannot self-register, so the admin account configured by
ADMIN_USER_ID / ADMIN_PASSWORD is created (or re-promoted) here.
"""

import logging
from typing import Optional

from laundry.core.config import get_admin_credentials
from laundry.db.session import session_scope
from laundry.domain.entities import User as DomainUser
from laundry.repositories.user_repo import UserRepository
from laundry.services.user_service import UserService

logger = logging.getLogger(__name__)


def ensure_admin_user(
    user_id: Optional[str] = None, password: Optional[str] = None
) -> Optional[DomainUser]:
    """
    Ensure the configured admin account exists, is active and has the admin type.

    Idempotent. Explicit arguments take precedence over the environment.
    Returns None (and does nothing) when no credentials are configured.
    """
    if not user_id or not password:
        credentials = get_admin_credentials()
        if credentials is None:
            logger.info(
                "Admin seed skipped (ADMIN_USER_ID/ADMIN_PASSWORD not set)",
                extra={"context": {"component": "seed"}},
            )
            return None
        user_id, password = credentials

    with session_scope() as db:
        return UserService(UserRepository(db)).ensure_admin(user_id, password)
