"""
Login and ownership predicates shared by the application services.
"""

from typing import Optional

from laundry.core.exceptions import InvalidUserError, NotLoginError
from laundry.domain.entities import User


def require_login(actor: Optional[User]) -> User:
    """Return the actor, or raise NotLoginError for anonymous callers."""
    if actor is None:
        raise NotLoginError()
    return actor


def require_admin(actor: Optional[User]) -> User:
    actor = require_login(actor)
    if not actor.is_admin:
        raise InvalidUserError("Administrator privileges are required")
    return actor


def require_self_or_admin(actor: Optional[User], user_id: str) -> User:
    actor = require_login(actor)
    if not actor.is_admin and actor.user_id != user_id:
        raise InvalidUserError("Only the user or an administrator may do this")
    return actor
