"""
Authentication helpers for the JSON API.

Clients authenticate with the JWT returned by ``POST /auth/login``, sent
either as ``Authorization: Bearer <token>`` or in the ``access_token``
cookie set by the same endpoint. Flask-Login's request loader resolves the
token into a database user; services receive it as a domain ``User``
through :func:`get_current_actor`.

Examples:
    @book_bp.route("", methods=["POST"])
    def create_book():
        actor = get_current_actor()
        ...

    @auth_bp.route("/me")
    @api_login_required
    def me():
        ...
"""

import logging
from functools import wraps
from typing import Optional

from flask import Request
from flask_login import current_user

from laundry.core.api_utils import api_response
from laundry.core.exceptions import NotLoginError
from laundry.core.security import get_user_from_token
from laundry.domain.entities import User as DomainUser

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"


def token_from_request(req: Request) -> Optional[str]:
    """Return the bearer token from the Authorization header or the cookie."""
    auth_header = req.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer ") :].strip()
        if token:
            return token
    return req.cookies.get(ACCESS_TOKEN_COOKIE) or None


def load_user_from_request(req: Request):
    """Flask-Login request loader: token -> active database user, or None."""
    token = token_from_request(req)
    if not token:
        return None

    user_data = get_user_from_token(token)
    if not user_data:
        logger.debug("Rejected invalid or expired token")
        return None

    from laundry.db.session import SessionLocal
    from laundry.repositories.user_repo import UserRepository

    with SessionLocal() as db:
        user = UserRepository(db).get_db_by_id(user_data["user_id"])
        if user and user.is_active:
            return user

    return None


def get_current_actor() -> Optional[DomainUser]:
    """Return the authenticated caller as a domain User, or None when anonymous."""
    if not current_user or not getattr(current_user, "is_authenticated", False):
        return None

    return DomainUser(
        user_id=current_user.user_id,
        user_name=current_user.user_name,
        user_tel=current_user.user_tel or "",
        user_address=current_user.user_address,
        user_type=current_user.user_type,
        is_active=current_user.is_active,
        user_insert_date=current_user.user_insert_date,
    )


def api_login_required(f):
    """Return the 401 envelope instead of running the view for anonymous callers."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_actor() is None:
            error = NotLoginError()
            return api_response(False, error.message, None, error.status_code)
        return f(*args, **kwargs)

    return decorated_function
