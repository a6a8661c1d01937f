"""
Auth controller: registration, login and logout for the JSON API.

Login returns the JWT in the response body and also sets it as an
HttpOnly ``access_token`` cookie, so both API clients and browsers work.
"""

import logging

from flask import Blueprint, current_app

from laundry.core.api_utils import api_response, json_body
from laundry.core.auth_decorators import (
    ACCESS_TOKEN_COOKIE,
    api_login_required,
    get_current_actor,
)
from laundry.core.limiter_config import LOGIN_RATE_LIMIT, limiter
from laundry.core.security import JWT_EXPIRATION_HOURS
from laundry.db.session import session_scope
from laundry.repositories.user_repo import UserRepository
from laundry.schemas.dtos import LoginRequest, UserRegisterRequest, UserResponse
from laundry.services.user_service import UserService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/register", methods=["POST"])
@limiter.limit("20 per hour")
def register():
    """Register a customer or shop owner."""
    request_dto = UserRegisterRequest.from_dict(json_body())
    with session_scope() as db:
        user = UserService(UserRepository(db)).register_user(request_dto)

    return api_response(
        True, "User registered", UserResponse.from_domain(user).to_dict(), 201
    )


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(LOGIN_RATE_LIMIT)
def login():
    request_dto = LoginRequest.from_dict(json_body())
    with session_scope() as db:
        user, token = UserService(UserRepository(db)).login_user(
            request_dto.user_id, request_dto.password
        )

    response, status = api_response(
        True,
        "Login successful",
        {
            "access_token": token,
            "token_type": "Bearer",
            "user": UserResponse.from_domain(user).to_dict(),
        },
    )
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        max_age=JWT_EXPIRATION_HOURS * 3600,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite="Lax",
    )
    return response, status


@auth_bp.route("/logout", methods=["POST"])
def logout():
    actor = get_current_actor()
    if actor is not None:
        logger.info("User logged out", extra={"context": {"user_id": actor.user_id}})

    response, status = api_response(True, "Logged out")
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        "",
        expires=0,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite="Lax",
    )
    return response, status


@auth_bp.route("/me", methods=["GET"])
@api_login_required
def me():
    actor = get_current_actor()
    return api_response(True, "Current user", UserResponse.from_domain(actor).to_dict())
