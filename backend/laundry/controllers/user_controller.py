"""
User controller - profile lookups and updates.
"""

from flask import Blueprint, request

from laundry.core.api_utils import api_response, json_body
from laundry.core.auth_decorators import get_current_actor
from laundry.db.session import session_scope
from laundry.repositories.user_repo import UserRepository
from laundry.schemas.dtos import UserResponse, UserUpdateRequest
from laundry.services.user_service import UserService

user_bp = Blueprint("users", __name__, url_prefix="/users")


@user_bp.route("", methods=["GET"])
def list_users():
    """All users, or those of one type with ``?user_type=`` (admin only)."""
    actor = get_current_actor()
    user_type = request.args.get("user_type")
    with session_scope() as db:
        service = UserService(UserRepository(db))
        if user_type:
            users = service.select_by_user_type(actor, user_type)
        else:
            users = service.select_all_user(actor)

    return api_response(
        True,
        f"{len(users)} users",
        [UserResponse.from_domain(user).to_dict() for user in users],
    )


@user_bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    actor = get_current_actor()
    with session_scope() as db:
        user = UserService(UserRepository(db)).select_by_user_id(actor, user_id)
    return api_response(True, "User found", UserResponse.from_domain(user).to_dict())


@user_bp.route("/<user_id>", methods=["PATCH"])
def update_user(user_id: str):
    actor = get_current_actor()
    request_dto = UserUpdateRequest.from_dict(json_body())
    with session_scope() as db:
        user = UserService(UserRepository(db)).update_user(actor, user_id, request_dto)
    return api_response(True, "User updated", UserResponse.from_domain(user).to_dict())


@user_bp.route("/<user_id>/deactivate", methods=["POST"])
def deactivate_user(user_id: str):
    actor = get_current_actor()
    with session_scope() as db:
        user = UserService(UserRepository(db)).deactivate_user(actor, user_id)
    return api_response(
        True, "User deactivated", UserResponse.from_domain(user).to_dict()
    )
