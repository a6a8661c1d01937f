"""
Laundry controller - shop registration and lookups.

Shop listings are public; registration requires an owner or admin token.
"""

from flask import Blueprint

from laundry.core.api_utils import api_response, json_body
from laundry.core.auth_decorators import get_current_actor
from laundry.db.session import session_scope
from laundry.repositories.laundry_repo import LaundryRepository
from laundry.repositories.user_repo import UserRepository
from laundry.schemas.dtos import LaundryCreateRequest, LaundryResponse
from laundry.services.laundry_service import LaundryService

laundry_bp = Blueprint("laundries", __name__, url_prefix="/laundries")


def _service(db) -> LaundryService:
    return LaundryService(LaundryRepository(db), UserRepository(db))


@laundry_bp.route("", methods=["GET"])
def list_laundries():
    with session_scope() as db:
        laundries = _service(db).list_laundries()
    return api_response(
        True,
        f"{len(laundries)} laundries",
        [LaundryResponse.from_domain(laundry).to_dict() for laundry in laundries],
    )


@laundry_bp.route("", methods=["POST"])
def register_laundry():
    actor = get_current_actor()
    request_dto = LaundryCreateRequest.from_dict(json_body())
    with session_scope() as db:
        laundry = _service(db).register_laundry(actor, request_dto)
    return api_response(
        True, "Laundry registered", LaundryResponse.from_domain(laundry).to_dict(), 201
    )


@laundry_bp.route("/<int:laundry_id>", methods=["GET"])
def get_laundry(laundry_id: int):
    with session_scope() as db:
        laundry = _service(db).get_laundry(laundry_id)
    return api_response(
        True, "Laundry found", LaundryResponse.from_domain(laundry).to_dict()
    )


@laundry_bp.route("/owner/<user_id>", methods=["GET"])
def list_by_owner(user_id: str):
    actor = get_current_actor()
    with session_scope() as db:
        laundries = _service(db).list_by_owner(actor, user_id)
    return api_response(
        True,
        f"{len(laundries)} laundries",
        [LaundryResponse.from_domain(laundry).to_dict() for laundry in laundries],
    )
