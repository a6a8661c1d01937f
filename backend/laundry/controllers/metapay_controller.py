"""
Metapay controller - balance account, linked bank accounts, charges, pay logs.
"""

from flask import Blueprint, request

from laundry.core.api_utils import api_response, json_body
from laundry.core.auth_decorators import get_current_actor
from laundry.core.config import get_metapay_max_charge
from laundry.core.limiter_config import limiter
from laundry.db.session import session_scope
from laundry.repositories.metapay_repo import MetapayRepository
from laundry.repositories.pay_log_repo import PayLogRepository
from laundry.schemas.dtos import (
    ChargeRequest,
    MetapayResponse,
    PayAccountCreateRequest,
    PayAccountResponse,
    PayLogResponse,
)
from laundry.services.metapay_service import MetapayService

metapay_bp = Blueprint("metapay", __name__, url_prefix="/metapay")


def _service(db) -> MetapayService:
    return MetapayService(
        MetapayRepository(db), PayLogRepository(db), max_charge=get_metapay_max_charge()
    )


@metapay_bp.route("", methods=["POST"])
def open_metapay():
    actor = get_current_actor()
    with session_scope() as db:
        metapay = _service(db).open_metapay(actor)
    return api_response(
        True, "Metapay opened", MetapayResponse.from_domain(metapay).to_dict(), 201
    )


@metapay_bp.route("", methods=["GET"])
def get_metapay():
    """Own Metapay account; admins may pass ``?user_id=``."""
    actor = get_current_actor()
    with session_scope() as db:
        metapay = _service(db).get_metapay(actor, request.args.get("user_id"))
    return api_response(True, "Metapay found", MetapayResponse.from_domain(metapay).to_dict())


@metapay_bp.route("/accounts", methods=["POST"])
def link_pay_account():
    actor = get_current_actor()
    request_dto = PayAccountCreateRequest.from_dict(json_body())
    with session_scope() as db:
        account = _service(db).link_pay_account(actor, request_dto)
    return api_response(
        True, "Pay account linked", PayAccountResponse.from_domain(account).to_dict(), 201
    )


@metapay_bp.route("/accounts/<int:pay_account_id>", methods=["DELETE"])
def unlink_pay_account(pay_account_id: int):
    actor = get_current_actor()
    with session_scope() as db:
        _service(db).unlink_pay_account(actor, pay_account_id)
    return api_response(True, "Pay account unlinked")


@metapay_bp.route("/charge", methods=["POST"])
@limiter.limit("30 per minute")
def charge():
    actor = get_current_actor()
    request_dto = ChargeRequest.from_dict(json_body())
    with session_scope() as db:
        metapay = _service(db).charge(actor, request_dto)
    return api_response(
        True, "Metapay charged", MetapayResponse.from_domain(metapay).to_dict()
    )


@metapay_bp.route("/logs", methods=["GET"])
def list_pay_logs():
    actor = get_current_actor()
    with session_scope() as db:
        logs = _service(db).list_pay_logs(actor, request.args.get("user_id"))
    return api_response(
        True,
        f"{len(logs)} pay logs",
        [PayLogResponse.from_domain(log).to_dict() for log in logs],
    )
