"""
Settlement controller - per-shop and global settlement listings with totals.
"""

from flask import Blueprint

from laundry.core.api_utils import api_response
from laundry.core.auth_decorators import get_current_actor
from laundry.db.session import session_scope
from laundry.repositories.laundry_repo import LaundryRepository
from laundry.repositories.settlement_repo import SettlementRepository
from laundry.schemas.dtos import SettlementResponse
from laundry.services.settlement_service import SettlementService
from laundry.utils.formatters import format_won

settlement_bp = Blueprint("settlements", __name__, url_prefix="/settlements")


def _payload(settlements) -> dict:
    total = SettlementService.total(settlements)
    return {
        "settlements": [SettlementResponse.from_domain(s).to_dict() for s in settlements],
        "total": total,
        "total_display": f"{format_won(total)}원",
    }


@settlement_bp.route("", methods=["GET"])
def list_all():
    actor = get_current_actor()
    with session_scope() as db:
        settlements = SettlementService(
            SettlementRepository(db), LaundryRepository(db)
        ).list_all(actor)
    return api_response(True, f"{len(settlements)} settlements", _payload(settlements))


@settlement_bp.route("/laundry/<int:laundry_id>", methods=["GET"])
def list_by_laundry(laundry_id: int):
    actor = get_current_actor()
    with session_scope() as db:
        settlements = SettlementService(
            SettlementRepository(db), LaundryRepository(db)
        ).list_by_laundry(actor, laundry_id)
    return api_response(True, f"{len(settlements)} settlements", _payload(settlements))
