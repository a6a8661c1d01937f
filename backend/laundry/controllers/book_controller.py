"""
Booking controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Builds one BookService per request over a single transactional session
- Leaves authorization to the service (anonymous callers get 401 from it)
"""

from flask import Blueprint

from laundry.core.api_utils import api_response, json_body, query_int
from laundry.core.auth_decorators import get_current_actor
from laundry.core.exceptions import NotFilledInError
from laundry.db.session import session_scope
from laundry.repositories.book_repo import BookRepository
from laundry.repositories.laundry_repo import LaundryRepository
from laundry.repositories.metapay_repo import MetapayRepository
from laundry.repositories.pay_log_repo import PayLogRepository
from laundry.repositories.settlement_repo import SettlementRepository
from laundry.repositories.user_repo import UserRepository
from laundry.schemas.dtos import BookCreateRequest, BookResponse, _to_int
from laundry.services.book_service import BookService

book_bp = Blueprint("books", __name__, url_prefix="/books")


def _service(db) -> BookService:
    return BookService(
        book_repo=BookRepository(db),
        user_repo=UserRepository(db),
        laundry_repo=LaundryRepository(db),
        metapay_repo=MetapayRepository(db),
        pay_log_repo=PayLogRepository(db),
        settlement_repo=SettlementRepository(db),
    )


def _books_payload(books) -> list:
    return [BookResponse.from_domain(book).to_dict() for book in books]


@book_bp.route("", methods=["POST"])
def make_book():
    """Create a booking; Metapay bookings are debited in the same transaction."""
    actor = get_current_actor()
    request_dto = BookCreateRequest.from_dict(json_body())
    with session_scope() as db:
        book = _service(db).make_book(actor, request_dto)
    return api_response(
        True, "Booking created", BookResponse.from_domain(book).to_dict(), 201
    )


@book_bp.route("", methods=["GET"])
def search_book_all():
    actor = get_current_actor()
    with session_scope() as db:
        books = _service(db).search_book_all(actor)
    return api_response(True, f"{len(books)} bookings", _books_payload(books))


@book_bp.route("/<int:book_id>", methods=["GET"])
def get_book(book_id: int):
    actor = get_current_actor()
    with session_scope() as db:
        book = _service(db).get_book(actor, book_id)
    return api_response(True, "Booking found", BookResponse.from_domain(book).to_dict())


@book_bp.route("/date/<date>", methods=["GET"])
def search_book_by_date(date: str):
    actor = get_current_actor()
    with session_scope() as db:
        books = _service(db).search_book_by_date(actor, date)
    return api_response(True, f"{len(books)} bookings", _books_payload(books))


@book_bp.route("/user/<user_id>", methods=["GET"])
def search_book_by_user_id(user_id: str):
    actor = get_current_actor()
    book_state_id = query_int("book_state_id")
    with session_scope() as db:
        books = _service(db).search_book_by_user_id(actor, user_id, book_state_id)
    return api_response(True, f"{len(books)} bookings", _books_payload(books))


@book_bp.route("/user/<user_id>/first", methods=["GET"])
def exist_book_by_book_state(user_id: str):
    """Oldest booking of the user in ``?book_state_id=``; ``book`` is null when none."""
    actor = get_current_actor()
    book_state_id = query_int("book_state_id", required=True)
    with session_scope() as db:
        book = _service(db).exist_book_by_book_state(actor, user_id, book_state_id)
    return api_response(
        True,
        "Booking found" if book else "No booking in that state",
        {
            "exists": book is not None,
            "book": BookResponse.from_domain(book).to_dict() if book else None,
        },
    )


@book_bp.route("/laundry/<int:laundry_id>", methods=["GET"])
def search_book_by_laundry_id(laundry_id: int):
    actor = get_current_actor()
    book_state_id = query_int("book_state_id")
    with session_scope() as db:
        books = _service(db).search_book_by_laundry_id(actor, laundry_id, book_state_id)
    return api_response(True, f"{len(books)} bookings", _books_payload(books))


@book_bp.route("/<int:book_id>/state", methods=["PATCH"])
def update_book_state(book_id: int):
    actor = get_current_actor()
    book_state_id = _to_int(json_body().get("book_state_id"), "book_state_id")
    if book_state_id is None:
        raise NotFilledInError(field="book_state_id")
    with session_scope() as db:
        book = _service(db).update_book_state(actor, book_id, book_state_id)
    return api_response(
        True, "Booking state updated", BookResponse.from_domain(book).to_dict()
    )


@book_bp.route("/<int:book_id>/complete", methods=["POST"])
def update_book_complete(book_id: int):
    actor = get_current_actor()
    with session_scope() as db:
        book = _service(db).update_book_complete(actor, book_id)
    return api_response(True, "Booking completed", BookResponse.from_domain(book).to_dict())


@book_bp.route("/<int:book_id>/cancel", methods=["POST"])
def update_book_canceled(book_id: int):
    actor = get_current_actor()
    with session_scope() as db:
        book = _service(db).update_book_canceled(actor, book_id)
    return api_response(True, "Booking canceled", BookResponse.from_domain(book).to_dict())
