"""
Booking service following SOLID principles.

Each operation is a linear sequence: verify the session, verify the
referenced ids, verify ownership and balance, then write. All writes of one
call share the caller's session, so a raised error leaves nothing behind.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from laundry.core.config import APP_TZ
from laundry.core.exceptions import (
    InsufficientBalanceError,
    InvalidBookStateError,
    InvalidUserError,
    NotExistError,
    NotFilledInError,
)
from laundry.domain import codes
from laundry.domain.entities import Book as DomainBook
from laundry.domain.entities import BookLine as DomainBookLine
from laundry.domain.entities import Laundry as DomainLaundry
from laundry.domain.entities import PayLog as DomainPayLog
from laundry.domain.entities import Settlement as DomainSettlement
from laundry.domain.entities import User as DomainUser
from laundry.domain.interfaces import (
    IBookRepository,
    ILaundryRepository,
    IMetapayRepository,
    IPayLogRepository,
    ISettlementRepository,
    IUserRepository,
)
from laundry.schemas.dtos import BookCreateRequest

from .authorization import require_admin, require_login, require_self_or_admin

logger = logging.getLogger(__name__)


class BookService:
    """Application service for the booking workflow.

    This service:
    - Creates bookings with their lines and the optional Metapay debit
    - Drives state transitions (pending -> in progress -> complete / canceled)
    - Writes settlements on completion and refunds Metapay on cancellation
    - Answers booking searches scoped to what the caller may see
    """

    def __init__(
        self,
        book_repo: IBookRepository,
        user_repo: IUserRepository,
        laundry_repo: ILaundryRepository,
        metapay_repo: IMetapayRepository,
        pay_log_repo: IPayLogRepository,
        settlement_repo: ISettlementRepository,
    ) -> None:
        self.book_repo = book_repo
        self.user_repo = user_repo
        self.laundry_repo = laundry_repo
        self.metapay_repo = metapay_repo
        self.pay_log_repo = pay_log_repo
        self.settlement_repo = settlement_repo

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def make_book(
        self, actor: Optional[DomainUser], request: BookCreateRequest
    ) -> DomainBook:
        """Create a booking.

        1. Insert the booking.
        2. Insert its line items.
        3. When paid with Metapay, debit the balance and record a PayLog.

        Raises:
            NotLoginError: Anonymous caller
            NotFilledInError: laundry_id, book_method_id or book_lines missing
            InvalidUserError: Non-admin booking on behalf of another user
            NotExistError: Unknown user, laundry, method, clothes, fabric or Metapay
            InsufficientBalanceError: Metapay balance below the total fee
        """
        actor = require_login(actor)
        request.validate()

        user_id = request.user_id or actor.user_id
        if user_id != actor.user_id and not actor.is_admin:
            raise InvalidUserError("Bookings can only be made for yourself")
        if self.user_repo.get_by_id(user_id) is None:
            raise NotExistError(f"User {user_id} does not exist")

        laundry = self._require_laundry(request.laundry_id)

        if request.book_method_id not in codes.BOOK_METHODS:
            raise NotExistError(f"Book method {request.book_method_id} does not exist")
        for line in request.book_lines:
            if line.clothes_id not in codes.CLOTHES:
                raise NotExistError(f"Clothes {line.clothes_id} does not exist")
            if line.fabric_id not in codes.FABRICS:
                raise NotExistError(f"Fabric {line.fabric_id} does not exist")

        total_fee = request.total_fee
        metapay = None
        if request.book_method_id == codes.BOOK_METHOD_METAPAY:
            metapay = self.metapay_repo.get_by_user_id(user_id, for_update=True)
            if metapay is None:
                raise NotExistError(f"User {user_id} has no Metapay account")
            # Debit before any insert so an insufficient balance writes nothing
            metapay.withdraw(total_fee)
            new_balance = self.metapay_repo.change_balance(
                metapay.metapay_id, -total_fee
            )
            if new_balance is None:
                # Spent by another request after the read above
                raise InsufficientBalanceError(
                    amount=total_fee,
                    message=f"Metapay balance no longer covers amount {total_fee}",
                )

        book = self.book_repo.create(
            DomainBook(
                user_id=user_id,
                laundry_id=laundry.laundry_id,
                book_count=len(request.book_lines),
                book_memo=request.book_memo,
                book_method_id=request.book_method_id,
                book_total_fee=total_fee,
                book_state_id=codes.BOOK_STATE_PENDING,
                book_insert_date=datetime.now(APP_TZ),
                book_lines=[
                    DomainBookLine(
                        clothes_id=line.clothes_id,
                        fabric_id=line.fabric_id,
                        book_line_fee=line.book_line_fee,
                    )
                    for line in request.book_lines
                ],
            )
        )

        if metapay is not None:
            self.pay_log_repo.create(
                DomainPayLog(
                    metapay_id=metapay.metapay_id,
                    book_id=book.book_id,
                    pay_log_type=codes.PAY_LOG_PAYMENT,
                    pay_log_amount=total_fee,
                    pay_log_balance=new_balance,
                )
            )

        logger.info(
            "Booking created",
            extra={
                "context": {
                    "book_id": book.book_id,
                    "user_id": user_id,
                    "laundry_id": laundry.laundry_id,
                    "book_method_id": request.book_method_id,
                    "book_total_fee": total_fee,
                    "line_count": len(request.book_lines),
                }
            },
        )
        return book

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def update_book_state(
        self,
        actor: Optional[DomainUser],
        book_id: Optional[int],
        book_state_id: Optional[int],
    ) -> DomainBook:
        """Move a booking to another state (shop owner or admin).

        Completion and cancellation delegate to their dedicated operations so
        the settlement and refund side effects always happen.
        """
        actor = require_login(actor)
        if book_id is None:
            raise NotFilledInError(field="book_id")
        if book_state_id is None:
            raise NotFilledInError(field="book_state_id")
        if book_state_id not in codes.BOOK_STATES:
            raise NotExistError(f"Book state {book_state_id} does not exist")

        if book_state_id == codes.BOOK_STATE_COMPLETE:
            return self.update_book_complete(actor, book_id)
        if book_state_id == codes.BOOK_STATE_CANCELED:
            return self.update_book_canceled(actor, book_id)

        book = self._require_book(book_id, for_update=True)
        laundry = self._require_laundry(book.laundry_id)
        self._require_shop_owner(actor, laundry)
        self._require_transition(book, book_state_id)

        updated = self._apply_transition(book, book_state_id)
        self._log_transition(actor, book, book_state_id)
        return updated

    def update_book_complete(
        self, actor: Optional[DomainUser], book_id: int
    ) -> DomainBook:
        """Complete a booking and insert its settlement (shop owner or admin)."""
        actor = require_login(actor)
        book = self._require_book(book_id, for_update=True)
        laundry = self._require_laundry(book.laundry_id)
        self._require_shop_owner(actor, laundry)
        self._require_transition(book, codes.BOOK_STATE_COMPLETE)

        updated = self._apply_transition(book, codes.BOOK_STATE_COMPLETE)
        if self.settlement_repo.get_by_book_id(book_id) is None:
            self.settlement_repo.create(
                DomainSettlement(
                    book_id=book_id,
                    laundry_id=book.laundry_id,
                    settlement_fee=book.book_total_fee,
                    settlement_date=datetime.now(APP_TZ),
                )
            )

        self._log_transition(actor, book, codes.BOOK_STATE_COMPLETE)
        return updated

    def update_book_canceled(
        self, actor: Optional[DomainUser], book_id: int
    ) -> DomainBook:
        """Cancel a booking.

        Business Rules:
        - The customer may cancel while the booking is still pending
        - The shop owner and admins may cancel pending or in-progress bookings
        - Metapay payments are refunded to the customer's balance
        """
        actor = require_login(actor)
        book = self._require_book(book_id, for_update=True)
        laundry = self._require_laundry(book.laundry_id)

        is_staff = actor.is_admin or laundry.is_owned_by(actor)
        if not is_staff and actor.user_id != book.user_id:
            raise InvalidUserError(
                "Only the customer, the shop owner or an admin may cancel a booking"
            )
        self._require_transition(book, codes.BOOK_STATE_CANCELED)
        if not is_staff and book.book_state_id != codes.BOOK_STATE_PENDING:
            raise InvalidBookStateError(
                "Customers can only cancel bookings that are still pending"
            )

        updated = self._apply_transition(book, codes.BOOK_STATE_CANCELED)
        if book.is_paid_by_metapay:
            self._refund(book)

        self._log_transition(actor, book, codes.BOOK_STATE_CANCELED)
        return updated

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def search_book_all(self, actor: Optional[DomainUser]) -> List[DomainBook]:
        """All bookings (admin only)."""
        require_admin(actor)
        return self.book_repo.get_all()

    def search_book_by_date(
        self, actor: Optional[DomainUser], date: Optional[str]
    ) -> List[DomainBook]:
        """Bookings made on one day (YYYY-MM-DD, application timezone).

        Admins see every booking; other users only the bookings they made
        or that were made at one of their shops.
        """
        actor = require_login(actor)
        if not date:
            raise NotFilledInError(field="date")
        try:
            day = datetime.strptime(date.strip(), "%Y-%m-%d")
        except ValueError:
            raise ValueError("date must use the YYYY-MM-DD format")

        start = day.replace(tzinfo=APP_TZ)
        books = self.book_repo.get_by_date_range(start, start + timedelta(days=1))
        if actor.is_admin:
            return books

        own_laundries = {
            laundry.laundry_id for laundry in self.laundry_repo.get_by_owner(actor.user_id)
        }
        return [
            book
            for book in books
            if book.user_id == actor.user_id or book.laundry_id in own_laundries
        ]

    def search_book_by_user_id(
        self,
        actor: Optional[DomainUser],
        user_id: Optional[str],
        book_state_id: Optional[int] = None,
    ) -> List[DomainBook]:
        """A user's bookings, optionally in one state (the user or an admin)."""
        actor = require_login(actor)
        if not user_id:
            raise NotFilledInError(field="user_id")
        require_self_or_admin(actor, user_id)
        if self.user_repo.get_by_id(user_id) is None:
            raise NotExistError(f"User {user_id} does not exist")
        self._check_state_filter(book_state_id)
        return self.book_repo.get_by_user_id(user_id, book_state_id)

    def search_book_by_laundry_id(
        self,
        actor: Optional[DomainUser],
        laundry_id: Optional[int],
        book_state_id: Optional[int] = None,
    ) -> List[DomainBook]:
        """A shop's bookings, optionally in one state (the owner or an admin)."""
        actor = require_login(actor)
        if laundry_id is None:
            raise NotFilledInError(field="laundry_id")
        laundry = self._require_laundry(laundry_id)
        self._require_shop_owner(actor, laundry)
        self._check_state_filter(book_state_id)
        return self.book_repo.get_by_laundry_id(laundry_id, book_state_id)

    def exist_book_by_book_state(
        self, actor: Optional[DomainUser], user_id: str, book_state_id: int
    ) -> Optional[DomainBook]:
        """The user's oldest booking in the given state, or None."""
        actor = require_login(actor)
        require_self_or_admin(actor, user_id)
        self._check_state_filter(book_state_id)
        return self.book_repo.get_first_by_state(user_id, book_state_id)

    def get_book(self, actor: Optional[DomainUser], book_id: int) -> DomainBook:
        """One booking, visible to its customer, the shop owner and admins."""
        actor = require_login(actor)
        book = self._require_book(book_id)
        if actor.is_admin or actor.user_id == book.user_id:
            return book
        laundry = self._require_laundry(book.laundry_id)
        self._require_shop_owner(actor, laundry)
        return book

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_book(self, book_id: int, for_update: bool = False) -> DomainBook:
        book = self.book_repo.get_by_id(book_id, for_update=for_update)
        if book is None:
            raise NotExistError(f"Booking {book_id} does not exist")
        return book

    def _require_laundry(self, laundry_id: int) -> DomainLaundry:
        laundry = self.laundry_repo.get_by_id(laundry_id)
        if laundry is None:
            raise NotExistError(f"Laundry {laundry_id} does not exist")
        return laundry

    @staticmethod
    def _require_shop_owner(actor: DomainUser, laundry: DomainLaundry) -> None:
        if not actor.is_admin and not laundry.is_owned_by(actor):
            raise InvalidUserError(
                f"User {actor.user_id} does not own laundry {laundry.laundry_id}"
            )

    @staticmethod
    def _require_transition(book: DomainBook, target_state: int) -> None:
        if not codes.can_transition(book.book_state_id, target_state):
            raise InvalidBookStateError(
                f"Booking {book.book_id} cannot move from "
                f"'{book.book_state_name}' to '{codes.BOOK_STATES[target_state]}'"
            )

    def _apply_transition(self, book: DomainBook, target_state: int) -> DomainBook:
        """Write the new state only while the booking is in the state that was checked."""
        updated = self.book_repo.update_state(
            book.book_id, target_state, from_state_id=book.book_state_id
        )
        if updated is None:
            raise InvalidBookStateError(
                f"Booking {book.book_id} was changed by another request"
            )
        return updated

    @staticmethod
    def _check_state_filter(book_state_id: Optional[int]) -> None:
        if book_state_id is not None and book_state_id not in codes.BOOK_STATES:
            raise NotExistError(f"Book state {book_state_id} does not exist")

    def _refund(self, book: DomainBook) -> None:
        """Return the Metapay amount paid for a booking, net of earlier refunds."""
        logs = self.pay_log_repo.get_by_book_id(book.book_id)
        paid = sum(
            log.pay_log_amount for log in logs if log.pay_log_type == codes.PAY_LOG_PAYMENT
        )
        refunded = sum(
            log.pay_log_amount for log in logs if log.pay_log_type == codes.PAY_LOG_REFUND
        )
        amount = paid - refunded
        if amount <= 0:
            return

        metapay = self.metapay_repo.get_by_user_id(book.user_id, for_update=True)
        if metapay is None:
            raise NotExistError(f"User {book.user_id} has no Metapay account")

        metapay.deposit(amount)
        new_balance = self.metapay_repo.change_balance(metapay.metapay_id, amount)
        if new_balance is None:
            raise NotExistError(f"Metapay {metapay.metapay_id} does not exist")
        self.pay_log_repo.create(
            DomainPayLog(
                metapay_id=metapay.metapay_id,
                book_id=book.book_id,
                pay_log_type=codes.PAY_LOG_REFUND,
                pay_log_amount=amount,
                pay_log_balance=new_balance,
            )
        )
        logger.info(
            "Booking refunded",
            extra={
                "context": {
                    "book_id": book.book_id,
                    "user_id": book.user_id,
                    "amount": amount,
                    "balance": new_balance,
                }
            },
        )

    @staticmethod
    def _log_transition(actor: DomainUser, book: DomainBook, target_state: int) -> None:
        logger.info(
            "Booking state changed",
            extra={
                "context": {
                    "book_id": book.book_id,
                    "from_state": book.book_state_id,
                    "to_state": target_state,
                    "actor": actor.user_id,
                }
            },
        )
