"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from laundry.core.exceptions import InsufficientBalanceError

from . import codes


@dataclass
class User:
    """Domain entity representing a User in the system.

    This is the pure business representation, independent of:
    - Database implementation (SQLAlchemy)
    - HTTP frameworks (Flask)
    """

    user_id: str = ""
    user_name: str = ""
    user_tel: str = ""
    user_address: Optional[str] = None
    user_type: str = codes.USER_TYPE_CUSTOMER
    is_active: bool = True
    user_insert_date: Optional[datetime] = None

    def __post_init__(self):
        """Validate domain rules."""
        if not self.user_id:
            raise ValueError("User id is required")
        if self.user_type not in codes.USER_TYPES:
            raise ValueError(f"Invalid user type: {self.user_type}")

    @property
    def is_admin(self) -> bool:
        return self.user_type == codes.USER_TYPE_ADMIN

    @property
    def is_owner(self) -> bool:
        return self.user_type == codes.USER_TYPE_OWNER


@dataclass
class Laundry:
    """Domain entity for a laundry shop owned by a user."""

    laundry_id: Optional[int] = None
    user_id: str = ""
    laundry_name: str = ""
    laundry_address: Optional[str] = None
    laundry_tel: Optional[str] = None
    laundry_insert_date: Optional[datetime] = None

    def __post_init__(self):
        if not self.laundry_name:
            raise ValueError("Laundry name is required")
        if not self.user_id:
            raise ValueError("Laundry owner is required")

    def is_owned_by(self, user: Optional[User]) -> bool:
        return user is not None and user.user_id == self.user_id


@dataclass
class BookLine:
    """One clothing item within a booking."""

    clothes_id: int = 0
    fabric_id: int = 0
    book_line_fee: int = 0
    book_line_id: Optional[int] = None
    book_id: Optional[int] = None

    def __post_init__(self):
        if self.book_line_fee < 0:
            raise ValueError("Line fee cannot be negative")

    @property
    def clothes_name(self) -> str:
        return codes.CLOTHES.get(self.clothes_id, "")

    @property
    def fabric_name(self) -> str:
        return codes.FABRICS.get(self.fabric_id, "")


@dataclass
class Book:
    """Domain entity for a laundry booking and its line items."""

    book_id: Optional[int] = None
    user_id: str = ""
    laundry_id: int = 0
    book_count: int = 0
    book_memo: Optional[str] = None
    book_method_id: int = codes.BOOK_METHOD_ON_SITE
    book_total_fee: int = 0
    book_state_id: int = codes.BOOK_STATE_PENDING
    book_insert_date: Optional[datetime] = None
    book_update_date: Optional[datetime] = None
    book_lines: List[BookLine] = field(default_factory=list)
    laundry_name: Optional[str] = None

    def __post_init__(self):
        if self.book_total_fee < 0:
            raise ValueError("Total fee cannot be negative")
        if self.book_count < 0:
            raise ValueError("Book count cannot be negative")

    @property
    def is_paid_by_metapay(self) -> bool:
        return self.book_method_id == codes.BOOK_METHOD_METAPAY

    @property
    def is_terminal(self) -> bool:
        return self.book_state_id in codes.TERMINAL_BOOK_STATES

    @property
    def book_state_name(self) -> str:
        return codes.BOOK_STATES.get(self.book_state_id, "")

    @property
    def book_method_name(self) -> str:
        return codes.BOOK_METHODS.get(self.book_method_id, "")


@dataclass
class PayAccount:
    """A bank account linked to a Metapay account."""

    bank_id: int = 0
    pay_account_number: str = ""
    pay_account_id: Optional[int] = None
    metapay_id: Optional[int] = None

    @property
    def bank_name(self) -> str:
        return codes.BANKS.get(self.bank_id, "")


@dataclass
class Metapay:
    """Stored-balance payment account belonging to one user."""

    user_id: str = ""
    metapay_balance: int = 0
    metapay_id: Optional[int] = None
    metapay_date: Optional[datetime] = None
    pay_accounts: List[PayAccount] = field(default_factory=list)

    def __post_init__(self):
        if self.metapay_balance < 0:
            raise ValueError("Metapay balance cannot be negative")

    def withdraw(self, amount: int) -> int:
        """Debit amount from the balance, returning the new balance."""
        if amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.metapay_balance < amount:
            raise InsufficientBalanceError(self.metapay_balance, amount)
        self.metapay_balance -= amount
        return self.metapay_balance

    def deposit(self, amount: int) -> int:
        """Credit amount to the balance, returning the new balance."""
        if amount < 0:
            raise ValueError("Amount cannot be negative")
        self.metapay_balance += amount
        return self.metapay_balance


@dataclass
class PayLog:
    """Record of a balance-affecting Metapay transaction."""

    metapay_id: int = 0
    pay_log_type: str = codes.PAY_LOG_CHARGE
    pay_log_amount: int = 0
    pay_log_balance: int = 0
    book_id: Optional[int] = None
    pay_log_id: Optional[int] = None
    pay_log_date: Optional[datetime] = None

    def __post_init__(self):
        if self.pay_log_type not in codes.PAY_LOG_TYPES:
            raise ValueError(f"Invalid pay log type: {self.pay_log_type}")


@dataclass
class Settlement:
    """Revenue record written when a booking is completed."""

    book_id: int = 0
    laundry_id: int = 0
    settlement_fee: int = 0
    settlement_id: Optional[int] = None
    settlement_date: Optional[datetime] = None
