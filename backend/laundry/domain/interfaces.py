"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.

Write operations only flush; the caller's session scope owns the commit.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import Book, Laundry, Metapay, PayAccount, PayLog, Settlement, User


class IUserReader(ABC):
    """Interface for user read operations - Interface Segregation Principle."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by login id."""
        pass

    @abstractmethod
    def get_all(self) -> List[User]:
        """Get all users."""
        pass

    @abstractmethod
    def get_by_user_type(self, user_type: str) -> List[User]:
        """Get all users of one type."""
        pass

    @abstractmethod
    def get_password_hash(self, user_id: str) -> Optional[str]:
        """Get the stored password hash for a user."""
        pass


class IUserWriter(ABC):
    """Interface for user write operations - Interface Segregation Principle."""

    @abstractmethod
    def create(self, user: User, password_hash: str) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    def update(self, user: User) -> User:
        """Update an existing user."""
        pass

    @abstractmethod
    def set_password(self, user_id: str, password_hash: str) -> bool:
        """Replace the stored password hash."""
        pass


class IUserRepository(IUserReader, IUserWriter):
    """Complete user repository interface combining read/write operations."""

    pass


class ILaundryReader(ABC):
    """Interface for laundry read operations."""

    @abstractmethod
    def get_by_id(self, laundry_id: int) -> Optional[Laundry]:
        """Get laundry by ID."""
        pass

    @abstractmethod
    def get_all(self) -> List[Laundry]:
        """Get all laundries."""
        pass

    @abstractmethod
    def get_by_owner(self, user_id: str) -> List[Laundry]:
        """Get the laundries owned by a user."""
        pass


class ILaundryWriter(ABC):
    """Interface for laundry write operations."""

    @abstractmethod
    def create(self, laundry: Laundry) -> Laundry:
        """Create a new laundry."""
        pass


class ILaundryRepository(ILaundryReader, ILaundryWriter):
    """Complete laundry repository interface."""

    pass


class IBookReader(ABC):
    """Interface for booking read operations."""

    @abstractmethod
    def get_by_id(self, book_id: int, for_update: bool = False) -> Optional[Book]:
        """Get booking (with lines) by ID, optionally locking its row."""
        pass

    @abstractmethod
    def get_all(self) -> List[Book]:
        """Get all bookings, newest first."""
        pass

    @abstractmethod
    def get_by_date_range(self, start: datetime, end: datetime) -> List[Book]:
        """Get bookings inserted in [start, end)."""
        pass

    @abstractmethod
    def get_by_user_id(
        self, user_id: str, book_state_id: Optional[int] = None
    ) -> List[Book]:
        """Get a user's bookings, optionally restricted to one state."""
        pass

    @abstractmethod
    def get_by_laundry_id(
        self, laundry_id: int, book_state_id: Optional[int] = None
    ) -> List[Book]:
        """Get a laundry's bookings, optionally restricted to one state."""
        pass

    @abstractmethod
    def get_first_by_state(self, user_id: str, book_state_id: int) -> Optional[Book]:
        """Get the oldest booking of a user in the given state."""
        pass


class IBookWriter(ABC):
    """Interface for booking write operations."""

    @abstractmethod
    def create(self, book: Book) -> Book:
        """Insert a booking and its lines."""
        pass

    @abstractmethod
    def update_state(
        self, book_id: int, book_state_id: int, from_state_id: Optional[int] = None
    ) -> Optional[Book]:
        """Change a booking's state.

        With from_state_id, only a booking still in that state is changed;
        otherwise None is returned.
        """
        pass


class IBookRepository(IBookReader, IBookWriter):
    """Complete booking repository interface."""

    pass


class IMetapayRepository(ABC):
    """Interface for Metapay accounts and their linked bank accounts."""

    @abstractmethod
    def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[Metapay]:
        """Get a user's Metapay account with linked accounts, optionally locked."""
        pass

    @abstractmethod
    def create(self, metapay: Metapay) -> Metapay:
        """Open a Metapay account."""
        pass

    @abstractmethod
    def change_balance(self, metapay_id: int, amount: int) -> Optional[int]:
        """Add a signed amount to the stored balance in one statement.

        Returns the new balance, or None when the account is missing or the
        balance would go negative.
        """
        pass

    @abstractmethod
    def add_pay_account(self, account: PayAccount) -> PayAccount:
        """Link a bank account."""
        pass

    @abstractmethod
    def get_pay_account(self, pay_account_id: int) -> Optional[PayAccount]:
        """Get a linked bank account by ID."""
        pass

    @abstractmethod
    def delete_pay_account(self, pay_account_id: int) -> bool:
        """Unlink a bank account."""
        pass


class IPayLogRepository(ABC):
    """Interface for Metapay transaction records."""

    @abstractmethod
    def create(self, pay_log: PayLog) -> PayLog:
        """Record a transaction."""
        pass

    @abstractmethod
    def get_by_metapay_id(self, metapay_id: int) -> List[PayLog]:
        """Get an account's transactions, newest first."""
        pass

    @abstractmethod
    def get_by_book_id(self, book_id: int) -> List[PayLog]:
        """Get the transactions that reference a booking."""
        pass


class ISettlementRepository(ABC):
    """Interface for settlement records."""

    @abstractmethod
    def create(self, settlement: Settlement) -> Settlement:
        """Insert a settlement."""
        pass

    @abstractmethod
    def get_by_book_id(self, book_id: int) -> Optional[Settlement]:
        """Get the settlement of a booking."""
        pass

    @abstractmethod
    def get_by_laundry_id(self, laundry_id: int) -> List[Settlement]:
        """Get a laundry's settlements, newest first."""
        pass

    @abstractmethod
    def get_all(self) -> List[Settlement]:
        """Get all settlements, newest first."""
        pass
