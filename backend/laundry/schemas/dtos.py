"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Request DTOs raise NotFilledInError for missing required fields; response
DTOs add the display labels (code names, formatted won and numbers).
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from laundry.core.exceptions import NotFilledInError
from laundry.domain import codes
from laundry.utils.formatters import (
    format_account_number,
    format_datetime,
    format_tel,
    format_won,
    lookup_label,
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_int(value: Any, field_name: str) -> Optional[int]:
    """Convert a JSON value to int; None stays None."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be an integer")


def _to_str(value: Any, field_name: str) -> Optional[str]:
    """Accept a JSON string; None stays None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _to_tel(value: Any, field_name: str) -> Optional[str]:
    tel = _to_str(value, field_name)
    return tel.replace("-", "").strip() if tel is not None else None


# ------------------- USERS -------------------


@dataclass
class UserRegisterRequest:
    """DTO for user registration requests."""

    user_id: str
    password: str
    user_name: str
    user_tel: str
    user_address: Optional[str] = None
    user_type: str = codes.USER_TYPE_CUSTOMER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRegisterRequest":
        return cls(
            user_id=(_to_str(data.get("user_id"), "user_id") or "").strip(),
            password=_to_str(data.get("password"), "password") or "",
            user_name=(_to_str(data.get("user_name"), "user_name") or "").strip(),
            user_tel=_to_tel(data.get("user_tel"), "user_tel") or "",
            user_address=_to_str(data.get("user_address"), "user_address"),
            user_type=_to_str(data.get("user_type"), "user_type")
            or codes.USER_TYPE_CUSTOMER,
        )

    def validate(self) -> None:
        """Validate the request data."""
        for name in ("user_id", "password", "user_name", "user_tel"):
            if _is_blank(getattr(self, name)):
                raise NotFilledInError(field=name)
        if len(self.user_id) > 30:
            raise ValueError("user_id must be at most 30 characters")
        if len(self.password) < 4:
            raise ValueError("password must be at least 4 characters")
        if not self.user_tel.isdigit():
            raise ValueError("user_tel must contain digits only")
        if self.user_type not in (codes.USER_TYPE_CUSTOMER, codes.USER_TYPE_OWNER):
            raise ValueError("user_type must be 'customer' or 'owner'")


@dataclass
class LoginRequest:
    user_id: str
    password: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoginRequest":
        return cls(
            user_id=(_to_str(data.get("user_id"), "user_id") or "").strip(),
            password=_to_str(data.get("password"), "password") or "",
        )


@dataclass
class UserUpdateRequest:
    """DTO for user update requests (all fields optional)."""

    user_name: Optional[str] = None
    user_tel: Optional[str] = None
    user_address: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserUpdateRequest":
        return cls(
            user_name=_to_str(data.get("user_name"), "user_name"),
            user_tel=_to_tel(data.get("user_tel"), "user_tel"),
            user_address=_to_str(data.get("user_address"), "user_address"),
            password=_to_str(data.get("password"), "password"),
        )

    def validate(self) -> None:
        if self.user_name is not None and not self.user_name.strip():
            raise NotFilledInError(field="user_name")
        if self.user_tel is not None and not self.user_tel.isdigit():
            raise ValueError("user_tel must contain digits only")
        if self.password is not None and len(self.password) < 4:
            raise ValueError("password must be at least 4 characters")


@dataclass
class UserResponse:
    """DTO for user API responses."""

    user_id: str
    user_name: str
    user_tel: str
    user_address: Optional[str]
    user_type: str
    is_active: bool
    user_insert_date: Optional[str]

    @classmethod
    def from_domain(cls, user) -> "UserResponse":
        return cls(
            user_id=user.user_id,
            user_name=user.user_name,
            user_tel=format_tel(user.user_tel),
            user_address=user.user_address,
            user_type=user.user_type,
            is_active=user.is_active,
            user_insert_date=format_datetime(user.user_insert_date),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ------------------- LAUNDRIES -------------------


@dataclass
class LaundryCreateRequest:
    """DTO for laundry registration requests."""

    laundry_name: str
    laundry_address: Optional[str] = None
    laundry_tel: Optional[str] = None
    user_id: Optional[str] = None  # Admins may register on behalf of an owner

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LaundryCreateRequest":
        return cls(
            laundry_name=(_to_str(data.get("laundry_name"), "laundry_name") or "").strip(),
            laundry_address=_to_str(data.get("laundry_address"), "laundry_address"),
            laundry_tel=_to_tel(data.get("laundry_tel"), "laundry_tel"),
            user_id=_to_str(data.get("user_id"), "user_id"),
        )

    def validate(self) -> None:
        if _is_blank(self.laundry_name):
            raise NotFilledInError(field="laundry_name")


@dataclass
class LaundryResponse:
    laundry_id: int
    user_id: str
    laundry_name: str
    laundry_address: Optional[str]
    laundry_tel: str

    @classmethod
    def from_domain(cls, laundry) -> "LaundryResponse":
        return cls(
            laundry_id=laundry.laundry_id,
            user_id=laundry.user_id,
            laundry_name=laundry.laundry_name,
            laundry_address=laundry.laundry_address,
            laundry_tel=format_tel(laundry.laundry_tel),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ------------------- BOOKINGS -------------------


@dataclass
class BookLineRequest:
    """DTO for one line item of a booking request."""

    clothes_id: Optional[int]
    fabric_id: Optional[int]
    book_line_fee: Optional[int]

    @classmethod
    def from_dict(cls, data: Any) -> "BookLineRequest":
        if not isinstance(data, dict):
            raise ValueError("each book_lines entry must be an object")
        return cls(
            clothes_id=_to_int(data.get("clothes_id"), "clothes_id"),
            fabric_id=_to_int(data.get("fabric_id"), "fabric_id"),
            book_line_fee=_to_int(data.get("book_line_fee"), "book_line_fee"),
        )

    def validate(self) -> None:
        for name in ("clothes_id", "fabric_id", "book_line_fee"):
            if getattr(self, name) is None:
                raise NotFilledInError(field=name)
        if self.book_line_fee < 0:
            raise ValueError("book_line_fee cannot be negative")


@dataclass
class BookCreateRequest:
    """DTO for booking creation requests.

    book_count and book_total_fee are derived from the lines; when the client
    sends them they must agree with the lines.
    """

    laundry_id: Optional[int]
    book_method_id: Optional[int]
    book_lines: List[BookLineRequest] = field(default_factory=list)
    book_memo: Optional[str] = None
    user_id: Optional[str] = None
    book_count: Optional[int] = None
    book_total_fee: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookCreateRequest":
        raw_lines = data.get("book_lines") or []
        if not isinstance(raw_lines, list):
            raise ValueError("book_lines must be a list")
        return cls(
            laundry_id=_to_int(data.get("laundry_id"), "laundry_id"),
            book_method_id=_to_int(data.get("book_method_id"), "book_method_id"),
            book_lines=[BookLineRequest.from_dict(line) for line in raw_lines],
            book_memo=_to_str(data.get("book_memo"), "book_memo") or None,
            user_id=_to_str(data.get("user_id"), "user_id") or None,
            book_count=_to_int(data.get("book_count"), "book_count"),
            book_total_fee=_to_int(data.get("book_total_fee"), "book_total_fee"),
        )

    @property
    def total_fee(self) -> int:
        return sum(line.book_line_fee or 0 for line in self.book_lines)

    def validate(self) -> None:
        if self.laundry_id is None:
            raise NotFilledInError(field="laundry_id")
        if self.book_method_id is None:
            raise NotFilledInError(field="book_method_id")
        if not self.book_lines:
            raise NotFilledInError(field="book_lines")
        for line in self.book_lines:
            line.validate()
        if self.book_count is not None and self.book_count != len(self.book_lines):
            raise ValueError("book_count does not match the number of book_lines")
        if self.book_total_fee is not None and self.book_total_fee != self.total_fee:
            raise ValueError("book_total_fee does not match the sum of line fees")
        if self.book_memo is not None and len(self.book_memo) > 255:
            raise ValueError("book_memo must be at most 255 characters")


@dataclass
class BookLineResponse:
    book_line_id: Optional[int]
    clothes_id: int
    clothes_name: str
    fabric_id: int
    fabric_name: str
    book_line_fee: int
    book_line_fee_display: str

    @classmethod
    def from_domain(cls, line) -> "BookLineResponse":
        return cls(
            book_line_id=line.book_line_id,
            clothes_id=line.clothes_id,
            clothes_name=lookup_label(codes.CLOTHES, line.clothes_id),
            fabric_id=line.fabric_id,
            fabric_name=lookup_label(codes.FABRICS, line.fabric_id),
            book_line_fee=line.book_line_fee,
            book_line_fee_display=f"{format_won(line.book_line_fee)}원",
        )


@dataclass
class BookResponse:
    """DTO for booking API responses."""

    book_id: int
    user_id: str
    laundry_id: int
    laundry_name: Optional[str]
    book_count: int
    book_memo: Optional[str]
    book_method_id: int
    book_method_name: str
    book_total_fee: int
    book_total_fee_display: str
    book_state_id: int
    book_state_name: str
    book_insert_date: Optional[str]
    book_update_date: Optional[str]
    book_lines: List[BookLineResponse]

    @classmethod
    def from_domain(cls, book) -> "BookResponse":
        return cls(
            book_id=book.book_id,
            user_id=book.user_id,
            laundry_id=book.laundry_id,
            laundry_name=book.laundry_name,
            book_count=book.book_count,
            book_memo=book.book_memo,
            book_method_id=book.book_method_id,
            book_method_name=lookup_label(codes.BOOK_METHODS, book.book_method_id),
            book_total_fee=book.book_total_fee,
            book_total_fee_display=f"{format_won(book.book_total_fee)}원",
            book_state_id=book.book_state_id,
            book_state_name=lookup_label(codes.BOOK_STATES, book.book_state_id),
            book_insert_date=format_datetime(book.book_insert_date),
            book_update_date=format_datetime(book.book_update_date),
            book_lines=[BookLineResponse.from_domain(line) for line in book.book_lines],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ------------------- METAPAY -------------------


@dataclass
class PayAccountCreateRequest:
    bank_id: Optional[int]
    pay_account_number: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PayAccountCreateRequest":
        return cls(
            bank_id=_to_int(data.get("bank_id"), "bank_id"),
            pay_account_number=str(data.get("pay_account_number") or "")
            .replace("-", "")
            .strip(),
        )

    def validate(self) -> None:
        if self.bank_id is None:
            raise NotFilledInError(field="bank_id")
        if not self.pay_account_number:
            raise NotFilledInError(field="pay_account_number")
        if not self.pay_account_number.isdigit() or not (
            10 <= len(self.pay_account_number) <= 14
        ):
            raise ValueError("pay_account_number must be 10 to 14 digits")


@dataclass
class ChargeRequest:
    pay_account_id: Optional[int]
    amount: Optional[int]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChargeRequest":
        return cls(
            pay_account_id=_to_int(data.get("pay_account_id"), "pay_account_id"),
            amount=_to_int(data.get("amount"), "amount"),
        )

    def validate(self, max_charge: int) -> None:
        if self.pay_account_id is None:
            raise NotFilledInError(field="pay_account_id")
        if self.amount is None:
            raise NotFilledInError(field="amount")
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if self.amount > max_charge:
            raise ValueError(f"amount must not exceed {max_charge}")


@dataclass
class PayAccountResponse:
    pay_account_id: int
    bank_id: int
    bank_name: str
    pay_account_number: str

    @classmethod
    def from_domain(cls, account) -> "PayAccountResponse":
        return cls(
            pay_account_id=account.pay_account_id,
            bank_id=account.bank_id,
            bank_name=lookup_label(codes.BANKS, account.bank_id),
            pay_account_number=format_account_number(account.pay_account_number),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MetapayResponse:
    metapay_id: int
    user_id: str
    metapay_balance: int
    metapay_balance_display: str
    metapay_date: Optional[str]
    pay_account_count: int
    pay_accounts: List[PayAccountResponse]

    @classmethod
    def from_domain(cls, metapay) -> "MetapayResponse":
        return cls(
            metapay_id=metapay.metapay_id,
            user_id=metapay.user_id,
            metapay_balance=metapay.metapay_balance,
            metapay_balance_display=format_won(metapay.metapay_balance),
            metapay_date=format_datetime(metapay.metapay_date),
            pay_account_count=len(metapay.pay_accounts),
            pay_accounts=[
                PayAccountResponse.from_domain(account)
                for account in metapay.pay_accounts
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PayLogResponse:
    pay_log_id: int
    book_id: Optional[int]
    pay_log_type: str
    pay_log_type_name: str
    pay_log_amount: int
    pay_log_balance: int
    pay_log_date: Optional[str]

    @classmethod
    def from_domain(cls, pay_log) -> "PayLogResponse":
        return cls(
            pay_log_id=pay_log.pay_log_id,
            book_id=pay_log.book_id,
            pay_log_type=pay_log.pay_log_type,
            pay_log_type_name=lookup_label(codes.PAY_LOG_TYPES, pay_log.pay_log_type),
            pay_log_amount=pay_log.pay_log_amount,
            pay_log_balance=pay_log.pay_log_balance,
            pay_log_date=format_datetime(pay_log.pay_log_date),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ------------------- SETTLEMENTS -------------------


@dataclass
class SettlementResponse:
    settlement_id: int
    book_id: int
    laundry_id: int
    settlement_fee: int
    settlement_fee_display: str
    settlement_date: Optional[str]

    @classmethod
    def from_domain(cls, settlement) -> "SettlementResponse":
        return cls(
            settlement_id=settlement.settlement_id,
            book_id=settlement.book_id,
            laundry_id=settlement.laundry_id,
            settlement_fee=settlement.settlement_fee,
            settlement_fee_display=f"{format_won(settlement.settlement_fee)}원",
            settlement_date=format_datetime(settlement.settlement_date),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
