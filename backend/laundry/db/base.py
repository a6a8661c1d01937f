from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base


# Explicitly implement Flask-Login interface without inheriting UserMixin
class User(Base):
    """User model for authentication (customers, shop owners and admins)"""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(30), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    user_name: Mapped[str] = mapped_column(String(50), nullable=False)
    user_tel: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    user_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="customer", index=True
    )  # 'customer', 'owner', 'admin'
    active_flag: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    user_insert_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    @property
    def is_active(self) -> bool:
        # Flask-Login expects this property
        return self.active_flag

    @is_active.setter
    def is_active(self, value: bool) -> None:
        self.active_flag = bool(value)

    # Flask-Login required methods/properties - ensure explicit behavior
    def get_id(self):
        """Return user identifier for Flask-Login"""
        return str(self.user_id)

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    def __repr__(self):
        return f"<User(user_id={self.user_id}, user_type={self.user_type})>"


class Laundry(Base):
    """Laundry shop owned by a user"""

    __tablename__ = "laundries"

    laundry_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(30), ForeignKey("users.user_id"), nullable=False, index=True
    )
    laundry_name: Mapped[str] = mapped_column(String(100), nullable=False)
    laundry_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    laundry_tel: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    laundry_insert_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship("User", backref="laundries")

    def __repr__(self):
        return f"<Laundry(laundry_id={self.laundry_id}, name={self.laundry_name})>"


class Book(Base):
    """Laundry booking (예약)"""

    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("book_total_fee >= 0", name="ck_books_total_fee"),
        CheckConstraint("book_count >= 0", name="ck_books_count"),
    )

    book_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(30), ForeignKey("users.user_id"), nullable=False, index=True
    )
    laundry_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("laundries.laundry_id"), nullable=False, index=True
    )
    book_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    book_memo: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    book_method_id: Mapped[int] = mapped_column(Integer, nullable=False)
    book_total_fee: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    book_state_id: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, index=True
    )
    book_insert_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    book_update_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    laundry: Mapped["Laundry"] = relationship("Laundry", backref="books")
    lines: Mapped[List["BookLine"]] = relationship(
        "BookLine",
        back_populates="book",
        order_by="BookLine.book_line_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return (
            f"<Book(book_id={self.book_id}, user_id={self.user_id}, "
            f"laundry_id={self.laundry_id}, state={self.book_state_id})>"
        )


class BookLine(Base):
    """One clothing item of a booking"""

    __tablename__ = "book_lines"
    __table_args__ = (
        CheckConstraint("book_line_fee >= 0", name="ck_book_lines_fee"),
    )

    book_line_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("books.book_id"), nullable=False, index=True
    )
    clothes_id: Mapped[int] = mapped_column(Integer, nullable=False)
    fabric_id: Mapped[int] = mapped_column(Integer, nullable=False)
    book_line_fee: Mapped[int] = mapped_column(Integer, nullable=False)

    book: Mapped["Book"] = relationship("Book", back_populates="lines")


class Metapay(Base):
    """Stored-balance payment account (one per user)"""

    __tablename__ = "metapays"
    __table_args__ = (
        CheckConstraint("metapay_balance >= 0", name="ck_metapays_balance"),
    )

    metapay_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(30), ForeignKey("users.user_id"), nullable=False, unique=True
    )
    metapay_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    metapay_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    pay_accounts: Mapped[List["PayAccount"]] = relationship(
        "PayAccount",
        back_populates="metapay",
        order_by="PayAccount.pay_account_id",
        cascade="all, delete-orphan",
    )


class PayAccount(Base):
    """Bank account linked to a Metapay account"""

    __tablename__ = "pay_accounts"

    pay_account_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    metapay_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("metapays.metapay_id"), nullable=False, index=True
    )
    bank_id: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_account_number: Mapped[str] = mapped_column(String(20), nullable=False)

    metapay: Mapped["Metapay"] = relationship("Metapay", back_populates="pay_accounts")


class PayLog(Base):
    """Balance-affecting Metapay transaction"""

    __tablename__ = "pay_logs"

    pay_log_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    metapay_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("metapays.metapay_id"), nullable=False, index=True
    )
    book_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("books.book_id"), nullable=True, index=True
    )
    pay_log_type: Mapped[str] = mapped_column(String(20), nullable=False)
    pay_log_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_log_balance: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_log_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class Settlement(Base):
    """Settlement (정산) of a completed booking"""

    __tablename__ = "settlements"

    settlement_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("books.book_id"), nullable=False, unique=True
    )
    laundry_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("laundries.laundry_id"), nullable=False, index=True
    )
    settlement_fee: Mapped[int] = mapped_column(Integer, nullable=False)
    settlement_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
