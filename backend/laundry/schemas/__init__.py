"""
Schemas package - Data Transfer Objects and validation.

This package contains DTOs that define the API contracts
and handle validation following SOLID principles.
"""

from .dtos import (
    BookCreateRequest,
    BookLineRequest,
    BookResponse,
    ChargeRequest,
    LaundryCreateRequest,
    LaundryResponse,
    MetapayResponse,
    PayAccountCreateRequest,
    PayAccountResponse,
    PayLogResponse,
    SettlementResponse,
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    # User DTOs
    "UserRegisterRequest",
    "UserUpdateRequest",
    "UserResponse",
    # Laundry DTOs
    "LaundryCreateRequest",
    "LaundryResponse",
    # Booking DTOs
    "BookCreateRequest",
    "BookLineRequest",
    "BookResponse",
    # Metapay DTOs
    "PayAccountCreateRequest",
    "ChargeRequest",
    "MetapayResponse",
    "PayAccountResponse",
    "PayLogResponse",
    # Settlement DTOs
    "SettlementResponse",
]
