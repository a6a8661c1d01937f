"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities with business logic
- codes.py: Static code tables (states, methods, clothes, fabrics, banks)
- interfaces.py: Repository contracts
"""

from .entities import Book, BookLine, Laundry, Metapay, PayAccount, PayLog, Settlement, User
from .interfaces import (
    IBookReader,
    IBookRepository,
    IBookWriter,
    ILaundryReader,
    ILaundryRepository,
    ILaundryWriter,
    IMetapayRepository,
    IPayLogRepository,
    ISettlementRepository,
    IUserReader,
    IUserRepository,
    IUserWriter,
)

__all__ = [
    # Domain entities
    "User",
    "Laundry",
    "Book",
    "BookLine",
    "Metapay",
    "PayAccount",
    "PayLog",
    "Settlement",
    # Repository interfaces
    "IUserRepository",
    "ILaundryRepository",
    "IBookRepository",
    "IMetapayRepository",
    "IPayLogRepository",
    "ISettlementRepository",
    # Segregated interfaces
    "IUserReader",
    "IUserWriter",
    "ILaundryReader",
    "ILaundryWriter",
    "IBookReader",
    "IBookWriter",
]
