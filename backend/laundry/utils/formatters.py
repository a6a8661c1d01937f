"""Display formatting helpers for API responses.

This module provides helpers for:
- Won amounts with thousands separators
- Phone and bank account numbers with dashes
- Label lookups in the static code tables
- Date formatting consistency
"""

import logging
from datetime import datetime
from typing import Mapping, Optional, Union

logger = logging.getLogger(__name__)


def format_won(value: Union[int, float, str, None]) -> str:
    """Format an amount in won with thousands separators.

    Examples:
        format_won(1234)     # "1,234"
        format_won(0)        # "0"
        format_won(None)     # "0"
        format_won("15000")  # "15,000"
    """
    if value is None:
        return "0"
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        logger.warning("Could not format won amount", extra={"context": {"value": value}})
        return str(value)


def _insert_dashes(digits: str, positions) -> str:
    """Insert a dash before each position, counted in the dashed string as it grows."""
    chars = list(digits)
    for position in positions:
        if position >= len(chars):
            break
        chars.insert(position, "-")
    return "".join(chars)


def format_tel(tel: Optional[str]) -> str:
    """Format an 11-digit mobile number as 010-1234-5678.

    Dashes go after the 3rd and 7th digit; shorter numbers keep the dashes
    that fit. Already formatted input is normalized first.

    Examples:
        format_tel("01012345678")  # "010-1234-5678"
        format_tel(None)           # ""
    """
    if not tel:
        return ""
    digits = tel.replace("-", "").strip()
    return _insert_dashes(digits, (3, 8))


def format_account_number(account_number: Optional[str]) -> str:
    """Format a bank account number as 4-3-rest digit groups.

    Examples:
        format_account_number("1234567890")  # "1234-567-890"
        format_account_number("")            # ""
    """
    if not account_number:
        return ""
    digits = account_number.replace("-", "").strip()
    return _insert_dashes(digits, (4, 8))


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime for display (YYYY-MM-DD HH:MM:SS)."""
    if value is None:
        return None
    return value.strftime("%Y-%m-%d %H:%M:%S")


def lookup_label(table: Mapping, code) -> str:
    """Return the label of a code, or an empty string for unknown codes."""
    try:
        return table.get(code, "")
    except TypeError:
        return ""
