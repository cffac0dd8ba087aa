"""
Input Validation Module

Sanitises amounts typed into forms before they reach the calculators,
which assume non-negative finite input.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

# Currency symbols and whitespace
_STRIP_PATTERN = re.compile(r"[₱\s]|PHP|Php|php")

# Plain digits or comma-grouped thousands, optional decimals
_AMOUNT_PATTERN = re.compile(r"^-?(\d{1,3}(,\d{3})+|\d+)(\.\d+)?$|^-?\.\d+$")


class InvalidAmountError(ValueError):
    """Raised for non-numeric, non-finite or negative amounts."""


def parse_amount(raw: Any, field_name: str = "amount", allow_empty: bool = False) -> Decimal:
    """Parse a user-entered amount.

    Args:
        raw: Value such as 250000, "250,000.50" or "₱1,234.56"
        field_name: Name used in error messages
        allow_empty: Treat None or blank input as zero

    Returns:
        Non-negative Decimal

    Raises:
        InvalidAmountError: If the value cannot be used as an amount
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if allow_empty:
            return Decimal("0")
        raise InvalidAmountError(f"'{field_name}' is required")

    if isinstance(raw, bool):
        raise InvalidAmountError(f"'{field_name}' must be a number")

    if isinstance(raw, str):
        text = _STRIP_PATTERN.sub("", raw)
        if not _AMOUNT_PATTERN.match(text):
            raise InvalidAmountError(f"'{field_name}' must be a number, got {raw!r}")
        text = text.replace(",", "")
    else:
        text = str(raw)

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(f"'{field_name}' must be a number, got {raw!r}") from None

    if not value.is_finite():
        raise InvalidAmountError(f"'{field_name}' must be finite")
    if value < 0:
        raise InvalidAmountError(f"'{field_name}' must not be negative")
    return value
