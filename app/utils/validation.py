"""
Money input parsing for the API request models
"""
import re
from decimal import Decimal, InvalidOperation

# Numeric(15, 2) columns hold at most 13 integer digits
MAX_AMOUNT = Decimal("1e13")

_AMOUNT_RE = re.compile(r"^-?\d+(\.\d{1,2})?$")


def parse_money_input(value, allow_zero: bool = True) -> Decimal:
    """
    Parse a request value (str / int / float / Decimal) into a non-negative Decimal.

    Strings may use a decimal comma ("100,50") and carry at most 2 decimal places.

    Raises:
        ValueError: malformed, negative, too large, or zero when allow_zero is False

    Example:
        >>> parse_money_input(" 100,50 ")
        Decimal('100.50')
    """
    if isinstance(value, bool):
        raise ValueError("Invalid amount")
    if isinstance(value, float):
        value = repr(value)

    normalized = str(value).strip().replace(",", ".")
    try:
        amount = Decimal(normalized)
    except (InvalidOperation, ValueError):
        raise ValueError("Invalid amount")

    if not amount.is_finite():
        raise ValueError("Invalid amount")
    if not _AMOUNT_RE.match(normalized):
        raise ValueError("At most 2 decimal places")
    if amount < 0:
        raise ValueError("Amount must not be negative")
    if abs(amount) >= MAX_AMOUNT:
        raise ValueError("Amount is too large")
    if not allow_zero and amount == 0:
        raise ValueError("Amount must be greater than zero")
    return amount
