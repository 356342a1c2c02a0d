"""
Money helpers shared by the domain, use cases and API.

All amounts are fixed-point Decimals with 2 fractional digits.

Usage:
    from app.utils.money import to_money, format_money

    to_money("1500.5")            -> Decimal("1500.50")
    format_money(3000000)         -> "Rp 3.000.000"
    format_money(1200.5, "USD")   -> "1,200 USD"
"""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Currencies written before the amount, with local separators
_CURRENCY_PREFIX = {
    "IDR": ("Rp", ".", ","),
}


def to_money(amount) -> Decimal:
    """
    Convert int / str / Decimal to a 2-digit Decimal.

    Floats are converted through str() so 0.1 stays 0.10 and not 0.1000000000000000055.
    """
    if amount is None:
        return ZERO
    if isinstance(amount, float):
        amount = str(amount)
    if not isinstance(amount, Decimal):
        amount = Decimal(amount)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(amount) -> str:
    """Decimal as a plain string for JSON ("3000000.00")."""
    return str(to_money(amount))


def format_money(amount, currency: str = "IDR", decimals: int = 0) -> str:
    """
    Format an amount with thousand separators and a currency label.

    Args:
        amount: int / float / Decimal / str
        currency: ISO currency code (IDR, USD, EUR ...)
        decimals: digits after the decimal point

    Returns:
        "Rp 3.000.000" / "1,200 USD"
    """
    amount = to_money(amount)
    formatted = f"{{:,.{decimals}f}}".format(amount)

    prefix = _CURRENCY_PREFIX.get(currency)
    if prefix is None:
        return f"{formatted} {currency}"

    label, thousands, point = prefix
    formatted = formatted.replace(",", "\0").replace(".", point).replace("\0", thousands)
    return f"{label} {formatted}"


def sum_money(amounts) -> Decimal:
    """Exact sum of amounts (0.00 for an empty iterable)."""
    return to_money(sum((to_money(a) for a in amounts), Decimal("0")))
