"""
Wish domain rules - savings goals and their funding status

Two derivations live here and must not be mixed up:

* stored status  - resolve_wish_status(price, amount_still_needed), persisted
  on every create/update of a wish;
* live status    - live_wish_progress(price, balance), computed for display
  from the owner's current aggregate savings and never persisted.
"""
from dataclasses import dataclass
from decimal import Decimal

from app.utils.money import to_money, ZERO


# Stored statuses
WISH_STATUS_FUNDED = "funded"
WISH_STATUS_PARTIALLY_FUNDED = "partially-funded"
WISH_STATUS_UNFUNDED = "unfunded"

WISH_STATUSES = [
    WISH_STATUS_FUNDED,
    WISH_STATUS_PARTIALLY_FUNDED,
    WISH_STATUS_UNFUNDED,
]

# Live (display) statuses
LIVE_STATUS_ACHIEVED = "achieved"
LIVE_STATUS_PENDING = "pending"

LIVE_STATUSES = [LIVE_STATUS_ACHIEVED, LIVE_STATUS_PENDING]


def resolve_wish_status(price: Decimal, amount_still_needed: Decimal | None = None) -> str:
    """
    Stored status of a wish.

        D == 0      -> funded
        0 < D < P   -> partially-funded
        D >= P      -> unfunded

    A missing D means nothing is saved yet, so it defaults to P.
    """
    price = to_money(price)
    needed = price if amount_still_needed is None else to_money(amount_still_needed)

    if needed == 0:
        return WISH_STATUS_FUNDED
    if 0 < needed < price:
        return WISH_STATUS_PARTIALLY_FUNDED
    return WISH_STATUS_UNFUNDED


def amount_still_needed(price: Decimal, balance: Decimal) -> Decimal:
    """max(0, price - aggregate savings balance)"""
    return max(ZERO, to_money(price) - to_money(balance))


@dataclass(frozen=True)
class LiveWishProgress:
    """Display-only view of a wish against the current savings balance"""
    is_funded: bool
    amount_still_needed: Decimal
    affordability_percent: Decimal

    @property
    def status(self) -> str:
        return LIVE_STATUS_ACHIEVED if self.is_funded else LIVE_STATUS_PENDING


def live_wish_progress(price: Decimal, balance: Decimal) -> LiveWishProgress:
    """
    Live progress of a wish: funded as soon as balance >= price.

    affordability_percent is balance / price capped at 100, and 0 when the
    balance is not positive.
    """
    price = to_money(price)
    balance = to_money(balance)

    if balance > 0 and price > 0:
        percent = min(Decimal("100"), balance / price * 100)
    else:
        percent = Decimal("0")

    return LiveWishProgress(
        is_funded=balance >= price,
        amount_still_needed=amount_still_needed(price, balance),
        affordability_percent=to_money(percent),
    )
