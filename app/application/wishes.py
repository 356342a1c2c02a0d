"""
Wish use cases - business logic for wishes operations
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.activity import ACTIVITY_WISH_CREATED, ACTIVITY_WISH_UPDATED, ACTIVITY_WISH_DELETED
from app.domain.wish import (
    resolve_wish_status,
    amount_still_needed,
    live_wish_progress,
    LiveWishProgress,
    WISH_STATUSES,
    LIVE_STATUSES,
)
from app.infrastructure.activitylog.repository import ActivityRecorder
from app.infrastructure.db.models import Wish
from app.readmodels.balances import get_aggregate_balance
from app.utils.money import to_money, sum_money

logger = logging.getLogger(__name__)


class WishValidationError(ValueError):
    """Invalid wish input"""
    pass


class WishNotFoundError(LookupError):
    """Wish does not exist or belongs to another user"""
    pass


def wish_snapshot(wish: Wish) -> dict:
    """Stored fields of a wish for the activity log"""
    return {
        "id": wish.id,
        "name": wish.name,
        "description": wish.description,
        "price": to_money(wish.price),
        "amount_still_needed": to_money(wish.amount_still_needed),
        "status": wish.status,
        "created_at": wish.created_at,
        "updated_at": wish.updated_at,
    }


def get_owned_wish(db: Session, wish_id: int, owner_id: int) -> Wish:
    """
    Raises:
        WishNotFoundError: if absent or owned by someone else
    """
    wish = db.query(Wish).filter(
        Wish.id == wish_id,
        Wish.user_id == owner_id
    ).first()

    if not wish:
        raise WishNotFoundError(f"Wish #{wish_id} not found")

    return wish


class _WishStatusMixin:
    """Derives amount_still_needed and status according to WISH_STATUS_SOURCE"""

    db: Session

    def _derive(
        self,
        owner_id: int,
        price: Decimal,
        supplied_needed: Decimal | None,
        stored_needed: Decimal | None,
    ) -> tuple[Decimal, str]:
        if get_settings().WISH_STATUS_SOURCE == "live":
            if supplied_needed is not None:
                logger.info(
                    "Ignoring caller-supplied amount_still_needed=%s for user %s, using live balance",
                    supplied_needed, owner_id,
                )
            balance = get_aggregate_balance(self.db, owner_id)
            needed = amount_still_needed(price, balance)
        elif supplied_needed is not None:
            needed = to_money(supplied_needed)
        elif stored_needed is not None:
            needed = to_money(stored_needed)
        else:
            needed = to_money(price)

        return needed, resolve_wish_status(price, needed)


def _validate(name: str | None, price: Decimal | None, needed: Decimal | None) -> None:
    if name is not None and not name.strip():
        raise WishValidationError("Wish name must not be empty")
    if price is not None and to_money(price) <= 0:
        raise WishValidationError("Price must be greater than zero")
    if needed is not None and to_money(needed) < 0:
        raise WishValidationError("Amount still needed must not be negative")


class CreateWishUseCase(_WishStatusMixin):
    """Use case: create a wish"""

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(
        self,
        owner_id: int,
        name: str,
        price: Decimal,
        description: str | None = None,
        amount_still_needed: Decimal | None = None,
    ) -> Wish:
        """
        Create a wish with its status resolved

        Args:
            owner_id: ID of the owner (user.id)
            name: wish name
            price: target price (> 0)
            description: optional notes
            amount_still_needed: caller's difference, only used when
                WISH_STATUS_SOURCE=caller (defaults to price)

        Returns:
            the persisted Wish
        """
        _validate(name, price, amount_still_needed)

        price = to_money(price)
        needed, status = self._derive(owner_id, price, amount_still_needed, stored_needed=None)

        wish = Wish(
            user_id=owner_id,
            name=name.strip(),
            description=description,
            price=price,
            amount_still_needed=needed,
            status=status,
        )
        self.db.add(wish)
        self.db.commit()
        self.db.refresh(wish)

        self.recorder.record(owner_id, ACTIVITY_WISH_CREATED, {
            "wish_id": wish.id,
            "wish_name": wish.name,
            "price": price,
            "status": status,
        })

        return wish


class UpdateWishUseCase(_WishStatusMixin):
    """Use case: partially update a wish, status is always re-resolved"""

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(
        self,
        wish_id: int,
        owner_id: int,
        **changes
    ) -> Wish:
        """
        Update a wish

        Args:
            wish_id: ID of the wish
            owner_id: ID of the owner
            **changes: any of name, description, price, amount_still_needed

        Raises:
            WishNotFoundError, WishValidationError
        """
        unknown = set(changes) - {"name", "description", "price", "amount_still_needed"}
        if unknown:
            raise WishValidationError(f"Unknown wish fields: {', '.join(sorted(unknown))}")

        wish = get_owned_wish(self.db, wish_id, owner_id)
        _validate(changes.get("name"), changes.get("price"), changes.get("amount_still_needed"))

        old_data = wish_snapshot(wish)

        if changes.get("name") is not None:
            wish.name = changes["name"].strip()
        if "description" in changes:
            wish.description = changes["description"]
        if changes.get("price") is not None:
            wish.price = to_money(changes["price"])

        wish.amount_still_needed, wish.status = self._derive(
            owner_id,
            to_money(wish.price),
            changes.get("amount_still_needed"),
            stored_needed=wish.amount_still_needed,
        )

        self.db.commit()
        self.db.refresh(wish)

        self.recorder.record(owner_id, ACTIVITY_WISH_UPDATED, {
            "wish_id": wish.id,
            "wish_name": wish.name,
            "old_data": old_data,
            "new_data": wish_snapshot(wish),
        })

        return wish


class DeleteWishUseCase:
    """Use case: delete a wish"""

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(self, wish_id: int, owner_id: int) -> None:
        wish = get_owned_wish(self.db, wish_id, owner_id)
        deleted_data = wish_snapshot(wish)

        self.db.delete(wish)
        self.db.commit()

        self.recorder.record(owner_id, ACTIVITY_WISH_DELETED, {
            "wish_id": deleted_data["id"],
            "wish_name": deleted_data["name"],
            "deleted_data": deleted_data,
        })


class RefreshWishStatusesUseCase:
    """
    Use case: re-resolve the stored status of all wishes of an owner
    against the current aggregate savings balance.

    Runs inside the caller's transaction (flush only) after every savings
    change when WISH_STATUS_SOURCE=live.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int) -> int:
        """
        Returns:
            number of wishes whose stored status or amount changed
        """
        if get_settings().WISH_STATUS_SOURCE != "live":
            return 0

        balance = get_aggregate_balance(self.db, owner_id)
        changed = 0

        for wish in self.db.query(Wish).filter(Wish.user_id == owner_id).all():
            needed = amount_still_needed(wish.price, balance)
            status = resolve_wish_status(wish.price, needed)
            if status != wish.status or needed != to_money(wish.amount_still_needed):
                wish.amount_still_needed = needed
                wish.status = status
                changed += 1

        self.db.flush()
        return changed


WISH_SORTS = ["newest", "oldest", "highest", "lowest"]


@dataclass
class WishView:
    """A stored wish paired with its live (display-only) progress"""
    wish: Wish
    live: LiveWishProgress


@dataclass
class WishesSummary:
    total: int
    achieved: int
    pending: int
    savings_balance: Decimal
    total_amount_still_needed: Decimal


class WishesService:
    """Read side: listing with live progress against the current savings balance"""

    def __init__(self, db: Session):
        self.db = db

    def list_wishes(
        self,
        owner_id: int,
        status: str | None = None,
        live_status: str | None = None,
        sort: str = "newest",
    ) -> tuple[list[WishView], Decimal]:
        """
        Wishes of the owner with live progress

        Args:
            owner_id: ID of the owner
            status: filter on the stored status (funded, partially-funded, unfunded)
            live_status: filter on the live status (achieved, pending)
            sort: newest / oldest / highest / lowest (by price)

        Returns:
            (wish views, aggregate savings balance used for live progress)
        """
        if sort not in WISH_SORTS:
            raise WishValidationError(f"Unknown sort: {sort}")
        if status is not None and status not in WISH_STATUSES:
            raise WishValidationError(f"Unknown status: {status}")
        if live_status is not None and live_status not in LIVE_STATUSES:
            raise WishValidationError(f"Unknown live status: {live_status}")

        query = self.db.query(Wish).filter(Wish.user_id == owner_id)
        if status:
            query = query.filter(Wish.status == status)

        order = {
            "newest": (Wish.created_at.desc(), Wish.id.desc()),
            "oldest": (Wish.created_at.asc(), Wish.id.asc()),
            "highest": (Wish.price.desc(), Wish.id.desc()),
            "lowest": (Wish.price.asc(), Wish.id.asc()),
        }[sort]

        balance = get_aggregate_balance(self.db, owner_id)
        views = [
            WishView(wish=w, live=live_wish_progress(w.price, balance))
            for w in query.order_by(*order).all()
        ]

        if live_status:
            views = [v for v in views if v.live.status == live_status]

        return views, balance

    @staticmethod
    def summarize(views: list[WishView], balance: Decimal) -> WishesSummary:
        achieved = sum(1 for v in views if v.live.is_funded)
        return WishesSummary(
            total=len(views),
            achieved=achieved,
            pending=len(views) - achieved,
            savings_balance=to_money(balance),
            total_amount_still_needed=sum_money(v.live.amount_still_needed for v in views),
        )
