"""
Aggregate savings balance of an owner
"""
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.infrastructure.db.models import Saving
from app.utils.money import to_money


def get_aggregate_balance(db: Session, owner_id: int) -> Decimal:
    """Sum of total over all savings accounts of the owner (0.00 when none)"""
    total = (
        db.query(func.coalesce(func.sum(Saving.total), 0))
        .filter(Saving.user_id == owner_id)
        .scalar()
    )
    return to_money(total)
