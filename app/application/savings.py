"""
Savings use cases - business logic for savings accounts
"""
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from app.application.wishes import RefreshWishStatusesUseCase
from app.domain.activity import ACTIVITY_SAVING_CREATED, ACTIVITY_SAVING_UPDATED, ACTIVITY_SAVING_DELETED
from app.domain.savings import compute_savings_total, apply_savings_change, aggregate_savings_balance
from app.infrastructure.activitylog.repository import ActivityRecorder
from app.infrastructure.db.models import Saving
from app.utils.money import to_money, sum_money


SAVINGS_SORTS = ["newest", "oldest", "highest", "lowest"]


class SavingValidationError(ValueError):
    """Invalid savings input"""
    pass


class SavingNotFoundError(LookupError):
    """Savings account does not exist or belongs to another user"""
    pass


def saving_snapshot(saving: Saving) -> dict:
    """Stored fields of a savings account for the activity log"""
    return {
        "id": saving.id,
        "bank_name": saving.bank_name,
        "income": to_money(saving.income),
        "expense": to_money(saving.expense),
        "total": to_money(saving.total),
        "created_at": saving.created_at,
        "updated_at": saving.updated_at,
    }


def get_owned_saving(db: Session, saving_id: int, owner_id: int) -> Saving:
    """
    Raises:
        SavingNotFoundError: if absent or owned by someone else
    """
    saving = db.query(Saving).filter(
        Saving.id == saving_id,
        Saving.user_id == owner_id
    ).first()

    if not saving:
        raise SavingNotFoundError(f"Saving #{saving_id} not found")

    return saving


def _validate(bank_name: str | None, income: Decimal | None, expense: Decimal | None) -> None:
    if bank_name is not None and not bank_name.strip():
        raise SavingValidationError("Bank name must not be empty")
    if income is not None and to_money(income) < 0:
        raise SavingValidationError("Income must not be negative")
    if expense is not None and to_money(expense) < 0:
        raise SavingValidationError("Expense must not be negative")


class CreateSavingUseCase:
    """
    Use case: create a savings account

    1. Compute total = income - expense
    2. Persist the account (and re-resolve wish statuses in the same transaction)
    3. Record the activity after commit
    """

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(
        self,
        owner_id: int,
        bank_name: str,
        income: Decimal,
        expense: Decimal | None = None,
    ) -> Saving:
        """
        Create a savings account

        Args:
            owner_id: ID of the owner (user.id)
            bank_name: bank label
            income: income amount (>= 0)
            expense: expense amount (>= 0, default 0)

        Returns:
            the persisted Saving
        """
        _validate(bank_name, income, expense)

        income = to_money(income)
        expense = to_money(expense)
        total = compute_savings_total(income, expense)

        saving = Saving(
            user_id=owner_id,
            bank_name=bank_name.strip(),
            income=income,
            expense=expense,
            total=total,
        )
        self.db.add(saving)
        self.db.flush()

        RefreshWishStatusesUseCase(self.db).execute(owner_id)

        self.db.commit()
        self.db.refresh(saving)

        self.recorder.record(owner_id, ACTIVITY_SAVING_CREATED, {
            "saving_id": saving.id,
            "bank": saving.bank_name,
            "income": income,
            "expense": expense,
            "total": total,
        })

        return saving


class UpdateSavingUseCase:
    """Use case: partially update a savings account, total is always recomputed"""

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(
        self,
        saving_id: int,
        owner_id: int,
        bank_name: str | None = None,
        income: Decimal | None = None,
        expense: Decimal | None = None,
    ) -> Saving:
        """
        Update a savings account. Fields left as None keep their stored value.

        Raises:
            SavingNotFoundError, SavingValidationError
        """
        saving = get_owned_saving(self.db, saving_id, owner_id)
        _validate(bank_name, income, expense)

        old_data = saving_snapshot(saving)

        if bank_name is not None:
            saving.bank_name = bank_name.strip()

        saving.income, saving.expense, saving.total = apply_savings_change(
            saving.income, saving.expense, income=income, expense=expense
        )
        self.db.flush()

        RefreshWishStatusesUseCase(self.db).execute(owner_id)

        self.db.commit()
        self.db.refresh(saving)

        self.recorder.record(owner_id, ACTIVITY_SAVING_UPDATED, {
            "saving_id": saving.id,
            "bank": saving.bank_name,
            "old_data": old_data,
            "new_data": saving_snapshot(saving),
        })

        return saving


class DeleteSavingUseCase:
    """Use case: delete a savings account"""

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(self, saving_id: int, owner_id: int) -> None:
        saving = get_owned_saving(self.db, saving_id, owner_id)
        deleted_data = saving_snapshot(saving)

        self.db.delete(saving)
        self.db.flush()

        RefreshWishStatusesUseCase(self.db).execute(owner_id)

        self.db.commit()

        self.recorder.record(owner_id, ACTIVITY_SAVING_DELETED, {
            "saving_id": deleted_data["id"],
            "bank": deleted_data["bank_name"],
            "deleted_data": deleted_data,
        })


@dataclass
class SavingsSummary:
    total_income: Decimal
    total_expense: Decimal
    grand_total: Decimal


class SavingsService:
    """Read side: filtered listing and totals"""

    def __init__(self, db: Session):
        self.db = db

    def list_savings(
        self,
        owner_id: int,
        bank: str | None = None,
        sort: str = "newest",
    ) -> list[Saving]:
        """Savings of the owner, optionally filtered by bank substring"""
        if sort not in SAVINGS_SORTS:
            raise SavingValidationError(f"Unknown sort: {sort}")

        query = self.db.query(Saving).filter(Saving.user_id == owner_id)

        if bank:
            query = query.filter(Saving.bank_name.ilike(f"%{bank}%"))

        order = {
            "newest": (Saving.created_at.desc(), Saving.id.desc()),
            "oldest": (Saving.created_at.asc(), Saving.id.asc()),
            "highest": (Saving.total.desc(), Saving.id.desc()),
            "lowest": (Saving.total.asc(), Saving.id.asc()),
        }[sort]

        return query.order_by(*order).all()

    @staticmethod
    def summarize(savings: list[Saving]) -> SavingsSummary:
        """Totals over the given (already filtered) savings"""
        return SavingsSummary(
            total_income=sum_money(s.income for s in savings),
            total_expense=sum_money(s.expense for s in savings),
            grand_total=aggregate_savings_balance(s.total for s in savings),
        )
