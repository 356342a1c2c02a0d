"""
Savings API endpoints
"""
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.savings import (
    CreateSavingUseCase,
    UpdateSavingUseCase,
    DeleteSavingUseCase,
    SavingsService,
    SavingValidationError,
    SavingNotFoundError,
    get_owned_saving,
)
from app.infrastructure.db.models import User, Saving
from app.utils.money import money_str
from app.utils.validation import parse_money_input


router = APIRouter(prefix="/api/v1/savings", tags=["savings"])


# === Request/Response models ===

class CreateSavingRequest(BaseModel):
    bank_name: str = Field(min_length=1, max_length=255)
    income: Decimal
    expense: Decimal | None = None

    @field_validator("income", "expense", mode="before")
    @classmethod
    def validate_amount(cls, v):
        """Non-negative, point or comma, at most 2 decimal places"""
        if v is None:
            return v
        return parse_money_input(v)


class UpdateSavingRequest(BaseModel):
    bank_name: str | None = Field(default=None, min_length=1, max_length=255)
    income: Decimal | None = None
    expense: Decimal | None = None

    @field_validator("income", "expense", mode="before")
    @classmethod
    def validate_amount(cls, v):
        if v is None:
            return v
        return parse_money_input(v)


class SavingResponse(BaseModel):
    id: int
    bank_name: str
    income: str  # Decimal as string
    expense: str
    total: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_saving(cls, saving: Saving) -> "SavingResponse":
        return cls(
            id=saving.id,
            bank_name=saving.bank_name,
            income=money_str(saving.income),
            expense=money_str(saving.expense),
            total=money_str(saving.total),
            created_at=saving.created_at,
            updated_at=saving.updated_at,
        )


class SavingsSummaryResponse(BaseModel):
    total_income: str
    total_expense: str
    grand_total: str


class SavingEnvelope(BaseModel):
    message: str
    data: SavingResponse


class SavingsListEnvelope(BaseModel):
    message: str
    data: list[SavingResponse]
    summary: SavingsSummaryResponse


# === Endpoints ===

@router.get("/", response_model=SavingsListEnvelope)
def list_savings(
    bank: str | None = None,
    sort: str = "newest",
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Savings of the current user with totals over the listed rows"""
    service = SavingsService(db)
    try:
        savings = service.list_savings(user.id, bank=bank, sort=sort)
    except SavingValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    summary = service.summarize(savings)

    return SavingsListEnvelope(
        message="Savings retrieved successfully",
        data=[SavingResponse.from_saving(s) for s in savings],
        summary=SavingsSummaryResponse(
            total_income=money_str(summary.total_income),
            total_expense=money_str(summary.total_expense),
            grand_total=money_str(summary.grand_total),
        ),
    )


@router.post("/", response_model=SavingEnvelope, status_code=status.HTTP_201_CREATED)
def create_saving(
    req: CreateSavingRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a savings account (total = income - expense)"""
    try:
        saving = CreateSavingUseCase(db).execute(
            owner_id=user.id,
            bank_name=req.bank_name,
            income=req.income,
            expense=req.expense,
        )
    except SavingValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return SavingEnvelope(message="Saving created successfully", data=SavingResponse.from_saving(saving))


@router.get("/{saving_id}", response_model=SavingEnvelope)
def get_saving(
    saving_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        saving = get_owned_saving(db, saving_id, user.id)
    except SavingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return SavingEnvelope(message="Saving retrieved successfully", data=SavingResponse.from_saving(saving))


@router.put("/{saving_id}", response_model=SavingEnvelope)
def update_saving(
    saving_id: int,
    req: UpdateSavingRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update; the total is recomputed from stored and supplied values"""
    try:
        saving = UpdateSavingUseCase(db).execute(
            saving_id=saving_id,
            owner_id=user.id,
            bank_name=req.bank_name,
            income=req.income,
            expense=req.expense,
        )
    except SavingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except SavingValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return SavingEnvelope(message="Saving updated successfully", data=SavingResponse.from_saving(saving))


@router.delete("/{saving_id}")
def delete_saving(
    saving_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        DeleteSavingUseCase(db).execute(saving_id=saving_id, owner_id=user.id)
    except SavingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return {"message": "Saving deleted successfully"}
