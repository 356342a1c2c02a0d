"""
Wishes API endpoints

Each wish is returned with its stored status and, separately, a "live"
block computed from the current savings balance for display.
"""
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.wishes import (
    CreateWishUseCase,
    UpdateWishUseCase,
    DeleteWishUseCase,
    WishesService,
    WishValidationError,
    WishNotFoundError,
    get_owned_wish,
)
from app.domain.wish import live_wish_progress, LiveWishProgress
from app.infrastructure.db.models import User, Wish
from app.readmodels.balances import get_aggregate_balance
from app.utils.money import money_str
from app.utils.validation import parse_money_input


router = APIRouter(prefix="/api/v1/wishes", tags=["wishes"])


# === Request/Response models ===

class CreateWishRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: Decimal
    amount_still_needed: Decimal | None = None

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v):
        """Price must be > 0"""
        return parse_money_input(v, allow_zero=False)

    @field_validator("amount_still_needed", mode="before")
    @classmethod
    def validate_needed(cls, v):
        if v is None:
            return v
        return parse_money_input(v)


class UpdateWishRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = None
    amount_still_needed: Decimal | None = None

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v):
        if v is None:
            return v
        return parse_money_input(v, allow_zero=False)

    @field_validator("amount_still_needed", mode="before")
    @classmethod
    def validate_needed(cls, v):
        if v is None:
            return v
        return parse_money_input(v)


class LiveProgressResponse(BaseModel):
    status: str  # achieved / pending
    is_funded: bool
    amount_still_needed: str
    affordability_percent: str


class WishResponse(BaseModel):
    id: int
    name: str
    description: str | None
    price: str  # Decimal as string
    amount_still_needed: str
    status: str  # stored: funded / partially-funded / unfunded
    live: LiveProgressResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_wish(cls, wish: Wish, live: LiveWishProgress) -> "WishResponse":
        return cls(
            id=wish.id,
            name=wish.name,
            description=wish.description,
            price=money_str(wish.price),
            amount_still_needed=money_str(wish.amount_still_needed),
            status=wish.status,
            live=LiveProgressResponse(
                status=live.status,
                is_funded=live.is_funded,
                amount_still_needed=money_str(live.amount_still_needed),
                affordability_percent=money_str(live.affordability_percent),
            ),
            created_at=wish.created_at,
            updated_at=wish.updated_at,
        )


class WishesSummaryResponse(BaseModel):
    total: int
    achieved: int
    pending: int
    savings_balance: str
    total_amount_still_needed: str


class WishEnvelope(BaseModel):
    message: str
    data: WishResponse


class WishesListEnvelope(BaseModel):
    message: str
    data: list[WishResponse]
    summary: WishesSummaryResponse


# === Helper function ===

def _wish_response(db: Session, wish: Wish, owner_id: int) -> WishResponse:
    """Attach live progress against the owner's current balance"""
    balance = get_aggregate_balance(db, owner_id)
    return WishResponse.from_wish(wish, live_wish_progress(wish.price, balance))


# === Endpoints ===

@router.get("/", response_model=WishesListEnvelope)
def list_wishes(
    status: str | None = None,
    live_status: str | None = None,
    sort: str = "newest",
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Wishes of the current user"""
    service = WishesService(db)
    try:
        views, balance = service.list_wishes(user.id, status=status, live_status=live_status, sort=sort)
    except WishValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    summary = service.summarize(views, balance)

    return WishesListEnvelope(
        message="Wishes retrieved successfully",
        data=[WishResponse.from_wish(v.wish, v.live) for v in views],
        summary=WishesSummaryResponse(
            total=summary.total,
            achieved=summary.achieved,
            pending=summary.pending,
            savings_balance=money_str(summary.savings_balance),
            total_amount_still_needed=money_str(summary.total_amount_still_needed),
        ),
    )


@router.post("/", response_model=WishEnvelope, status_code=status.HTTP_201_CREATED)
def create_wish(
    req: CreateWishRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        wish = CreateWishUseCase(db).execute(
            owner_id=user.id,
            name=req.name,
            description=req.description,
            price=req.price,
            amount_still_needed=req.amount_still_needed,
        )
    except WishValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return WishEnvelope(message="Wish created successfully", data=_wish_response(db, wish, user.id))


@router.get("/{wish_id}", response_model=WishEnvelope)
def get_wish(
    wish_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        wish = get_owned_wish(db, wish_id, user.id)
    except WishNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return WishEnvelope(message="Wish retrieved successfully", data=_wish_response(db, wish, user.id))


@router.put("/{wish_id}", response_model=WishEnvelope)
def update_wish(
    wish_id: int,
    req: UpdateWishRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update; the stored status is re-resolved"""
    try:
        wish = UpdateWishUseCase(db).execute(
            wish_id=wish_id,
            owner_id=user.id,
            **req.model_dump(exclude_unset=True),
        )
    except WishNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except WishValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return WishEnvelope(message="Wish updated successfully", data=_wish_response(db, wish, user.id))


@router.delete("/{wish_id}")
def delete_wish(
    wish_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        DeleteWishUseCase(db).execute(wish_id=wish_id, owner_id=user.id)
    except WishNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return {"message": "Wish deleted successfully"}
