"""
Activity log API endpoints
"""
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_admin
from app.application.activity import ActivityLogService, ActivityLogNotFoundError, Page
from app.config import get_settings
from app.domain.activity import normalize_payload
from app.infrastructure.db.models import User, ActivityLog


router = APIRouter(prefix="/api/v1/logs", tags=["logs"])


# === Request/Response models ===

def _check_payload(v: dict[str, Any] | None) -> dict[str, Any] | None:
    """Reject payloads the activity log cannot store (ActivityPayloadError is a ValueError)"""
    return normalize_payload(v, max_depth=get_settings().ACTIVITY_PAYLOAD_MAX_DEPTH)


class CreateLogRequest(BaseModel):
    activity: str = Field(min_length=1, max_length=255)
    data: dict[str, Any] | None = None

    @field_validator("data")
    @classmethod
    def validate_data(cls, v):
        return _check_payload(v)


class UpdateLogRequest(BaseModel):
    activity: str | None = Field(default=None, min_length=1, max_length=255)
    data: dict[str, Any] | None = None

    @field_validator("data")
    @classmethod
    def validate_data(cls, v):
        return _check_payload(v)


class LogUserResponse(BaseModel):
    id: int
    name: str
    email: str


class LogResponse(BaseModel):
    id: int
    user_id: int
    activity: str
    data: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime
    user: LogUserResponse | None = None

    @classmethod
    def from_log(cls, entry: ActivityLog, with_user: bool = False) -> "LogResponse":
        user = None
        if with_user and entry.user is not None:
            user = LogUserResponse(id=entry.user.id, name=entry.user.name, email=entry.user.email)
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            activity=entry.activity,
            data=entry.data,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            user=user,
        )


class LogPageResponse(BaseModel):
    data: list[LogResponse]
    current_page: int
    per_page: int
    total: int
    last_page: int

    @classmethod
    def from_page(cls, page: Page, with_user: bool = False) -> "LogPageResponse":
        return cls(
            data=[LogResponse.from_log(e, with_user=with_user) for e in page.items],
            current_page=page.current_page,
            per_page=page.per_page,
            total=page.total,
            last_page=page.last_page,
        )


class LogPageEnvelope(BaseModel):
    message: str
    data: LogPageResponse


class LogEnvelope(BaseModel):
    message: str
    data: LogResponse


# === Endpoints ===

@router.get("/", response_model=LogPageEnvelope)
def list_logs(
    activity: str | None = None,
    user_id: int | None = None,
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All entries, newest first (admin)"""
    result = ActivityLogService(db).list_logs(page=page, per_page=per_page, user_id=user_id, activity=activity)
    return LogPageEnvelope(
        message="Logs retrieved successfully",
        data=LogPageResponse.from_page(result, with_user=True),
    )


@router.get("/my", response_model=LogPageEnvelope)
def my_logs(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Entries of the current user, newest first"""
    result = ActivityLogService(db).list_logs(page=page, per_page=per_page, user_id=user.id)
    return LogPageEnvelope(
        message="User logs retrieved successfully",
        data=LogPageResponse.from_page(result),
    )


@router.post("/", response_model=LogEnvelope, status_code=status.HTTP_201_CREATED)
def create_log(
    req: CreateLogRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = ActivityLogService(db).create_log(user.id, req.activity, req.data)
    return LogEnvelope(message="Log created successfully", data=LogResponse.from_log(entry))


@router.get("/{log_id}", response_model=LogEnvelope)
def get_log(
    log_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Own entry, or any entry for an admin"""
    try:
        entry = ActivityLogService(db).get_log(log_id)
    except ActivityLogNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    if entry.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=404, detail=f"Log #{log_id} not found")

    return LogEnvelope(message="Log retrieved successfully", data=LogResponse.from_log(entry, with_user=True))


@router.put("/{log_id}", response_model=LogEnvelope)
def update_log(
    log_id: int,
    req: UpdateLogRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Administrative edit"""
    try:
        entry = ActivityLogService(db).update_log(log_id, **req.model_dump(exclude_unset=True))
    except ActivityLogNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return LogEnvelope(message="Log updated successfully", data=LogResponse.from_log(entry))


@router.delete("/{log_id}")
def delete_log(
    log_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        ActivityLogService(db).delete_log(log_id)
    except ActivityLogNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return {"message": "Log deleted successfully"}
