"""
Dashboard API endpoint
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.api.v1.logs import LogResponse
from app.application.dashboard import DashboardService
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


class DashboardResponse(BaseModel):
    total_savings: str
    total_savings_display: str
    savings_count: int
    total_wishes: int
    achieved_wishes: int
    pending_wishes: int
    total_amount_still_needed: str
    total_logs: int
    recent_logs: list[LogResponse]


class DashboardEnvelope(BaseModel):
    message: str
    data: DashboardResponse


@router.get("/", response_model=DashboardEnvelope)
def dashboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Savings total, wish counts by live status and recent activity"""
    summary = DashboardService(db).get_summary(user.id)
    summary["recent_logs"] = [LogResponse.from_log(e) for e in summary["recent_logs"]]
    return DashboardEnvelope(message="Dashboard retrieved successfully", data=DashboardResponse(**summary))
