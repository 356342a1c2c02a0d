"""
Activity log read service and administrative edits.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.activity import normalize_payload
from app.infrastructure.activitylog.repository import ActivityLogRepository
from app.infrastructure.db.models import ActivityLog


class ActivityLogNotFoundError(LookupError):
    pass


@dataclass
class Page:
    items: list[ActivityLog]
    current_page: int
    per_page: int
    total: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))


def clamp_per_page(per_page: int | None) -> int:
    """Requested page size limited to 1..LOGS_MAX_PER_PAGE (default LOGS_PER_PAGE)."""
    settings = get_settings()
    if per_page is None:
        return settings.LOGS_PER_PAGE
    return max(1, min(per_page, settings.LOGS_MAX_PER_PAGE))


class ActivityLogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ActivityLogRepository(db)

    def list_logs(
        self,
        page: int = 1,
        per_page: int | None = None,
        user_id: int | None = None,
        activity: str | None = None,
    ) -> Page:
        """Newest-first page of entries (all users unless user_id is given)."""
        page = max(1, page)
        per_page = clamp_per_page(per_page)
        items, total = self.repo.list_page(page, per_page, user_id=user_id, activity=activity)
        return Page(items=items, current_page=page, per_page=per_page, total=total)

    def get_log(self, log_id: int) -> ActivityLog:
        entry = self.repo.get(log_id)
        if entry is None:
            raise ActivityLogNotFoundError(f"Log #{log_id} not found")
        return entry

    def create_log(self, owner_id: int, activity: str, data: dict[str, Any] | None = None) -> ActivityLog:
        """
        Manual entry written by the user. Unlike ActivityRecorder, payload
        errors propagate (ActivityPayloadError) so the API can reject them.
        """
        log_id = self.repo.append(owner_id, activity, data)
        self.db.commit()
        return self.get_log(log_id)

    def update_log(self, log_id: int, **changes) -> ActivityLog:
        """Administrative edit of activity and/or data."""
        entry = self.get_log(log_id)

        if changes.get("activity") is not None:
            entry.activity = changes["activity"]
        if "data" in changes:
            entry.data = normalize_payload(
                changes["data"], max_depth=get_settings().ACTIVITY_PAYLOAD_MAX_DEPTH
            )

        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_log(self, log_id: int) -> None:
        entry = self.get_log(log_id)
        self.db.delete(entry)
        self.db.commit()
