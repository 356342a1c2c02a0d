"""
Activity Log Repository - append-only audit trail

Every mutation of savings, wishes and sessions is recorded as an immutable entry.
"""
import logging
from typing import Optional, Dict, Any, List, Tuple

from sqlalchemy.orm import Session, joinedload

from app.config import get_settings
from app.domain.activity import normalize_payload
from app.infrastructure.db.models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogRepository:
    """
    Repository for the activity_logs table
    """

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        user_id: int,
        activity: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Add an entry to the activity log (flush only, the caller commits)

        Args:
            user_id: owner of the entry
            activity: human readable description ("Created new saving")
            payload: structured details, see app.domain.activity

        Returns:
            id of the new entry

        Raises:
            ActivityPayloadError: if the payload cannot be stored

        Example:
            >>> repo = ActivityLogRepository(db)
            >>> log_id = repo.append(
            ...     user_id=1,
            ...     activity="Created new saving",
            ...     payload={"saving_id": 7, "bank": "BCA", "total": "3000000.00"},
            ... )
        """
        max_depth = get_settings().ACTIVITY_PAYLOAD_MAX_DEPTH
        entry = ActivityLog(
            user_id=user_id,
            activity=activity,
            data=normalize_payload(payload, max_depth=max_depth),
        )

        self.db.add(entry)
        self.db.flush()

        return entry.id

    def get(self, log_id: int) -> Optional[ActivityLog]:
        """Entry by id with its user loaded, or None"""
        return (
            self.db.query(ActivityLog)
            .options(joinedload(ActivityLog.user))
            .filter(ActivityLog.id == log_id)
            .first()
        )

    def list_page(
        self,
        page: int,
        per_page: int,
        user_id: Optional[int] = None,
        activity: Optional[str] = None,
    ) -> Tuple[List[ActivityLog], int]:
        """
        One page of entries, newest first

        Args:
            page: 1-based page number
            per_page: page size
            user_id: only entries of this user (optional)
            activity: substring filter on the description (optional)

        Returns:
            (entries, total number of matching entries)
        """
        query = self.db.query(ActivityLog)

        if user_id is not None:
            query = query.filter(ActivityLog.user_id == user_id)

        if activity:
            query = query.filter(ActivityLog.activity.ilike(f"%{activity}%"))

        total = query.count()

        entries = (
            query.options(joinedload(ActivityLog.user))
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )

        return entries, total

    def count(self, user_id: int) -> int:
        """Number of entries of a user"""
        return self.db.query(ActivityLog).filter(ActivityLog.user_id == user_id).count()


class ActivityRecorder:
    """
    Records an activity after the triggering mutation has been committed.

    Recording never fails the mutation: errors are logged and rolled back,
    and record() returns None.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ActivityLogRepository(db)

    def record(
        self,
        owner_id: int,
        activity: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        try:
            log_id = self.repo.append(owner_id, activity, payload)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to record activity %r for user %s", activity, owner_id)
            return None

        logger.debug("Recorded activity %r for user %s (log #%s)", activity, owner_id, log_id)
        return log_id
