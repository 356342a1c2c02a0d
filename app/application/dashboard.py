"""
Dashboard read service: aggregates savings, wishes and activity for one user.

Wish counts use the live status (current savings balance against price),
not the stored status.
"""
from sqlalchemy.orm import Session

from app.application.wishes import WishesService
from app.infrastructure.activitylog.repository import ActivityLogRepository
from app.infrastructure.db.models import Saving
from app.utils.money import money_str, format_money

RECENT_LOGS_LIMIT = 5


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_summary(self, owner_id: int) -> dict:
        savings_count = self.db.query(Saving).filter(Saving.user_id == owner_id).count()

        wishes_service = WishesService(self.db)
        views, balance = wishes_service.list_wishes(owner_id)
        wishes = wishes_service.summarize(views, balance)

        logs_repo = ActivityLogRepository(self.db)
        recent_logs, total_logs = logs_repo.list_page(1, RECENT_LOGS_LIMIT, user_id=owner_id)

        return {
            "total_savings": money_str(balance),
            "total_savings_display": format_money(balance),
            "savings_count": savings_count,
            "total_wishes": wishes.total,
            "achieved_wishes": wishes.achieved,
            "pending_wishes": wishes.pending,
            "total_amount_still_needed": money_str(wishes.total_amount_still_needed),
            "total_logs": total_logs,
            "recent_logs": recent_logs,
        }
