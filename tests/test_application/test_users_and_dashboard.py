"""
Tests for user registration/removal and the dashboard summary
"""
from decimal import Decimal

import pytest

from app.application.dashboard import DashboardService
from app.application.savings import CreateSavingUseCase
from app.application.users import RegisterUserUseCase, DeleteUserUseCase, UserValidationError, UserNotFoundError
from app.application.wishes import CreateWishUseCase
from app.auth import issue_access_token, verify_password
from app.infrastructure.db.models import User, Saving, Wish, ActivityLog, AccessToken


class TestRegisterUser:
    def test_register_hashes_password_and_logs(self, db_session):
        user = RegisterUserUseCase(db_session).execute(
            name="Siti", email="Siti@Gmail.com", password="password123", phone_number="0812"
        )
        assert user.email == "siti@gmail.com"
        assert user.password_hash != "password123"
        assert verify_password("password123", user.password_hash)

        entry = db_session.query(ActivityLog).filter(ActivityLog.user_id == user.id).one()
        assert entry.activity == "User registered"
        assert entry.data == {"email": "siti@gmail.com", "name": "Siti"}

    def test_duplicate_email_rejected(self, db_session, owner):
        with pytest.raises(UserValidationError, match="taken"):
            RegisterUserUseCase(db_session).execute(name="X", email=owner.email, password="password123")


class TestDeleteUser:
    def test_cascade(self, db_session, owner, other_user, settings):
        CreateSavingUseCase(db_session).execute(owner_id=owner.id, bank_name="BCA", income=Decimal("10"))
        CreateWishUseCase(db_session).execute(owner_id=owner.id, name="Bag", price=Decimal("5"))
        CreateSavingUseCase(db_session).execute(owner_id=other_user.id, bank_name="BRI", income=Decimal("1"))
        issue_access_token(db_session, owner)
        db_session.commit()
        owner_id = owner.id

        DeleteUserUseCase(db_session).execute(owner_id)
        db_session.expire_all()

        assert db_session.query(User).filter(User.id == owner_id).count() == 0
        assert db_session.query(Saving).filter(Saving.user_id == owner_id).count() == 0
        assert db_session.query(Wish).filter(Wish.user_id == owner_id).count() == 0
        assert db_session.query(ActivityLog).filter(ActivityLog.user_id == owner_id).count() == 0
        assert db_session.query(AccessToken).filter(AccessToken.user_id == owner_id).count() == 0
        assert db_session.query(Saving).filter(Saving.user_id == other_user.id).count() == 1

    def test_missing_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            DeleteUserUseCase(db_session).execute(12345)


class TestDashboard:
    def test_summary(self, db_session, owner, settings):
        CreateSavingUseCase(db_session).execute(
            owner_id=owner.id, bank_name="BCA", income=Decimal("5000000"), expense=Decimal("2000000")
        )
        CreateWishUseCase(db_session).execute(owner_id=owner.id, name="Phone", price=Decimal("3000000"))
        CreateWishUseCase(db_session).execute(owner_id=owner.id, name="Car", price=Decimal("200000000"))

        summary = DashboardService(db_session).get_summary(owner.id)

        assert summary["total_savings"] == "3000000.00"
        assert summary["total_savings_display"] == "Rp 3.000.000"
        assert summary["savings_count"] == 1
        assert summary["total_wishes"] == 2
        assert summary["achieved_wishes"] == 1
        assert summary["pending_wishes"] == 1
        assert summary["total_amount_still_needed"] == "197000000.00"
        assert summary["total_logs"] == 3
        assert summary["recent_logs"][0].activity == "Created new wish"

    def test_empty(self, db_session, owner, settings):
        summary = DashboardService(db_session).get_summary(owner.id)
        assert summary["total_savings"] == "0.00"
        assert summary["total_wishes"] == 0
        assert summary["recent_logs"] == []
