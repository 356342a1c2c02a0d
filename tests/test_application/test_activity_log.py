"""
Tests for the activity log: recorder, pagination, admin edits
"""
from unittest.mock import patch

import pytest

from app.application.activity import ActivityLogService, ActivityLogNotFoundError, clamp_per_page
from app.domain.activity import ActivityPayloadError
from app.infrastructure.activitylog.repository import ActivityRecorder
from app.infrastructure.db.models import ActivityLog


class TestActivityRecorder:
    def test_record_returns_id(self, db_session, owner_id):
        log_id = ActivityRecorder(db_session).record(owner_id, "Manual", {"k": "v"})
        entry = db_session.query(ActivityLog).filter(ActivityLog.id == log_id).one()
        assert entry.activity == "Manual"
        assert entry.data == {"k": "v"}

    def test_bad_payload_does_not_raise(self, db_session, owner_id):
        deep = {"a": {"b": {"c": {"d": {"e": 1}}}}}
        assert ActivityRecorder(db_session).record(owner_id, "Too deep", deep) is None
        assert db_session.query(ActivityLog).count() == 0

    @pytest.mark.parametrize("amount", [1e300, float("nan")])
    def test_unstorable_amount_does_not_raise(self, db_session, owner_id, amount):
        assert ActivityRecorder(db_session).record(owner_id, "Odd amount", {"amount": amount}) is None
        assert db_session.query(ActivityLog).count() == 0

    def test_unexpected_error_does_not_raise(self, db_session, owner_id):
        with patch(
            "app.infrastructure.activitylog.repository.ActivityLogRepository.append",
            side_effect=RuntimeError("boom"),
        ):
            assert ActivityRecorder(db_session).record(owner_id, "Manual") is None


class TestActivityLogService:
    def _fill(self, db_session, owner_id, count, activity="Entry"):
        recorder = ActivityRecorder(db_session)
        return [recorder.record(owner_id, f"{activity} {i}") for i in range(count)]

    def test_newest_first_with_default_page_size(self, db_session, owner_id, settings):
        ids = self._fill(db_session, owner_id, 25)

        page = ActivityLogService(db_session).list_logs(user_id=owner_id)

        assert page.per_page == 20
        assert page.total == 25
        assert page.last_page == 2
        assert len(page.items) == 20
        assert page.items[0].id == ids[-1]

        second = ActivityLogService(db_session).list_logs(page=2, user_id=owner_id)
        assert [e.id for e in second.items] == list(reversed(ids[:5]))

    def test_per_page_override_and_cap(self, settings):
        assert clamp_per_page(5) == 5
        assert clamp_per_page(None) == settings.LOGS_PER_PAGE
        assert clamp_per_page(10_000) == settings.LOGS_MAX_PER_PAGE
        assert clamp_per_page(0) == 1

    def test_filters(self, db_session, owner_id, other_user, settings):
        self._fill(db_session, owner_id, 2, activity="Created saving")
        self._fill(db_session, other_user.id, 3, activity="Updated wish")

        service = ActivityLogService(db_session)
        assert service.list_logs(activity="wish").total == 3
        assert service.list_logs(user_id=owner_id).total == 2
        assert service.list_logs().total == 5

    def test_empty_page(self, db_session, owner_id, settings):
        page = ActivityLogService(db_session).list_logs(user_id=owner_id)
        assert page.items == []
        assert page.last_page == 1

    def test_create_rejects_deep_payload(self, db_session, owner_id, settings):
        with pytest.raises(ActivityPayloadError):
            ActivityLogService(db_session).create_log(
                owner_id, "Manual", {"a": {"b": {"c": {"d": {"e": 1}}}}}
            )

    def test_admin_update_and_delete(self, db_session, owner_id, settings):
        service = ActivityLogService(db_session)
        entry = service.create_log(owner_id, "Typo", {"x": 1})

        updated = service.update_log(entry.id, activity="Fixed", data={"x": 2})
        assert updated.activity == "Fixed"
        assert updated.data == {"x": 2}

        service.delete_log(entry.id)
        with pytest.raises(ActivityLogNotFoundError):
            service.get_log(entry.id)
