"""
Tests for wish status derivation (stored and live)
"""
from decimal import Decimal

import pytest

from app.domain.wish import (
    resolve_wish_status,
    amount_still_needed,
    live_wish_progress,
    WISH_STATUS_FUNDED,
    WISH_STATUS_PARTIALLY_FUNDED,
    WISH_STATUS_UNFUNDED,
    LIVE_STATUS_ACHIEVED,
    LIVE_STATUS_PENDING,
)


class TestResolveWishStatus:
    @pytest.mark.parametrize("price", ["0.01", "1", "18000000.00"])
    def test_nothing_needed_is_funded(self, price):
        assert resolve_wish_status(Decimal(price), Decimal("0")) == WISH_STATUS_FUNDED

    @pytest.mark.parametrize("price, needed", [
        ("100", "100"),
        ("100", "100.01"),
        ("25000000.00", "25000000.00"),
        ("10", "1000"),
    ])
    def test_needed_at_or_above_price_is_unfunded(self, price, needed):
        assert resolve_wish_status(Decimal(price), Decimal(needed)) == WISH_STATUS_UNFUNDED

    @pytest.mark.parametrize("price, needed", [
        ("100", "0.01"),
        ("100", "99.99"),
        ("15000000.00", "5000000.00"),
    ])
    def test_needed_between_zero_and_price_is_partially_funded(self, price, needed):
        assert resolve_wish_status(Decimal(price), Decimal(needed)) == WISH_STATUS_PARTIALLY_FUNDED

    def test_missing_amount_defaults_to_price(self):
        """No amount supplied: fully unfunded, not an error"""
        assert resolve_wish_status(Decimal("500")) == WISH_STATUS_UNFUNDED
        assert resolve_wish_status(Decimal("500"), None) == WISH_STATUS_UNFUNDED

    def test_scenarios(self):
        assert resolve_wish_status(Decimal("18000000.00"), Decimal("0.00")) == "funded"
        assert resolve_wish_status(Decimal("15000000.00"), Decimal("5000000.00")) == "partially-funded"
        assert resolve_wish_status(Decimal("25000000.00"), Decimal("25000000.00")) == "unfunded"

    def test_idempotent(self):
        results = {resolve_wish_status(Decimal("15000000"), Decimal("5000000")) for _ in range(3)}
        assert results == {WISH_STATUS_PARTIALLY_FUNDED}


class TestAmountStillNeeded:
    def test_balance_below_price(self):
        assert amount_still_needed(Decimal("15000000"), Decimal("10000000")) == Decimal("5000000.00")

    def test_balance_above_price_is_zero(self):
        assert amount_still_needed(Decimal("100"), Decimal("250")) == Decimal("0.00")

    def test_no_savings_needs_full_price(self):
        assert amount_still_needed(Decimal("25000000"), Decimal("0")) == Decimal("25000000.00")


class TestLiveWishProgress:
    def test_funded_when_balance_reaches_price(self):
        live = live_wish_progress(Decimal("100"), Decimal("100"))
        assert live.is_funded is True
        assert live.status == LIVE_STATUS_ACHIEVED
        assert live.amount_still_needed == Decimal("0.00")
        assert live.affordability_percent == Decimal("100.00")

    def test_pending_with_partial_balance(self):
        live = live_wish_progress(Decimal("200"), Decimal("50"))
        assert live.is_funded is False
        assert live.status == LIVE_STATUS_PENDING
        assert live.amount_still_needed == Decimal("150.00")
        assert live.affordability_percent == Decimal("25.00")

    def test_affordability_capped_at_100(self):
        assert live_wish_progress(Decimal("100"), Decimal("1000")).affordability_percent == Decimal("100.00")

    def test_negative_balance_has_zero_affordability(self):
        live = live_wish_progress(Decimal("100"), Decimal("-20"))
        assert live.affordability_percent == Decimal("0.00")
        assert live.is_funded is False

    def test_live_and_stored_can_disagree(self):
        """Stored status from an old amount vs. live status from the current balance"""
        stored = resolve_wish_status(Decimal("100"), Decimal("100"))
        live = live_wish_progress(Decimal("100"), Decimal("150"))
        assert stored == WISH_STATUS_UNFUNDED
        assert live.status == LIVE_STATUS_ACHIEVED
