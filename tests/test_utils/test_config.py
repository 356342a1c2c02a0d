"""
Tests for settings loaded from the environment
"""
import pytest
from pydantic import ValidationError

from app.config import Settings


def test_wish_status_source_defaults_to_live(monkeypatch):
    monkeypatch.delenv("WISH_STATUS_SOURCE", raising=False)
    assert Settings(_env_file=None).WISH_STATUS_SOURCE == "live"


def test_caller_status_source_from_env(monkeypatch):
    monkeypatch.setenv("WISH_STATUS_SOURCE", "caller")
    assert Settings(_env_file=None).WISH_STATUS_SOURCE == "caller"


def test_unknown_status_source_rejected(monkeypatch):
    monkeypatch.setenv("WISH_STATUS_SOURCE", "client")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
