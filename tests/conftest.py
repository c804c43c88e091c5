"""Shared fixtures for cronmask tests."""

from datetime import timezone

import pytest

from cronmask.config import reset_config

UTC = timezone.utc


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Start every test from an environment without CRONMASK_* settings."""
    for key in ("CRONMASK_TIMEZONE", "CRONMASK_SEARCH_HORIZON_YEARS", "CRONMASK_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
