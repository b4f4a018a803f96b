"""
Shared test fixtures

Provides:
- Environment isolation for LETTERMINT_* settings
- A frozen clock for the webhook verifier
"""

import pytest
from unittest.mock import patch

from lettermint.config import get_settings


NOW = 1_700_000_000


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts without LETTERMINT_* env vars and with a fresh settings cache"""
    for name in (
        "LETTERMINT_API_TOKEN",
        "LETTERMINT_BASE_URL",
        "LETTERMINT_TIMEOUT",
        "LETTERMINT_WEBHOOK_SECRET",
        "LETTERMINT_WEBHOOK_TOLERANCE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def frozen_now():
    """Pin the verifier's clock and return the pinned unix time"""
    with patch("lettermint.webhook._current_timestamp", return_value=NOW):
        yield NOW


