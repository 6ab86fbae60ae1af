"""Shared pytest fixtures."""

import pytest

from platform_monitor.domain.models import CanonicalRecord, RecordKind
from platform_monitor.logging.context import clear_log_context

MONITOR_ENV_VARS = (
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "LOG_LEVEL",
    "DIGEST_SIZE",
    "HTTP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer shells (and .env files) from leaking into tests."""
    for name in MONITOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def make_record():
    """Factory for CanonicalRecord with sensible defaults."""

    def _make(name="Acme", **overrides):
        fields = {
            "name": name,
            "tagline": "",
            "url": f"https://example.com/{name.strip().lower().replace(' ', '-') or 'x'}",
            "source": "TestSource",
            "kind": RecordKind.STARTUP,
        }
        fields.update(overrides)
        return CanonicalRecord(**fields)

    return _make
