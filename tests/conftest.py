"""Shared fixtures for the context hub tests."""

import pytest
from datetime import datetime, timedelta, timezone

from context_hub.domain.models import Capture, CaptureType
from context_hub.generation.providers import get_default_selector

ENV_VARS = [
    "GROQ_API_KEY",
    "OPENROUTER_API_KEY",
    "GROK_API_KEY",
    "OPENAI_API_KEY",
    "AI_MODEL",
    "APP_URL",
    "REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from real credentials and any local .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_default_selector.cache_clear()
    yield
    get_default_selector.cache_clear()


@pytest.fixture
def now():
    """Fixed reference time for recency calculations."""
    return datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_capture(now):
    """Factory for captures created a given number of days before now."""
    counter = {"n": 0}

    def factory(title=None, content="", days_ago=30.0, capture_type=CaptureType.NOTE, source=None):
        counter["n"] += 1
        return Capture(
            id=f"cap_{counter['n']}",
            title=title,
            content=content,
            type=capture_type,
            source=source,
            created_at=now - timedelta(days=days_ago),
        )

    return factory
