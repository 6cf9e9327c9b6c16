from __future__ import annotations

import pytest

from config.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for key in ("DB_PATH", "STORE_BACKEND", "API_PORT", "MAX_TOP_SKILLS", "ALLOW_PRIVATE_HOSTS"):
        monkeypatch.delenv(key, raising=False)
    settings = get_settings()
    assert settings.db_path == "candidates.db"
    assert settings.store_backend == "sqlite"
    assert settings.api_port == 3000
    assert settings.max_top_skills == 5
    assert settings.navigation_min_interval_seconds == 3.0
    assert settings.allow_private_hosts is True
    assert "/invalid" in settings.blocked_url_fragments


def test_api_backend_requires_base_url(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "API")
    monkeypatch.delenv("API_BASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        get_settings()


@pytest.mark.parametrize("value", ["0", "6", "12"])
def test_skill_limit_outside_profile_cap_is_rejected(monkeypatch, value):
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    monkeypatch.setenv("MAX_TOP_SKILLS", value)
    with pytest.raises(RuntimeError):
        get_settings()
