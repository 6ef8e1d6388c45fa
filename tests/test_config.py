import pytest

import config
from config import Settings, config_status, load_settings, validate_configuration


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda *a, **k: False)
    for key in ("APP_ENV", "DEBUG_MODE", "SUGGESTION_API_KEY", "SUGGESTION_API_URL",
                "SUGGESTION_MODEL", "SUGGESTION_TIMEOUT", "ENABLE_AI_SUGGESTIONS",
                "ENABLE_SENTIMENT_ANALYSIS", "HABIT_DB_PATH"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = load_settings()
    assert s == Settings()
    assert not s.is_production
    assert validate_configuration(s) == ["AI suggestions are enabled but SUGGESTION_API_KEY is not set"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("DEBUG_MODE", "yes")
    monkeypatch.setenv("SUGGESTION_API_KEY", " secret ")
    monkeypatch.setenv("SUGGESTION_API_URL", "https://llm.example/v1/")
    monkeypatch.setenv("SUGGESTION_TIMEOUT", "abc")
    monkeypatch.setenv("ENABLE_SENTIMENT_ANALYSIS", "false")
    s = load_settings()
    assert s.is_production and s.debug_mode
    assert s.suggestion_api_key == "secret"
    assert s.suggestion_api_url == "https://llm.example/v1"
    assert s.suggestion_timeout == Settings.suggestion_timeout
    assert not s.sentiment_analysis_enabled
    assert validate_configuration(s) == []


def test_status_hides_key():
    status = config_status(Settings(suggestion_api_key="secret"))
    assert status["has_suggestion_key"] is True
    assert "secret" not in str(status)
