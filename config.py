# config.py
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional

from dotenv import load_dotenv

TRUTHY = ("true", "1", "yes")


def get_env(key: str, fallback: str = "") -> str:
    return (os.getenv(key) or fallback).strip()


def get_bool_env(key: str, fallback: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return fallback
    return value.strip().lower() in TRUTHY


def get_float_env(key: str, fallback: float = 0.0) -> float:
    try:
        return float(os.getenv(key, ""))
    except ValueError:
        return fallback


@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    debug_mode: bool = False
    suggestion_api_key: Optional[str] = None
    suggestion_api_url: str = "https://api.novita.ai/v3/openai"
    suggestion_model: str = "meta-llama/llama-3.1-8b-instruct"
    suggestion_timeout: float = 10.0
    ai_suggestions_enabled: bool = True
    sentiment_analysis_enabled: bool = True
    database_path: str = "habits.db"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def has_suggestion_key(self) -> bool:
        return bool(self.suggestion_api_key)


def load_settings() -> Settings:
    """Build settings from the environment (and a .env file if present)."""
    load_dotenv()
    return Settings(
        app_env=get_env("APP_ENV", "development"),
        debug_mode=get_bool_env("DEBUG_MODE"),
        suggestion_api_key=get_env("SUGGESTION_API_KEY") or None,
        suggestion_api_url=get_env("SUGGESTION_API_URL", Settings.suggestion_api_url).rstrip("/"),
        suggestion_model=get_env("SUGGESTION_MODEL", Settings.suggestion_model),
        suggestion_timeout=get_float_env("SUGGESTION_TIMEOUT", Settings.suggestion_timeout),
        ai_suggestions_enabled=get_bool_env("ENABLE_AI_SUGGESTIONS", True),
        sentiment_analysis_enabled=get_bool_env("ENABLE_SENTIMENT_ANALYSIS", True),
        database_path=get_env("HABIT_DB_PATH", Settings.database_path),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def validate_configuration(settings: Settings) -> List[str]:
    errors = []
    if settings.ai_suggestions_enabled and not settings.has_suggestion_key:
        errors.append("AI suggestions are enabled but SUGGESTION_API_KEY is not set")
    if settings.suggestion_timeout <= 0:
        errors.append("SUGGESTION_TIMEOUT must be positive")
    return errors


def config_status(settings: Settings) -> Dict:
    # never expose the key itself
    return {
        "app_environment": settings.app_env,
        "debug_mode": settings.debug_mode,
        "has_suggestion_key": settings.has_suggestion_key,
        "ai_suggestions_enabled": settings.ai_suggestions_enabled,
        "sentiment_analysis_enabled": settings.sentiment_analysis_enabled,
        "database_path": settings.database_path,
    }


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug_mode else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
