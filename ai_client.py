# ai_client.py
import json
import logging
import re
from typing import Dict, List, Optional

import requests

from config import Settings, get_settings
from habits import coerce_categories, coerce_mood, parse_category
from recommender import generate_personalized_suggestion, suggestion_prompt

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "category", "duration", "reasoning")

SYSTEM_PROMPT = """
You are a friendly micro-habit coach. Suggest ONE small habit the user can do today.

Rules:
- Keep it short and doable in 15 minutes or less.
- Match the user's mood and preferred categories.
- No medical advice or diagnosis.
- Category must be one of: physical, mindfulness, relaxation, productivity.
- Reply with JSON only.

Output format (JSON):
{
 "title": "short habit name",
 "description": "one sentence",
 "category": "mindfulness",
 "duration": 5,
 "reasoning": "why this fits the user right now"
}
"""


class SuggestionError(Exception):
    """Remote response unusable; the caller falls back to local suggestions."""


def build_request_payload(profile, mood, preferences, completed_habits, current_streak,
                          screen_time_hours=None) -> Dict:
    mood = coerce_mood(mood)
    user = {
        "profile": profile.summary() if profile is not None else {},
        "mood": mood.key,
        "preferred_categories": [c.key for c in coerce_categories(preferences)],
        "completed_habits": [
            {"title": h.title, "category": h.category.key, "completions": len(h.completed_dates)}
            for h in completed_habits or []
        ],
        "current_streak": current_streak,
    }
    if screen_time_hours is not None:
        user["screen_time_hours"] = round(float(screen_time_hours), 1)
    return user


def _chat_body(settings: Settings, user: Dict) -> Dict:
    return {
        "model": settings.suggestion_model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(user, ensure_ascii=False)},
        ],
        "temperature": 0.9,
        "response_format": {"type": "json_object"},
    }


def parse_suggestion(raw: str, mood) -> Dict:
    """Validate the model's JSON reply into the suggestion shape."""
    text = re.sub(r"```json|```", "", raw or "").strip()
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SuggestionError(f"malformed JSON: {e}") from e
    if not isinstance(data, dict):
        raise SuggestionError("response is not an object")

    missing = [k for k in REQUIRED_FIELDS if not str(data.get(k) or "").strip()]
    if missing:
        raise SuggestionError(f"missing fields: {', '.join(missing)}")
    category = parse_category(str(data["category"]))
    if category is None:
        raise SuggestionError(f"unknown category {data['category']!r}")
    try:
        duration = int(data["duration"])
    except (TypeError, ValueError) as e:
        raise SuggestionError(f"bad duration {data['duration']!r}") from e
    if duration <= 0:
        raise SuggestionError(f"bad duration {duration}")

    title = str(data["title"]).strip()
    return {
        "title": title,
        "description": str(data["description"]).strip(),
        "category": category.key,
        "duration": duration,
        "prompt": suggestion_prompt(mood, title),
        "reasoning": str(data["reasoning"]).strip(),
    }


def request_remote_suggestion(settings: Settings, user: Dict, session=None) -> str:
    http = session or requests
    resp = http.post(
        f"{settings.suggestion_api_url}/chat/completions",
        headers={"Authorization": f"Bearer {settings.suggestion_api_key}"},
        json=_chat_body(settings, user),
        timeout=settings.suggestion_timeout,
    )
    resp.raise_for_status()
    try:
        return resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise SuggestionError(f"unexpected response body: {e}") from e


def fetch_habit_suggestion(profile, mood, preferences, completed_habits: Optional[List] = None,
                           current_streak: int = 0, screen_time_hours=None,
                           recent_completions=None, settings: Optional[Settings] = None,
                           session=None, rng=None) -> Dict:
    """Ask the remote service for a suggestion, falling back to local generation.

    One attempt only. Any failure is logged and replaced by the local
    personalized generator; the result's ``source`` says which one answered.
    """
    settings = settings or get_settings()
    mood = coerce_mood(mood)

    def local(reason):
        logger.info("using local suggestion (%s)", reason)
        s = generate_personalized_suggestion(mood, preferences, screen_time_hours,
                                             current_streak, recent_completions, rng=rng)
        s["source"] = "local"
        return s

    if not settings.ai_suggestions_enabled:
        return local("ai suggestions disabled")
    if not settings.has_suggestion_key:
        return local("no api key")

    user = build_request_payload(profile, mood, preferences, completed_habits,
                                 current_streak, screen_time_hours)
    try:
        raw = request_remote_suggestion(settings, user, session=session)
        suggestion = parse_suggestion(raw, mood)
    except (requests.RequestException, SuggestionError) as e:
        logger.warning("remote suggestion failed: %s", e)
        return local("remote failure")

    suggestion["source"] = "remote"
    logger.debug("remote suggestion: %s", suggestion["title"])
    return suggestion
