# mental_state.py
from typing import Dict, Tuple

from habits import DEFAULT_MOOD, Mood

WEIGHTS = {
    "sentiment_negative": 0.3,
    "sentiment_positive": 0.3,
    "fear": 0.3,
    "anger": 0.2,
    "sadness": 0.25,
    "joy": 0.3,
    "surprise": 0.25,
    "keywords": 0.6,
}

MOOD_KEYWORDS = {
    Mood.STRESSED: {"stressed", "stress", "anxious", "overwhelmed", "worried", "panic",
                    "pressure", "deadline", "nervous", "tense"},
    Mood.TIRED: {"tired", "exhausted", "sleepy", "drained", "fatigue", "fatigued",
                 "worn", "sleep", "weary"},
    Mood.ENERGIZED: {"energized", "energetic", "pumped", "motivated", "ready",
                     "productive", "charged", "unstoppable"},
    Mood.HAPPY: {"happy", "great", "amazing", "fantastic", "wonderful", "good",
                 "joy", "glad", "excited", "cheerful"},
}

MIN_CONFIDENCE = 0.25


def score_keywords(text: str) -> Dict[Mood, Dict]:
    tokens = set((text or "").lower().split())
    out = {}
    for mood, words in MOOD_KEYWORDS.items():
        found = sorted(tokens & words)
        out[mood] = {"found": found, "score": min(1.0, len(found) / 2)}
    return out


def infer_mood(signals: Dict) -> Tuple[Mood, float]:
    """Fuse sentiment, emotion and keyword signals into a single Mood."""
    sent = signals.get("sentiment")
    emotion = signals.get("emotion")
    neg = 1.0 if sent == "negative" else 0.0
    pos = 1.0 if sent == "positive" else 0.0
    kw = signals.get("keywords") or score_keywords(signals.get("text", ""))

    def hit(name):
        return 1.0 if emotion == name else 0.0

    def k(mood):
        return kw.get(mood, {}).get("score", 0.0)

    scores = {
        Mood.STRESSED: WEIGHTS["sentiment_negative"] * neg + WEIGHTS["fear"] * hit("fear")
        + WEIGHTS["anger"] * hit("anger") + WEIGHTS["keywords"] * k(Mood.STRESSED),
        Mood.TIRED: WEIGHTS["sadness"] * hit("sadness") + 0.1 * neg
        + WEIGHTS["keywords"] * k(Mood.TIRED),
        Mood.ENERGIZED: WEIGHTS["surprise"] * hit("surprise") + 0.1 * pos
        + WEIGHTS["keywords"] * k(Mood.ENERGIZED),
        Mood.HAPPY: WEIGHTS["sentiment_positive"] * pos + WEIGHTS["joy"] * (hit("joy") + hit("love"))
        + WEIGHTS["keywords"] * k(Mood.HAPPY),
    }

    mood = max(scores, key=scores.get)
    confidence = float(min(1.0, scores[mood]))
    if confidence < MIN_CONFIDENCE:
        return DEFAULT_MOOD, confidence
    return mood, confidence
