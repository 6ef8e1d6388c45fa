# sentiment.py
import logging
from functools import lru_cache
from typing import Dict

import nltk
from nltk.sentiment import SentimentIntensityAnalyzer

from mental_state import MIN_CONFIDENCE, infer_mood, score_keywords
from utils import clean_text

logger = logging.getLogger(__name__)

EMOTION_MODEL_NAME = "bhadresh-savani/distilbert-base-uncased-emotion"
EMOTION_LABELS = ["anger", "fear", "joy", "love", "sadness", "surprise"]


@lru_cache(maxsize=1)
def _get_analyzer():
    # Ensure NLTK VADER is available
    try:
        nltk.data.find("sentiment/vader_lexicon.zip")
    except LookupError:
        nltk.download("vader_lexicon", quiet=True)
    return SentimentIntensityAnalyzer()


@lru_cache(maxsize=1)
def _get_emotion_model():
    """(tokenizer, model), or None when the model can't be loaded; the result is cached either way."""
    try:
        from transformers import AutoModelForSequenceClassification, AutoTokenizer
        tokenizer = AutoTokenizer.from_pretrained(EMOTION_MODEL_NAME)
        model = AutoModelForSequenceClassification.from_pretrained(EMOTION_MODEL_NAME)
    except Exception as e:
        logger.warning("emotion model unavailable: %s", e)
        return None
    return tokenizer, model


# Sentiment (VADER)
def get_sentiment(text):
    scores = _get_analyzer().polarity_scores(text)
    compound = scores["compound"]
    if compound >= 0.25:
        label = "positive"
    elif compound <= -0.25:
        label = "negative"
    else:
        label = "neutral"
    return label, abs(compound), scores


# Emotion model (DistilBERT)
def get_emotion(text):
    loaded = _get_emotion_model()
    if loaded is None:
        return "joy", 0.0
    try:
        import torch
        tokenizer, model = loaded
        inputs = tokenizer(text, return_tensors="pt", truncation=True)
        with torch.no_grad():
            outputs = model(**inputs)
        probs = torch.softmax(outputs.logits, dim=1)[0]
        conf, idx = torch.max(probs, 0)
        return EMOTION_LABELS[int(idx)], float(conf)
    except Exception as e:
        # fail-safe: return neutral emotion on model issues
        logger.warning("emotion inference failed, using neutral fallback: %s", e)
        return "joy", 0.0


def analyze_mood_from_text(text, use_models=True) -> Dict:
    """Detect a Mood from free text.

    Keywords always count; VADER and the emotion model are added when
    ``use_models`` is set (the sentiment-analysis feature flag).
    """
    cleaned = clean_text(text or "")
    if not cleaned:
        return {"error": "Please describe how you feel in a few words."}

    keywords = score_keywords(cleaned)
    signals = {"text": cleaned, "keywords": keywords}
    if use_models:
        sentiment, sent_conf, _ = get_sentiment(cleaned)
        emotion, emo_conf = get_emotion(cleaned)
        signals.update(sentiment=sentiment, emotion=emotion)
    mood, confidence = infer_mood(signals)

    found = {m.key: v["found"] for m, v in keywords.items() if v["found"]}
    total = sum(len(v) for v in found.values())
    if confidence < MIN_CONFIDENCE:
        reasoning = f"No strong mood signal found, defaulting to {mood.key}."
    else:
        parts = [f"Detected a {mood.key} mood"]
        if found.get(mood.key):
            parts.append(f"from words like {', '.join(found[mood.key])}")
        if use_models:
            parts.append(f"with {signals['sentiment']} sentiment and {signals['emotion']} emotion")
        reasoning = " ".join(parts) + "."

    return {
        "detected_mood": mood.key,
        "confidence": round(confidence, 3),
        "reasoning": reasoning,
        "keyword_analysis": {"found_keywords": found, "total_matches": total},
    }
