# recommender.py
import random
from typing import Dict, List, Optional

from habits import (HabitCategory as C, HabitDifficulty, Mood, coerce_categories,
                    coerce_mood)


def _t(title, description, duration):
    return {"title": title, "description": description, "duration": duration}


HABIT_TEMPLATES = {
    Mood.STRESSED: {
        C.MINDFULNESS: [
            _t("5-Minute Deep Breathing", "Take slow, deep breaths to calm your mind", 5),
            _t("Quick Meditation", "A brief mindfulness session to center yourself", 3),
            _t("Body Scan", "Notice each part of your body from head to toe and let tension go", 5),
        ],
        C.PHYSICAL: [
            _t("Gentle Stretching", "Light stretches to release tension", 5),
            _t("Shoulder Rolls", "Roll your shoulders and loosen your neck", 2),
        ],
        C.RELAXATION: [
            _t("Progressive Muscle Release", "Tense and relax each muscle group in turn", 5),
        ],
        C.PRODUCTIVITY: [
            _t("Gratitude Journaling", "Write down three things you're grateful for", 3),
            _t("Brain Dump", "List every open worry on paper to clear your head", 5),
        ],
    },
    Mood.ENERGIZED: {
        C.PHYSICAL: [
            _t("10-Minute Walk", "A brisk walk to channel your energy", 10),
            _t("Quick Workout", "High-energy exercises to boost your mood", 15),
            _t("Stair Climb", "Take the stairs a few times at a steady pace", 5),
        ],
        C.PRODUCTIVITY: [
            _t("Creative Writing", "Channel your energy into creative expression", 10),
            _t("Learning Session", "Read or learn something new", 15),
            _t("Two-Minute Tidy", "Clear one surface around you", 2),
        ],
        C.MINDFULNESS: [
            _t("Intention Setting", "Decide on one thing you want to finish today", 3),
        ],
        C.RELAXATION: [
            _t("Cool-Down Breathing", "Slow your breathing after a burst of activity", 5),
        ],
    },
    Mood.TIRED: {
        C.RELAXATION: [
            _t("Power Nap Preparation", "Gentle relaxation to prepare for rest", 5),
            _t("Calming Music", "Listen to soothing music for a few minutes", 5),
        ],
        C.PHYSICAL: [
            _t("Hydration Break", "Drink a glass of water mindfully", 2),
            _t("Gentle Yoga", "Restorative poses to re-energize gently", 10),
        ],
        C.MINDFULNESS: [
            _t("Eyes-Closed Rest", "Close your eyes and count ten slow breaths", 3),
        ],
        C.PRODUCTIVITY: [
            _t("Tomorrow's Top Three", "Write down the three tasks that matter most tomorrow", 3),
        ],
    },
    Mood.HAPPY: {
        C.PHYSICAL: [
            _t("Dance Break", "Move to your favorite song", 5),
            _t("Sunshine Walk", "Step outside and enjoy a short walk", 10),
        ],
        C.MINDFULNESS: [
            _t("Gratitude Practice", "Celebrate what makes you happy", 5),
            _t("Goal Visualization", "Visualize achieving your dreams", 5),
        ],
        C.PRODUCTIVITY: [
            _t("Social Connection", "Send a positive message to someone", 3),
        ],
        C.RELAXATION: [
            _t("Savor the Moment", "Sit back and replay the best part of your day", 3),
        ],
    },
}

# first entry is the fallback category when no preferences are given
MOOD_FOCUS = {
    Mood.STRESSED: [C.MINDFULNESS, C.RELAXATION],
    Mood.ENERGIZED: [C.PHYSICAL, C.PRODUCTIVITY],
    Mood.TIRED: [C.RELAXATION, C.MINDFULNESS],
    Mood.HAPPY: [C.PHYSICAL, C.PRODUCTIVITY],
}

MOOD_ANALYSIS = {
    Mood.STRESSED: "User is experiencing stress. Recommend calming, relaxation-focused activities to reduce cortisol levels and promote mental well-being.",
    Mood.ENERGIZED: "User has high energy levels. Ideal time for physical activities or challenging tasks that can channel this energy productively.",
    Mood.TIRED: "User is experiencing fatigue. Suggest gentle, restorative activities that don't overwhelm and can help re-energize gradually.",
    Mood.HAPPY: "User is in a positive emotional state. Great opportunity for habit reinforcement and trying new, engaging activities.",
}

EMOTIONAL_STATE = {
    Mood.STRESSED: "High stress levels detected. Priority: stress reduction and emotional regulation.",
    Mood.ENERGIZED: "High energy and motivation detected. Optimal for challenging activities.",
    Mood.TIRED: "Low energy levels detected. Focus on gentle, restorative activities.",
    Mood.HAPPY: "Positive emotional state detected. Excellent for habit building and reinforcement.",
}

EASY_SUGGESTIONS = [
    {"title": "2-Minute Breathing", "description": "Just two minutes of deep breathing",
     "category": C.MINDFULNESS.key, "duration": 2},
    {"title": "Drink Water", "description": "Mindfully drink a glass of water",
     "category": C.PHYSICAL.key, "duration": 1},
    {"title": "Gentle Stretch", "description": "One simple stretch for 30 seconds",
     "category": C.PHYSICAL.key, "duration": 1},
    {"title": "Gratitude Moment", "description": "Think of one thing you're grateful for",
     "category": C.MINDFULNESS.key, "duration": 1},
]

MODERATE_SCREEN_TIME = 3.0
HIGH_SCREEN_TIME = 6.0
DIFFICULTY_MAX_MINUTES = {
    HabitDifficulty.EASY: 5,
    HabitDifficulty.MODERATE: 10,
    HabitDifficulty.CHALLENGING: None,
}


def default_category(mood):
    return MOOD_FOCUS[coerce_mood(mood)][0]


def recommended_categories(mood, preferences) -> List[C]:
    combined = coerce_categories(preferences) + MOOD_FOCUS[coerce_mood(mood)]
    return coerce_categories(combined)


def mood_analysis(mood) -> str:
    return MOOD_ANALYSIS[coerce_mood(mood)]


def emotional_state(mood) -> str:
    return EMOTIONAL_STATE[coerce_mood(mood)]


def get_habit_suggestions(mood, preferences) -> List[Dict]:
    """Candidate templates for the mood across the preferred categories.

    Unknown moods fall back to the default mood, unknown categories are
    ignored, and an empty preference list uses the mood's focus category.
    """
    mood = coerce_mood(mood)
    cats = coerce_categories(preferences) or [default_category(mood)]
    pool, seen = [], set()
    for cat in cats:
        for tpl in HABIT_TEMPLATES[mood][cat]:
            if tpl["title"] in seen:
                continue
            seen.add(tpl["title"])
            pool.append(dict(tpl, category=cat.key))
    return pool


def suggestion_prompt(mood, title: str) -> str:
    mood = coerce_mood(mood)
    t = title.lower()
    if mood is Mood.STRESSED:
        return f"You're feeling stressed. I recommend {t} to help you relax. Would you like to proceed?"
    if mood is Mood.ENERGIZED:
        return f"You're feeling energized! How about {t}? It'll give you a great boost!"
    if mood is Mood.TIRED:
        return f"I can see you're feeling tired. Let's try {t} to gently re-energize yourself."
    return f"You're feeling happy and in a great mood! Perfect time for {t}. Let's keep that positive energy flowing!"


def suggestion_reasoning(mood, preferences, screen_time_hours=None, current_streak=None) -> str:
    mood = coerce_mood(mood)
    prefs = coerce_categories(preferences)
    reasons = [f"Based on your {mood.key} mood"]
    if prefs:
        reasons.append(f"aligned with your preference for {prefs[0].display_name.lower()}")
    if screen_time_hours is not None and screen_time_hours >= MODERATE_SCREEN_TIME:
        reasons.append(f"considering your {screen_time_hours:.1f} hours of screen time today")
    if current_streak:
        reasons.append(f"building on your {current_streak}-day streak")
    return ", ".join(reasons) + "."


def detailed_reasoning(mood, screen_time_hours=None, current_streak=0) -> str:
    mood = coerce_mood(mood)
    text = f"This suggestion is tailored for your current {mood.key} state. "
    if screen_time_hours is not None and screen_time_hours >= MODERATE_SCREEN_TIME:
        text += (f"Given your {screen_time_hours:.1f} hours of screen time, "
                 "this offline activity will help balance your digital consumption. ")
    if current_streak > 0:
        text += (f"Your {current_streak}-day streak shows great commitment, "
                 "and this habit will help maintain your momentum.")
    else:
        text += "This is a great starting point to build a new habit streak."
    return text


def _build(mood, preferences, tpl) -> Dict:
    return {
        "title": tpl["title"],
        "description": tpl["description"],
        "category": tpl["category"],
        "duration": int(tpl["duration"]),
        "prompt": suggestion_prompt(mood, tpl["title"]),
        "reasoning": suggestion_reasoning(mood, preferences),
    }


def generate_habit_suggestion(mood, preferences, rng: Optional[random.Random] = None) -> Dict:
    rng = rng or random
    pool = get_habit_suggestions(mood, preferences)
    return _build(mood, preferences, rng.choice(pool))


def calculate_difficulty(current_streak: int, recent_completions: Optional[Dict[str, int]] = None) -> HabitDifficulty:
    total = sum((recent_completions or {}).values())
    if current_streak >= 7 and total >= 5:
        return HabitDifficulty.CHALLENGING
    if current_streak >= 3 and total >= 3:
        return HabitDifficulty.MODERATE
    return HabitDifficulty.EASY


def _narrow(pool, keep):
    narrowed = [s for s in pool if keep(s)]
    return narrowed or pool


def generate_personalized_suggestion(mood, preferences, screen_time_hours=None, current_streak=0,
                                     recent_completions=None, rng=None) -> Dict:
    """Local suggestion shaped by screen time and streak-based difficulty.

    Same contract as generate_habit_suggestion plus a ``difficulty`` key; this
    is what the remote client returns when the service can't be used.
    """
    rng = rng or random
    current_streak = current_streak or 0
    pool = get_habit_suggestions(mood, preferences)
    if screen_time_hours is not None and screen_time_hours >= MODERATE_SCREEN_TIME:
        offline = (C.PHYSICAL.key, C.MINDFULNESS.key)
        pool = _narrow(pool, lambda s: s["category"] in offline)
    difficulty = calculate_difficulty(current_streak, recent_completions)
    limit = DIFFICULTY_MAX_MINUTES[difficulty]
    if limit is not None:
        pool = _narrow(pool, lambda s: s["duration"] <= limit)

    suggestion = _build(mood, preferences, rng.choice(pool))
    suggestion["difficulty"] = difficulty.value
    suggestion["reasoning"] = " ".join([
        suggestion_reasoning(mood, preferences, screen_time_hours, current_streak),
        detailed_reasoning(mood, screen_time_hours, current_streak),
    ])
    return suggestion


def next_day_suggestion(habit, rng=None) -> Dict:
    rng = rng or random
    tpl = rng.choice(get_habit_suggestions(Mood.HAPPY, [habit.category]))
    return {
        "title": tpl["title"],
        "description": tpl["description"],
        "message": "Ready for tomorrow? Here's a great follow-up habit!",
    }


def easier_suggestion(rng=None) -> Dict:
    rng = rng or random
    tpl = rng.choice(EASY_SUGGESTIONS)
    return dict(tpl, message="Let's start small tomorrow. Here's an easy habit to get back on track!")


def categorize_screen_time(hours: float) -> str:
    if hours >= HIGH_SCREEN_TIME:
        return "high"
    if hours >= MODERATE_SCREEN_TIME:
        return "moderate"
    return "low"


def break_duration(hours: float) -> int:
    if hours >= HIGH_SCREEN_TIME:
        return 15
    if hours >= MODERATE_SCREEN_TIME:
        return 10
    return 5
