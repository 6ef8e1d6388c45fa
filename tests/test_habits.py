from datetime import date, datetime

from habits import (Habit, HabitCategory, Mood, UserProfile, coerce_categories, coerce_mood,
                    parse_category, parse_mood)

TODAY = date(2026, 10, 17)


def make_habit(days):
    return Habit(id="h1", title="Quick Meditation", description="Center yourself",
                 category=HabitCategory.MINDFULNESS, duration_minutes=3,
                 created_at=datetime(2026, 10, 1, 8, 0), completed_dates=days)


def test_parse_accepts_keys_and_display_names():
    assert parse_mood("stressed") is Mood.STRESSED
    assert parse_mood(" Energized ") is Mood.ENERGIZED
    assert parse_mood("grumpy") is None
    assert parse_category("Physical Activity") is HabitCategory.PHYSICAL
    assert parse_category(3) is None
    assert coerce_mood(None) is Mood.HAPPY


def test_coerce_categories_drops_unknown_and_duplicates():
    cats = coerce_categories(["physical", "yoga", HabitCategory.PHYSICAL, "Mindfulness"])
    assert cats == [HabitCategory.PHYSICAL, HabitCategory.MINDFULNESS]
    assert coerce_categories(None) == []


def test_streak_counts_back_from_today():
    habit = make_habit([date(2026, 10, 15), date(2026, 10, 16), date(2026, 10, 17), date(2026, 10, 12)])
    assert habit.current_streak(TODAY) == 3
    assert habit.is_completed_today(TODAY)


def test_streak_is_zero_without_today():
    habit = make_habit([date(2026, 10, 16)])
    assert habit.current_streak(TODAY) == 0
    assert not habit.is_completed_today(TODAY)
    assert make_habit([]).current_streak(TODAY) == 0


def test_habit_dict_round_trip_and_unknown_category():
    habit = make_habit([date(2026, 10, 17)])
    data = habit.to_dict()
    assert data["category"] == "mindfulness"
    assert Habit.from_dict(data) == habit

    data["category"] = "juggling"
    assert Habit.from_dict(data).category is HabitCategory.MINDFULNESS


def test_profile_from_dict_defaults_unknown_values():
    profile = UserProfile.from_dict({
        "id": "u1",
        "name": "Sam",
        "current_mood": "grumpy",
        "preferred_categories": ["physical", "juggling"],
        "created_at": "2026-10-01T09:00:00",
    })
    assert profile.current_mood is Mood.HAPPY
    assert profile.preferred_categories == [HabitCategory.PHYSICAL, HabitCategory.MINDFULNESS]
    assert profile.reminder_hour == 9
    assert profile.notifications_enabled


def test_profile_summary():
    profile = UserProfile(id="u1", name="Sam", current_mood=Mood.TIRED,
                          preferred_categories=[HabitCategory.RELAXATION], longest_streak=4)
    summary = profile.summary()
    assert summary["current_mood"] == "tired"
    assert summary["preferred_categories"] == ["relaxation"]
    assert UserProfile.from_dict(profile.to_dict()).longest_streak == 4


def test_profile_from_dict_collapses_repeated_categories():
    profile = UserProfile.from_dict({
        "id": "u1",
        "preferred_categories": ["juggling", "mindfulness", "Physical Activity", "physical"],
    })
    assert profile.preferred_categories == [HabitCategory.MINDFULNESS, HabitCategory.PHYSICAL]


def test_profile_differs_from_mood_or_preferences():
    profile = UserProfile(id="u1", name="Sam", current_mood=Mood.STRESSED,
                          preferred_categories=[HabitCategory.MINDFULNESS, HabitCategory.PHYSICAL])
    assert not profile.differs_from(Mood.STRESSED, [HabitCategory.PHYSICAL, HabitCategory.MINDFULNESS])
    assert profile.differs_from(Mood.TIRED, [HabitCategory.MINDFULNESS, HabitCategory.PHYSICAL])
    assert profile.differs_from(Mood.STRESSED, [HabitCategory.MINDFULNESS])
    assert UserProfile(id="u2", name="").differs_from(Mood.HAPPY, [])
