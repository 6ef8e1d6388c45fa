import random
from datetime import date, datetime

import pytest

import history_store
from coach import celebration_message, process_habit_completion
from habits import Habit, HabitCategory, Mood, UserProfile


@pytest.fixture
def db(tmp_path):
    path = str(tmp_path / "habits.db")
    history_store.init_db(path)
    return path


@pytest.fixture
def habit(db):
    h = Habit(id="h1", title="Gentle Stretching", description="Light stretches to release tension",
              category=HabitCategory.PHYSICAL, duration_minutes=5, created_at=datetime(2026, 10, 1, 7, 30))
    history_store.save_habit(h, db)
    return h


def test_save_and_list(db, habit):
    habits = history_store.list_habits(db)
    assert habits == [habit]
    assert history_store.get_habit("missing", db) is None


def test_complete_habit_is_idempotent_per_day(db, habit):
    history_store.complete_habit("h1", date(2026, 10, 16), db=db)
    history_store.complete_habit("h1", date(2026, 10, 17), db=db)
    h = history_store.complete_habit("h1", date(2026, 10, 17), db=db)
    assert h.completed_dates == [date(2026, 10, 16), date(2026, 10, 17)]
    assert h.current_streak(date(2026, 10, 17)) == 2


def test_complete_unknown_habit(db):
    with pytest.raises(KeyError):
        history_store.complete_habit("nope", db=db)


def test_suggestion_log_and_feedback(db):
    event = history_store.log_suggestion(Mood.STRESSED, ["mindfulness"],
                                         {"title": "Quick Meditation", "source": "remote"}, db=db)
    history_store.record_feedback(event, "accepted", db=db)
    rows = history_store.fetch_recent(10, db=db)
    assert len(rows) == 1
    _, _, mood, cats, title, source, feedback = rows[0]
    assert (mood, cats, title, source, feedback) == ("stressed", "mindfulness", "Quick Meditation", "remote", "accepted")


def test_profile_round_trip(db):
    assert history_store.load_profile(db) is None
    profile = UserProfile(id="u1", name="Alex", current_mood=Mood.ENERGIZED,
                          preferred_categories=[HabitCategory.PRODUCTIVITY], current_streak=2)
    history_store.save_profile(profile, db)
    history_store.save_profile(profile.copy_with(longest_streak=5), db)
    loaded = history_store.load_profile(db)
    assert loaded.current_mood is Mood.ENERGIZED
    assert loaded.preferred_categories == [HabitCategory.PRODUCTIVITY]
    assert loaded.longest_streak == 5


def test_clear_all_wipes_every_table(db, habit):
    history_store.complete_habit("h1", date(2026, 10, 17), db=db)
    history_store.log_suggestion(Mood.TIRED, ["relaxation"], {"title": "Power Nap"}, db=db)
    history_store.save_profile(UserProfile(id="u1", name="Alex"), db)

    history_store.clear_all(db)

    assert history_store.list_habits(db) == []
    assert history_store.fetch_recent(db=db) == []
    assert history_store.load_profile(db) is None
    history_store.save_habit(habit, db)
    assert history_store.get_habit("h1", db).completed_dates == []


def test_process_completion(db, habit):
    history_store.complete_habit("h1", date(2026, 10, 16), db=db)
    result = process_habit_completion("h1", True, day=date(2026, 10, 17), db=db, rng=random.Random(3))
    assert result["new_streak"] == 2
    assert result["total_completions"] == 2
    assert result["celebration_message"] == celebration_message(2)
    assert result["next_suggestion"]["title"]


def test_process_missed(db, habit):
    result = process_habit_completion("h1", False, db=db)
    assert result["streak_reset"] is True
    assert result["encouragement_message"]
    assert result["easier_suggestion"]["title"]
    assert history_store.get_habit("h1", db).completed_dates == []
