# app.py
import uuid
from datetime import datetime, time

import pandas as pd
import streamlit as st

from ai_client import fetch_habit_suggestion
from coach import (REMINDER_MESSAGES, WELCOME_MESSAGES, completion_messages,
                   process_habit_completion, progress_message, random_message)
from config import config_status, configure_logging, get_settings, validate_configuration
from habits import Habit, HabitCategory, Mood, UserProfile, parse_category
from history_store import (clear_all, fetch_recent, init_db, list_habits, load_profile, log_suggestion,
                           record_feedback, save_habit, save_profile)
from recommender import (break_duration, categorize_screen_time, emotional_state, mood_analysis,
                         recommended_categories)
from utils import (analyze_user_performance, category_completions, optimization_recommendations,
                   plot_progress, recent_completions)

settings = get_settings()
configure_logging(settings)

st.set_page_config(page_title="Micro-Habit Coach", layout="centered")
init_db()

# ------------------------------
# Session state
# ------------------------------
if "profile" not in st.session_state:
    st.session_state.profile = load_profile() or UserProfile(id=str(uuid.uuid4()), name="")

if "suggestion" not in st.session_state:
    st.session_state.suggestion = None

if "suggestion_event" not in st.session_state:
    st.session_state.suggestion_event = None

if "last_result" not in st.session_state:
    st.session_state.last_result = None

mood_labels = {m: f"{m.emoji} {m.display_name}" for m in Mood}

if "mood_choice" not in st.session_state:
    st.session_state.mood_choice = mood_labels[st.session_state.profile.current_mood or Mood.HAPPY]

if "mood_analysis" not in st.session_state:
    st.session_state.mood_analysis = None

category_labels = {c: f"{c.emoji} {c.display_name}" for c in HabitCategory}

if "category_choice" not in st.session_state:
    st.session_state.category_choice = [category_labels[c] for c in st.session_state.profile.preferred_categories]

profile = st.session_state.profile

# ------------------------------
# Helpers
# ------------------------------
def refresh_suggestion(mood, preferences, screen_time):
    habits = list_habits()
    streak = max((h.current_streak() for h in habits), default=0)
    recent = recent_completions(habits)
    suggestion = fetch_habit_suggestion(
        profile, mood, preferences,
        completed_habits=[h for h in habits if h.completed_dates],
        current_streak=streak,
        screen_time_hours=screen_time or None,
        recent_completions=recent,
        settings=settings,
    )
    st.session_state.suggestion = suggestion
    st.session_state.suggestion_event = log_suggestion(mood, preferences, suggestion)


def sync_profile(habits):
    streaks = [h.current_streak() for h in habits]
    current = st.session_state.profile
    updated = current.copy_with(
        total_habits_completed=sum(len(h.completed_dates) for h in habits),
        current_streak=max(streaks, default=0),
        longest_streak=max([current.longest_streak] + streaks),
    )
    st.session_state.profile = updated
    save_profile(updated)


def detect_mood():
    # runs as a button callback, before the mood radio is drawn again
    text = st.session_state.get("mood_text", "")
    if not text.strip():
        return
    from sentiment import analyze_mood_from_text
    analysis = analyze_mood_from_text(text, use_models=settings.sentiment_analysis_enabled)
    st.session_state.mood_analysis = analysis
    if "error" not in analysis:
        st.session_state.mood_choice = mood_labels[Mood[analysis["detected_mood"].upper()]]

# ------------------------------
# Page UI
# ------------------------------
st.title("🌱 Micro-Habit Coach")

if not profile.name:
    st.write(random_message(WELCOME_MESSAGES))
    with st.form("onboarding"):
        name = st.text_input("What should we call you?")
        if st.form_submit_button("Get started") and name.strip():
            st.session_state.profile = profile.copy_with(name=name.strip())
            save_profile(st.session_state.profile)
            st.rerun()
    st.stop()

st.write(f"Hi {profile.name}! {random_message(WELCOME_MESSAGES)}")

for problem in validate_configuration(settings):
    st.caption(f"⚙️ {problem} (local suggestions only)")

# ------------------------------
# Mood + preferences
# ------------------------------
st.subheader("How do you feel right now?")
choice = st.radio("Mood", list(mood_labels.values()), key="mood_choice", horizontal=True)
mood = next(m for m, label in mood_labels.items() if label == choice)

with st.expander("Or describe it in your own words"):
    st.text_input("💬 How's your day going?", key="mood_text")
    st.button("Detect mood", on_click=detect_mood)
    analysis = st.session_state.mood_analysis
    if analysis:
        if "error" in analysis:
            st.warning(analysis["error"])
        else:
            st.info(f"{analysis['reasoning']} (confidence {analysis['confidence']:.2f})")

st.subheader("What kind of habit would you like today?")
picked = st.multiselect("Preferred categories", list(category_labels.values()), key="category_choice")
preferences = [c for c, label in category_labels.items() if label in picked]
screen_time = st.slider("Screen time today (hours, optional)", 0.0, 12.0, 0.0, 0.5)

changed = profile.differs_from(mood, preferences)
if changed:
    profile = profile.copy_with(current_mood=mood, preferred_categories=preferences,
                                last_mood_update=datetime.now())
    st.session_state.profile = profile
    save_profile(profile)

st.caption(f"{emotional_state(mood)} {mood_analysis(mood)}")
good_fits = ", ".join(c.display_name for c in recommended_categories(mood, preferences))
st.caption(f"Good fits right now: {good_fits}")
if screen_time:
    st.caption(f"Your screen time is {categorize_screen_time(screen_time)}. "
               f"A {break_duration(screen_time)}-minute offline break would help.")

clicked = st.button("✨ Suggest a habit")
if clicked or changed or st.session_state.suggestion is None:
    refresh_suggestion(mood, preferences, screen_time)

# ------------------------------
# Suggestion card
# ------------------------------
s = st.session_state.suggestion
if s:
    st.subheader("🎯 Today's suggestion")
    st.markdown(f"### {s.get('title', 'Mindful Breathing')}")
    st.write(s.get("description", "Take 5 minutes to focus on your breathing"))
    cat = parse_category(s.get("category")) or HabitCategory.MINDFULNESS
    st.write(f"{cat.emoji} {cat.display_name} · {s.get('duration', 5)} min")
    st.info(s.get("prompt", ""))
    st.caption(s.get("reasoning", "Based on your current mood and preferences"))

    col1, col2 = st.columns(2)
    if col1.button("👍 Accept"):
        habit = Habit(
            id=str(uuid.uuid4()),
            title=s["title"],
            description=s["description"],
            category=cat,
            duration_minutes=int(s.get("duration") or 5),
            created_at=datetime.now(),
        )
        save_habit(habit)
        record_feedback(st.session_state.suggestion_event, "accepted")
        st.session_state.suggestion = None
        st.success(f"Added '{habit.title}' to your habits.")
    if col2.button("🔄 Something else"):
        record_feedback(st.session_state.suggestion_event, "skipped")
        refresh_suggestion(mood, preferences, screen_time)

# ------------------------------
# Habits + streaks
# ------------------------------
habits = list_habits()
if habits:
    st.subheader("✅ Your habits")
    for h in habits:
        c1, c2, c3 = st.columns([3, 1, 1])
        c1.write(f"{h.category.emoji} **{h.title}** · 🔥 {h.current_streak()}")
        if c2.button("Done", key=f"done_{h.id}", disabled=h.is_completed_today()):
            st.session_state.last_result = process_habit_completion(h.id, True)
        if c3.button("Missed", key=f"miss_{h.id}"):
            st.session_state.last_result = process_habit_completion(h.id, False)

    result = st.session_state.last_result
    if result:
        if result["completed"]:
            st.success(result["celebration_message"])
            st.write(random_message(completion_messages(result["new_streak"])))
            nxt = result["next_suggestion"]
            st.write(f"{nxt['message']} **{nxt['title']}**: {nxt['description']}")
        else:
            st.warning(result["encouragement_message"])
            easy = result["easier_suggestion"]
            st.write(f"{easy['message']} **{easy['title']}**: {easy['description']}")

    habits = list_habits()
    sync_profile(habits)

    # Progress
    st.subheader("📈 Progress")
    perf = analyze_user_performance(habits)
    st.metric("Current streak", f"{st.session_state.profile.current_streak} days")
    st.write(progress_message(perf["total_completions"], st.session_state.profile.longest_streak))
    for rec in optimization_recommendations(habits):
        st.write(f"- {rec}")
    st.pyplot(plot_progress(habits))
    by_category = category_completions(habits)
    if by_category:
        st.bar_chart(pd.Series(by_category))

# Sidebar: reminders, suggestion history, config status
with st.sidebar:
    current = st.session_state.profile
    if current.notifications_enabled:
        st.info(f"⏰ {current.reminder_hour:02d}:{current.reminder_minute:02d} · {random_message(REMINDER_MESSAGES)}")

    st.subheader("📚 Recent suggestions")
    recent = fetch_recent(50)
    if recent:
        df_db = pd.DataFrame(recent, columns=["id", "ts", "mood", "categories", "title", "source", "feedback"])
        st.write("Suggestions shown:", len(df_db))
        st.bar_chart(df_db["source"].value_counts())
        st.dataframe(df_db[["ts", "mood", "title", "feedback"]].head(10))

    st.header("Settings")
    with st.form("profile_settings"):
        name = st.text_input("Name", value=current.name)
        notifications = st.checkbox("Daily reminders", value=current.notifications_enabled)
        reminder = st.time_input("Reminder time", value=time(current.reminder_hour, current.reminder_minute))
        if st.form_submit_button("Save settings"):
            updated = current.copy_with(
                name=name.strip() or current.name,
                notifications_enabled=notifications,
                reminder_hour=reminder.hour,
                reminder_minute=reminder.minute,
            )
            st.session_state.profile = updated
            save_profile(updated)
            st.success("Settings saved.")

    st.write(config_status(settings))

    confirm = st.checkbox("I want to delete all my habits and history")
    if st.button("🗑️ Reset app data", disabled=not confirm):
        clear_all()
        st.session_state.clear()
        st.rerun()
