# history_store.py
import json
import sqlite3
from datetime import date, datetime
from typing import List, Optional

from config import get_settings
from habits import Habit, UserProfile, coerce_categories, coerce_mood


def _db(db):
    return db or get_settings().database_path


def init_db(db=None):
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.executescript("""
    CREATE TABLE IF NOT EXISTS habits (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        category TEXT,
        duration INTEGER,
        created_at TEXT
    );
    CREATE TABLE IF NOT EXISTS completions (
        habit_id TEXT NOT NULL,
        day TEXT NOT NULL,
        PRIMARY KEY (habit_id, day)
    );
    CREATE TABLE IF NOT EXISTS suggestions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        ts TEXT,
        mood TEXT,
        categories TEXT,
        title TEXT,
        source TEXT,
        feedback TEXT
    );
    CREATE TABLE IF NOT EXISTS profile (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        data TEXT
    );
    """)
    conn.commit()
    conn.close()


def save_habit(habit: Habit, db=None):
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("INSERT OR REPLACE INTO habits (id,title,description,category,duration,created_at) VALUES (?,?,?,?,?,?)",
              (habit.id, habit.title, habit.description, habit.category.key,
               habit.duration_minutes, habit.created_at.isoformat()))
    for day in habit.to_dict()["completed_dates"]:
        c.execute("INSERT OR IGNORE INTO completions (habit_id,day) VALUES (?,?)", (habit.id, day))
    conn.commit()
    conn.close()


def _load(conn, rows) -> List[Habit]:
    c = conn.cursor()
    habits = []
    for hid, title, desc, cat, duration, created in rows:
        c.execute("SELECT day FROM completions WHERE habit_id=? ORDER BY day", (hid,))
        habits.append(Habit.from_dict({
            "id": hid, "title": title, "description": desc, "category": cat,
            "duration_minutes": duration, "created_at": created,
            "completed_dates": [r[0] for r in c.fetchall()],
        }))
    return habits


def list_habits(db=None) -> List[Habit]:
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("SELECT id,title,description,category,duration,created_at FROM habits ORDER BY created_at")
    habits = _load(conn, c.fetchall())
    conn.close()
    return habits


def get_habit(habit_id, db=None) -> Optional[Habit]:
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("SELECT id,title,description,category,duration,created_at FROM habits WHERE id=?", (habit_id,))
    habits = _load(conn, c.fetchall())
    conn.close()
    return habits[0] if habits else None


def complete_habit(habit_id, day: Optional[date] = None, db=None) -> Habit:
    """Mark a habit done for a day; completing twice on one day is a no-op."""
    day = day or date.today()
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("SELECT 1 FROM habits WHERE id=?", (habit_id,))
    if c.fetchone() is None:
        conn.close()
        raise KeyError(f"unknown habit {habit_id}")
    c.execute("INSERT OR IGNORE INTO completions (habit_id,day) VALUES (?,?)", (habit_id, day.isoformat()))
    conn.commit()
    conn.close()
    return get_habit(habit_id, db)


def log_suggestion(mood, categories, suggestion, db=None) -> int:
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("INSERT INTO suggestions (ts,mood,categories,title,source) VALUES (?,?,?,?,?)",
              (datetime.utcnow().isoformat(), coerce_mood(mood).key,
               ",".join(cat.key for cat in coerce_categories(categories)),
               suggestion["title"], suggestion.get("source", "local")))
    conn.commit()
    event_id = c.lastrowid
    conn.close()
    return event_id


def record_feedback(event_id, feedback, db=None):
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("UPDATE suggestions SET feedback=? WHERE id=?", (feedback, event_id))
    conn.commit()
    conn.close()


def fetch_recent(n=50, db=None):
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("SELECT id,ts,mood,categories,title,source,feedback FROM suggestions ORDER BY id DESC LIMIT ?", (n,))
    rows = c.fetchall()
    conn.close()
    return rows


def save_profile(profile: UserProfile, db=None):
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("INSERT OR REPLACE INTO profile (id,data) VALUES (1,?)", (json.dumps(profile.to_dict()),))
    conn.commit()
    conn.close()


def load_profile(db=None) -> Optional[UserProfile]:
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    c.execute("SELECT data FROM profile WHERE id=1")
    row = c.fetchone()
    conn.close()
    if row is None:
        return None
    return UserProfile.from_dict(json.loads(row[0]))


def clear_all(db=None):
    """Reset the app: drop every habit, completion, logged suggestion and the profile."""
    conn = sqlite3.connect(_db(db))
    c = conn.cursor()
    for table in ("completions", "habits", "suggestions", "profile"):
        c.execute(f"DELETE FROM {table}")
    conn.commit()
    conn.close()
