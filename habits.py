# habits.py
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional


class Mood(Enum):
    HAPPY = ("happy", "Happy", "😊")
    STRESSED = ("stressed", "Stressed", "😰")
    TIRED = ("tired", "Tired", "😴")
    ENERGIZED = ("energized", "Energized", "⚡")

    def __init__(self, key, display_name, emoji):
        self.key = key
        self.display_name = display_name
        self.emoji = emoji


class HabitCategory(Enum):
    PHYSICAL = ("physical", "Physical Activity", "🏃")
    MINDFULNESS = ("mindfulness", "Mindfulness", "🧘")
    RELAXATION = ("relaxation", "Relaxation", "😌")
    PRODUCTIVITY = ("productivity", "Productivity", "📝")

    def __init__(self, key, display_name, emoji):
        self.key = key
        self.display_name = display_name
        self.emoji = emoji


class HabitDifficulty(Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


DEFAULT_MOOD = Mood.HAPPY
DEFAULT_CATEGORY = HabitCategory.MINDFULNESS


def parse_mood(value) -> Optional[Mood]:
    """Accepts a Mood, its key ("stressed") or display name; None if unknown."""
    if isinstance(value, Mood):
        return value
    if not isinstance(value, str):
        return None
    v = value.strip().lower()
    for mood in Mood:
        if v in (mood.key, mood.display_name.lower()):
            return mood
    return None


def parse_category(value) -> Optional[HabitCategory]:
    if isinstance(value, HabitCategory):
        return value
    if not isinstance(value, str):
        return None
    v = value.strip().lower()
    for cat in HabitCategory:
        if v in (cat.key, cat.display_name.lower()):
            return cat
    return None


def coerce_mood(value) -> Mood:
    return parse_mood(value) or DEFAULT_MOOD


def coerce_categories(values: Optional[Iterable]) -> List[HabitCategory]:
    # unknown entries are dropped, order and first occurrence kept
    out = []
    for v in values or []:
        cat = parse_category(v)
        if cat is not None and cat not in out:
            out.append(cat)
    return out


def _to_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


@dataclass
class Habit:
    id: str
    title: str
    description: str
    category: HabitCategory
    duration_minutes: int
    created_at: datetime
    completed_dates: List[date] = field(default_factory=list)

    def current_streak(self, today: Optional[date] = None) -> int:
        """Consecutive completed days counting back from today."""
        days = {_to_day(d) for d in self.completed_dates}
        streak = 0
        cursor = today or date.today()
        while cursor in days:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    def is_completed_today(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return any(_to_day(d) == today for d in self.completed_dates)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.key,
            "duration_minutes": self.duration_minutes,
            "created_at": self.created_at.isoformat(),
            "completed_dates": [_to_day(d).isoformat() for d in self.completed_dates],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Habit":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description", ""),
            category=parse_category(data.get("category")) or DEFAULT_CATEGORY,
            duration_minutes=int(data.get("duration_minutes") or 5),
            created_at=datetime.fromisoformat(data["created_at"]),
            completed_dates=[_to_day(d) for d in data.get("completed_dates", [])],
        )


@dataclass
class UserProfile:
    id: str
    name: str
    current_mood: Optional[Mood] = None
    preferred_categories: List[HabitCategory] = field(default_factory=list)
    notifications_enabled: bool = True
    reminder_hour: int = 9
    reminder_minute: int = 0
    total_habits_completed: int = 0
    longest_streak: int = 0
    current_streak: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    last_mood_update: datetime = field(default_factory=datetime.now)

    def copy_with(self, **changes) -> "UserProfile":
        return replace(self, **changes)

    def differs_from(self, mood: Mood, preferences: List[HabitCategory]) -> bool:
        """True when the picked mood or the set of preferred categories moved away from the stored ones."""
        return mood != self.current_mood or set(preferences) != set(self.preferred_categories)

    def summary(self) -> Dict:
        """Compact view used when asking the remote suggestion service."""
        return {
            "name": self.name,
            "current_mood": self.current_mood.key if self.current_mood else None,
            "preferred_categories": [c.key for c in self.preferred_categories],
            "total_habits_completed": self.total_habits_completed,
            "longest_streak": self.longest_streak,
            "current_streak": self.current_streak,
        }

    def to_dict(self) -> Dict:
        data = self.summary()
        data.update({
            "id": self.id,
            "notifications_enabled": self.notifications_enabled,
            "reminder_hour": self.reminder_hour,
            "reminder_minute": self.reminder_minute,
            "created_at": self.created_at.isoformat(),
            "last_mood_update": self.last_mood_update.isoformat(),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "UserProfile":
        mood = data.get("current_mood")
        now = datetime.now().isoformat()
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            current_mood=coerce_mood(mood) if mood is not None else None,
            preferred_categories=list(dict.fromkeys(
                parse_category(c) or DEFAULT_CATEGORY for c in data.get("preferred_categories", [])
            )),
            notifications_enabled=data.get("notifications_enabled", True),
            reminder_hour=data.get("reminder_hour", 9),
            reminder_minute=data.get("reminder_minute", 0),
            total_habits_completed=data.get("total_habits_completed", 0),
            longest_streak=data.get("longest_streak", 0),
            current_streak=data.get("current_streak", 0),
            created_at=datetime.fromisoformat(data.get("created_at") or now),
            last_mood_update=datetime.fromisoformat(data.get("last_mood_update") or now),
        )
