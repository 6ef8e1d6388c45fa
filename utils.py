# utils.py
import re
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional

import matplotlib
import pandas as pd

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

# ---------------------------------------------------------
# Clean Text
# ---------------------------------------------------------
def clean_text(text):
    text = re.sub(r'http\S+', '', text)                # URLs
    text = re.sub(r'@\w+', '', text)                  # @mentions
    text = re.sub(r'[^A-Za-z\s]', '', text)           # symbols
    text = re.sub(r'\s+', ' ', text).strip()          # extra spaces
    return text

# ---------------------------------------------------------
# Completion history as a frame
# ---------------------------------------------------------
def completions_frame(habits) -> pd.DataFrame:
    """One row per (habit, completed day)."""
    rows = [
        {"habit_id": h.id, "title": h.title, "category": h.category.key, "day": d}
        for h in habits
        for d in h.completed_dates
    ]
    return pd.DataFrame(rows, columns=["habit_id", "title", "category", "day"])

# ---------------------------------------------------------
# Performance analysis
# ---------------------------------------------------------
def recent_completions(habits, days=7, today: Optional[date] = None) -> Dict[str, int]:
    """Completions per category over the last ``days`` days, today included."""
    today = today or date.today()
    start = today - timedelta(days=days - 1)
    counts = Counter(
        h.category.key
        for h in habits
        for d in h.completed_dates
        if start <= d <= today
    )
    return dict(counts)


def analyze_user_performance(habits, today: Optional[date] = None) -> Dict:
    if not habits:
        return {"status": "no_data", "message": "No habits to analyze yet"}

    total = sum(len(h.completed_dates) for h in habits)
    avg_streak = sum(h.current_streak(today) for h in habits) / len(habits)
    rate = sum(1 for h in habits if h.is_completed_today(today)) / len(habits)

    if rate >= 0.8:
        performance = "excellent"
    elif rate >= 0.6:
        performance = "good"
    elif rate >= 0.4:
        performance = "fair"
    else:
        performance = "needs_improvement"

    return {
        "total_completions": total,
        "average_streak": round(avg_streak),
        "completion_rate": round(rate * 100),
        "performance": performance,
        "total_habits": len(habits),
    }


def category_completions(habits) -> Dict[str, int]:
    df = completions_frame(habits)
    if df.empty:
        return {}
    return {k: int(v) for k, v in df["category"].value_counts().items()}


def difficulty_adjustment(habits, today: Optional[date] = None) -> str:
    if not habits:
        return "maintain"
    active = sum(1 for h in habits if h.current_streak(today) > 0) / len(habits)
    if active >= 0.8:
        return "increase"
    if active <= 0.3:
        return "decrease"
    return "maintain"


def optimization_recommendations(habits, today: Optional[date] = None) -> List[str]:
    recs = []
    perf = analyze_user_performance(habits, today).get("performance")
    if perf == "excellent":
        recs.append("🌟 You're doing amazing! Consider adding a new habit category to expand your routine.")
    elif perf == "needs_improvement":
        recs.append("💪 Let's focus on easier, shorter habits to rebuild momentum.")
    adjustment = difficulty_adjustment(habits, today)
    if adjustment == "increase":
        recs.append("📈 You're ready for slightly longer habits.")
    elif adjustment == "decrease":
        recs.append("📉 Shorter habits may help you get back on track.")
    return recs

# ---------------------------------------------------------
# Visualization
# ---------------------------------------------------------
def daily_counts(habits, days_back=14, today: Optional[date] = None) -> pd.Series:
    today = today or date.today()
    days = [today - timedelta(days=i) for i in range(days_back - 1, -1, -1)]
    df = completions_frame(habits)
    counts = df["day"].value_counts() if not df.empty else pd.Series(dtype=int)
    return pd.Series([int(counts.get(d, 0)) for d in days], index=days)


def plot_progress(habits, days_back=14, today: Optional[date] = None):
    series = daily_counts(habits, days_back, today)
    fig, ax = plt.subplots(figsize=(8, 3))
    ax.bar([d.strftime("%m-%d") for d in series.index], series.values)
    ax.set_ylabel("Habits completed")
    ax.set_title(f"Last {days_back} days")
    fig.autofmt_xdate()
    return fig
