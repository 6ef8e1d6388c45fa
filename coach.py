# coach.py
import random
from datetime import date
from typing import Dict, List, Optional

import history_store
from recommender import easier_suggestion, next_day_suggestion

WELCOME_MESSAGES = [
    "Welcome to Micro-Habit Tracker! Let's get started by understanding how you're feeling today.",
    "Hello there! I'm your personal habit companion. Let's begin this journey together!",
    "Great to see you! I'm here to help you build amazing micro-habits. Let's start!",
]

MISSED_HABIT_MESSAGES = [
    "No worries! Every habit journey has ups and downs. Tomorrow is a fresh start! 💪",
    "Missing one day doesn't define your journey. Let's get back on track tomorrow! 🌟",
    "It's okay! What matters is getting back up. You've got this! 🚀",
    "Don't be hard on yourself. Consistency is built over time, not perfection! ❤️",
]

REMINDER_MESSAGES = [
    "Hey there! Just a friendly reminder to complete your habit for today. Let's keep the momentum going!",
    "Time for your daily habit! Today's a great day to continue your streak!",
    "Your habit is waiting for you! A few minutes now will make your day even better!",
    "Gentle reminder: Your future self will thank you for completing today's habit!",
]


def random_message(messages: List[str], rng=None) -> str:
    return (rng or random).choice(messages)


def celebration_message(streak: int) -> str:
    if streak <= 1:
        return "🎉 Fantastic start! You've completed your first habit. Every journey begins with a single step!"
    if streak <= 3:
        return f"🔥 Amazing! {streak} days in a row! You're building real momentum here!"
    if streak <= 7:
        return f"⭐ Incredible! {streak}-day streak! You're developing a powerful habit pattern!"
    if streak <= 14:
        return f"🏆 Outstanding! {streak} consecutive days! You're becoming a habit master!"
    return f"👑 Legendary! {streak} days of pure dedication! You're an inspiration!"


def completion_messages(streak: int) -> List[str]:
    if streak <= 1:
        return [
            "You've completed your habit for today! Well done! Your current streak is 1 day. Would you like to continue tomorrow?",
            "Fantastic start! You've completed your first habit. Let's build on this momentum!",
        ]
    if streak <= 3:
        return [
            f"Amazing! You've kept up your {streak}-day streak! Keep it up, you're doing great!",
            f"Wonderful progress! {streak} days in a row. You're building something special!",
        ]
    if streak <= 7:
        return [
            f"Incredible! You've maintained a {streak}-day streak! You're on fire!",
            f"Outstanding! {streak} days of consistency. You're becoming unstoppable!",
        ]
    return [
        f"Absolutely amazing! {streak} days of pure dedication! You're a habit master!",
        f"Extraordinary! {streak} consecutive days! You're proof that small habits create big changes!",
    ]


def progress_message(total_completed: int, longest_streak: int, rng=None) -> str:
    return random_message([
        f"You're doing great! You've completed {total_completed} habits total with your longest streak being {longest_streak} days!",
        f"Amazing progress! {total_completed} habits completed and a personal best of {longest_streak} days in a row!",
    ], rng)


def process_habit_completion(habit_id, completed: bool, day: Optional[date] = None,
                             db=None, rng=None) -> Dict:
    """Record a completed or missed habit and decide what to say next."""
    result = {"habit_id": habit_id, "completed": completed}
    if completed:
        habit = history_store.complete_habit(habit_id, day=day, db=db)
        streak = habit.current_streak(day)
        result.update({
            "new_streak": streak,
            "total_completions": len(habit.completed_dates),
            "celebration_message": celebration_message(streak),
            "next_suggestion": next_day_suggestion(habit, rng=rng),
        })
    else:
        result.update({
            "encouragement_message": random_message(MISSED_HABIT_MESSAGES, rng),
            "easier_suggestion": easier_suggestion(rng=rng),
            "streak_reset": True,
        })
    return result
