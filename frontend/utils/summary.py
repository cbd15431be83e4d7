"""
Dashboard summaries computed from the caches.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from models.records import Event, Expense, MoodLog, Task
from .date_filter import to_day


@dataclass
class TodaySummary:
    spent_today: float = 0.0
    spent_this_month: float = 0.0
    tasks_due_today: int = 0
    tasks_open: int = 0
    events_today: int = 0
    upcoming_events: int = 0
    latest_mood: Optional[str] = None


def summarize(
    expenses: Iterable[Expense],
    tasks: Iterable[Task],
    events: Iterable[Event],
    moods: Iterable[MoodLog],
    today: Optional[date] = None,
) -> TodaySummary:
    today = today or date.today()
    summary = TodaySummary()

    for expense in expenses:
        day = to_day(expense.date)
        if day is None:
            continue
        if day == today:
            summary.spent_today += expense.amount
        if (day.year, day.month) == (today.year, today.month):
            summary.spent_this_month += expense.amount

    for task in tasks:
        if task.completed:
            continue
        summary.tasks_open += 1
        if to_day(task.due_date) == today:
            summary.tasks_due_today += 1

    for event in events:
        day = to_day(event.date)
        if day == today:
            summary.events_today += 1
        elif day is not None and day > today:
            summary.upcoming_events += 1

    # moods are kept newest first
    for mood in moods:
        summary.latest_mood = mood.mood
        break

    return summary
