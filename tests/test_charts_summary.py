from datetime import date

from components.charts import ChartBuilder, daily_totals, mood_frame
from models.records import Event, Expense, MoodLog, Task
from models.status import CollectionSyncStatus, SyncLevel
from utils.summary import summarize

TODAY = date(2024, 5, 15)


def _expenses():
    return [
        Expense(title="lunch", amount=9.0, date="2024-05-15"),
        Expense(title="coffee", amount=3.5, date="2024-05-15T08:00:00"),
        Expense(title="books", amount=40.0, date="2024-05-02"),
        Expense(title="april", amount=12.0, date="2024-04-30"),
        Expense(title="broken", amount=1.0, date="someday"),
    ]


def test_daily_totals() -> None:
    totals = daily_totals(_expenses())
    assert list(totals["amount"]) == [12.0, 40.0, 12.5]
    assert [d.date() for d in totals["day"]] == [date(2024, 4, 30), date(2024, 5, 2), date(2024, 5, 15)]


def test_daily_totals_empty() -> None:
    assert daily_totals([]).empty


def test_mood_frame_drops_unknown_moods() -> None:
    frame = mood_frame([
        MoodLog(date="2024-05-02", mood="Happy"),
        MoodLog(date="2024-05-01", mood="Stressed"),
        MoodLog(date="2024-05-03", mood="Elated"),
    ])
    assert list(frame["score"]) == [1, 4]


def test_expense_chart_has_one_trace() -> None:
    fig = ChartBuilder.create_expense_chart(_expenses())
    assert len(fig.data) == 1


def test_summarize() -> None:
    summary = summarize(
        _expenses(),
        [
            Task(title="due", due_date="2024-05-15"),
            Task(title="done", due_date="2024-05-15", completed=True),
            Task(title="later", due_date="2024-05-20"),
        ],
        [
            Event(name="today", date="2024-05-15"),
            Event(name="next week", date="2024-05-22"),
            Event(name="past", date="2024-05-01"),
        ],
        [MoodLog(date="2024-05-15", mood="Happy"), MoodLog(date="2024-05-14", mood="Sad")],
        today=TODAY,
    )
    assert summary.spent_today == 12.5
    assert summary.spent_this_month == 52.5
    assert summary.tasks_open == 2
    assert summary.tasks_due_today == 1
    assert summary.events_today == 1
    assert summary.upcoming_events == 1
    assert summary.latest_mood == "Happy"


def test_sync_levels() -> None:
    assert CollectionSyncStatus("notes", local_only=True).level == SyncLevel.LOCAL
    assert CollectionSyncStatus("tasks", failed=True).level == SyncLevel.OFFLINE
    assert CollectionSyncStatus("tasks", pending=True).level == SyncLevel.PENDING
