"""
Date Filter
Pure filtering of cached items by a date field, shared by every list view.

Kinds:
    all    → input unchanged (same object)
    week   → today - 7 days ... today
    month  → same calendar month as today
    year   → same calendar year as today
    range  → from ... to, inclusive; both bounds required

Dates are compared at day granularity; time of day and timezone are ignored.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, TypeVar, Union

import pandas as pd

T = TypeVar("T")

DateLike = Union[str, date, pd.Timestamp, None]


class DateFilterKind(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    RANGE = "range"

    @property
    def label(self) -> str:
        labels = {
            "all": "All time",
            "week": "Last 7 days",
            "month": "This month",
            "year": "This year",
            "range": "Custom range",
        }
        return labels.get(self.value, self.value)


def to_day(value: Any) -> Optional[date]:
    """Calendar day of a date-ish value, or None when unparseable"""
    if value is None or value == "":
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date()


def filter_by_date(
    items: Sequence[T],
    get_date: Callable[[T], Any],
    kind: Union[DateFilterKind, str],
    from_date: DateLike = None,
    to_date: DateLike = None,
    today: Optional[date] = None,
) -> Union[Sequence[T], List[T]]:
    """Stable filter; never sorts and never mutates `items`"""
    try:
        kind = DateFilterKind(kind)
    except ValueError:
        return items

    if kind == DateFilterKind.ALL:
        return items

    today = today or date.today()

    if kind == DateFilterKind.WEEK:
        start = today - timedelta(days=7)
        keep = lambda d: start <= d <= today
    elif kind == DateFilterKind.MONTH:
        keep = lambda d: d.year == today.year and d.month == today.month
    elif kind == DateFilterKind.YEAR:
        keep = lambda d: d.year == today.year
    else:
        lower, upper = to_day(from_date), to_day(to_date)
        if lower is None or upper is None:
            return items
        keep = lambda d: lower <= d <= upper

    result = []
    for item in items:
        day = to_day(get_date(item))
        if day is not None and keep(day):
            result.append(item)
    return result
