"""
Named relative date ranges for calendar queries.

The calendar view offers "yesterday", "this week", "next month" and so
on.  This module turns such a name plus the viewer's current date into
the concrete first and last calendar day to fetch events for.  Weeks
run Sunday to Saturday.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Union
import pandas as pd

from ..utils.timeutils import TimestampLike, local_wall_clock


class RangeKind(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RangeAnchor(Enum):
    YESTERDAY = "yesterday"
    TODAY = "today"
    TOMORROW = "tomorrow"
    LAST_WEEK = "lastWeek"
    THIS_WEEK = "thisWeek"
    NEXT_WEEK = "nextWeek"
    LAST_MONTH = "lastMonth"
    THIS_MONTH = "thisMonth"
    NEXT_MONTH = "nextMonth"

    @property
    def kind(self) -> RangeKind:
        return _ANCHOR_KINDS[self]

    @property
    def step(self) -> int:
        """-1, 0 or +1 relative to the current day, week or month."""
        return _ANCHOR_STEPS[self]


_ANCHOR_KINDS = {
    RangeAnchor.YESTERDAY: RangeKind.DAILY,
    RangeAnchor.TODAY: RangeKind.DAILY,
    RangeAnchor.TOMORROW: RangeKind.DAILY,
    RangeAnchor.LAST_WEEK: RangeKind.WEEKLY,
    RangeAnchor.THIS_WEEK: RangeKind.WEEKLY,
    RangeAnchor.NEXT_WEEK: RangeKind.WEEKLY,
    RangeAnchor.LAST_MONTH: RangeKind.MONTHLY,
    RangeAnchor.THIS_MONTH: RangeKind.MONTHLY,
    RangeAnchor.NEXT_MONTH: RangeKind.MONTHLY,
}

_ANCHOR_STEPS = {
    RangeAnchor.YESTERDAY: -1,
    RangeAnchor.TODAY: 0,
    RangeAnchor.TOMORROW: 1,
    RangeAnchor.LAST_WEEK: -1,
    RangeAnchor.THIS_WEEK: 0,
    RangeAnchor.NEXT_WEEK: 1,
    RangeAnchor.LAST_MONTH: -1,
    RangeAnchor.THIS_MONTH: 0,
    RangeAnchor.NEXT_MONTH: 1,
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def as_params(self) -> Dict[str, str]:
        """ISO ``start`` / ``end`` pair, ready to parameterise an events query."""
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def parse_anchor(value: Union[str, RangeAnchor]) -> RangeAnchor:
    """Accept ``"thisWeek"``, ``"this_week"`` or ``"THIS_WEEK"``."""
    if isinstance(value, RangeAnchor):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unknown date range {value!r}")
    wanted = value.strip().replace("_", "").lower()
    for anchor in RangeAnchor:
        if anchor.value.lower() == wanted:
            return anchor
    raise ValueError(f"Unknown date range {value!r}")


def _as_date(today: Union[date, datetime, pd.Timestamp]) -> date:
    # pandas.Timestamp is a datetime subclass
    if isinstance(today, datetime):
        return today.date()
    return today


def resolve(
    kind: Optional[Union[str, RangeKind]],
    anchor: Union[str, RangeAnchor],
    today: Union[date, datetime, pd.Timestamp],
) -> DateRange:
    """Concrete first and last day of the range named by `anchor`.

    Parameters
    ----------
    kind : str, RangeKind or None
        ``daily``, ``weekly`` or ``monthly``.  ``None`` infers it from
        the anchor.
    anchor : str or RangeAnchor
        Which day, week or month relative to `today`.
    today : date
        The viewer's current calendar date.

    Raises
    ------
    ValueError
        If the anchor is unknown or does not belong to `kind`.
    """
    anchor = parse_anchor(anchor)
    if kind is not None:
        kind = kind if isinstance(kind, RangeKind) else RangeKind(str(kind).strip().lower())
        if anchor.kind is not kind:
            raise ValueError(f"Range {anchor.value!r} is not a {kind.value} range")
    day = _as_date(today)

    if anchor.kind is RangeKind.DAILY:
        target = day + timedelta(days=anchor.step)
        return DateRange(target, target)

    if anchor.kind is RangeKind.WEEKLY:
        # Python weeks start on Monday (0); shift so that Sunday is 0
        day_of_week = (day.weekday() + 1) % 7
        start = day - timedelta(days=day_of_week) + timedelta(weeks=anchor.step)
        return DateRange(start, start + timedelta(days=6))

    month = pd.Period(year=day.year, month=day.month, freq="M") + anchor.step
    return DateRange(month.start_time.date(), month.end_time.date())


def local_today(offset_hours: float, utc_now: Optional[TimestampLike] = None) -> date:
    """Calendar date of a viewer at `offset_hours` from UTC."""
    return local_wall_clock(offset_hours, utc_now).date()
