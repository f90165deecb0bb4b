"""
Countdowns to economic calendar events.

Calendar rows give a UTC date and a UTC ``HH:MM`` time.  To show "starts
in 3h 20m" to a viewer at some fixed offset, the time is shifted by the
offset first and the UTC calendar date is then corrected by however
many days the shift crossed.  Shifting minutes alone would leave the
event on its UTC date and put it a whole day off for anything within
``|offset|`` hours of UTC midnight.

Rows that carry no usable time ("Tentative", "15th", blanks, garbage)
get the "unknown" countdown, which sorts after every real one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple
import pandas as pd

from .models import CalendarEvent
from ..utils.timeutils import MINUTES_PER_DAY, TimestampLike, offset_minutes, parse_time_str

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "--"
PASSED_LABEL = "Passed"


class CountdownStatus(Enum):
    UPCOMING = "upcoming"
    PASSED = "passed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Countdown:
    """Time left until an event, as seen from the viewer's wall clock.

    ``minutes_until`` is infinite for passed and unknown events so that
    sorting by it pushes them to the bottom.
    """
    minutes_until: float
    label: str
    status: CountdownStatus
    local_date: Optional[date] = None
    local_time: Optional[str] = None


UNKNOWN_COUNTDOWN = Countdown(math.inf, UNKNOWN_LABEL, CountdownStatus.UNKNOWN)


def is_unscheduled(time_utc: Optional[str]) -> bool:
    """True for rows the calendar publishes without a clock time.

    The upstream feed has no explicit status field: blanks and
    "Tentative" mark undecided times, and day-of-month placeholders such
    as "15th" contain ``"th"``.  The ``"th"`` test is case-sensitive.
    """
    if not isinstance(time_utc, str) or not time_utc.strip():
        return True
    return time_utc.strip().lower() == "tentative" or "th" in time_utc


def parse_utc_date(date_utc: str) -> date:
    """UTC calendar date of a ``YYYY-MM-DD`` or full ISO string.

    Full ISO values with an offset are converted to UTC before taking
    the date, so ``2025-11-18T00:00:00.000Z`` stays on the 18th whatever
    the local machine's timezone is.
    """
    if "T" in date_utc:
        ts = pd.Timestamp(date_utc)
        if ts.tzinfo is not None:
            ts = ts.tz_convert("UTC")
        return ts.date()
    parts = date_utc.strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"Not a YYYY-MM-DD date: {date_utc!r}")
    year, month, day = (int(p) for p in parts)
    return date(year, month, day)


def _localize(date_utc: str, time_utc: str, offset_hours: float) -> Tuple[date, int]:
    """Local calendar date and minutes past local midnight of a UTC date/time."""
    t = parse_time_str(time_utc)
    total_minutes = t.hour * 60 + t.minute + offset_minutes(offset_hours)
    day_offset, local_minutes = divmod(total_minutes, MINUTES_PER_DAY)
    local_date = parse_utc_date(date_utc) + timedelta(days=day_offset)
    return local_date, local_minutes


def _as_wall_clock(now_local: TimestampLike) -> pd.Timestamp:
    now = now_local if isinstance(now_local, pd.Timestamp) else pd.Timestamp(now_local)
    if now.tzinfo is not None:
        # keep the wall-clock reading, drop the zone
        now = now.tz_localize(None)
    return now


def format_time_left(total_minutes: int) -> str:
    """``"{d}d {h}h"`` beyond 24 hours, ``"{h}h {m}m"`` otherwise."""
    hours_left, minutes_left = divmod(total_minutes, 60)
    if hours_left > 24:
        return f"{hours_left // 24}d {hours_left % 24}h"
    return f"{hours_left}h {minutes_left}m"


def time_until(
    date_utc: Optional[str],
    time_utc: Optional[str],
    offset_hours: float,
    now_local: TimestampLike,
) -> Countdown:
    """Countdown to an event for a viewer at `offset_hours` from UTC.

    Parameters
    ----------
    date_utc : str
        ``YYYY-MM-DD`` or full ISO date of the event in UTC.
    time_utc : str or None
        ``HH:MM`` time of the event in UTC.
    offset_hours : float
        Viewer's offset from UTC, e.g. ``5.5``.
    now_local : timestamp
        Viewer's current wall-clock time (naive).

    Returns
    -------
    Countdown
        Never raises: anything that fails to parse yields the unknown
        countdown.
    """
    if is_unscheduled(time_utc):
        return UNKNOWN_COUNTDOWN
    try:
        local_date, local_minutes = _localize(date_utc or "", time_utc, offset_hours)
        now = _as_wall_clock(now_local)
    except (ValueError, TypeError, OverflowError) as exc:
        logger.debug("Cannot compute countdown for %r %r: %s", date_utc, time_utc, exc)
        return UNKNOWN_COUNTDOWN

    hour, minute = divmod(local_minutes, 60)
    local_time = f"{hour:02d}:{minute:02d}"
    event_at = pd.Timestamp(datetime.combine(local_date, time(hour, minute)))
    diff_seconds = (now - event_at).total_seconds()

    if diff_seconds > 0:
        return Countdown(math.inf, PASSED_LABEL, CountdownStatus.PASSED, local_date, local_time)

    total_minutes = int(math.floor(-diff_seconds / 60))
    return Countdown(
        minutes_until=total_minutes,
        label=format_time_left(total_minutes),
        status=CountdownStatus.UPCOMING,
        local_date=local_date,
        local_time=local_time,
    )


def convert_utc_time(time_utc: Optional[str], offset_hours: float) -> Optional[str]:
    """Local ``HH:MM`` for a UTC ``HH:MM``, or ``None`` when there is no clock time."""
    if is_unscheduled(time_utc):
        return None
    try:
        t = parse_time_str(time_utc)
    except ValueError:
        return None
    local = (t.hour * 60 + t.minute + offset_minutes(offset_hours)) % MINUTES_PER_DAY
    return f"{local // 60:02d}:{local % 60:02d}"


def local_event_date(date_utc: Optional[str], time_utc: Optional[str], offset_hours: float) -> Optional[date]:
    """Calendar date an event falls on for the viewer.

    Unscheduled events keep their UTC date; unparseable dates give ``None``.
    """
    try:
        utc_date = parse_utc_date(date_utc or "")
    except (ValueError, TypeError, OverflowError):
        return None
    if is_unscheduled(time_utc):
        return utc_date
    try:
        return _localize(date_utc or "", time_utc, offset_hours)[0]
    except ValueError:
        return utc_date


def sort_by_countdown(
    events: Iterable[CalendarEvent],
    offset_hours: float,
    now_local: TimestampLike,
) -> List[Tuple[CalendarEvent, Countdown]]:
    """Pair each event with its countdown, soonest first.

    Passed and unknown events keep their relative order at the end.
    """
    rows = [(ev, time_until(ev.date_utc, ev.time_utc, offset_hours, now_local)) for ev in events]
    return sorted(rows, key=lambda row: row[1].minutes_until)


def group_by_local_date(
    events: Iterable[CalendarEvent],
    offset_hours: float,
) -> Dict[Optional[date], List[CalendarEvent]]:
    """Group events by the calendar date they fall on for a viewer at `offset_hours`."""
    groups: Dict[Optional[date], List[CalendarEvent]] = {}
    for ev in events:
        key = local_event_date(ev.date_utc, ev.time_utc, offset_hours)
        groups.setdefault(key, []).append(ev)
    return groups
