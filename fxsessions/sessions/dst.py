"""
Daylight saving time for the main forex centres.

The session table is written in UTC for standard time.  While a centre
observes summer time its session opens and closes an hour earlier in
UTC.  Switch dates come from the published nth-Sunday rules, so no
timezone database is consulted:

* United States: second Sunday in March to first Sunday in November.
* United Kingdom / EU: last Sunday in March to last Sunday in October.
* Australia (Sydney): first Sunday in October to first Sunday in April.

Tokyo does not observe DST.  Rules are applied per calendar date, the
hour of the switch itself is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union
import pandas as pd

from .registry import SessionGroup, TimeWindow, default_registry
from ..utils.timeutils import TimestampLike, normalize_hour

logger = logging.getLogger(__name__)

DST_SHIFT_HOURS = -1.0

DateLike = Union[date, TimestampLike]


class Centre(Enum):
    SYDNEY = "sydney"
    TOKYO = "tokyo"
    LONDON = "london"
    NEW_YORK = "newyork"


# Group names of the built-in session table
DEFAULT_CENTRES: Dict[str, Centre] = {
    "Sydney": Centre.SYDNEY,
    "Asia": Centre.TOKYO,
    "London": Centre.LONDON,
    "New York": Centre.NEW_YORK,
}


def _as_day(day: DateLike) -> date:
    return pd.Timestamp(day).date()


def _nth_sunday(year: int, month: int, n: int) -> date:
    first = pd.Timestamp(year=year, month=month, day=1)
    return pd.date_range(first, periods=n, freq="W-SUN")[-1].date()


def _last_sunday(year: int, month: int) -> date:
    first = pd.Timestamp(year=year, month=month, day=1)
    sundays = pd.date_range(first, first + pd.offsets.MonthEnd(0), freq="W-SUN")
    return sundays[-1].date()


def is_us_dst(day: DateLike) -> bool:
    d = _as_day(day)
    return _nth_sunday(d.year, 3, 2) <= d < _nth_sunday(d.year, 11, 1)


def is_europe_dst(day: DateLike) -> bool:
    d = _as_day(day)
    return _last_sunday(d.year, 3) <= d < _last_sunday(d.year, 10)


def is_australia_dst(day: DateLike) -> bool:
    """Southern-hemisphere summer time, which spans the new year."""
    d = _as_day(day)
    return d >= _nth_sunday(d.year, 10, 1) or d < _nth_sunday(d.year, 4, 1)


def is_dst_active(day: DateLike) -> bool:
    """True while the US and Europe are both on summer time (mid-March to late October)."""
    return is_us_dst(day) and is_europe_dst(day)


_RULES: Dict[Centre, Callable[[DateLike], bool]] = {
    Centre.SYDNEY: is_australia_dst,
    Centre.LONDON: is_europe_dst,
    Centre.NEW_YORK: is_us_dst,
}


def session_shift(centre: Centre, day: DateLike) -> float:
    """UTC shift in hours for `centre`'s sessions on `day`: ``-1`` in summer time, else ``0``."""
    rule = _RULES.get(centre)
    if rule is not None and rule(day):
        return DST_SHIFT_HOURS
    return 0.0


def session_range_for(
    standard_range: Tuple[float, float],
    centre: Centre,
    day: DateLike,
) -> Tuple[float, float]:
    """Standard-time ``(start, end)`` UTC range adjusted for DST on `day`.

    The start stays within ``[0, 24)`` and the duration is unchanged, so
    London's ``(7, 16)`` becomes ``(6, 15)`` in July and a session
    starting at midnight becomes ``(23, 32)``.
    """
    start, end = standard_range
    shift = session_shift(centre, day)
    if shift == 0:
        return start, end
    new_start = normalize_hour(start + shift)
    return new_start, new_start + (end - start)


def shift_window(window: TimeWindow, hours: float) -> TimeWindow:
    start = normalize_hour(window.start_utc + hours)
    return replace(window, start_utc=start, end_utc=start + window.duration)


def registry_for(
    day: DateLike,
    groups: Optional[List[SessionGroup]] = None,
    centres: Optional[Dict[str, Centre]] = None,
) -> List[SessionGroup]:
    """Session groups with their windows moved for DST on `day`.

    Every window of a group (main, overlaps and killzones) moves with
    the group's centre.  Groups whose name is not in `centres` are left
    as they are.
    """
    if groups is None:
        groups = default_registry()
    if centres is None:
        centres = DEFAULT_CENTRES

    adjusted: List[SessionGroup] = []
    for group in groups:
        centre = centres.get(group.name)
        shift = session_shift(centre, day) if centre is not None else 0.0
        if shift == 0:
            adjusted.append(group)
            continue
        logger.debug("Shifting %s windows by %+g h for %s", group.name, shift, _as_day(day))
        adjusted.append(SessionGroup(
            name=group.name,
            main=shift_window(group.main, shift),
            overlaps=tuple(shift_window(w, shift) for w in group.overlaps),
            killzones=tuple(shift_window(w, shift) for w in group.killzones),
        ))
    return adjusted
