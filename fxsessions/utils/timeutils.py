"""
Time arithmetic helpers shared by the session and calendar modules.

Everything here works with fixed numeric UTC offsets expressed in hours
(``5.5`` for India, ``-4`` for New York in summer).  No timezone
database is consulted: a viewer's wall clock is simply UTC shifted by
the offset.
"""

from __future__ import annotations

import re
from datetime import datetime, time
from typing import Optional, Union
import pandas as pd

HOURS_PER_DAY = 24
MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")

TimestampLike = Union[pd.Timestamp, datetime, str]


def parse_time_str(ts: str) -> time:
    """Parse a `HH:MM` string into a `datetime.time` object.

    Parameters
    ----------
    ts : str
        A string in 24-hour format such as ``"06:30"`` or ``"9:30"``.
        A trailing seconds field (``"06:30:00"``) is accepted and ignored.

    Returns
    -------
    datetime.time
        The corresponding time.

    Raises
    ------
    ValueError
        If the string is not a valid 24-hour clock time.
    """
    match = _TIME_RE.match(ts or "")
    if match is None:
        raise ValueError(f"Not a HH:MM time: {ts!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour >= HOURS_PER_DAY or minute >= 60:
        raise ValueError(f"Clock time out of range: {ts!r}")
    return time(hour=hour, minute=minute)


def normalize_hour(value: float) -> float:
    """Reduce an hour value into ``[0, 24)``."""
    r = value % HOURS_PER_DAY
    # tiny negatives round up to exactly 24.0 under float modulo
    return 0.0 if r >= HOURS_PER_DAY else r


def offset_minutes(offset_hours: float) -> int:
    """Whole minutes for a fractional hour offset (``5.5`` -> ``330``)."""
    return int(round(offset_hours * 60))


def to_utc(ts: TimestampLike) -> pd.Timestamp:
    """Return `ts` as a UTC `pandas.Timestamp`.

    Naive timestamps are assumed to already be in UTC.
    """
    if not isinstance(ts, pd.Timestamp):
        ts = pd.Timestamp(ts)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def utc_hours(ts: TimestampLike) -> float:
    """Fractional hours since UTC midnight for `ts`.

    ``2024-01-01 13:45:30Z`` gives ``13.758333...``.
    """
    utc = to_utc(ts)
    return utc.hour + utc.minute / 60 + utc.second / 3600


def local_wall_clock(offset_hours: float, utc_now: Optional[TimestampLike] = None) -> pd.Timestamp:
    """Naive wall-clock time of a viewer at `offset_hours` from UTC.

    If `utc_now` is omitted the current time is used.
    """
    utc = to_utc(utc_now if utc_now is not None else pd.Timestamp.now(tz="UTC"))
    local = utc + pd.Timedelta(minutes=offset_minutes(offset_hours))
    return local.tz_localize(None)


def format_hours(hours: float) -> str:
    """Format fractional hours as ``HH:MM``, wrapping at midnight."""
    hours = normalize_hour(hours)
    whole = int(hours)
    minutes = int(round((hours - whole) * 60))
    if minutes == 60:
        whole, minutes = (whole + 1) % HOURS_PER_DAY, 0
    return f"{whole:02d}:{minutes:02d}"


def format_duration(seconds: float) -> str:
    """Format seconds as ``"{h}h {m}m {s}s"``; negative values keep a leading ``-``."""
    sign = "-" if seconds < 0 else ""
    total = int(abs(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{sign}{hours}h {minutes}m {secs}s"
