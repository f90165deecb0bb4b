"""
Tabular views of session status, timeline blocks, alerts and event countdowns.

The engine returns small dataclasses; this module lays them out as
`pandas.DataFrame` tables for the command line.  Keeping the layout in
one place makes it easy to add other output formats later.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Iterable, List, Tuple
import pandas as pd

from ..calendar.countdown import Countdown, convert_utc_time
from ..calendar.models import CalendarEvent
from ..sessions.registry import SessionGroup
from ..sessions.status import ALERT_TOLERANCE_HOURS, WARNING_THRESHOLD_HOURS, alert_events, evaluate, hours_apart
from ..sessions.timeline import TimelineBlock, local_range_label
from ..utils.timeutils import format_duration, format_hours

STATUS_COLUMNS = ["session", "window", "category", "state", "local_hours", "elapsed", "remaining", "opens_in"]
CALENDAR_COLUMNS = ["date", "time", "currency", "impact", "event", "countdown"]
ALERT_COLUMNS = ["local_time", "session", "window", "alert", "due", "message"]


def status_frame(
    groups: Iterable[SessionGroup],
    now_utc_hours: float,
    offset_hours: float,
    warning_hours: float = WARNING_THRESHOLD_HOURS,
) -> pd.DataFrame:
    """One row per window with its state and timing at `now_utc_hours`."""
    rows = []
    for group in groups:
        for window in group.windows:
            status = evaluate(window, now_utc_hours, warning_hours)
            rows.append({
                'session': group.name,
                'window': window.name,
                'category': window.category.value,
                'state': status.state.value,
                'local_hours': local_range_label(window, offset_hours),
                'elapsed': format_duration(status.elapsed_seconds) if status.is_active else "",
                'remaining': format_duration(status.remaining_seconds) if status.is_active else "",
                'opens_in': (
                    format_duration(status.seconds_until_open)
                    if status.seconds_until_open is not None else ""
                ),
            })
    return pd.DataFrame(rows, columns=STATUS_COLUMNS)


def timeline_frame(blocks: Iterable[TimelineBlock]) -> pd.DataFrame:
    """Timeline blocks with positions rounded for display."""
    df = pd.DataFrame([asdict(b) for b in blocks])
    if df.empty:
        return df
    return df.round({'left_percent': 2, 'width_percent': 2})


def calendar_frame(rows: List[Tuple[CalendarEvent, Countdown]], offset_hours: float) -> pd.DataFrame:
    """Events in countdown order with their local date and time."""
    records = []
    for ev, countdown in rows:
        records.append({
            'date': countdown.local_date.isoformat() if countdown.local_date else ev.date_utc,
            'time': convert_utc_time(ev.time_utc, offset_hours) or (ev.time_utc or ""),
            'currency': ev.currency,
            'impact': ev.impact,
            'event': ev.event,
            'countdown': countdown.label,
        })
    return pd.DataFrame(records, columns=CALENDAR_COLUMNS)


def alerts_frame(
    groups: Iterable[SessionGroup],
    now_utc_hours: float,
    offset_hours: float,
    warning_hours: float = WARNING_THRESHOLD_HOURS,
    tolerance: float = ALERT_TOLERANCE_HOURS,
) -> pd.DataFrame:
    """The day's alert schedule in local time, flagging alerts due now."""
    rows = []
    for alert in alert_events(groups, warning_hours):
        rows.append({
            'local_time': format_hours(alert.trigger_utc + offset_hours),
            'session': alert.group,
            'window': alert.window_id,
            'alert': alert.kind.value,
            'due': hours_apart(alert.trigger_utc, now_utc_hours) <= tolerance,
            'message': alert.message,
        })
    df = pd.DataFrame(rows, columns=ALERT_COLUMNS)
    return df.sort_values('local_time', kind='stable').reset_index(drop=True)


def render_table(df: pd.DataFrame) -> str:
    """Plain-text rendering of a table, or a placeholder when it is empty."""
    if df.empty:
        return "(no rows)"
    return df.to_string(index=False)
