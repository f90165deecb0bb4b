"""
Session status evaluation.

Given the current UTC time (as fractional hours since midnight) this
module decides whether each session window is open, closed or about to
change.  A window that crosses midnight, such as Sydney's ``21 -> 30``,
is tested against its occurrence anchored to yesterday as well as the
one anchored to today, so ``03:00`` still falls inside the session that
opened at ``21:00`` the evening before.

The same windows also drive an alert schedule: four notifications per
window around its open and close, matched against "now" with a small
tolerance.

All functions are pure: callers pass "now" explicitly and may call at
any cadence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .registry import SessionGroup, TimeWindow, WindowCategory
from ..utils.timeutils import HOURS_PER_DAY, normalize_hour

WARNING_THRESHOLD_HOURS = 15 / 60

# Day shifts of a window's occurrences around "today": yesterday, today, tomorrow.
# The tomorrow shift only matters for distance_to_edge: it lets a window opening
# just after UTC midnight (say 00:05) raise its opening WARNING at 23:55.
_OCCURRENCE_SHIFTS = (-24.0, 0.0, 24.0)


class SessionState(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    WARNING = "WARNING"


@dataclass(frozen=True)
class EvaluatedStatus:
    """Status of one window at one instant.

    ``state`` refines ``is_active``: WARNING means closing soon when the
    window is active and opening soon when it is not.
    """
    window_id: str
    is_active: bool
    state: SessionState
    elapsed_seconds: float = 0.0
    remaining_seconds: float = 0.0
    seconds_until_open: Optional[float] = None

    @property
    def is_warning(self) -> bool:
        return self.state is SessionState.WARNING

    @property
    def is_closing_soon(self) -> bool:
        return self.is_warning and self.is_active

    @property
    def is_opening_soon(self) -> bool:
        return self.is_warning and not self.is_active

    @property
    def notable_state(self) -> Optional[SessionState]:
        """The state, or ``None`` for a window that is simply closed."""
        return None if self.state is SessionState.CLOSED else self.state


@dataclass(frozen=True)
class ActiveWindow:
    """A window that is open or about to open, with its owning group."""
    group: str
    window: TimeWindow
    status: EvaluatedStatus

    @property
    def category(self) -> WindowCategory:
        return self.window.category


def occurrence_contains(start: float, end: float, now: float) -> bool:
    """True if `now` lies in ``[start, end)`` shifted by yesterday or today.

    `now` is expected within ``[0, 24)`` and `start` within ``[0, 24)``,
    so the occurrence anchored to tomorrow can never contain it.
    """
    return any(start + shift <= now < end + shift for shift in _OCCURRENCE_SHIFTS)


def distance_to_edge(window: TimeWindow, now: float, edge: str) -> Optional[float]:
    """Hours from `now` until the next ``"start"`` or ``"end"`` of `window`.

    Looks across the window's occurrences anchored to yesterday, today
    and tomorrow and returns the smallest strictly positive distance.
    """
    if edge == "start":
        anchor = window.start_utc
    elif edge == "end":
        anchor = window.end_utc
    else:
        raise ValueError(f"edge must be 'start' or 'end', got {edge!r}")
    distances = [anchor + shift - now for shift in _OCCURRENCE_SHIFTS]
    upcoming = [d for d in distances if d > 0]
    return min(upcoming) if upcoming else None


def evaluate(
    window: TimeWindow,
    now_utc_hours: float,
    warning_hours: float = WARNING_THRESHOLD_HOURS,
) -> EvaluatedStatus:
    """Classify `window` at `now_utc_hours`.

    Start is inclusive and end exclusive.  A window within
    `warning_hours` of closing (while active) or opening (while
    inactive) is reported as WARNING.  Full-day windows never close, so
    they are always OPEN.
    """
    now = normalize_hour(now_utc_hours)
    is_active = occurrence_contains(window.start_utc, window.end_utc, now)

    if is_active:
        to_close = distance_to_edge(window, now, "end")
        remaining = to_close if to_close is not None else 0.0
        state = SessionState.OPEN
        if window.duration < 24 and to_close is not None and to_close <= warning_hours:
            state = SessionState.WARNING
        return EvaluatedStatus(
            window_id=window.id,
            is_active=True,
            state=state,
            elapsed_seconds=(window.duration - remaining) * 3600,
            remaining_seconds=remaining * 3600,
        )

    to_open = distance_to_edge(window, now, "start")
    state = SessionState.CLOSED
    if to_open is not None and to_open <= warning_hours:
        state = SessionState.WARNING
    return EvaluatedStatus(
        window_id=window.id,
        is_active=False,
        state=state,
        seconds_until_open=to_open * 3600 if to_open is not None else None,
    )


def evaluate_groups(
    groups: Iterable[SessionGroup],
    now_utc_hours: float,
    warning_hours: float = WARNING_THRESHOLD_HOURS,
) -> List[ActiveWindow]:
    """Every window that is open or about to open, in registry order."""
    active: List[ActiveWindow] = []
    for group in groups:
        for window in group.windows:
            status = evaluate(window, now_utc_hours, warning_hours)
            if status.notable_state is not None:
                active.append(ActiveWindow(group=group.name, window=window, status=status))
    return active


def session_status_map(
    groups: Iterable[SessionGroup],
    now_utc_hours: float,
    warning_hours: float = WARNING_THRESHOLD_HOURS,
) -> Dict[str, SessionState]:
    """State of each group's main window keyed by group name."""
    return {
        group.name: evaluate(group.main, now_utc_hours, warning_hours).state
        for group in groups
    }


ALERT_TOLERANCE_HOURS = 1 / 60


class AlertKind(Enum):
    OPEN_BEFORE = "open-before"
    OPEN = "open"
    CLOSE_BEFORE = "close-before"
    CLOSE = "close"

    @property
    def is_opening(self) -> bool:
        return self in (AlertKind.OPEN_BEFORE, AlertKind.OPEN)


@dataclass(frozen=True)
class SessionAlert:
    """A scheduled notification for one edge of one window.

    ``trigger_utc`` is in UTC hours on the window's own scale, so it can
    fall below 0 or past 24 for windows near midnight.
    """
    id: str
    group: str
    window_id: str
    kind: AlertKind
    trigger_utc: float
    message: str
    color: str = ""

    @property
    def title(self) -> str:
        return "Opening Alert" if self.kind.is_opening else "Closing Alert"

    def fired_key(self, now_utc_hours: float) -> str:
        """De-duplication key: an alert fires at most once per UTC hour."""
        return f"{self.id}_{int(math.floor(normalize_hour(now_utc_hours)))}"


def alert_events(
    groups: Iterable[SessionGroup],
    lead_hours: float = WARNING_THRESHOLD_HOURS,
) -> List[SessionAlert]:
    """Four alerts per window: before open, open, before close and close."""
    lead_minutes = int(round(lead_hours * 60))
    alerts: List[SessionAlert] = []
    for group in groups:
        for window in group.windows:
            schedule = (
                (AlertKind.OPEN_BEFORE, window.start_utc - lead_hours,
                 f"{window.name} opens in {lead_minutes} minutes"),
                (AlertKind.OPEN, window.start_utc, f"{window.name} is now open"),
                (AlertKind.CLOSE_BEFORE, window.end_utc - lead_hours,
                 f"{window.name} closes in {lead_minutes} minutes"),
                (AlertKind.CLOSE, window.end_utc, f"{window.name} is now closed"),
            )
            for kind, trigger, message in schedule:
                alerts.append(SessionAlert(
                    id=f"{group.name}_{window.id}_{kind.value}",
                    group=group.name,
                    window_id=window.id,
                    kind=kind,
                    trigger_utc=trigger,
                    message=message,
                    color=window.color,
                ))
    return alerts


def hours_apart(a: float, b: float) -> float:
    """Distance between two times of day on the 24-hour circle."""
    gap = abs(normalize_hour(a) - normalize_hour(b))
    return min(gap, HOURS_PER_DAY - gap)


def due_alerts(
    groups: Iterable[SessionGroup],
    now_utc_hours: float,
    tolerance: float = ALERT_TOLERANCE_HOURS,
    lead_hours: float = WARNING_THRESHOLD_HOURS,
) -> List[SessionAlert]:
    """Alerts whose trigger lies within `tolerance` hours of now, either side."""
    return [
        alert for alert in alert_events(groups, lead_hours)
        if hours_apart(alert.trigger_utc, now_utc_hours) <= tolerance
    ]
