"""
Projection of session windows onto a 24-hour local timeline.

The timeline runs from local midnight (0 %) to the next local midnight
(100 %).  A window shifted into the viewer's timezone may run past the
right edge; it is then split into a block ending at 100 % and a
residual block starting at 0 %.  Positions are percentages only, pixel
layout belongs to whoever draws the chart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from .registry import SessionGroup, TimeWindow, WindowCategory
from ..utils.timeutils import HOURS_PER_DAY, format_hours, normalize_hour, parse_time_str

# Residual blocks no wider than this (in hours) are floating-point leftovers, not time.
SLIVER_EPSILON_HOURS = 0.001


@dataclass(frozen=True)
class TimelineBlock:
    """One renderable slice of a window."""
    key: str
    window_id: str
    session: str
    left_percent: float
    width_percent: float
    y_level: int
    segment: int = 1

    @property
    def right_percent(self) -> float:
        return self.left_percent + self.width_percent


def _percent(hours: float) -> float:
    return hours / HOURS_PER_DAY * 100


def project(
    window: TimeWindow,
    offset_hours: float,
    epsilon: float = SLIVER_EPSILON_HOURS,
) -> List[TimelineBlock]:
    """Project `window` onto the timeline of a viewer at `offset_hours`.

    Returns one block, or two when the shifted window crosses local
    midnight.  The second block is dropped when its width does not
    exceed `epsilon` hours.
    """
    duration = window.duration
    adjusted_start = normalize_hour(window.start_utc + offset_hours)
    adjusted_end = adjusted_start + duration
    y_level = window.category.y_level

    def block(segment: int, left_hours: float, width_hours: float) -> TimelineBlock:
        return TimelineBlock(
            key=f"{window.id}_{segment}",
            window_id=window.id,
            session=window.session,
            left_percent=_percent(left_hours),
            width_percent=_percent(width_hours),
            y_level=y_level,
            segment=segment,
        )

    if adjusted_end <= HOURS_PER_DAY:
        return [block(1, adjusted_start, duration)]

    blocks = [block(1, adjusted_start, HOURS_PER_DAY - adjusted_start)]
    residual = adjusted_end - HOURS_PER_DAY
    if residual > epsilon:
        blocks.append(block(2, 0.0, residual))
    return blocks


def build_timeline(
    groups: Iterable[SessionGroup],
    offset_hours: float,
    layers: Optional[Set[WindowCategory]] = None,
) -> List[TimelineBlock]:
    """Blocks for every window of every group.

    `layers` restricts the output to the given categories; ``None``
    keeps all of them.
    """
    blocks: List[TimelineBlock] = []
    for group in groups:
        for window in group.windows:
            if layers is not None and window.category not in layers:
                continue
            blocks.extend(project(window, offset_hours))
    return blocks


def now_line_percent(now_utc_hours: float, offset_hours: float) -> float:
    """Position of the "now" marker on the local timeline."""
    return _percent(normalize_hour(now_utc_hours + offset_hours))


def event_position_percent(time_utc: Optional[str], offset_hours: float) -> Optional[float]:
    """Position of a calendar event on the local timeline, or ``None`` if its time is not a clock time."""
    try:
        t = parse_time_str(time_utc or "")
    except ValueError:
        return None
    return now_line_percent(t.hour + t.minute / 60, offset_hours)


def local_range_label(window: TimeWindow, offset_hours: float) -> str:
    """``"HH:MM - HH:MM"`` of the window in the viewer's timezone."""
    start = format_hours(window.start_utc + offset_hours)
    end = format_hours(window.end_utc + offset_hours)
    return f"{start} - {end}"
