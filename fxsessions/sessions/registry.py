"""
Trading session registry.

This module holds the static table of named UTC time windows: one main
window per geographic session (Sydney, Asia, London, New York) plus the
overlap and killzone sub-windows that belong to it.  Windows are plain
immutable values; the status evaluator and the timeline projector only
ever read them.

Hours are counted from UTC midnight and may be fractional.  A window
whose end exceeds 24 crosses midnight, so ``21 -> 30`` runs from 21:00
today to 06:00 tomorrow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class InvalidWindowError(ValueError):
    """Raised when a time window definition cannot describe a real session."""


class WindowCategory(Enum):
    MAIN = "main"
    OVERLAP = "overlap"
    KILLZONE = "killzone"

    @property
    def y_level(self) -> int:
        """Row on the timeline chart: main sessions on top, killzones at the bottom."""
        return _Y_LEVELS[self]


_Y_LEVELS = {
    WindowCategory.MAIN: 0,
    WindowCategory.OVERLAP: 1,
    WindowCategory.KILLZONE: 2,
}


@dataclass(frozen=True)
class Tooltip:
    """Descriptive text shown next to a window."""
    title: str = ""
    volatility: str = ""
    best_pairs: str = ""
    strategy: str = ""


@dataclass(frozen=True)
class TimeWindow:
    """A named UTC time range.

    Attributes
    ----------
    id : str
        Stable key such as ``"london_session"``.
    name : str
        Display name.
    start_utc : float
        Start in hours since UTC midnight, within ``[0, 24)``.
    end_utc : float
        End in hours since UTC midnight.  May exceed 24 for windows that
        cross midnight.  The end is exclusive.
    category : WindowCategory
        Main session, overlap or killzone.
    session : str
        Name of the session group that owns the window.
    """

    id: str
    name: str
    start_utc: float
    end_utc: float
    category: WindowCategory = WindowCategory.MAIN
    session: str = ""
    color: str = ""
    opacity: float = 0.7
    tooltip: Tooltip = field(default_factory=Tooltip)

    def __post_init__(self) -> None:
        if not 0 <= self.start_utc < 24:
            raise InvalidWindowError(
                f"Window {self.id!r} must start within [0, 24) UTC hours, got {self.start_utc}"
            )
        if self.duration <= 0:
            raise InvalidWindowError(
                f"Window {self.id!r} has non-positive duration ({self.start_utc} -> {self.end_utc})"
            )
        if self.duration > 24:
            raise InvalidWindowError(
                f"Window {self.id!r} is longer than a day ({self.start_utc} -> {self.end_utc})"
            )

    @property
    def duration(self) -> float:
        return self.end_utc - self.start_utc

    @property
    def wraps_midnight(self) -> bool:
        return self.end_utc > 24


@dataclass(frozen=True)
class SessionGroup:
    """A geographic session: its main window plus overlap and killzone windows."""
    name: str
    main: TimeWindow
    overlaps: Tuple[TimeWindow, ...] = ()
    killzones: Tuple[TimeWindow, ...] = ()

    @property
    def windows(self) -> Iterator[TimeWindow]:
        yield self.main
        yield from self.overlaps
        yield from self.killzones


def _window_from_dict(session: str, raw: Dict[str, Any], category: WindowCategory) -> TimeWindow:
    if "key" not in raw:
        raise InvalidWindowError(f"Window in session {session!r} has no key")
    try:
        start, end = raw["range"]
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidWindowError(
            f"Window {raw['key']!r} in session {session!r} needs a [start, end] range"
        ) from exc
    name = str(raw.get("name", raw["key"]))
    tip = raw.get("tooltip") or {}
    return TimeWindow(
        id=str(raw["key"]),
        name=name,
        start_utc=float(start),
        end_utc=float(end),
        category=category,
        session=session,
        color=str(raw.get("color", "")),
        opacity=float(raw.get("opacity", 0.7)),
        tooltip=Tooltip(
            title=str(tip.get("title", name)),
            volatility=str(tip.get("volatility", "")),
            best_pairs=str(tip.get("best_pairs", tip.get("bestPairs", ""))),
            strategy=str(tip.get("strategy", "")),
        ),
    )


def group_from_dict(raw: Dict[str, Any]) -> SessionGroup:
    """Build a `SessionGroup` from a configuration mapping.

    The mapping has a ``name``, a ``main`` window and optional
    ``overlaps`` / ``killzones`` lists.  Each window is a mapping with
    ``key``, ``name``, ``range`` (``[start, end]`` in UTC hours) and
    optional ``color``, ``opacity`` and ``tooltip``.

    Raises
    ------
    InvalidWindowError
        If any window is malformed.
    """
    name = str(raw["name"])
    if "main" not in raw:
        raise InvalidWindowError(f"Session {name!r} has no main window")
    main = _window_from_dict(name, raw["main"], WindowCategory.MAIN)
    overlaps = tuple(_window_from_dict(name, w, WindowCategory.OVERLAP) for w in raw.get("overlaps") or [])
    killzones = tuple(_window_from_dict(name, w, WindowCategory.KILLZONE) for w in raw.get("killzones") or [])
    return SessionGroup(name=name, main=main, overlaps=overlaps, killzones=killzones)


def build_registry(raw_groups: List[Dict[str, Any]]) -> List[SessionGroup]:
    """Validate and build every session group, rejecting duplicate window keys."""
    groups = [group_from_dict(raw) for raw in raw_groups]
    seen: Dict[str, str] = {}
    for group in groups:
        for window in group.windows:
            if window.id in seen:
                raise InvalidWindowError(
                    f"Window key {window.id!r} used by both {seen[window.id]!r} and {group.name!r}"
                )
            seen[window.id] = group.name
    logger.debug("Loaded %d session groups with %d windows", len(groups), len(seen))
    return groups


def find_window(groups: List[SessionGroup], window_id: str) -> Optional[TimeWindow]:
    for group in groups:
        for window in group.windows:
            if window.id == window_id:
                return window
    return None


DEFAULT_SESSIONS: List[Dict[str, Any]] = [
    {
        "name": "Sydney",
        "main": {
            "key": "sydney_session",
            "name": "Sydney Session",
            "range": [21, 30],  # 21:00 to 06:00 UTC
            "color": "hsl(195, 74%, 62%)",
            "opacity": 0.7,
            "tooltip": {
                "title": "Sydney Session",
                "volatility": "Low",
                "best_pairs": "AUD/USD, AUD/JPY",
                "strategy": "Range trading, breakouts during session open.",
            },
        },
    },
    {
        "name": "Asia",
        "main": {
            "key": "tokyo_session",
            "name": "Asian Session (Tokyo)",
            "range": [23, 32],  # 23:00 to 08:00 UTC
            "color": "hsl(320, 82%, 60%)",
            "opacity": 0.7,
            "tooltip": {
                "title": "Asian Session (Tokyo)",
                "volatility": "Low-Medium",
                "best_pairs": "USD/JPY, GBP/JPY",
                "strategy": "Follow JPY pairs, watch for Bank of Japan announcements.",
            },
        },
    },
    {
        "name": "London",
        "main": {
            "key": "london_session",
            "name": "London Session",
            "range": [7, 16],
            "color": "hsl(45, 100%, 50%)",
            "opacity": 0.7,
            "tooltip": {
                "title": "London Session",
                "volatility": "High",
                "best_pairs": "EUR/USD, GBP/USD",
                "strategy": "High volume, focus on breakouts and trend-following.",
            },
        },
        "overlaps": [
            {
                "key": "asia_london_overlap",
                "name": "Asia-London Overlap",
                "range": [7, 8],
                "color": "hsl(255, 80%, 70%)",
                "opacity": 0.9,
                "tooltip": {
                    "title": "Asia-London Overlap",
                    "volatility": "High",
                    "best_pairs": "GBP/JPY, EUR/JPY",
                    "strategy": "Trend continuation from Asia or reversals as London volume enters.",
                },
            },
        ],
        "killzones": [
            {
                "key": "london_killzone",
                "name": "London Killzone",
                "range": [6, 9],
                "color": "hsl(0, 80%, 60%)",
                "opacity": 0.8,
                "tooltip": {
                    "title": "London Killzone (LKZ)",
                    "volatility": "Very High",
                    "best_pairs": "EUR/USD, GBP/USD",
                    "strategy": "Liquidity grabs above/below the Asian range, then a reversal.",
                },
            },
        ],
    },
    {
        "name": "New York",
        "main": {
            "key": "ny_session",
            "name": "New York Session",
            "range": [12, 21],
            "color": "hsl(120, 60%, 50%)",
            "opacity": 0.7,
            "tooltip": {
                "title": "New York Session",
                "volatility": "High",
                "best_pairs": "USD Majors",
                "strategy": "Key economic data releases. Trade the news or wait for post-news trends.",
            },
        },
        "overlaps": [
            {
                "key": "london_ny_overlap",
                "name": "London-NY Overlap",
                "range": [12, 16],
                "color": "hsl(20, 100%, 60%)",
                "opacity": 0.9,
                "tooltip": {
                    "title": "London-NY Overlap",
                    "volatility": "Very High",
                    "best_pairs": "EUR/USD, USD/JPY, GBP/USD",
                    "strategy": "Highest liquidity period. Breakouts and short-term trend following.",
                },
            },
        ],
        "killzones": [
            {
                "key": "ny_am_killzone",
                "name": "NY AM Killzone",
                "range": [11, 14],
                "color": "hsl(0, 80%, 60%)",
                "opacity": 0.8,
                "tooltip": {
                    "title": "NY AM Killzone",
                    "volatility": "Very High",
                    "best_pairs": "USD Majors, Indices (US30, NAS100)",
                    "strategy": "Manipulation moves around the NY open before the true move.",
                },
            },
            {
                "key": "ny_pm_killzone",
                "name": "NY PM Killzone",
                "range": [17, 19],
                "color": "hsl(0, 60%, 55%)",
                "opacity": 0.6,
                "tooltip": {
                    "title": "NY PM Killzone",
                    "volatility": "Medium",
                    "best_pairs": "USD Majors",
                    "strategy": "Reversal or retracement as London closes and profits are taken.",
                },
            },
        ],
    },
]


def default_registry() -> List[SessionGroup]:
    """The built-in Sydney / Asia / London / New York table."""
    return build_registry(DEFAULT_SESSIONS)
