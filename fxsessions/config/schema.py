"""
Viewer, status, calendar and session-table settings.

A ``config.yaml`` has four optional top-level sections:

``display``
    The viewer's timezone, as a label from the timezone table or an
    explicit ``offset`` in hours.
``status``
    The WARNING lead time in minutes, and ``adjust_dst`` to move the
    London, New York and Sydney windows for daylight saving time.
``calendar``
    The event export to read, the named date range and the
    currency / impact filters.
``sessions``
    A replacement session table.  When it is absent the built-in
    Sydney / Asia / London / New York table is used.

Anything left out falls back to the defaults of the dataclasses below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any
import yaml

from ..sessions.registry import SessionGroup, build_registry, default_registry
from ..sessions.timezones import find_timezone

logger = logging.getLogger(__name__)


@dataclass
class DisplayConfig:
    """Viewer timezone.

    Attributes
    ----------
    timezone : str
        Abbreviation from the timezone table (``"UTC"``, ``"IST"``, ``"JST"``).
    offset : float, optional
        Explicit offset from UTC in hours.  Takes precedence over
        `timezone` when set, which allows offsets missing from the table.
    """

    timezone: str = "UTC"
    offset: Optional[float] = None


@dataclass
class StatusConfig:
    """Session status evaluation.

    Attributes
    ----------
    warning_minutes : float
        How close to an open or close a window is flagged as WARNING.
    adjust_dst : bool
        Shift the London, New York and Sydney windows one hour earlier
        while their centre observes daylight saving time.
    """

    warning_minutes: float = 15.0
    adjust_dst: bool = False


@dataclass
class CalendarConfig:
    """Economic calendar input and filters.

    Attributes
    ----------
    events_file : str
        JSON or CSV export of calendar events.
    range : str
        Named date range such as ``thisWeek`` or ``nextMonth``.
    currency : str, optional
        Only show events for this currency.
    impact : str, optional
        Only show events with this impact (``high``, ``medium``, ``low``).
    """

    events_file: str = "data/events.json"
    range: str = "thisWeek"
    currency: Optional[str] = None
    impact: Optional[str] = None


@dataclass
class Config:
    """Root configuration.

    Attributes
    ----------
    display : DisplayConfig
        Viewer timezone.
    status : StatusConfig
        Status evaluation settings.
    calendar : CalendarConfig
        Calendar input and filters.
    sessions : list of SessionGroup
        Session table.  Defaults to the built-in Sydney / Asia / London /
        New York windows.
    """

    display: DisplayConfig = field(default_factory=DisplayConfig)
    status: StatusConfig = field(default_factory=StatusConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    sessions: List[SessionGroup] = field(default_factory=default_registry)

    @property
    def offset_hours(self) -> float:
        """Viewer offset from UTC in hours.

        Raises
        ------
        ValueError
            If no explicit offset is set and the timezone label is unknown.
        """
        if self.display.offset is not None:
            return float(self.display.offset)
        tz = find_timezone(self.display.timezone)
        if tz is None:
            raise ValueError(f"Unknown timezone label {self.display.timezone!r}")
        return tz.offset

    @property
    def warning_hours(self) -> float:
        return self.status.warning_minutes / 60


def _merge_dict(defaults: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries.

    The values in `override` take precedence over those in `defaults`.
    This helper is used when loading YAML into nested dataclasses.
    """
    result: Dict[str, Any] = defaults.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def config_from_dict(raw: Dict[str, Any]) -> Config:
    """Build a `Config` from an already parsed mapping.

    Raises
    ------
    InvalidWindowError
        If a custom session table contains an invalid window.
    """
    # Build nested dictionaries representing the default dataclasses
    defaults: Dict[str, Any] = {
        'display': {
            'timezone': "UTC",
            'offset': None,
        },
        'status': {
            'warning_minutes': 15.0,
            'adjust_dst': False,
        },
        'calendar': {
            'events_file': "data/events.json",
            'range': "thisWeek",
            'currency': None,
            'impact': None,
        },
        'sessions': None,
    }

    merged = _merge_dict(defaults, raw)

    display = merged['display']
    display_cfg = DisplayConfig(
        timezone=str(display.get('timezone') or "UTC"),
        offset=float(display['offset']) if display.get('offset') is not None else None,
    )
    status = merged['status']
    status_cfg = StatusConfig(
        warning_minutes=float(status.get('warning_minutes', 15.0)),
        adjust_dst=bool(status.get('adjust_dst', False)),
    )
    calendar_cfg = CalendarConfig(**merged['calendar'])

    sessions = merged.get('sessions')
    groups = build_registry(sessions) if sessions else default_registry()

    return Config(
        display=display_cfg,
        status=status_cfg,
        calendar=calendar_cfg,
        sessions=groups,
    )


def load_config(path: Optional[str]) -> Config:
    """Load a configuration file from the given YAML path.

    Parameters
    ----------
    path : str or None
        Path to the YAML file.  ``None`` or a missing file gives the
        default configuration.

    Returns
    -------
    Config
        A populated configuration object.  Missing fields are filled with
        sensible defaults defined in the dataclasses.
    """
    if path is None or not Path(path).exists():
        logger.info("No configuration file at %s, using defaults", path)
        return config_from_dict({})
    with open(path, "r", encoding="utf-8") as fh:
        raw: Dict[str, Any] = yaml.safe_load(fh) or {}
    return config_from_dict(raw)
