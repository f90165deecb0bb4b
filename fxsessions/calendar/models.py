"""
Economic calendar event records.

Events come from an external calendar service keyed by UTC date and
time.  They are read-only here: the countdown calculator only looks at
``date_utc`` and ``time_utc``, and `filter_events` only filters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional


def _optional_str(value: Any) -> Optional[str]:
    # pandas hands missing CSV cells over as NaN floats
    if value is None or (isinstance(value, float) and value != value):
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CalendarEvent:
    """A single economic release."""
    id: str
    date_utc: str
    time_utc: Optional[str]
    currency: str = ""
    impact: str = ""
    event: str = ""
    previous: Optional[str] = None
    forecast: Optional[str] = None
    actual: Optional[str] = None
    actual_status: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], default_id: Any = None) -> "CalendarEvent":
        """Build an event from an API row.

        Upstream rows carry ``date_utc`` / ``time_utc``; older exports
        only have ``date`` / ``time``, which are then taken as UTC.

        Raises
        ------
        ValueError
            If the row has no date at all.
        """
        date_utc = _optional_str(raw.get("date_utc")) or _optional_str(raw.get("date"))
        if date_utc is None:
            raise ValueError(f"Calendar row has no date: {dict(raw)!r}")
        time_utc = _optional_str(raw.get("time_utc"))
        if time_utc is None:
            time_utc = _optional_str(raw.get("time"))
        event_id = _optional_str(raw.get("id")) or _optional_str(raw.get("event_uid"))
        if event_id is None:
            event_id = str(default_id) if default_id is not None else f"{date_utc}:{time_utc}"
        return cls(
            id=event_id,
            date_utc=date_utc,
            time_utc=time_utc,
            currency=(_optional_str(raw.get("currency")) or "").upper(),
            impact=(_optional_str(raw.get("impact")) or "").lower(),
            event=_optional_str(raw.get("event")) or "",
            previous=_optional_str(raw.get("previous")),
            forecast=_optional_str(raw.get("forecast")),
            actual=_optional_str(raw.get("actual")),
            actual_status=_optional_str(raw.get("actual_status")),
        )


def filter_events(
    events: Iterable[CalendarEvent],
    currency: Optional[str] = None,
    impact: Optional[str] = None,
) -> List[CalendarEvent]:
    """Keep events matching `currency` and `impact`; ``None`` matches everything."""
    result = []
    for ev in events:
        if currency and ev.currency != currency.upper():
            continue
        if impact and ev.impact.lower() != impact.lower():
            continue
        result.append(ev)
    return result
