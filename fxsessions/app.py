"""
Application entry point.

This module defines a simple command-line interface over the session
and calendar engine.  It loads the configuration, works out "now" for
the chosen timezone and prints one of four views: live session status,
the projected 24-hour timeline, the session alert schedule, or calendar
event countdowns.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional
import pandas as pd

from .calendar.countdown import local_event_date, sort_by_countdown
from .calendar.date_range import local_today, resolve
from .calendar.models import filter_events
from .config.schema import Config, load_config
from .data.event_loader import EventFileLoader
from .reporting.report import alerts_frame, calendar_frame, render_table, status_frame, timeline_frame
from .sessions.dst import registry_for
from .sessions.status import session_status_map
from .sessions.timeline import build_timeline, now_line_percent
from .sessions.timezones import match_offset
from .utils.timeutils import local_wall_clock, to_utc, utc_hours

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def show_status(config: Config, now_utc: pd.Timestamp) -> str:
    hours = utc_hours(now_utc)
    summary = session_status_map(config.sessions, hours, config.warning_hours)
    logger.info("Sessions: %s", ", ".join(f"{name}={state.value}" for name, state in summary.items()))
    df = status_frame(config.sessions, hours, config.offset_hours, config.warning_hours)
    return render_table(df)


def show_timeline(config: Config, now_utc: pd.Timestamp) -> str:
    offset = config.offset_hours
    blocks = build_timeline(config.sessions, offset)
    marker = now_line_percent(utc_hours(now_utc), offset)
    return f"now at {marker:.2f}%\n{render_table(timeline_frame(blocks))}"


def show_alerts(config: Config, now_utc: pd.Timestamp) -> str:
    hours = utc_hours(now_utc)
    df = alerts_frame(config.sessions, hours, config.offset_hours, config.warning_hours)
    for message in df.loc[df['due'], 'message']:
        logger.info("Alert due: %s", message)
    return render_table(df)


def show_calendar(config: Config, now_utc: pd.Timestamp) -> str:
    offset = config.offset_hours
    date_range = resolve(None, config.calendar.range, local_today(offset, now_utc))
    logger.info("Calendar range %s: %s", config.calendar.range, date_range.as_params())

    events = EventFileLoader(config.calendar.events_file).load()
    events = filter_events(events, config.calendar.currency, config.calendar.impact)
    in_range = []
    for ev in events:
        day = local_event_date(ev.date_utc, ev.time_utc, offset)
        if day is not None and day in date_range:
            in_range.append(ev)

    rows = sort_by_countdown(in_range, offset, local_wall_clock(offset, now_utc))
    return render_table(calendar_frame(rows, offset))


def main(argv: Optional[List[str]] = None) -> None:
    """Parse command-line arguments and print the requested view."""
    parser = argparse.ArgumentParser(description="Forex session and calendar clock")
    parser.add_argument('view', choices=['status', 'timeline', 'alerts', 'calendar'], help="What to show")
    parser.add_argument('--config', default='config.yaml', help="Path to configuration YAML file")
    parser.add_argument('--timezone', help="Timezone label, e.g. IST or JST")
    parser.add_argument('--offset', type=float, help="Offset from UTC in hours; overrides --timezone")
    parser.add_argument('--now', help="Evaluate at this UTC instant (ISO 8601) instead of the current time")
    parser.add_argument('--range', dest='date_range', help="Calendar date range, e.g. today or nextWeek")
    parser.add_argument('--events', help="Calendar events file (JSON or CSV)")
    parser.add_argument('--dst', action='store_true', help="Shift session hours for daylight saving time")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    config = load_config(args.config)
    # Override configuration from CLI if provided
    if args.timezone:
        config.display.timezone = args.timezone
        config.display.offset = None
    if args.offset is not None:
        config.display.offset = args.offset
    if args.date_range:
        config.calendar.range = args.date_range
    if args.events:
        config.calendar.events_file = args.events
    if args.dst:
        config.status.adjust_dst = True

    try:
        offset = config.offset_hours
    except ValueError as exc:
        parser.error(str(exc))

    now_utc = to_utc(args.now) if args.now else pd.Timestamp.now(tz="UTC")
    if config.status.adjust_dst:
        config.sessions = registry_for(now_utc, config.sessions)
    known = match_offset(offset)
    logger.info("Viewer offset %+g h (%s)", offset, known.label if known else "custom")

    if args.view == 'status':
        output = show_status(config, now_utc)
    elif args.view == 'timeline':
        output = show_timeline(config, now_utc)
    elif args.view == 'alerts':
        output = show_alerts(config, now_utc)
    else:
        output = show_calendar(config, now_utc)
    print(output)


if __name__ == '__main__':
    main()
