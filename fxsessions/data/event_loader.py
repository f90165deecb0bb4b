"""
Calendar event file loader.

The calendar service lives elsewhere; for offline use its responses can
be saved to disk and loaded here.  Two formats are understood:

* JSON, either a bare list of rows or the service's response envelope
  ``{"success": true, "data": [...]}``.
* CSV with a header row.  The columns follow the service's field
  names:

```
id,date_utc,time_utc,currency,impact,event,actual,forecast,previous
```

Only ``date_utc`` (or ``date``) is required.  Rows that cannot be
turned into events are skipped with a warning so one bad row never
hides the rest of the calendar.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List
import pandas as pd

from ..calendar.models import CalendarEvent

logger = logging.getLogger(__name__)


class EventFileLoader:
    """Load calendar events from a JSON or CSV export.

    Parameters
    ----------
    path : str
        File to read.  The format is picked from the suffix (``.json``
        or ``.csv``).
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def _read_rows(self) -> List[Dict[str, Any]]:
        suffix = self.path.suffix.lower()
        if suffix == ".json":
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
            if isinstance(payload, dict):
                payload = payload.get("data", payload.get("events"))
            if not isinstance(payload, list):
                raise ValueError(f"No event list found in {self.path}")
            return [row for row in payload if isinstance(row, dict)]
        if suffix == ".csv":
            # Read everything as text so "08:30" and "0.5%" survive untouched
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
            df.columns = [c.strip() for c in df.columns]
            return df.to_dict(orient="records")
        raise ValueError(f"Unsupported calendar file format: {self.path.suffix!r}")

    def load(self) -> List[CalendarEvent]:
        """Read the file and return its events in file order.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ValueError
            If the file format is not recognised.
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Calendar file not found: {self.path}")

        events: List[CalendarEvent] = []
        rows = self._read_rows()
        for idx, row in enumerate(rows):
            try:
                events.append(CalendarEvent.from_dict(row, default_id=idx))
            except ValueError as exc:
                logger.warning("Skipping calendar row %d in %s: %s", idx, self.path, exc)
        logger.info("Loaded %d of %d calendar rows from %s", len(events), len(rows), self.path)
        return events
