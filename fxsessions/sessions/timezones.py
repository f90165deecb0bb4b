"""
Fixed-offset timezone table.

Viewers pick a timezone by its abbreviation; only the numeric offset
is used afterwards.  Abbreviations are ambiguous (``IST``, ``CST``), so
the first entry in table order wins a label lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Timezone:
    label: str
    offset: float


TIMEZONES: List[Timezone] = [
    Timezone("UTC", 0),
    Timezone("GMT", 0),
    Timezone("EST", -5),
    # Europe
    Timezone("WET", 0),
    Timezone("WEST", 1),
    Timezone("CET", 1),
    Timezone("CEST", 2),
    Timezone("EET", 2),
    Timezone("EEST", 3),
    Timezone("BST", 1),
    Timezone("MSK", 3),
    # Asia
    Timezone("IST", 5.5),
    Timezone("PKT", 5),
    Timezone("BDT", 6),
    Timezone("ICT", 7),
    Timezone("WIB", 7),
    Timezone("CST", 8),
    Timezone("HKT", 8),
    Timezone("SGT", 8),
    Timezone("JST", 9),
    Timezone("KST", 9),
    # Americas
    Timezone("PST", -8),
    Timezone("PDT", -7),
    Timezone("MST", -7),
    Timezone("MDT", -6),
    Timezone("CDT", -5),
    Timezone("EDT", -4),
    Timezone("VET", -4),
    Timezone("ART", -3),
    Timezone("BRT", -3),
    # Africa and Middle East
    Timezone("WAT", 1),
    Timezone("CAT", 2),
    Timezone("SAST", 2),
    Timezone("EAT", 3),
    Timezone("AST", 3),
    Timezone("IRST", 3.5),
    Timezone("GST", 4),
    # Oceania
    Timezone("AWST", 8),
    Timezone("ACST", 9.5),
    Timezone("AEST", 10),
    Timezone("ACSST", 10.5),
    Timezone("AEDT", 11),
    Timezone("NZST", 12),
    Timezone("NZDT", 13),
]


def find_timezone(label: str) -> Optional[Timezone]:
    """Look up a timezone by abbreviation, ignoring case."""
    wanted = label.strip().upper()
    for tz in TIMEZONES:
        if tz.label.upper() == wanted:
            return tz
    return None


def match_offset(offset: float, tolerance: float = 0.1) -> Optional[Timezone]:
    """First table entry whose offset is within `tolerance` hours of `offset`."""
    for tz in TIMEZONES:
        if abs(tz.offset - offset) < tolerance:
            return tz
    return None
