"""Import caregiver availability from the scheduling system's weekly export.

Export cells look like::

    Available
    9:00:00 AM To 1:00:00 PM

    Available
    5:00:00 PM To 8:00:00 PM

and are converted into the ``"HH:MM - HH:MM"`` strings of an availability grid.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from carehire.schemas import WEEK_ORDER

log = logging.getLogger(__name__)

_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})(?::\d{2})?\s*(AM|PM)", re.IGNORECASE)
_TIME = r"(\d{1,2}:\d{2}:\d{2}\s*[AP]M)"
_AVAILABLE_RE = re.compile(r"Available\s*\n?\s*" + _TIME + r"\s*To\s*" + _TIME, re.IGNORECASE)
_SCHEDULED_RE = re.compile(
    r"Scheduled Availability\s*\n?\s*" + _TIME + r"\s*To\s*" + _TIME, re.IGNORECASE
)


def to_24_hour(value: str | None) -> str | None:
    """``"1:30:00 PM"`` -> ``"13:30"``; None when the text is not a 12-hour time."""
    if not value:
        return None
    m = _CLOCK_RE.search(value)
    if not m:
        log.debug("Could not match time format for %r", value)
        return None
    hour, minutes, meridiem = int(m.group(1)), m.group(2), m.group(3).upper()
    if meridiem == "PM" and hour < 12:
        hour += 12
    if meridiem == "AM" and hour == 12:
        hour = 0
    return f"{hour:02d}:{minutes}"


def extract_ranges(cell: str | None) -> list[str]:
    """Time ranges in an export cell.

    "Available" blocks win; "Scheduled Availability" blocks are used only when
    the cell has no "Available" block.
    """
    if not cell:
        return []
    text = cell.replace("\r", "")
    matches = _AVAILABLE_RE.findall(text)
    if not matches:
        matches = _SCHEDULED_RE.findall(text)

    ranges = []
    for start, end in matches:
        start_24, end_24 = to_24_hour(start), to_24_hour(end)
        if start_24 and end_24:
            ranges.append(f"{start_24} - {end_24}")
    return ranges


def grid_from_export(schedule: Mapping[str, str | None]) -> dict[str, list[str]]:
    """Availability grid for one caregiver from ``{"Monday": cell, ...}``."""
    cells = {day.strip().lower(): cell for day, cell in schedule.items()}
    return {day: extract_ranges(cells.get(day)) for day in WEEK_ORDER}


def has_availability(grid: Mapping[str, list[str]]) -> bool:
    return any(grid.values())
