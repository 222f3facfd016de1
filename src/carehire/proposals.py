"""Schedule proposals — a first-draft weekly shift plan for a caregiver.

The proposal is deliberately coarse: it walks the week Monday to Sunday,
takes the first availability range of each day and assigns hours greedily
until the estimate is used up. Coordinators edit it by hand afterwards.
"""

from __future__ import annotations

import logging
import re

from carehire.schemas import WEEK_ORDER, HoursEstimate, ProposedSchedule, WeeklyAvailabilityGrid

log = logging.getLogger(__name__)

SCHEDULE_MESSAGE_KEY = "schedule"
UNKNOWN_HOURS_MESSAGE = "Could not determine required hours from input."
NO_AVAILABILITY_MESSAGE = "Caregiver has no availability defined."

DEFAULT_CHUNK_HOURS = 4

_NUMBER = r"(\d+(?:\.\d+)?)"
_PER_DAY_RE = re.compile(_NUMBER + r"\s*hours?\s*per\s*day", re.IGNORECASE)
_PER_WEEK_RE = re.compile(_NUMBER + r"\s*hours?(?:\s*(?:per\s*week|weekly))?", re.IGNORECASE)
_BARE_NUMBER_RE = re.compile(r"\s*(\d+)\s*")
_RANGE_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$")


def _number(text: str) -> float:
    value = float(text)
    return int(value) if value.is_integer() else value


def parse_hours_estimate(text: str | None) -> HoursEstimate | None:
    """Interpret an intake coordinator's free-text hours estimate.

    Patterns are tried in order: ``N hours per day``, then ``N hours``
    (optionally ``per week`` / ``weekly``), then a bare integer, which counts
    as weekly hours. Returns None when nothing matches.
    """
    if not text:
        return None

    m = _PER_DAY_RE.search(text)
    if m:
        return HoursEstimate(hours_per_day=_number(m.group(1)))

    m = _PER_WEEK_RE.search(text)
    if m:
        return HoursEstimate(total_weekly_hours=_number(m.group(1)))

    m = _BARE_NUMBER_RE.fullmatch(text)
    if m:
        return HoursEstimate(total_weekly_hours=int(m.group(1)))

    return None


def parse_range_start(entry: str) -> int | None:
    """Start hour of an ``"HH:MM - HH:MM"`` range, or None if malformed."""
    m = _RANGE_RE.match(entry)
    if not m:
        return None
    start_h, start_m, end_h, end_m = (int(g) for g in m.groups())
    if start_h > 23 or end_h > 23 or start_m > 59 or end_m > 59:
        return None
    return start_h


def format_hour(hour: float) -> str:
    """Hour-granular 12-hour label: 0 -> ``12AM``, 13 -> ``1PM``."""
    h = int(hour) % 24
    suffix = "AM" if h < 12 else "PM"
    display = h % 12 or 12
    return f"{display}{suffix}"


def is_placeholder(schedule: ProposedSchedule) -> bool:
    """True when a proposal carries an explanatory message instead of shifts."""
    return SCHEDULE_MESSAGE_KEY in schedule


def propose_schedule(
    estimate_text: str | None,
    availability: WeeklyAvailabilityGrid | None,
    chunk_hours: float = DEFAULT_CHUNK_HOURS,
) -> ProposedSchedule:
    """Propose at most one shift per weekday from a caregiver's availability."""
    estimate = parse_hours_estimate(estimate_text)
    if estimate is None:
        return {SCHEDULE_MESSAGE_KEY: UNKNOWN_HOURS_MESSAGE}

    if not availability or not any(availability.values()):
        return {SCHEDULE_MESSAGE_KEY: NO_AVAILABILITY_MESSAGE}

    remaining = estimate.total_weekly_hours or 0
    schedule: ProposedSchedule = {}

    for day in WEEK_ORDER:
        ranges = availability.get(day)
        if not ranges:
            continue

        # Single shift per day: later ranges are ignored.
        start_hour = parse_range_start(ranges[0])
        if start_hour is None:
            log.debug("Skipping %s, malformed availability range %r", day, ranges[0])
            continue

        if estimate.hours_per_day is not None:
            hours = estimate.hours_per_day
        elif remaining > 0:
            hours = min(remaining, chunk_hours)
            remaining -= hours
        else:
            hours = 0

        if hours > 0:
            schedule[day] = f"{format_hour(start_hour)} - {format_hour(start_hour + hours)}"

    return schedule
