"""Weekly interview-slot templates and where they come from.

A template maps each :class:`Weekday` to the times of day at which interview
slots start. Templates are read from the ``settings/availability`` document
(keys like ``monday_slots`` holding ``"11:00,12:00"``), or taken from the
fixed rules table used before the settings screen existed.
"""

from __future__ import annotations

import logging
import re
from datetime import time
from typing import Any, Callable, Mapping

from carehire.schemas import Weekday

log = logging.getLogger(__name__)

WeekdayTemplate = dict[Weekday, list[time]]

SLOTS_SUFFIX = "_slots"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

_HOURLY_11_TO_17 = "11:00,12:00,13:00,14:00,15:00,16:00,17:00"

DEFAULT_SETTINGS: dict[str, str] = {
    "sunday_slots": _HOURLY_11_TO_17,
    "monday_slots": _HOURLY_11_TO_17,
    "tuesday_slots": _HOURLY_11_TO_17,
    "wednesday_slots": _HOURLY_11_TO_17,
    "thursday_slots": "",
    "friday_slots": "",
    "saturday_slots": "",
}

_MORNINGS = (time(8, 30), time(9, 30), time(10, 30))
_AFTERNOONS = (time(13, 30), time(14, 30), time(15, 30))

STATIC_RULES: dict[Weekday, tuple[time, ...]] = {
    Weekday.MONDAY: _MORNINGS,
    Weekday.TUESDAY: _MORNINGS,
    Weekday.WEDNESDAY: _MORNINGS,
    Weekday.THURSDAY: _AFTERNOONS,
    Weekday.FRIDAY: _AFTERNOONS,
}


def parse_time(value: str) -> time | None:
    """Parse ``H:MM`` / ``HH:MM`` (24-hour). Returns None when invalid."""
    m = _TIME_RE.match(value.strip())
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def parse_slot_times(raw: str | None) -> list[time]:
    """Split a comma-separated slot string, dropping blank or invalid entries."""
    if not raw:
        return []
    times: list[time] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        parsed = parse_time(part)
        if parsed is None:
            log.debug("Dropping unparseable slot time %r", part)
            continue
        times.append(parsed)
    return times


def template_from_settings(doc: Mapping[str, Any]) -> WeekdayTemplate:
    """Build a template from a settings document keyed by ``<weekday>_slots``."""
    template: WeekdayTemplate = {}
    for key, value in doc.items():
        if not isinstance(key, str) or not key.endswith(SLOTS_SUFFIX):
            continue
        weekday = Weekday.from_name(key[: -len(SLOTS_SUFFIX)])
        if weekday is None:
            continue
        template[weekday] = parse_slot_times(value if isinstance(value, str) else None)
    return template


def default_template() -> WeekdayTemplate:
    return template_from_settings(DEFAULT_SETTINGS)


def static_template() -> WeekdayTemplate:
    return {day: list(times) for day, times in STATIC_RULES.items()}


def load_template(fetch: Callable[[], Mapping[str, Any] | None]) -> WeekdayTemplate:
    """Fetch the settings document and build a template from it.

    A missing document or any error raised by ``fetch`` is recovered by
    returning :func:`default_template`.
    """
    try:
        doc = fetch()
    except Exception:
        log.warning("Could not read availability settings, using default slots", exc_info=True)
        return default_template()

    if doc is None:
        log.warning("Availability settings document not found, using default slots")
        return default_template()
    return template_from_settings(doc)


def template_to_settings(template: Mapping[Weekday, list[time]]) -> dict[str, str]:
    """Render a template back into the settings-document shape."""
    return {
        f"{day.label}{SLOTS_SUFFIX}": ",".join(t.strftime("%H:%M") for t in template.get(day, []))
        for day in Weekday
    }
