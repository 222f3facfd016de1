"""Interview slot availability — bookable future slots from a weekly template."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Iterable, Mapping, Sequence

from carehire.schemas import AvailableDay, BookedAppointment, Weekday

DEFAULT_HORIZON_WEEKS = 3


def _instant(value: datetime, now: datetime) -> datetime:
    """Express ``value`` with the same awareness as ``now`` so equality compares instants."""
    if now.tzinfo is not None:
        return value if value.tzinfo is not None else value.replace(tzinfo=now.tzinfo)
    if value.tzinfo is not None:
        # Naive evaluation times are local wall-clock times.
        return value.astimezone().replace(tzinfo=None)
    return value


def compute_available_slots(
    template: Mapping[Weekday, Sequence[time]],
    booked: Iterable[BookedAppointment],
    horizon_weeks: int,
    now: datetime,
) -> list[AvailableDay]:
    """List the bookable slots for the next ``horizon_weeks`` weeks.

    Args:
        template: Slot start times per weekday. Missing or empty weekdays
            produce no slots.
        booked: Appointments already taken. A slot is taken when it falls on
            the same instant as an appointment's ``start_time``, whatever UTC
            offset the appointment was recorded in.
        horizon_weeks: Number of weeks to look ahead, starting with the
            calendar day of ``now``.
        now: Evaluation instant. Slots at or before it are excluded, so
            earlier slots of the current day drop out while later ones stay.

    Returns:
        One :class:`AvailableDay` per calendar day that still has at least one
        open slot, in date order. Days without open slots are omitted.
    """
    taken = {_instant(appt.start_time, now) for appt in booked}
    days: list[AvailableDay] = []

    for offset in range(max(horizon_weeks, 0) * 7):
        day = (now + timedelta(days=offset)).date()
        slot_times = template.get(Weekday.of(day))
        if not slot_times:
            continue

        open_slots = []
        for slot_time in slot_times:
            # Template times carry no date; anchor on the day at whole minutes.
            candidate = datetime.combine(
                day, time(slot_time.hour, slot_time.minute), tzinfo=now.tzinfo
            )
            if candidate > now and candidate not in taken:
                open_slots.append(candidate)

        if open_slots:
            days.append(AvailableDay(date=day, slots=open_slots))

    return days
