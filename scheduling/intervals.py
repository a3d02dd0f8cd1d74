from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from scheduling.errors import InvalidInterval

SLOT_FREE = "FREE"
SLOT_OCCUPIED = "OCCUPIED"


def _start(obj):
    return getattr(obj, "start_time", None) or getattr(obj, "start")


def _end(obj):
    return getattr(obj, "end_time", None) or getattr(obj, "end")


def overlaps(a, b) -> bool:
    # half-open: [10:00, 11:00) and [11:00, 12:00) do not overlap
    return _start(a) < _end(b) and _start(b) < _end(a)


def contains(interval, instant: datetime) -> bool:
    return _start(interval) <= instant < _end(interval)


def day_bounds(day):
    if isinstance(day, datetime):
        day = day.date()
    start = datetime(day.year, day.month, day.day)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end


def parse_time_of_day(value) -> time:
    """Accepts "HH:MM" (or "HH:MM:SS") strings and time objects."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInterval("Missing time of day")
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise InvalidInterval(f"Invalid time of day: {value!r}")
    try:
        numbers = [int(p) for p in parts]
        return time(*numbers)
    except ValueError:
        raise InvalidInterval(f"Invalid time of day: {value!r}")


def combine(day: date, time_of_day: time) -> datetime:
    return datetime.combine(day, time_of_day)


def validate_interval(start: datetime, end: datetime) -> None:
    if start is None or end is None:
        raise InvalidInterval("start_time and end_time are required")
    if end <= start:
        raise InvalidInterval("end_time must be after start_time")


@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Slot:
    """One timeline cell. `reservation` is the payload for OCCUPIED slots."""

    start: datetime
    end: datetime
    kind: str = SLOT_FREE
    reservation: Optional[Any] = None

    @property
    def is_free(self) -> bool:
        return self.kind == SLOT_FREE


def split_at(slot: Slot, boundary: time) -> List[Slot]:
    cut = combine(slot.start.date(), boundary)
    if slot.start < cut < slot.end:
        return [replace(slot, end=cut), replace(slot, start=cut)]
    return [slot]
