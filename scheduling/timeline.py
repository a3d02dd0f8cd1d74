from datetime import datetime, time
from typing import Iterable, List, Tuple

from scheduling.conflicts import is_active
from scheduling.intervals import SLOT_FREE, SLOT_OCCUPIED, Slot, validate_interval, split_at


def build_timeline(reservations: Iterable, window_start: datetime, window_end: datetime, boundary: time = None) -> List[Slot]:
    """
    Gapless FREE/OCCUPIED slots covering exactly [window_start, window_end).

    Reservations are clipped to the window; anything already covered by an
    earlier slot is dropped so the result never overlaps. When `boundary`
    is given, slots straddling it are split in two (morning/afternoon).
    """
    validate_interval(window_start, window_end)

    slots = []
    cursor = window_start
    for r in sorted((r for r in reservations if is_active(r)), key=lambda r: r.start_time):
        if r.end_time <= cursor or r.start_time >= window_end:
            continue
        if cursor < r.start_time:
            slots.append(Slot(start=cursor, end=r.start_time, kind=SLOT_FREE))
        start = max(r.start_time, cursor)
        end = min(r.end_time, window_end)
        slots.append(Slot(start=start, end=end, kind=SLOT_OCCUPIED, reservation=r))
        cursor = end

    if cursor < window_end:
        slots.append(Slot(start=cursor, end=window_end, kind=SLOT_FREE))

    if boundary is None:
        return slots
    out = []
    for s in slots:
        out.extend(split_at(s, boundary))
    return out


def free_ranges(slots: Iterable[Slot]) -> List[Tuple[datetime, datetime]]:
    """Coalesce touching FREE slots into maximal (start, end) ranges."""
    ranges = []
    for s in slots:
        if not s.is_free:
            continue
        if ranges and ranges[-1][1] == s.start:
            ranges[-1] = (ranges[-1][0], s.end)
        else:
            ranges.append((s.start, s.end))
    return ranges
