from typing import Iterable, List, Optional

from scheduling.constants import CANCELLED
from scheduling.intervals import overlaps

EXACT_START = "EXACT_START"  # import path: same lab, same start instant
OVERLAP = "OVERLAP"          # booking/search path: any half-open overlap


def is_active(reservation) -> bool:
    return reservation.status != CANCELLED


def find_conflicts(reservations: Iterable, candidate, mode: str = OVERLAP, lab_id=None, ignore_id=None) -> List:
    """
    Non-cancelled reservations colliding with `candidate` under `mode`.
    `candidate` only needs start_time/end_time (or start/end). When `lab_id`
    is given, reservations on other labs are ignored.
    """
    start = getattr(candidate, "start_time", None) or getattr(candidate, "start")
    out = []
    for r in reservations:
        if not is_active(r):
            continue
        if lab_id is not None and r.lab_id != lab_id:
            continue
        if ignore_id is not None and r.id == ignore_id:
            continue
        if mode == EXACT_START:
            if r.start_time == start:
                out.append(r)
        elif mode == OVERLAP:
            if overlaps(r, candidate):
                out.append(r)
        else:
            raise ValueError(f"Unknown conflict mode: {mode}")
    return out


def has_conflict(reservations: Iterable, candidate, mode: str = OVERLAP, lab_id=None) -> bool:
    return bool(find_conflicts(reservations, candidate, mode=mode, lab_id=lab_id))


def lab_is_available(
    lab,
    reservations: Iterable,
    candidate,
    min_capacity: int = 0,
    required_software: Optional[Iterable[str]] = None,
    adhoc: bool = True,
) -> bool:
    if adhoc and lab.is_permanent:
        return False
    if (lab.capacity or 0) < (min_capacity or 0):
        return False
    if required_software:
        wanted = {s.strip().lower() for s in required_software if s and s.strip()}
        installed = {s.lower() for s in lab.software_names}
        if not wanted.issubset(installed):
            return False
    return not has_conflict(reservations, candidate, mode=OVERLAP, lab_id=lab.id)
