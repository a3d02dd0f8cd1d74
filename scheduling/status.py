from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from scheduling.constants import (
    CANCELLED,
    CONFIRMED,
    OCCUPIED,
    LAB_FREE,
    LAB_OCCUPIED,
    LAB_OVERDUE,
    LAB_RESERVED,
)
from scheduling.intervals import contains

DEFAULT_PROFESSOR_MARKER = "Profesor: "
DEFAULT_UNKNOWN_USER = "Unknown user"


@dataclass(frozen=True)
class LabStatus:
    status: str
    current: Optional[Any] = None
    overdue: Optional[Any] = None
    next: Optional[Any] = None


def professor_name(reservation, marker: str = DEFAULT_PROFESSOR_MARKER, unknown: str = DEFAULT_UNKNOWN_USER) -> str:
    """
    Explicit professor field first, then the marker convention inside the
    description, then the creator's display name.
    """
    explicit = (getattr(reservation, "professor_name", None) or "").strip()
    if explicit:
        return explicit

    name = parse_professor_marker(getattr(reservation, "description", None), marker)
    if name:
        return name

    creator = getattr(reservation, "user", None)
    display = (getattr(creator, "full_name", None) or "").strip() if creator else ""
    return display or unknown


def parse_professor_marker(description: Optional[str], marker: str = DEFAULT_PROFESSOR_MARKER) -> Optional[str]:
    if description and marker and description.startswith(marker):
        return description[len(marker):].strip() or None
    return None


def _is_checked_in(reservation) -> bool:
    return reservation.status == OCCUPIED or reservation.check_in_time is not None


def resolve_status(now: datetime, reservations: Iterable) -> LabStatus:
    """
    Classify one lab at `now` from its reservations. Pure: same inputs give
    the same LabStatus, nothing is written back.
    """
    ordered = sorted(reservations, key=lambda r: (r.start_time, r.id or 0))

    overdue = next(
        (r for r in ordered if r.status == OCCUPIED and r.end_time < now),
        None,
    )

    candidates = [
        r for r in ordered
        if r.status in (CONFIRMED, OCCUPIED) and contains(r, now)
    ]
    # non-overlap invariant leaves at most one; prefer the checked-in one if not
    current = next((r for r in candidates if _is_checked_in(r)), None)
    if current is None and candidates:
        current = candidates[0]

    upcoming = next(
        (r for r in ordered if r.status != CANCELLED and r.start_time > now),
        None,
    )

    if overdue is not None:
        status = LAB_OVERDUE
    elif current is not None and _is_checked_in(current):
        status = LAB_OCCUPIED
    elif current is not None:
        status = LAB_RESERVED
    else:
        status = LAB_FREE

    return LabStatus(status=status, current=current, overdue=overdue, next=upcoming)
