"""
Key hand-off state machine.

    CONFIRMED --check_in--> OCCUPIED --check_out--> COMPLETED
    CONFIRMED | OCCUPIED --cancel--> CANCELLED

An overdue reservation is an OCCUPIED one past its end time, so it checks
out like any other. Illegal calls raise InvalidTransition before touching
the reservation.
"""
from datetime import datetime

from scheduling.constants import CANCELLED, COMPLETED, CONFIRMED, OCCUPIED
from scheduling.errors import InvalidTransition

TRANSITIONS = {
    "check_in": ({CONFIRMED}, OCCUPIED),
    "check_out": ({OCCUPIED}, COMPLETED),
    "cancel": ({CONFIRMED, OCCUPIED}, CANCELLED),
}


def can_transition(reservation, action: str) -> bool:
    allowed, _ = TRANSITIONS[action]
    return reservation.status in allowed


def _require(reservation, action: str) -> str:
    allowed, target = TRANSITIONS[action]
    if reservation.status not in allowed:
        raise InvalidTransition(
            f"Cannot {action.replace('_', '-')} reservation {reservation.id} in state {reservation.status}"
        )
    return target


def check_in(reservation, now: datetime):
    reservation.status = _require(reservation, "check_in")
    reservation.check_in_time = now
    return reservation


def check_out(reservation, now: datetime):
    reservation.status = _require(reservation, "check_out")
    reservation.check_out_time = now
    return reservation


def cancel(reservation, now: datetime, reason: str = None):
    reservation.status = _require(reservation, "cancel")
    reservation.cancelled_at = now
    reservation.cancel_reason = reason
    return reservation
