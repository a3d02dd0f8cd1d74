from datetime import datetime

import pytest

from models.reservation import Reservation
from scheduling import transitions
from scheduling.errors import InvalidTransition

NOW = datetime(2025, 11, 27, 10, 5)


def res(status="CONFIRMED"):
    return Reservation(
        id=7, lab_id=1, status=status,
        start_time=datetime(2025, 11, 27, 10), end_time=datetime(2025, 11, 27, 11),
    )


def test_full_lifecycle():
    r = res()
    transitions.check_in(r, NOW)
    assert r.status == "OCCUPIED"
    assert r.check_in_time == NOW

    later = datetime(2025, 11, 27, 11, 10)
    transitions.check_out(r, later)
    assert r.status == "COMPLETED"
    assert r.check_out_time == later


@pytest.mark.parametrize("status", ["CONFIRMED", "OCCUPIED"])
def test_cancel_from_active_states(status):
    r = res(status)
    transitions.cancel(r, NOW, reason="Lab maintenance")
    assert r.status == "CANCELLED"
    assert r.cancelled_at == NOW
    assert r.cancel_reason == "Lab maintenance"


@pytest.mark.parametrize("action,status", [
    ("check_in", "OCCUPIED"),
    ("check_in", "COMPLETED"),
    ("check_in", "CANCELLED"),
    ("check_out", "CONFIRMED"),
    ("check_out", "CANCELLED"),
    ("cancel", "COMPLETED"),
    ("cancel", "CANCELLED"),
])
def test_illegal_transitions_leave_reservation_untouched(action, status):
    r = res(status)
    with pytest.raises(InvalidTransition):
        getattr(transitions, action)(r, NOW)
    assert r.status == status
    assert r.check_in_time is None
    assert r.check_out_time is None
    assert r.cancelled_at is None


def test_can_transition():
    assert transitions.can_transition(res("CONFIRMED"), "check_in")
    assert not transitions.can_transition(res("CONFIRMED"), "check_out")
    assert transitions.can_transition(res("OCCUPIED"), "check_out")
