from datetime import datetime

from models.lab import Lab
from models.reservation import Reservation
from models.software import Software
from scheduling.conflicts import EXACT_START, OVERLAP, find_conflicts, has_conflict, lab_is_available
from scheduling.intervals import Interval


def res(id, start, end, status="CONFIRMED", lab_id=1):
    return Reservation(
        id=id, lab_id=lab_id, status=status,
        start_time=datetime.fromisoformat(start), end_time=datetime.fromisoformat(end),
    )


def iv(start, end):
    return Interval(datetime.fromisoformat(start), datetime.fromisoformat(end))


EXISTING = [
    res(1, "2025-11-27T10:00", "2025-11-27T11:00"),
    res(2, "2025-11-27T14:00", "2025-11-27T16:00", status="CANCELLED"),
    res(3, "2025-11-27T10:00", "2025-11-27T12:00", lab_id=2),
]


def test_overlap_mode_ignores_touching_booking():
    assert find_conflicts(EXISTING, iv("2025-11-27T11:00", "2025-11-27T12:00"), lab_id=1) == []


def test_overlap_mode_finds_partial_overlap():
    found = find_conflicts(EXISTING, iv("2025-11-27T10:30", "2025-11-27T11:30"), lab_id=1)
    assert [r.id for r in found] == [1]


def test_cancelled_reservations_never_conflict():
    assert not has_conflict(EXISTING, iv("2025-11-27T14:30", "2025-11-27T15:00"), lab_id=1)


def test_other_labs_are_ignored_when_scoped():
    assert [r.id for r in find_conflicts(EXISTING, iv("2025-11-27T11:00", "2025-11-27T11:30"))] == [3]
    assert find_conflicts(EXISTING, iv("2025-11-27T11:00", "2025-11-27T11:30"), lab_id=1) == []


def test_exact_start_mode_only_matches_same_instant():
    same = iv("2025-11-27T10:00", "2025-11-27T10:30")
    shifted = iv("2025-11-27T10:15", "2025-11-27T10:45")
    assert [r.id for r in find_conflicts(EXISTING, same, mode=EXACT_START, lab_id=1)] == [1]
    # overlaps, but the dedup key is the start instant
    assert find_conflicts(EXISTING, shifted, mode=EXACT_START, lab_id=1) == []
    assert has_conflict(EXISTING, shifted, mode=OVERLAP, lab_id=1)


def _lab(capacity=20, permanent=False, software=()):
    return Lab(
        id=1, name="SALA 8", capacity=capacity, is_permanent=permanent,
        software=[Software(name=s) for s in software],
    )


def test_lab_available_when_free_and_big_enough():
    lab = _lab(capacity=25, software=("Python", "AutoCAD"))
    candidate = iv("2025-11-27T11:00", "2025-11-27T12:00")
    assert lab_is_available(lab, EXISTING, candidate, min_capacity=20, required_software=["python"])


def test_lab_unavailable_reasons():
    candidate = iv("2025-11-27T11:00", "2025-11-27T12:00")
    assert not lab_is_available(_lab(capacity=15), EXISTING, candidate, min_capacity=20)
    assert not lab_is_available(_lab(software=("Python",)), EXISTING, candidate, required_software=["Python", "MATLAB"])
    assert not lab_is_available(_lab(permanent=True), EXISTING, candidate)
    assert not lab_is_available(_lab(), EXISTING, iv("2025-11-27T09:30", "2025-11-27T10:30"))


def test_permanent_lab_counts_outside_adhoc_search():
    candidate = iv("2025-11-27T11:00", "2025-11-27T12:00")
    assert lab_is_available(_lab(permanent=True), EXISTING, candidate, adhoc=False)
