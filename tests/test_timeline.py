from datetime import datetime, time

from models.reservation import Reservation
from scheduling.timeline import build_timeline, free_ranges


def dt(value):
    return datetime.fromisoformat(value)


def res(id, start, end, status="CONFIRMED"):
    return Reservation(id=id, lab_id=1, status=status, start_time=dt(start), end_time=dt(end))


DAY_START = dt("2025-11-27T07:00")
DAY_END = dt("2025-11-27T22:00")


def spans(slots):
    return [(s.start.strftime("%H:%M"), s.end.strftime("%H:%M"), s.kind) for s in slots]


def test_empty_day_is_one_free_slot():
    assert spans(build_timeline([], DAY_START, DAY_END)) == [("07:00", "22:00", "FREE")]


def test_slots_are_gapless_and_cover_window():
    reservations = [
        res(2, "2025-11-27T14:00", "2025-11-27T16:00"),
        res(1, "2025-11-27T09:00", "2025-11-27T10:00"),
        res(3, "2025-11-27T10:00", "2025-11-27T11:00"),
    ]
    slots = build_timeline(reservations, DAY_START, DAY_END)

    assert spans(slots) == [
        ("07:00", "09:00", "FREE"),
        ("09:00", "10:00", "OCCUPIED"),
        ("10:00", "11:00", "OCCUPIED"),
        ("11:00", "14:00", "FREE"),
        ("14:00", "16:00", "OCCUPIED"),
        ("16:00", "22:00", "FREE"),
    ]
    assert slots[0].start == DAY_START and slots[-1].end == DAY_END
    for a, b in zip(slots, slots[1:]):
        assert a.end == b.start
    assert [s.reservation.id for s in slots if not s.is_free] == [1, 3, 2]


def test_reservations_are_clipped_to_window():
    reservations = [
        res(1, "2025-11-27T06:00", "2025-11-27T08:00"),
        res(2, "2025-11-27T21:00", "2025-11-27T23:30"),
        res(3, "2025-11-26T10:00", "2025-11-26T11:00"),
    ]
    assert spans(build_timeline(reservations, DAY_START, DAY_END)) == [
        ("07:00", "08:00", "OCCUPIED"),
        ("08:00", "21:00", "FREE"),
        ("21:00", "22:00", "OCCUPIED"),
    ]


def test_cancelled_reservations_leave_the_slot_free():
    reservations = [res(1, "2025-11-27T09:00", "2025-11-27T10:00", status="CANCELLED")]
    assert spans(build_timeline(reservations, DAY_START, DAY_END)) == [("07:00", "22:00", "FREE")]


def test_split_at_one_pm():
    reservations = [res(1, "2025-11-27T12:00", "2025-11-27T14:00")]
    slots = build_timeline(reservations, DAY_START, DAY_END, boundary=time(13, 0))

    assert spans(slots) == [
        ("07:00", "12:00", "FREE"),
        ("12:00", "13:00", "OCCUPIED"),
        ("13:00", "14:00", "OCCUPIED"),
        ("14:00", "22:00", "FREE"),
    ]
    assert slots[1].reservation is slots[2].reservation


def test_free_ranges_coalesce_split_free_slots():
    reservations = [res(1, "2025-11-27T09:00", "2025-11-27T10:00")]
    slots = build_timeline(reservations, DAY_START, DAY_END, boundary=time(13, 0))

    # 10:00-13:00 and 13:00-22:00 are one range again
    assert free_ranges(slots) == [
        (DAY_START, dt("2025-11-27T09:00")),
        (dt("2025-11-27T10:00"), DAY_END),
    ]
