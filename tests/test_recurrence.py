from datetime import date, datetime

import pytest

from models.reservation import Reservation
from models.repository import SqlAlchemyRepository
from scheduling import SchedulingService
from scheduling.recurrence import RecurrenceRule, parse_weekday
from scheduling.errors import InvalidInterval
from utils.scheduler import load_settings

MONDAY_CLASS = {
    "day": "Lunes",
    "room": "sala 8",
    "time_start": "08:00",
    "time_end": "10:00",
    "subject": "Programacion I",
    "professor": "Ana Ruiz",
}


@pytest.mark.parametrize("token,expected", [
    ("Lunes", 0), ("MONDAY", 0), ("Miércoles", 2), ("miercoles", 2), ("Sábado", 5), ("sunday", 6),
])
def test_parse_weekday(token, expected):
    assert parse_weekday(token) == expected


def test_parse_weekday_rejects_unknown():
    with pytest.raises(ValueError):
        parse_weekday("Funday")


def test_rule_from_dict_validates_times():
    with pytest.raises(InvalidInterval):
        RecurrenceRule.from_dict({**MONDAY_CLASS, "time_end": "07:00"})
    with pytest.raises(InvalidInterval):
        RecurrenceRule.from_dict({**MONDAY_CLASS, "time_start": None})
    with pytest.raises(ValueError):
        RecurrenceRule.from_dict({**MONDAY_CLASS, "room": ""})


def test_occurrences_are_inclusive_of_semester_bounds():
    rule = RecurrenceRule.from_dict(MONDAY_CLASS)
    dates = [i.start.date() for i in rule.occurrences(date(2025, 9, 1), date(2025, 9, 29))]
    assert dates == [date(2025, 9, 1), date(2025, 9, 8), date(2025, 9, 15), date(2025, 9, 22), date(2025, 9, 29)]


def test_semester_expansion_creates_one_class_per_monday(service, make_lab):
    lab = make_lab("SALA 8")

    summary = service.expand_recurring_schedule([MONDAY_CLASS])

    assert summary.created == 22
    assert summary.updated == 0
    assert summary.processed_rules == 1
    rows = Reservation.query.filter_by(lab_id=lab.id).order_by(Reservation.start_time).all()
    assert len(rows) == 22
    assert rows[0].start_time == datetime(2025, 9, 1, 8, 0)
    assert rows[-1].start_time == datetime(2026, 1, 26, 8, 0)
    assert {r.type for r in rows} == {"CLASS"}
    assert {r.status for r in rows} == {"CONFIRMED"}
    assert {r.description for r in rows} == {"Profesor: Ana Ruiz"}
    assert {r.professor_name for r in rows} == {"Ana Ruiz"}
    assert {r.school_id for r in rows} == {"ING"}


def test_rerunning_the_same_import_creates_nothing(service, make_lab):
    make_lab("SALA 8")
    service.expand_recurring_schedule([MONDAY_CLASS])

    again = service.expand_recurring_schedule([{**MONDAY_CLASS, "professor": "Luis Vega"}])

    assert again.created == 0
    assert again.updated == 22
    assert Reservation.query.count() == 22
    assert {r.professor_name for r in Reservation.query.all()} == {"Luis Vega"}


def test_overlapping_existing_reservation_is_a_collision(service, make_lab, make_reservation):
    lab = make_lab("SALA 8")
    blocker = make_reservation(lab, datetime(2025, 9, 8, 9, 0), datetime(2025, 9, 8, 11, 0))

    summary = service.expand_recurring_schedule([MONDAY_CLASS])

    assert summary.created == 21
    assert summary.collisions == 1
    assert Reservation.query.filter_by(lab_id=lab.id, start_time=datetime(2025, 9, 8, 8, 0)).count() == 0
    assert blocker.subject == "Reunion"


def test_cancelled_reservation_does_not_block_import(service, make_lab, make_reservation):
    lab = make_lab("SALA 8")
    make_reservation(lab, datetime(2025, 9, 1, 8, 0), datetime(2025, 9, 1, 10, 0), status="CANCELLED")

    summary = service.expand_recurring_schedule([MONDAY_CLASS])

    assert summary.created == 22
    assert Reservation.query.filter_by(lab_id=lab.id, start_time=datetime(2025, 9, 1, 8, 0)).count() == 2


def test_bad_rules_are_skipped_without_aborting_the_batch(service, make_lab):
    make_lab("SALA 8")
    rules = [
        {**MONDAY_CLASS, "room": "SALA 99"},
        {**MONDAY_CLASS, "day": "Funday"},
        {**MONDAY_CLASS, "time_start": "11:00", "time_end": "10:00"},
        "not a rule",
        {**MONDAY_CLASS, "day": "Martes"},
    ]

    summary = service.expand_recurring_schedule(rules)

    assert [s.index for s in summary.skipped_rules] == [0, 1, 2, 3]
    assert "SALA 99" in summary.skipped_rules[0].reason
    assert summary.processed_rules == 5
    assert summary.created == 22
    assert summary.to_dict()["skipped"] == 4


def test_school_falls_back_to_keyword_table(service, make_lab):
    make_lab("SALA 8")
    service.expand_recurring_schedule([
        {**MONDAY_CLASS, "subject": "Marketing Digital"},
        {**MONDAY_CLASS, "day": "Martes", "subject": "Historia Universal"},
        {**MONDAY_CLASS, "day": "Jueves", "subject": "Programacion", "school_id": "DIS"},
        {**MONDAY_CLASS, "day": "Viernes", "subject": "Programacion", "school_id": "NOPE"},
    ])

    by_weekday = {r.start_time.weekday(): r.school_id for r in Reservation.query.all()}
    assert by_weekday == {0: "NEG", 1: "TC", 3: "DIS", 4: None}


def test_explicit_semester_window(service, make_lab):
    make_lab("SALA 8")
    summary = service.expand_recurring_schedule([MONDAY_CLASS], date(2025, 9, 1), date(2025, 9, 30))
    assert summary.created == 5


def test_should_stop_leaves_resume_point(service, make_lab):
    make_lab("SALA 8")
    calls = []

    def stop():
        calls.append(1)
        return len(calls) > 1

    summary = service.expand_recurring_schedule(
        [MONDAY_CLASS, {**MONDAY_CLASS, "day": "Martes"}], should_stop=stop,
    )

    assert summary.processed_rules == 1
    assert summary.created == 22

    resumed = service.expand_recurring_schedule([{**MONDAY_CLASS, "day": "Martes"}])
    assert resumed.created == 22
    assert Reservation.query.count() == 44


def test_import_requires_an_admin_owner(app, make_lab):
    make_lab("SALA 8")
    service = SchedulingService(SqlAlchemyRepository(), load_settings(app.config))
    with pytest.raises(RuntimeError):
        service.expand_recurring_schedule([MONDAY_CLASS])


def test_numeric_fields_do_not_abort_the_batch(service, make_lab):
    make_lab("SALA 8")
    rules = [
        {**MONDAY_CLASS, "subject": 101},
        {**MONDAY_CLASS, "day": "Martes", "room": 8},
        {**MONDAY_CLASS, "day": "Jueves", "professor": ["Ana", "Luis"]},
        {**MONDAY_CLASS, "day": "Viernes"},
    ]

    summary = service.expand_recurring_schedule(rules, date(2025, 9, 1), date(2025, 9, 30))

    # course code kept as text; room "8" does not exist; a list is not a name
    assert [s.index for s in summary.skipped_rules] == [1, 2]
    assert summary.processed_rules == 4
    assert {r.subject for r in Reservation.query.all()} == {"101", "Programacion I"}
    assert summary.created == 5 + 4


def test_integer_weekdays_include_monday(service, make_lab):
    make_lab("SALA 8")
    summary = service.expand_recurring_schedule(
        [{**MONDAY_CLASS, "day": 0}, {**MONDAY_CLASS, "day": 1}], date(2025, 9, 1), date(2025, 9, 30),
    )
    assert summary.skipped_rules == []
    assert {r.start_time.weekday() for r in Reservation.query.all()} == {0, 1}
    assert summary.created == 10
