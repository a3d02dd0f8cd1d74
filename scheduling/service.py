import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from functools import partial
from typing import Iterable, List, Optional

from scheduling import transitions
from scheduling.conflicts import OVERLAP, find_conflicts, lab_is_available
from scheduling.constants import CONFIRMED, EVENT, RESERVATION_TYPES
from scheduling.errors import ConflictDetected, InvalidInterval, InvalidTransition, NotFound
from scheduling.intervals import Interval, combine, day_bounds, parse_time_of_day, validate_interval
from scheduling.recurrence import ImportSummary, expand_recurring_schedule
from scheduling.schools import classify_subject
from scheduling.status import (
    DEFAULT_PROFESSOR_MARKER,
    DEFAULT_UNKNOWN_USER,
    LabStatus,
    professor_name,
    resolve_status,
)
from scheduling.timeline import build_timeline

logger = logging.getLogger(__name__)


@dataclass
class SchedulingSettings:
    semester_start: date
    semester_end: date
    day_start: time = time(7, 0)
    day_end: time = time(22, 0)
    split_boundary: time = time(13, 0)
    professor_marker: str = DEFAULT_PROFESSOR_MARKER
    unknown_user: str = DEFAULT_UNKNOWN_USER
    school_keywords: list = field(default_factory=list)
    default_school: str = "TC"

    @classmethod
    def from_config(cls, config) -> "SchedulingSettings":
        def _date(value):
            return value if isinstance(value, date) else date.fromisoformat(value)

        return cls(
            semester_start=_date(config["SEMESTER_START"]),
            semester_end=_date(config["SEMESTER_END"]),
            day_start=parse_time_of_day(config.get("TIMELINE_DAY_START", "07:00")),
            day_end=parse_time_of_day(config.get("TIMELINE_DAY_END", "22:00")),
            split_boundary=parse_time_of_day(config.get("TIMELINE_SPLIT_AT", "13:00")),
            professor_marker=config.get("PROFESSOR_MARKER", DEFAULT_PROFESSOR_MARKER),
            unknown_user=config.get("UNKNOWN_USER_LABEL", DEFAULT_UNKNOWN_USER),
            school_keywords=config.get("SCHOOL_KEYWORDS") or [],
            default_school=config.get("DEFAULT_SCHOOL_CODE", "TC"),
        )


class SchedulingService:
    """
    Scheduling operations over a ReservationRepository.

    Every "now" is an explicit argument so dashboards can simulate a time.
    Operator actions roll back on error and leave nothing half-written.
    """

    def __init__(self, repository, settings: SchedulingSettings):
        self.repository = repository
        self.settings = settings

    # ---------- lookups ----------
    def _lab(self, lab_id):
        lab = self.repository.get_lab(lab_id)
        if lab is None:
            raise NotFound(f"Lab {lab_id} not found")
        return lab

    def _reservation(self, reservation_id):
        reservation = self.repository.get_reservation(reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        return reservation

    def _status_window(self, lab_id, as_of: datetime):
        # from today on, plus keys still out from earlier days
        day_start, _ = day_bounds(as_of)
        rows = self.repository.lab_reservations(lab_id, start=day_start)
        seen = {r.id for r in rows}
        rows.extend(r for r in self.repository.occupied_reservations(lab_id) if r.id not in seen)
        return rows

    # ---------- status ----------
    def resolve_status(self, lab_id, as_of: datetime) -> LabStatus:
        self._lab(lab_id)
        return resolve_status(as_of, self._status_window(lab_id, as_of))

    def dashboard(self, as_of: datetime) -> List:
        return [
            (lab, resolve_status(as_of, self._status_window(lab.id, as_of)))
            for lab in self.repository.list_labs()
        ]

    def professor_name(self, reservation) -> str:
        return professor_name(reservation, self.settings.professor_marker, self.settings.unknown_user)

    # ---------- timeline ----------
    def day_reservations(self, lab_id, day) -> List:
        start, end = day_bounds(day)
        return self.repository.lab_reservations(lab_id, start=start, end=end)

    def get_timeline(self, lab_id, day) -> List:
        self._lab(lab_id)
        return self._timeline(lab_id, day)

    def _timeline(self, lab_id, day):
        if isinstance(day, datetime):
            day = day.date()
        return build_timeline(
            self.day_reservations(lab_id, day),
            combine(day, self.settings.day_start),
            combine(day, self.settings.day_end),
            self.settings.split_boundary,
        )

    def general_schedule(self, day) -> List:
        return [(lab, self._timeline(lab.id, day)) for lab in self.repository.list_labs()]

    # ---------- availability ----------
    def find_available_labs(
        self,
        day: date,
        start_time,
        duration_hours: float,
        min_capacity: int = 0,
        required_software: Optional[Iterable[str]] = None,
        only_mac: bool = False,
    ) -> List:
        if duration_hours is None or duration_hours <= 0:
            raise InvalidInterval("duration must be positive")
        if isinstance(day, datetime):
            day = day.date()
        start = combine(day, parse_time_of_day(start_time))
        candidate = Interval(start, start + timedelta(hours=duration_hours))

        available = []
        for lab in self.repository.list_labs():
            if only_mac and "MAC" not in (lab.name or "").upper():
                continue
            existing = self.repository.lab_reservations(lab.id, start=candidate.start, end=candidate.end)
            if lab_is_available(lab, existing, candidate, min_capacity, required_software, adhoc=True):
                available.append(lab)
        return available

    # ---------- ad-hoc booking ----------
    def book(
        self,
        lab_id,
        start_time: datetime,
        end_time: datetime,
        subject: str,
        creator,
        description: str = None,
        professor_name: str = None,
        type: str = EVENT,
        school_id: str = None,
    ):
        validate_interval(start_time, end_time)
        if type not in RESERVATION_TYPES:
            raise InvalidInterval(f"Unknown reservation type: {type}")
        if school_id and self.repository.get_school(school_id) is None:
            raise NotFound(f"School {school_id} not found")

        lab = self.repository.lock_lab(lab_id)
        if lab is None:
            self.repository.rollback()
            raise NotFound(f"Lab {lab_id} not found")
        if lab.is_permanent:
            self.repository.rollback()
            raise ConflictDetected(f"Lab {lab.name} is permanently reserved")

        candidate = Interval(start_time, end_time)
        existing = self.repository.lab_reservations(lab.id, start=start_time, end=end_time)
        conflicts = find_conflicts(existing, candidate, mode=OVERLAP, lab_id=lab.id)
        if conflicts:
            self.repository.rollback()
            raise ConflictDetected(f"Lab {lab.name} is already reserved in that interval", conflicts)

        if professor_name and not description:
            description = f"{self.settings.professor_marker}{professor_name}"

        reservation = self.repository.new_reservation(
            lab_id=lab.id,
            start_time=start_time,
            end_time=end_time,
            subject=(subject or "")[:100],
            description=description,
            professor_name=professor_name,
            type=type,
            status=CONFIRMED,
            school_id=school_id,
            user_id=creator.id,
        )
        self.repository.commit()
        logger.info("Reservation %s booked on lab %s (%s - %s)", reservation.id, lab.name, start_time, end_time)
        return reservation

    # ---------- key hand-off ----------
    def check_in(self, reservation_id, now: datetime = None):
        now = now or datetime.now()
        reservation = self._reservation(reservation_id)
        blocking = resolve_status(now, self._status_window(reservation.lab_id, now)).overdue
        if blocking is not None and blocking.id != reservation.id:
            logger.warning("Check-in of %s refused: reservation %s is overdue", reservation.id, blocking.id)
            raise InvalidTransition(
                f"Reservation {blocking.id} on this lab is overdue; check it out first"
            )
        return self._apply(transitions.check_in, reservation, now)

    def check_out(self, reservation_id, now: datetime = None):
        reservation = self._reservation(reservation_id)
        return self._apply(transitions.check_out, reservation, now or datetime.now())

    def cancel(self, reservation_id, now: datetime = None, reason: str = None):
        reservation = self._reservation(reservation_id)
        return self._apply(partial(transitions.cancel, reason=reason), reservation, now or datetime.now())

    def _apply(self, transition, reservation, now):
        try:
            transition(reservation, now)
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise
        return reservation

    # ---------- import ----------
    def resolve_school(self, subject: str) -> str:
        return classify_subject(subject, self.settings.school_keywords, self.settings.default_school)

    def expand_recurring_schedule(
        self,
        rules: Iterable,
        semester_start: date = None,
        semester_end: date = None,
        should_stop=None,
    ) -> ImportSummary:
        return expand_recurring_schedule(
            self.repository,
            rules,
            semester_start or self.settings.semester_start,
            semester_end or self.settings.semester_end,
            resolve_school=self.resolve_school,
            professor_marker=self.settings.professor_marker,
            should_stop=should_stop,
        )
