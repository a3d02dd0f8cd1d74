import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Iterator, List, Optional

from scheduling.conflicts import EXACT_START, OVERLAP, find_conflicts
from scheduling.constants import CLASS, CONFIRMED
from scheduling.errors import ConflictDetected, InvalidInterval, RuleSkipped
from scheduling.intervals import Interval, combine, parse_time_of_day
from scheduling.schools import strip_accents

logger = logging.getLogger(__name__)

# date.weekday(): Monday == 0
WEEKDAYS = {
    "LUNES": 0, "MONDAY": 0,
    "MARTES": 1, "TUESDAY": 1,
    "MIERCOLES": 2, "WEDNESDAY": 2,
    "JUEVES": 3, "THURSDAY": 3,
    "VIERNES": 4, "FRIDAY": 4,
    "SABADO": 5, "SATURDAY": 5,
    "DOMINGO": 6, "SUNDAY": 6,
}


def parse_weekday(token) -> int:
    if isinstance(token, int) and 0 <= token <= 6:
        return token
    key = strip_accents(str(token or "")).strip().upper()
    if key not in WEEKDAYS:
        raise ValueError(f"Unknown weekday: {token!r}")
    return WEEKDAYS[key]


def _text(data: dict, key: str) -> str:
    # numeric course codes and room numbers are accepted as text
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"Rule field {key} must be text")
    return str(value).strip()


@dataclass
class RecurrenceRule:
    weekday: int
    start: time
    end: time
    subject: str
    professor: str
    room: str
    school_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RecurrenceRule":
        """
        Import format: {"day", "room", "time_start", "time_end", "subject",
        "professor", "school_id"?}. Raises ValueError/InvalidInterval.
        """
        if not isinstance(data, dict):
            raise ValueError("Rule must be an object")
        room = _text(data, "room")
        if data.get("day") in (None, "") or not room:
            raise ValueError("Rule requires day and room")
        if not data.get("time_start") or not data.get("time_end"):
            raise InvalidInterval("Rule requires time_start and time_end")

        start = parse_time_of_day(data["time_start"])
        end = parse_time_of_day(data["time_end"])
        if end <= start:
            raise InvalidInterval("time_end must be after time_start")

        return cls(
            weekday=parse_weekday(data["day"]),
            start=start,
            end=end,
            subject=_text(data, "subject"),
            professor=_text(data, "professor"),
            room=room,
            school_id=_text(data, "school_id") or None,
        )

    def occurrences(self, semester_start: date, semester_end: date) -> Iterator[Interval]:
        """Every matching date in [semester_start, semester_end], inclusive."""
        day = semester_start
        while day <= semester_end:
            if day.weekday() == self.weekday:
                yield Interval(combine(day, self.start), combine(day, self.end))
            day += timedelta(days=1)


@dataclass
class ImportSummary:
    created: int = 0
    updated: int = 0
    collisions: int = 0
    processed_rules: int = 0
    skipped_rules: List[RuleSkipped] = field(default_factory=list)

    def to_dict(self):
        return {
            "created": self.created,
            "updated": self.updated,
            "collisions": self.collisions,
            "processed_rules": self.processed_rules,
            "skipped": len(self.skipped_rules),
            "skipped_rules": [s.to_dict() for s in self.skipped_rules],
        }


def expand_recurring_schedule(
    repository,
    rules: Iterable,
    semester_start: date,
    semester_end: date,
    resolve_school: Callable[[str], str],
    professor_marker: str,
    should_stop: Optional[Callable[[], bool]] = None,
) -> ImportSummary:
    """
    Expand weekly rules into CLASS reservations.

    Dedup key is (lab, exact start): an existing non-cancelled reservation
    starting at the same instant is updated in place instead of duplicated,
    so re-running the same input creates nothing. A new date that overlaps
    some other reservation is skipped as a collision. Each rule is committed
    on its own; `processed_rules` tells a caller where to resume.
    """
    if isinstance(semester_start, datetime):
        semester_start = semester_start.date()
    if isinstance(semester_end, datetime):
        semester_end = semester_end.date()

    summary = ImportSummary()
    creator = repository.admin_actor()
    if creator is None:
        raise RuntimeError("No administrative user available to own imported reservations")

    window_start = combine(semester_start, time.min)
    window_end = combine(semester_end, time.max)

    for index, raw in enumerate(rules):
        if should_stop is not None and should_stop():
            logger.info("Schedule import stopped after %d rules", summary.processed_rules)
            break

        try:
            rule = raw if isinstance(raw, RecurrenceRule) else RecurrenceRule.from_dict(raw)
        except (ValueError, InvalidInterval) as exc:
            summary.skipped_rules.append(RuleSkipped(index, str(exc), raw))
            summary.processed_rules += 1
            continue

        lab = repository.get_lab_by_name(rule.room)
        if lab is None:
            logger.warning("Lab %s not found for schedule item: %s", rule.room, rule.subject)
            summary.skipped_rules.append(RuleSkipped(index, f"Lab {rule.room} not found", raw))
            summary.processed_rules += 1
            continue

        school_id = rule.school_id or resolve_school(rule.subject)
        if school_id and repository.get_school(school_id) is None:
            logger.warning("School %s not found for schedule item: %s", school_id, rule.subject)
            school_id = None
        description = f"{professor_marker}{rule.professor}"
        existing = repository.lab_reservations(lab.id, window_start, window_end)
        created = updated = collisions = 0

        for interval in rule.occurrences(semester_start, semester_end):
            same_start = find_conflicts(existing, interval, mode=EXACT_START, lab_id=lab.id)
            if same_start:
                found = same_start[0]
                found.school_id = school_id
                found.professor_name = rule.professor or None
                found.description = description
                updated += 1
                continue

            if find_conflicts(existing, interval, mode=OVERLAP, lab_id=lab.id):
                collisions += 1
                continue

            reservation = repository.new_reservation(
                lab_id=lab.id,
                start_time=interval.start,
                end_time=interval.end,
                subject=rule.subject[:100],
                description=description,
                professor_name=rule.professor or None,
                type=CLASS,
                status=CONFIRMED,
                school_id=school_id,
                user_id=creator.id,
            )
            existing.append(reservation)
            created += 1

        try:
            repository.commit()
        except ConflictDetected as exc:
            # lost a race with a concurrent writer; this rule can be re-run
            summary.skipped_rules.append(RuleSkipped(index, exc.message, raw))
        else:
            summary.created += created
            summary.updated += updated
            summary.collisions += collisions
        summary.processed_rules += 1

    logger.info(
        "Imported recurring schedule: %d created, %d updated, %d collisions, %d rules skipped",
        summary.created, summary.updated, summary.collisions, len(summary.skipped_rules),
    )
    return summary
