from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models.db import db
from models.lab import Lab
from models.reservation import Reservation
from models.school import School
from models.user import User, Role
from scheduling.constants import CANCELLED, OCCUPIED
from scheduling.errors import ConflictDetected
from scheduling.repository import ReservationRepository
from security.rbac import ADMIN


class SqlAlchemyRepository(ReservationRepository):
    """ReservationRepository over the Flask-SQLAlchemy session."""

    def __init__(self, session=None):
        self.session = session or db.session

    def get_lab(self, lab_id):
        return self.session.get(Lab, lab_id)

    def get_lab_by_name(self, name: str):
        name = (name or "").strip().upper()
        if not name:
            return None
        return Lab.query.filter(func.upper(Lab.name) == name).first()

    def list_labs(self):
        return Lab.query.order_by(Lab.name.asc()).all()

    def lock_lab(self, lab_id):
        # row lock on the lab serializes check-then-create (no-op on SQLite)
        return (
            Lab.query
            .filter(Lab.id == lab_id)
            .with_for_update()
            .first()
        )

    def get_reservation(self, reservation_id):
        return self.session.get(Reservation, reservation_id)

    def lab_reservations(self, lab_id, start=None, end=None, include_cancelled=False):
        q = Reservation.query.filter(Reservation.lab_id == lab_id)
        if not include_cancelled:
            q = q.filter(Reservation.status != CANCELLED)
        if start is not None:
            q = q.filter(Reservation.end_time >= start)
        if end is not None:
            q = q.filter(Reservation.start_time <= end)
        return q.order_by(Reservation.start_time.asc()).all()

    def occupied_reservations(self, lab_id):
        return (
            Reservation.query
            .filter(Reservation.lab_id == lab_id, Reservation.status == OCCUPIED)
            .order_by(Reservation.start_time.asc())
            .all()
        )

    def new_reservation(self, **fields):
        reservation = Reservation(**fields)
        self.session.add(reservation)
        return reservation

    def get_school(self, school_id):
        return self.session.get(School, school_id)

    def admin_actor(self):
        return (
            User.query
            .join(User.roles)
            .filter(Role.name == ADMIN, User.is_active.is_(True))
            .order_by(User.id.asc())
            .first()
        )

    def commit(self):
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            # uq_reservation_lab_start_active fired: someone else got there first
            raise ConflictDetected("Lab already has a reservation starting at that time")

    def rollback(self):
        self.session.rollback()
