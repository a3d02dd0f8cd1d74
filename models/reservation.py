from datetime import datetime
from models.db import db

class Reservation(db.Model):
    __tablename__ = "reservations"

    id = db.Column(db.Integer, primary_key=True)

    lab_id = db.Column(db.Integer, db.ForeignKey("labs.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)  # creator
    school_id = db.Column(db.String(20), db.ForeignKey("schools.id"), nullable=True, index=True)

    # half-open interval [start_time, end_time)
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False)

    subject = db.Column(db.String(100), nullable=False, default="")
    description = db.Column(db.Text, nullable=True)
    professor_name = db.Column(db.String(160), nullable=True)

    type = db.Column(db.String(10), nullable=False, default="CLASS")
    # type values: CLASS, EVENT

    status = db.Column(db.String(20), nullable=False, default="CONFIRMED")
    # status values: CONFIRMED, OCCUPIED, COMPLETED, CANCELLED

    check_in_time = db.Column(db.DateTime, nullable=True)
    check_out_time = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancel_reason = db.Column(db.String(120), nullable=True)

    lab = db.relationship("Lab")
    user = db.relationship("User")
    school = db.relationship("School")

    __table_args__ = (
        db.CheckConstraint("end_time > start_time", name="ck_reservation_interval"),
        # Backstop for imports and racing bookings: one live reservation per lab start instant
        db.Index(
            "uq_reservation_lab_start_active",
            "lab_id",
            "start_time",
            unique=True,
            sqlite_where=db.text("status != 'CANCELLED'"),
            postgresql_where=db.text("status != 'CANCELLED'"),
        ),
    )
