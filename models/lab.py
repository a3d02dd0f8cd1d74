from datetime import datetime
from models.db import db
from models.software import lab_software

class Lab(db.Model):
    __tablename__ = "labs"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False, index=True)  # stored upper-case, e.g. SALA 8
    capacity = db.Column(db.Integer, nullable=False, default=20)
    description = db.Column(db.Text, nullable=True)

    # permanent labs never show up in ad-hoc search or booking
    is_permanent = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    software = db.relationship("Software", secondary=lab_software, back_populates="labs", order_by="Software.name")

    __table_args__ = (
        db.CheckConstraint("capacity > 0", name="ck_lab_capacity_positive"),
    )

    @property
    def software_names(self):
        return {s.name for s in self.software}
