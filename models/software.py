from models.db import db

# association table for many-to-many Lab <-> Software
lab_software = db.Table(
    "lab_software",
    db.Column("lab_id", db.Integer, db.ForeignKey("labs.id"), primary_key=True),
    db.Column("software_id", db.Integer, db.ForeignKey("software.id"), primary_key=True),
)

class Software(db.Model):
    __tablename__ = "software"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False, index=True)

    labs = db.relationship("Lab", secondary=lab_software, back_populates="software")
