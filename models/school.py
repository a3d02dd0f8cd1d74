from models.db import db

class School(db.Model):
    __tablename__ = "schools"

    id = db.Column(db.String(20), primary_key=True)  # short code, e.g. ING, TC
    name = db.Column(db.String(160), nullable=False)
    color = db.Column(db.String(20), nullable=False, default="#9CA3AF")
