from flask import current_app
from models import db
from models.user import Role
from models.school import School
from security.rbac import ROLES

def seed_roles():
    existing = {r.name for r in Role.query.all()}
    for name in ROLES:
        if name not in existing:
            db.session.add(Role(name=name))
    db.session.commit()

def seed_schools():
    """Schools referenced by the keyword table must exist before imports run."""
    existing = {s.id for s in School.query.all()}
    for code, name, color in current_app.config.get("DEFAULT_SCHOOLS", []):
        if code not in existing:
            db.session.add(School(id=code, name=name, color=color))
    db.session.commit()
