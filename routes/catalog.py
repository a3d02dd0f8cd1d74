import re

from sqlalchemy.exc import IntegrityError

from flask import Blueprint, request, jsonify, g
from models import db
from models.school import School
from models.software import Software
from security.rbac import ADMIN, require_roles
from utils.audit import log_event
from utils.auth_context import login_required

catalog_bp = Blueprint("catalog", __name__)

COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


# ---------- schools ----------
@catalog_bp.get("/schools")
@login_required
def list_schools():
    rows = School.query.order_by(School.id.asc()).all()
    return jsonify([{"id": s.id, "name": s.name, "color": s.color} for s in rows]), 200


@catalog_bp.post("/schools")
@require_roles(ADMIN)
def create_school():
    data = request.get_json(silent=True) or {}
    code = (data.get("id") or "").strip().upper()
    name = (data.get("name") or "").strip()
    color = (data.get("color") or "#9CA3AF").strip()

    if not code or not name:
        return jsonify(error="id and name are required"), 400
    if not COLOR_RE.match(color):
        return jsonify(error="color must look like #RRGGBB"), 400

    school = School(id=code, name=name, color=color)
    db.session.add(school)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="School already exists"), 409

    log_event("SCHOOL_CREATE", user_id=g.user.id, entity="school", entity_id=school.id)
    return jsonify(id=school.id, name=school.name, color=school.color), 201


# ---------- software ----------
@catalog_bp.get("/software")
@login_required
def list_software():
    rows = Software.query.order_by(Software.name.asc()).all()
    return jsonify([{"id": s.id, "name": s.name} for s in rows]), 200


@catalog_bp.post("/software")
@require_roles(ADMIN)
def create_software():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    if not name:
        return jsonify(error="Software name required"), 400

    sw = Software(name=name)
    db.session.add(sw)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Software already exists"), 409

    log_event("SOFTWARE_CREATE", user_id=g.user.id, entity="software", entity_id=sw.id)
    return jsonify(id=sw.id, name=sw.name), 201
