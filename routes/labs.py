from sqlalchemy.exc import IntegrityError

from flask import Blueprint, request, jsonify, g
from models import db
from models.lab import Lab
from routes.helpers import as_of_param, day_param
from routes.serializers import lab_json, reservation_json, slot_json, status_json
from security.rbac import ADMIN, require_roles
from utils.audit import log_event
from utils.auth_context import login_required
from utils.catalog_import import get_or_create_software
from utils.scheduler import get_scheduler
from scheduling.timeline import free_ranges

labs_bp = Blueprint("labs", __name__, url_prefix="/labs")


def _apply_lab_fields(lab, data):
    if "name" in data:
        name = (data.get("name") or "").strip().upper()
        if not name:
            return "Lab name required"
        lab.name = name
    if "capacity" in data:
        try:
            capacity = int(data.get("capacity"))
        except (TypeError, ValueError):
            return "capacity must be a positive integer"
        if capacity <= 0:
            return "capacity must be a positive integer"
        lab.capacity = capacity
    if "description" in data:
        lab.description = (data.get("description") or "").strip() or None
    if "is_permanent" in data:
        lab.is_permanent = bool(data.get("is_permanent"))
    if "software" in data:
        names = data.get("software") or []
        if not isinstance(names, list):
            return "software must be a list of names"
        unique = {n.strip().lower(): n.strip() for n in names if isinstance(n, str) and n.strip()}
        lab.software = [get_or_create_software(n) for n in unique.values()]
    return None


# ---------- catalog ----------
@labs_bp.get("")
@login_required
def list_labs():
    labs = Lab.query.order_by(Lab.name.asc()).all()
    return jsonify([lab_json(l) for l in labs]), 200


@labs_bp.post("")
@require_roles(ADMIN)
def create_lab():
    data = request.get_json(silent=True) or {}
    if not (data.get("name") or "").strip():
        return jsonify(error="Lab name required"), 400

    lab = Lab(capacity=20)
    error = _apply_lab_fields(lab, data)
    if error:
        return jsonify(error=error), 400

    db.session.add(lab)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Lab name already exists"), 409

    log_event("LAB_CREATE", user_id=g.user.id, entity="lab", entity_id=lab.id)
    return jsonify(lab_json(lab)), 201


@labs_bp.patch("/<int:lab_id>")
@require_roles(ADMIN)
def update_lab(lab_id: int):
    lab = db.session.get(Lab, lab_id)
    if not lab:
        return jsonify(error="Lab not found"), 404

    data = request.get_json(silent=True) or {}
    error = _apply_lab_fields(lab, data)
    if error:
        db.session.rollback()
        return jsonify(error=error), 400

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Lab name already exists"), 409

    log_event("LAB_UPDATE", user_id=g.user.id, entity="lab", entity_id=lab.id, metadata={"fields": sorted(data)})
    return jsonify(lab_json(lab)), 200


# ---------- status / schedule ----------
@labs_bp.get("/<int:lab_id>/status")
@login_required
def lab_status(lab_id: int):
    as_of = as_of_param(request.args.get("date"))
    scheduler = get_scheduler()
    result = scheduler.resolve_status(lab_id, as_of)
    return jsonify(status_json(scheduler.repository.get_lab(lab_id), result)), 200


@labs_bp.get("/<int:lab_id>/schedule")
@login_required
def lab_schedule(lab_id: int):
    day = day_param(request.args.get("date"))
    scheduler = get_scheduler()
    slots = scheduler.get_timeline(lab_id, day)
    return jsonify(
        lab_id=lab_id,
        date=day.isoformat(),
        slots=[slot_json(s) for s in slots],
        free_ranges=[{"start_time": s.isoformat(), "end_time": e.isoformat()} for s, e in free_ranges(slots)],
        reservations=[reservation_json(r) for r in scheduler.day_reservations(lab_id, day)],
    ), 200


# ---------- availability search ----------
@labs_bp.get("/search")
@login_required
def search_labs():
    args = request.args
    day = day_param(args.get("date"))
    start_time = args.get("startTime") or args.get("start_time")
    if not start_time:
        return jsonify(error="startTime is required (HH:MM)"), 400

    try:
        duration = float(args.get("duration", 1))
        capacity = int(args.get("capacity", 0))
    except ValueError:
        return jsonify(error="duration and capacity must be numbers"), 400

    software = [s for s in (args.get("software") or "").split(",") if s.strip()]
    only_mac = (args.get("onlyMac") or args.get("only_mac") or "").lower() == "true"

    labs = get_scheduler().find_available_labs(
        day, start_time, duration, capacity,
        required_software=software or None,
        only_mac=only_mac,
    )
    return jsonify([lab_json(l) for l in labs]), 200
