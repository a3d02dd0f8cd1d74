from datetime import date

from flask import Blueprint, jsonify, g, request
from routes.helpers import as_of_param, day_param
from routes.serializers import lab_json, slot_json, status_json
from security.rbac import ADMIN, require_roles
from utils.audit import log_event
from utils.scheduler import get_scheduler

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.get("/dashboard")
@require_roles(ADMIN)
def dashboard():
    as_of = as_of_param(request.args.get("date"))
    rows = get_scheduler().dashboard(as_of)
    return jsonify([status_json(lab, result) for lab, result in rows]), 200


@admin_bp.get("/general-schedule")
@require_roles(ADMIN)
def general_schedule():
    day = day_param(request.args.get("date"))
    rows = get_scheduler().general_schedule(day)
    return jsonify(
        date=day.isoformat(),
        labs=[{"lab": lab_json(lab), "slots": [slot_json(s) for s in slots]} for lab, slots in rows],
    ), 200


@admin_bp.post("/import-schedule")
@require_roles(ADMIN)
def import_schedule():
    data = request.get_json(silent=True)
    if isinstance(data, list):
        data = {"rules": data}
    data = data or {}

    rules = data.get("rules")
    if not isinstance(rules, list):
        return jsonify(error="rules must be a list of schedule items"), 400

    try:
        semester_start = date.fromisoformat(data["semester_start"]) if data.get("semester_start") else None
        semester_end = date.fromisoformat(data["semester_end"]) if data.get("semester_end") else None
    except ValueError:
        return jsonify(error="Invalid semester date. Use YYYY-MM-DD"), 400
    if semester_start and semester_end and semester_end < semester_start:
        return jsonify(error="semester_end must not be before semester_start"), 400

    summary = get_scheduler().expand_recurring_schedule(rules, semester_start, semester_end)

    log_event("SCHEDULE_IMPORT", user_id=g.user.id, metadata=summary.to_dict())
    return jsonify(summary.to_dict()), 200
