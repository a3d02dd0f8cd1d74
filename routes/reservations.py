from flask import Blueprint, jsonify, g

from routes.helpers import json_object, parse_datetime, text_field
from routes.serializers import reservation_json
from security.rbac import ADMIN, require_roles
from utils.audit import log_event
from utils.scheduler import get_scheduler

reservations_bp = Blueprint("reservations", __name__, url_prefix="/reservations")


# ---------- ADMIN: ad-hoc booking (CONFLICT SAFE) ----------
@reservations_bp.post("")
@require_roles(ADMIN)
def create_reservation():
    data = json_object()
    lab_id = data.get("lab_id")
    subject = text_field(data, "subject")
    if not isinstance(lab_id, int) or isinstance(lab_id, bool) or not subject:
        return jsonify(error="lab_id, subject, start_time, end_time are required"), 400

    start = parse_datetime(data.get("start_time"), "start_time")
    end = parse_datetime(data.get("end_time"), "end_time")

    reservation = get_scheduler().book(
        lab_id,
        start,
        end,
        subject,
        creator=g.user,
        description=text_field(data, "description"),
        professor_name=text_field(data, "professor"),
        type=(text_field(data, "type") or "EVENT").upper(),
        school_id=text_field(data, "school_id"),
    )

    log_event("RESERVATION_CREATE", user_id=g.user.id, entity="reservation", entity_id=reservation.id,
              metadata={"lab_id": reservation.lab_id, "start_time": start, "end_time": end})
    return jsonify(reservation_json(reservation)), 201


# ---------- ADMIN: key hand-off ----------
@reservations_bp.post("/<int:reservation_id>/check-in")
@require_roles(ADMIN)
def check_in(reservation_id: int):
    reservation = get_scheduler().check_in(reservation_id)
    log_event("CHECK_IN", user_id=g.user.id, entity="reservation", entity_id=reservation_id)
    return jsonify(reservation_json(reservation)), 200


@reservations_bp.post("/<int:reservation_id>/check-out")
@require_roles(ADMIN)
def check_out(reservation_id: int):
    reservation = get_scheduler().check_out(reservation_id)
    log_event("CHECK_OUT", user_id=g.user.id, entity="reservation", entity_id=reservation_id)
    return jsonify(reservation_json(reservation)), 200


# ---------- ADMIN: cancel ----------
@reservations_bp.post("/<int:reservation_id>/cancel")
@require_roles(ADMIN)
def cancel_reservation(reservation_id: int):
    data = json_object()
    reason = text_field(data, "reason") or "Admin cancellation"

    reservation = get_scheduler().cancel(reservation_id, reason=reason)
    log_event("RESERVATION_CANCEL", user_id=g.user.id, entity="reservation", entity_id=reservation_id,
              metadata={"reason": reason})
    return jsonify(reservation_json(reservation)), 200
