from utils.scheduler import get_scheduler

def _iso(value):
    return value.isoformat() if value else None

def lab_json(lab):
    return {
        "id": lab.id,
        "name": lab.name,
        "capacity": lab.capacity,
        "description": lab.description,
        "is_permanent": lab.is_permanent,
        "software": sorted(lab.software_names),
    }

def reservation_json(r):
    if r is None:
        return None
    return {
        "id": r.id,
        "lab_id": r.lab_id,
        "subject": r.subject,
        "description": r.description,
        "professor": get_scheduler().professor_name(r),
        "type": r.type,
        "status": r.status,
        "school_id": r.school_id,
        "start_time": _iso(r.start_time),
        "end_time": _iso(r.end_time),
        "check_in_time": _iso(r.check_in_time),
        "check_out_time": _iso(r.check_out_time),
        "created_by": r.user_id,
    }

def status_json(lab, lab_status):
    return {
        "lab": lab_json(lab),
        "status": lab_status.status,
        "current_reservation": reservation_json(lab_status.current),
        "overdue_reservation": reservation_json(lab_status.overdue),
        "next_reservation": reservation_json(lab_status.next),
    }

def slot_json(slot):
    split_at = get_scheduler().settings.split_boundary
    return {
        "start_time": _iso(slot.start),
        "end_time": _iso(slot.end),
        "kind": slot.kind,
        "period": "MORNING" if slot.start.time() < split_at else "AFTERNOON",
        "reservation": reservation_json(slot.reservation),
    }
