"""Loaders for the room catalog and software inventory JSON files."""
import json
import logging

from models import db
from models.lab import Lab
from models.software import Software

logger = logging.getLogger(__name__)

def read_json(path):
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)

def is_permanent_note(note, markers) -> bool:
    return bool(note) and any(m.lower() in note.lower() for m in markers or [])

def import_rooms(rooms, permanent_markers=None) -> int:
    """Upsert labs from [{"name", "capacity", "note"}] by upper-cased name."""
    count = 0
    for room in rooms:
        name = (room.get("name") or "").strip().upper()
        if not name:
            logger.warning("Skipping room without name: %r", room)
            continue
        note = room.get("note") or ""
        capacity = int(room.get("capacity") or 20)

        lab = Lab.query.filter_by(name=name).first()
        if lab is None:
            lab = Lab(name=name)
            db.session.add(lab)
        lab.capacity = capacity
        lab.description = note
        lab.is_permanent = is_permanent_note(note, permanent_markers)
        count += 1
    db.session.commit()
    return count

def get_or_create_software(name: str) -> Software:
    name = name.strip()
    sw = Software.query.filter(db.func.lower(Software.name) == name.lower()).first()
    if sw is None:
        sw = Software(name=name)
        db.session.add(sw)
    return sw

def seed_software(inventory) -> int:
    """Attach {"salas": [{"numero", "software": [...]}]} to labs named SALA <numero>."""
    updated = 0
    for sala in inventory.get("salas", []):
        lab_name = f"SALA {sala.get('numero')}".upper()
        lab = Lab.query.filter_by(name=lab_name).first()
        if lab is None:
            logger.warning("Lab %s not found in database.", lab_name)
            continue
        names = {s.strip().lower(): s.strip() for s in sala.get("software", []) if s and s.strip()}
        lab.software = [get_or_create_software(n) for n in names.values()]
        updated += 1
    db.session.commit()
    return updated
