from datetime import date, datetime

from flask import request

from scheduling.errors import InvalidInterval, SchedulingError

def parse_datetime(value, field="date"):
    # Expect ISO format like "2025-11-27T10:00:00" or "2025-11-27"
    if not value:
        raise InvalidInterval(f"{field} is required")
    if not isinstance(value, str):
        raise InvalidInterval(f"Invalid {field}. Use ISO e.g. 2025-11-27T10:00:00")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        raise InvalidInterval(f"Invalid {field}. Use ISO e.g. 2025-11-27T10:00:00")
    # UTC strings from the dashboard become naive local time
    return parsed.astimezone().replace(tzinfo=None) if parsed.tzinfo else parsed

def json_object():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def text_field(data, key):
    """Stripped string body field, None when missing or blank."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchedulingError(f"{key} must be a string")
    return value.strip() or None

def as_of_param(value):
    """`?date=` simulates "now" on dashboards; missing means the real clock."""
    return parse_datetime(value) if value else datetime.now()

def day_param(value) -> date:
    return as_of_param(value).date()
