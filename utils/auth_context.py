from functools import wraps
from flask import g, jsonify

from models import db
from models.user import User
from security.session import get_session_from_request


def load_current_user():
    """before_request hook: resolves the session cookie into g.user."""
    g.session = get_session_from_request()
    user = db.session.get(User, g.session.user_id) if g.session else None
    g.user = user if user is not None and user.is_active else None


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if g.get("user") is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper
