from functools import wraps
from flask import g, jsonify

ADMIN = "ADMIN"
PROFESSOR = "PROFESSOR"
ROLES = (ADMIN, PROFESSOR)


def has_role(role_name: str) -> bool:
    user = getattr(g, "user", None)
    return bool(user) and (user.has_role(ADMIN) or user.has_role(role_name))


def require_roles(*role_names: str):
    """
    Usage: @require_roles(ADMIN)

    ADMIN passes every role check.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if getattr(g, "user", None) is None:
                return jsonify(error="Authentication required"), 401
            if not any(has_role(name) for name in role_names):
                return jsonify(error="Forbidden"), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator
