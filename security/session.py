"""
Server-side operator sessions. The cookie carries a random token; only its
SHA-256 digest is stored, so a leaked sessions table cannot be replayed.
"""
import hashlib
import secrets
from datetime import datetime, timedelta
from flask import request, current_app

from models import db
from models.session import Session


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _live_sessions(**filters):
    return Session.query.filter_by(revoked=False, **filters)


def create_session(user_id: int) -> str:
    raw_token = secrets.token_urlsafe(32)
    now = datetime.utcnow()
    db.session.add(Session(
        user_id=user_id,
        token_hash=_digest(raw_token),
        created_at=now,
        last_seen_at=now,
        expires_at=now + timedelta(seconds=current_app.config.get("SESSION_LIFETIME_SECONDS", 12 * 60 * 60)),
        ip=request.headers.get("X-Forwarded-For", request.remote_addr),
        user_agent=(request.headers.get("User-Agent") or "")[:255],
    ))
    db.session.commit()
    return raw_token


def _expired(sess, now) -> bool:
    if sess.expires_at <= now:
        return True
    idle = timedelta(seconds=current_app.config.get("IDLE_TIMEOUT_SECONDS", 60 * 60))
    return (sess.last_seen_at or sess.created_at) + idle <= now


def get_session_from_request():
    raw_token = request.cookies.get(current_app.config.get("AUTH_COOKIE_NAME", "labslot_session"))
    if not raw_token:
        return None

    now = datetime.utcnow()
    sess = _live_sessions(token_hash=_digest(raw_token)).first()
    if sess is None or _expired(sess, now):
        return None

    sess.last_seen_at = now
    db.session.commit()
    return sess


def revoke_session(raw_token: str) -> bool:
    sess = _live_sessions(token_hash=_digest(raw_token)).first() if raw_token else None
    if sess is None:
        return False
    sess.revoked = True
    db.session.commit()
    return True


def revoke_all_sessions(user_id: int) -> int:
    """Logging in again ends every other session of the same operator."""
    count = _live_sessions(user_id=user_id).update({"revoked": True})
    db.session.commit()
    return count
