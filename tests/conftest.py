import pytest

from app import create_app
from models import db
from models.lab import Lab
from models.reservation import Reservation
from models.user import User, Role
from models.repository import SqlAlchemyRepository
from security.csrf import CSRF_COOKIE, CSRF_HEADER
from security.password import hash_password
from utils.scheduler import load_settings
from scheduling import SchedulingService

ADMIN_EMAIL = "admin@example.edu"
ADMIN_PASSWORD = "password123"


@pytest.fixture(scope="function")
def app():
    """Isolated in-memory database for each test."""
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret-key",
        "CREATE_TABLES": True,
        "SEMESTER_START": "2025-09-01",
        "SEMESTER_END": "2026-01-31",
    })
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def admin(app):
    user = User(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD, rounds=4), full_name="Admin User")
    user.roles.append(Role.query.filter_by(name="ADMIN").first())
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def service(app, admin):
    return SchedulingService(SqlAlchemyRepository(), load_settings(app.config))


@pytest.fixture
def make_lab(app):
    def _make(name="SALA 8", capacity=20, is_permanent=False, description=None):
        lab = Lab(name=name, capacity=capacity, is_permanent=is_permanent, description=description)
        db.session.add(lab)
        db.session.commit()
        return lab
    return _make


@pytest.fixture
def make_reservation(app, admin):
    def _make(lab, start, end, status="CONFIRMED", type="EVENT", subject="Reunion", **fields):
        r = Reservation(
            lab_id=lab.id, start_time=start, end_time=end, status=status, type=type,
            subject=subject, user_id=admin.id, **fields
        )
        db.session.add(r)
        db.session.commit()
        return r
    return _make


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client, admin):
    """Logged-in admin client that echoes the CSRF cookie on every request."""
    response = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    token = client.get_cookie(CSRF_COOKIE).value
    client.environ_base["HTTP_" + CSRF_HEADER.upper().replace("-", "_")] = token
    return client
