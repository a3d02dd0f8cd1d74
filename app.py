import logging

from flask import Flask, jsonify
from config import Config
from routes import health_bp, auth_bp, admin_bp, labs_bp, reservations_bp, catalog_bp

from models import db
from flask_migrate import Migrate
from sqlalchemy import inspect
from scheduling.errors import SchedulingError, ConflictDetected
from utils.seed import seed_roles, seed_schools
from utils.auth_context import load_current_user
from security.csrf import csrf_protect


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", logging.INFO))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(labs_bp)
    app.register_blueprint(reservations_bp)
    app.register_blueprint(catalog_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Seed roles and schools once the schema exists (safe & idempotent)
    with app.app_context():
        if app.config.get("CREATE_TABLES"):
            db.create_all()
        if inspect(db.engine).has_table("roles"):
            seed_roles()
            seed_schools()

    # session cookie -> g.user, then CSRF for state-changing requests
    app.before_request(load_current_user)
    app.before_request(csrf_protect)

    @app.errorhandler(SchedulingError)
    def _scheduling_error(exc):
        db.session.rollback()
        body = {"error": exc.message}
        if isinstance(exc, ConflictDetected) and exc.conflicts:
            body["conflicts"] = [r.id for r in exc.conflicts]
        return jsonify(body), exc.status_code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp


    register_cli(app)


    return app

#-------------------------
from datetime import date

import click
from models.user import User, Role
from models.reservation import Reservation
from scheduling.status import parse_professor_marker
from security.password import hash_password
from security.rbac import ADMIN
from utils.audit import log_event
from utils.catalog_import import import_rooms, read_json, seed_software
from utils.scheduler import load_settings
from models.repository import SqlAlchemyRepository
from scheduling import SchedulingService


def _iso_date(ctx, param, value):
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter("use YYYY-MM-DD")


def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    @click.option("--password", help="Create the user with this password if it does not exist.")
    @click.option("--name", "full_name", help="Display name for a new user.")
    def make_admin(email, password, full_name):
        """Promote (or create) a user as ADMIN by email (bootstrap)."""
        email = email.strip().lower()
        user = User.query.filter_by(email=email).first()
        if not user:
            if not password:
                click.echo("User not found (pass --password to create it)")
                return
            user = User(email=email, password_hash=hash_password(password), full_name=full_name)
            db.session.add(user)

        admin_role = Role.query.filter_by(name=ADMIN).first()
        if not admin_role:
            admin_role = Role(name=ADMIN)
            db.session.add(admin_role)

        if admin_role not in user.roles:
            user.roles.append(admin_role)
        db.session.commit()

        click.echo(f"{user.email} promoted to ADMIN")

    @app.cli.command("import-rooms")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_rooms_cmd(path):
        """Upsert labs from a rooms.json file."""
        count = import_rooms(read_json(path), app.config.get("PERMANENT_ROOM_MARKERS"))
        log_event("ROOMS_IMPORT", metadata={"path": path, "rooms": count})
        click.echo(f"Imported {count} rooms.")

    @app.cli.command("seed-software")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def seed_software_cmd(path):
        """Attach installed software from an inventory JSON file."""
        count = seed_software(read_json(path))
        click.echo(f"Updated software for {count} labs.")

    @app.cli.command("import-schedule")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    @click.option("--semester-start", callback=_iso_date, help="YYYY-MM-DD, defaults to SEMESTER_START.")
    @click.option("--semester-end", callback=_iso_date, help="YYYY-MM-DD, defaults to SEMESTER_END.")
    @click.option("--skip", default=0, show_default=True, help="Resume after this many already processed rules.")
    def import_schedule_cmd(path, semester_start, semester_end, skip):
        """Expand recurring weekly classes into reservations."""
        rules = read_json(path)
        if not isinstance(rules, list):
            raise click.ClickException("Schedule file must hold a JSON list")

        service = SchedulingService(SqlAlchemyRepository(), load_settings(app.config))
        summary = service.expand_recurring_schedule(rules[skip:], semester_start, semester_end)

        log_event("SCHEDULE_IMPORT", metadata={"path": path, **summary.to_dict()})
        click.echo(
            f"Imported {summary.created} recurring reservations "
            f"({summary.updated} updated, {summary.collisions} collisions, "
            f"{len(summary.skipped_rules)} rules skipped)."
        )
        for skipped in summary.skipped_rules:
            click.echo(f"  rule {skip + skipped.index}: {skipped.reason}")

    @app.cli.command("backfill-professors")
    def backfill_professors():
        """Copy professor names out of description markers into professor_name."""
        marker = app.config.get("PROFESSOR_MARKER", "Profesor: ")
        rows = Reservation.query.filter(Reservation.professor_name.is_(None)).all()
        filled = 0
        for r in rows:
            name = parse_professor_marker(r.description, marker)
            if name:
                r.professor_name = name[:160]
                filled += 1
        db.session.commit()
        click.echo(f"Backfilled professor for {filled} reservations.")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
