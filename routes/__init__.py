from .health import health_bp
from .auth import auth_bp
from .admin import admin_bp
from .labs import labs_bp
from .reservations import reservations_bp
from .catalog import catalog_bp
