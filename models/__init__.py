from .db import db
from .user import User, Role, user_roles
from .audit_log import AuditLog
from .session import Session
from .software import Software, lab_software
from .lab import Lab
from .school import School
from .reservation import Reservation
