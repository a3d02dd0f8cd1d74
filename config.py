import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as labslot.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "labslot.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie name for our auth token
    AUTH_COOKIE_NAME = "labslot_session"

    # 12 hours session lifetime (one operator shift)
    SESSION_LIFETIME_SECONDS = 12 * 60 * 60

    # Idle timeout: 60 minutes
    IDLE_TIMEOUT_SECONDS = 60 * 60

    # Session/cookie security defaults
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

    # Semester window bounding recurring schedule expansion (YYYY-MM-DD)
    SEMESTER_START = os.getenv("SEMESTER_START", "2025-09-01")
    SEMESTER_END = os.getenv("SEMESTER_END", "2026-01-31")

    # Day timeline shown per lab, split into morning/afternoon
    TIMELINE_DAY_START = os.getenv("TIMELINE_DAY_START", "07:00")
    TIMELINE_DAY_END = os.getenv("TIMELINE_DAY_END", "22:00")
    TIMELINE_SPLIT_AT = os.getenv("TIMELINE_SPLIT_AT", "13:00")

    # Imported classes carry "<marker><professor>" in their description
    PROFESSOR_MARKER = os.getenv("PROFESSOR_MARKER", "Profesor: ")
    UNKNOWN_USER_LABEL = "Unknown user"

    # Fallback school classification: ordered, first keyword match wins.
    # SCHOOL_KEYWORDS_FILE may point to a JSON list of {"keywords": [...], "school": "CODE"}.
    SCHOOL_KEYWORDS_FILE = os.getenv("SCHOOL_KEYWORDS_FILE")
    SCHOOL_KEYWORDS = [
        (("programacion", "software", "base de datos", "redes", "algoritmo"), "ING"),
        (("contabilidad", "finanzas", "economia", "marketing", "administracion"), "NEG"),
        (("diseño", "arte", "ilustracion", "fotografia"), "DIS"),
        (("ingles", "english", "idioma", "frances"), "IDI"),
    ]
    DEFAULT_SCHOOL_CODE = "TC"  # tronco comun

    # Seeded school catalog (id, name, color)
    DEFAULT_SCHOOLS = [
        ("ING", "Ingenieria", "#2563EB"),
        ("NEG", "Negocios", "#059669"),
        ("DIS", "Diseño", "#DB2777"),
        ("IDI", "Idiomas", "#D97706"),
        ("TC", "Tronco Comun", "#6B7280"),
    ]

    # Room notes that mark a lab as permanently assigned
    PERMANENT_ROOM_MARKERS = [
        "Préstamo de Internet Permanente",
        "Uso Permanente Idiomas",
    ]

    # Basic app settings
    DEBUG = False
