from flask import current_app, g

from models.repository import SqlAlchemyRepository
from scheduling import SchedulingService, SchedulingSettings
from scheduling.schools import load_table, normalize_table

def load_settings(config) -> SchedulingSettings:
    settings = SchedulingSettings.from_config(config)
    path = config.get("SCHOOL_KEYWORDS_FILE")
    settings.school_keywords = load_table(path) if path else normalize_table(settings.school_keywords)
    return settings

def get_scheduler() -> SchedulingService:
    """One SchedulingService per request, bound to the request's db session."""
    if "scheduler" not in g:
        settings = current_app.extensions.get("labslot_settings")
        if settings is None:
            settings = current_app.extensions["labslot_settings"] = load_settings(current_app.config)
        g.scheduler = SchedulingService(SqlAlchemyRepository(), settings)
    return g.scheduler
