from .errors import (
    SchedulingError,
    NotFound,
    InvalidTransition,
    InvalidInterval,
    ConflictDetected,
    RuleSkipped,
)
from .service import SchedulingService, SchedulingSettings
