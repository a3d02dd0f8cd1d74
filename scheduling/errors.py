class SchedulingError(Exception):
    """Base error for scheduling operations. Routes turn it into a JSON error."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(SchedulingError):
    status_code = 404


class InvalidTransition(SchedulingError):
    status_code = 409


class InvalidInterval(SchedulingError):
    status_code = 400


class ConflictDetected(SchedulingError):
    status_code = 409

    def __init__(self, message: str, conflicts=None):
        super().__init__(message)
        self.conflicts = list(conflicts or [])


class RuleSkipped(SchedulingError):
    """
    A recurrence rule that could not be expanded.
    Collected into the import summary; never escapes a batch.
    """

    def __init__(self, index: int, reason: str, rule=None):
        super().__init__(reason)
        self.index = index
        self.reason = reason
        self.rule = rule

    def to_dict(self):
        return {"index": self.index, "reason": self.reason}
