# Exceptions raised by the scheduling engine. The app maps each one to an HTTP status.

class SchedulingError(Exception):
    status_code = 500
    code = "SCHEDULING_ERROR"

    def __init__(self, message: str, *args):
        super().__init__(message, *args)
        self.message = message


class ValidationError(SchedulingError):
    """
    Missing or malformed input the caller can correct, e.g. an empty list of days,
    a time range whose start is not before its end, or a booking without a guest email.
    """
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(SchedulingError):
    """Unknown host, slot or slot type."""
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(SchedulingError):
    """
    The requested interval overlaps an existing booking for the host.
    Distinct from ValidationError so a client can ask the guest to pick another time.
    """
    status_code = 409
    code = "CONFLICT"


class CollaboratorFailure(SchedulingError):
    """
    A calendar or email call failed. Never fatal to a committed booking.
    """
    status_code = 502
    code = "COLLABORATOR_FAILURE"
