from .errors import CollaboratorFailure, ConflictError, NotFoundError, SchedulingError, ValidationError
