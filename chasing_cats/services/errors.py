"""Domain errors raised by the challenge service.

Routers never catch these; ``chasing_cats.main`` maps each class to an HTTP
status and a stable ``code`` so clients can tell "already voted" apart from
"voting is closed".
"""


class ServiceError(Exception):
    """Base exception for domain rule violations."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed input such as a relative image URL or over-length text."""

    code = "validation_error"


class NotFoundError(ServiceError):
    """Referenced challenge, entry or subscription does not exist."""

    code = "not_found"


class ConflictError(ServiceError):
    """Uniqueness invariant violated, including the loser of a race."""

    code = "conflict"


class InvalidStateError(ServiceError):
    """Operation attempted outside the lifecycle phase that permits it."""

    code = "invalid_state"


class ForbiddenError(ServiceError):
    """Authorization-shaped rejection, such as voting for your own entry."""

    code = "forbidden"
