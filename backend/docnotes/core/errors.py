# docnotes/core/errors.py
"""
Error taxonomy shared by stores, services and the HTTP layer.

Every error carries a stable machine-readable `code` and a human message.
Each kind carries its HTTP status code, which the exception handler in
docnotes.main uses; the core only needs to raise the right kind.
"""


class DocnotesError(Exception):
    """Base class for all errors reported to callers."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(DocnotesError):
    """Missing or malformed input (title, body, anchor, username, ...)."""

    status_code = 400
    default_code = "BAD_REQUEST"


class AuthorizationError(DocnotesError):
    """Caller is known but not allowed to perform the operation."""

    status_code = 403
    default_code = "FORBIDDEN"


class AuthenticationError(AuthorizationError):
    """Caller could not be identified (no session, bad credentials)."""

    status_code = 401
    default_code = "AUTH_REQUIRED"


class NotFoundError(DocnotesError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(DocnotesError):
    """Unique value already taken (username, email, team name, membership)."""

    status_code = 409
    default_code = "CONFLICT"


class PolicyError(DocnotesError):
    """Operation is well-formed and authorized but forbidden by policy."""

    status_code = 403
    default_code = "POLICY_VIOLATION"


class StorageError(DocnotesError):
    """Database failure; any in-flight transaction has been rolled back."""

    status_code = 500
    default_code = "STORAGE_ERROR"


def require(value, field: str) -> None:
    """
    Raise a ValidationError naming `field` when `value` is empty.

    Strings are stripped before the check, so whitespace-only input counts
    as missing.
    """
    if isinstance(value, str):
        value = value.strip()
    if not value:
        raise ValidationError(f"Missing parameter: {field}", code=f"MISSING_{field.upper()}")
