"""
Domain error taxonomy.

Services raise these; the API layer turns them into HTTP responses
(see app.main). Nothing here knows about HTTP besides the status code
each error maps to.

- Unauthenticated: missing/invalid session, never carries detail
- Forbidden: authenticated, but the relationship check failed
- NotFound: absent or not visible to the caller (deliberately conflated)
- ValidationError: malformed input, optional per-field details
- Conflict: duplicate natural key
- UpstreamFailure: an external provider call failed
- InvalidCredentials: failed login, one message for every cause
"""

from typing import Optional


class AppError(Exception):
    """Base application error."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authenticated"

    def to_dict(self) -> dict:
        # No distinction between missing, expired or forged credentials
        return {"error": self.default_message}


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class UpstreamFailure(AppError):
    status_code = 502
    default_message = "External service unavailable"


class InvalidCredentials(AppError):
    """Login failure; unknown email and wrong password look the same."""

    status_code = 401
    default_message = "Invalid credentials"
