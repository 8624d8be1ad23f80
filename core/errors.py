"""
core/errors.py -- Domain error taxonomy shared by auth/, tasks/ and api/.

Every error carries the HTTP status it maps to, a human-readable message and,
for validation-class errors, a field -> message mapping. Errors are raised
once where the problem is detected and rendered by the single AppError
handler in api/main.py. Nothing in auth/ or tasks/ builds HTTP responses.

Layer rule: core/ is the kernel. No imports from api/, auth/, tasks/, client/.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base class for errors that map to a client-visible HTTP response."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[dict[str, str]] = None) -> None:
        self.message = message or self.default_message
        self.field_errors = field_errors
        super().__init__(self.message)


class InvalidInput(AppError):
    """A request body failed one or more field-level constraints."""

    status_code = 400
    default_message = "Validation Error"


class DuplicateEmail(InvalidInput):
    """The email is already taken by another account.

    Always reported as a field error on "email" so a client can highlight
    the input. Raised both by the pre-insert lookup and by the UNIQUE
    constraint when two writes race.
    """

    def __init__(self, message: str = "User already exists", field_message: Optional[str] = None) -> None:
        super().__init__(message, {"email": field_message or "User already exists with this email"})


class InvalidCredentials(AppError):
    # One message for unknown email and wrong password (no account enumeration).
    status_code = 401
    default_message = "Invalid email or password"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not Found"
