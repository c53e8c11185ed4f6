"""Authentication exceptions and error codes.

These exceptions are raised by the fullfuel_auth and fullfuel_identity
packages and are translated to HTTP responses by the API layer. The
message of every exception is safe to show to clients.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes for API clients."""

    # 400
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"
    UNSUPPORTED_AUTH_METHOD = "UNSUPPORTED_AUTH_METHOD"
    MISSING_ASSERTION = "MISSING_ASSERTION"
    INVALID_ASSERTION = "INVALID_ASSERTION"
    INVALID_ROLE = "INVALID_ROLE"
    CANNOT_DEMOTE_SELF = "CANNOT_DEMOTE_SELF"

    # 401
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    MISSING_TOKEN = "MISSING_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"

    # 403
    ADMIN_REQUIRED = "ADMIN_REQUIRED"

    # 404
    NOT_FOUND = "NOT_FOUND"

    # 500 / 504
    STORE_FAILURE = "STORE_FAILURE"
    TIMEOUT = "TIMEOUT"


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code: ErrorCode = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class MissingFieldError(AuthError):
    """Raised when a required request field is absent or empty."""

    code = ErrorCode.MISSING_FIELD

    def __init__(self, message: str = "Required fields are missing"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    code = ErrorCode.WEAK_PASSWORD

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class UnsupportedAuthMethodError(AuthError):
    """Raised when a password login targets an account without a password."""

    code = ErrorCode.UNSUPPORTED_AUTH_METHOD

    def __init__(
        self,
        message: str = "This account uses a different authentication method",
    ):
        super().__init__(message)


class MissingAssertionError(AuthError):
    """Raised when no external identity token was supplied."""

    code = ErrorCode.MISSING_ASSERTION

    def __init__(self, message: str = "Google token is required"):
        super().__init__(message)


class InvalidAssertionError(AuthError):
    """Raised when an external identity token cannot be accepted."""

    code = ErrorCode.INVALID_ASSERTION

    def __init__(self, message: str = "Unable to process Google token"):
        super().__init__(message)


class IncompleteIdentityError(InvalidAssertionError):
    """Raised when a correctly signed token lacks the claims a user needs.

    The signature already checked out, so no other verifier is consulted.
    """

    def __init__(self, message: str = "Invalid Google token payload"):
        super().__init__(message)


class MissingTokenError(AuthError):
    """Raised when a request carries no bearer token."""

    code = ErrorCode.MISSING_TOKEN

    def __init__(self, message: str = "No token provided"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    """Raised when a session token is invalid, expired, or malformed."""

    code = ErrorCode.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class AdminRequiredError(AuthError):
    """Raised when a non-admin user calls an admin-only operation."""

    code = ErrorCode.ADMIN_REQUIRED

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class StoreFailureError(AuthError):
    """Raised when the credential store fails for a reason other than a conflict."""

    code = ErrorCode.STORE_FAILURE

    def __init__(self, message: str = "Credential store operation failed"):
        super().__init__(message)


class AuthTimeoutError(AuthError):
    """Raised when the credential store or identity provider does not answer in time."""

    code = ErrorCode.TIMEOUT

    def __init__(self, message: str = "Authentication backend timed out"):
        super().__init__(message)
