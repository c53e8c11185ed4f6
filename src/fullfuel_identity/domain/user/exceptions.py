"""User domain exceptions.

Raised for validation and uniqueness violations on user records. They
extend ``AuthError`` so the API layer renders them like any other auth
failure.
"""

from fullfuel_auth.exceptions import AuthError, ErrorCode


class InvalidEmailError(AuthError, ValueError):
    """Raised when email format is invalid."""

    code = ErrorCode.INVALID_EMAIL

    def __init__(self, message: str = "Invalid email address") -> None:
        super().__init__(message)


class DuplicateEmailError(AuthError):
    """Email already registered."""

    code = ErrorCode.DUPLICATE_EMAIL

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User with this email already exists")


class DuplicateUsernameError(AuthError):
    """Username already taken."""

    code = ErrorCode.DUPLICATE_USERNAME

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username is already taken")


class UserNotFoundError(AuthError):
    """User not found."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__("User not found")


class InvalidRoleError(AuthError):
    """Role outside the known set."""

    code = ErrorCode.INVALID_ROLE

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Invalid role: {role}. Must be 'user' or 'admin'")


class CannotDemoteSelfError(AuthError):
    """Cannot demote yourself from admin."""

    code = ErrorCode.CANNOT_DEMOTE_SELF

    def __init__(self) -> None:
        super().__init__("Cannot demote yourself from admin")
