"""Full Fuel Identity - User records, authentication and authorization.

This module handles all identity-related concerns:
- User records (credentials, profile, roles)
- Authentication (registration, login, Google sign-in, session tokens)
- Authorization (the admin gate)
- Persistence of users through SQLAlchemy
"""

from fullfuel_identity.application.commands import (
    UpdateProfileCommand,
    UpdateUserRoleCommand,
)
from fullfuel_identity.application.services import AuthenticationService, AuthResult
from fullfuel_identity.domain.user import (
    CannotDemoteSelfError,
    DuplicateEmailError,
    DuplicateUsernameError,
    Email,
    InvalidEmailError,
    InvalidRoleError,
    User,
    UserNotFoundError,
    UserRepository,
    UserRole,
)

__all__ = [
    # Domain - User
    "CannotDemoteSelfError",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "Email",
    "InvalidEmailError",
    "InvalidRoleError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
    # Application Commands
    "UpdateProfileCommand",
    "UpdateUserRoleCommand",
    # Application Services
    "AuthResult",
    "AuthenticationService",
]
