"""User domain manages user identity.

This domain handles:
- User aggregate (credential record and profile)
- Email and role value objects
- The repository interface the credential store implements
"""

from fullfuel_identity.domain.user.exceptions import (
    CannotDemoteSelfError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidEmailError,
    InvalidRoleError,
    UserNotFoundError,
)
from fullfuel_identity.domain.user.aggregates import User
from fullfuel_identity.domain.user.repositories import UserRepository
from fullfuel_identity.domain.user.value_objects import (
    Email,
    UserRole,
)

__all__ = [
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
]
