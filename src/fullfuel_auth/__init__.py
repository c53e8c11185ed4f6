"""Full Fuel Auth - Generic authentication infrastructure.

This package provides authentication building blocks that know nothing
about how users are stored. It handles:
- Password hashing (bcrypt)
- Session token creation and verification (JWT)
- Google ID token verification, with an unverified fallback parser
- The error taxonomy shared by the identity and API layers

Architecture:
    fullfuel_auth/
    ├── services/           # Pure logic (passwords, JWT, ID tokens)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions and error codes

Usage:
    from fullfuel_auth import JWTService, PasswordHashingService
"""

from fullfuel_auth.exceptions import (
    AdminRequiredError,
    AuthError,
    AuthTimeoutError,
    ErrorCode,
    IncompleteIdentityError,
    InvalidAssertionError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingAssertionError,
    MissingFieldError,
    MissingTokenError,
    StoreFailureError,
    UnsupportedAuthMethodError,
    WeakPasswordError,
)
from fullfuel_auth.schemas import ExternalIdentity, IdentityTrust, TokenPayload
from fullfuel_auth.services import (
    FallbackIdentityVerifier,
    GoogleIdTokenVerifier,
    IdentityVerifier,
    JWTService,
    PasswordHashingService,
    UnverifiedIdTokenParser,
)

__all__ = [
    # Services
    "FallbackIdentityVerifier",
    "GoogleIdTokenVerifier",
    "IdentityVerifier",
    "JWTService",
    "PasswordHashingService",
    "UnverifiedIdTokenParser",
    # Schemas
    "ExternalIdentity",
    "IdentityTrust",
    "TokenPayload",
    # Exceptions
    "AdminRequiredError",
    "AuthError",
    "AuthTimeoutError",
    "ErrorCode",
    "IncompleteIdentityError",
    "InvalidAssertionError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingAssertionError",
    "MissingFieldError",
    "MissingTokenError",
    "StoreFailureError",
    "UnsupportedAuthMethodError",
    "WeakPasswordError",
]
