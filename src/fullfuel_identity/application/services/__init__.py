"""Application services for identity management."""

from fullfuel_identity.application.services.authentication_service import (
    AuthenticationService,
    AuthResult,
)

__all__ = [
    "AuthResult",
    "AuthenticationService",
]
