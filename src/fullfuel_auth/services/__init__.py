from fullfuel_auth.services.identity_verifier import (
    FallbackIdentityVerifier,
    GoogleIdTokenVerifier,
    IdentityVerifier,
    UnverifiedIdTokenParser,
)
from fullfuel_auth.services.jwt_service import JWTService
from fullfuel_auth.services.password_service import PasswordHashingService

__all__ = [
    "FallbackIdentityVerifier",
    "GoogleIdTokenVerifier",
    "IdentityVerifier",
    "JWTService",
    "PasswordHashingService",
    "UnverifiedIdTokenParser",
]
