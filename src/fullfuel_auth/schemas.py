"""Data classes shared by the auth services."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class TokenPayload:
    """Decoded claims of a session token."""

    user_id: UUID
    name: str
    email: str
    issued_at: datetime
    exp: datetime


class IdentityTrust(str, Enum):
    """How an external identity was established."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity extracted from a third-party ID token.

    ``trust`` records whether the token's signature was checked against the
    provider's keys or only parsed structurally.
    """

    subject: str | None
    email: str
    name: str | None
    trust: IdentityTrust

    @property
    def is_verified(self) -> bool:
        return self.trust == IdentityTrust.VERIFIED
