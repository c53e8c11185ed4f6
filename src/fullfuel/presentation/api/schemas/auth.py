"""Authentication schemas for request/response models.

Request fields are optional so that absent values reach the service,
which answers with a specific error message.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fullfuel_identity import User


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    username: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ava",
                "email": "ava@example.com",
                "password": "secret123",
            },
        },
    )


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: str | None = None
    password: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ava@example.com",
                "password": "secret123",
            },
        },
    )


class GoogleTokenRequest(CamelModel):
    """Request schema carrying a Google ID token."""

    token: str | None = Field(default=None, description="Google ID token (JWT)")


class UserResponse(CamelModel):
    """A user as shown to clients; never includes the password hash."""

    id: UUID
    name: str
    email: str
    username: str | None = None
    role: str
    profile_picture: str | None = None
    bio: str | None = None
    favorite_artists: list[str] = Field(default_factory=list)
    purchased_tickets: list[str] = Field(default_factory=list)
    stripe_customer_id: str | None = None
    stripe_subscription_id: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            username=user.username,
            role=user.role.value,
            profile_picture=user.profile_picture,
            bio=user.bio,
            favorite_artists=user.favorite_artists,
            purchased_tickets=user.purchased_tickets,
            stripe_customer_id=user.stripe_customer_id,
            stripe_subscription_id=user.stripe_subscription_id,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(CamelModel):
    """Response schema for successful authentication."""

    token: str
    user: UserResponse


class CurrentUserResponse(CamelModel):
    """Response schema wrapping a single user."""

    user: UserResponse
