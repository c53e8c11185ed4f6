"""User aggregate: the credential record plus the profile it carries."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from fullfuel_identity.domain.shared.time import utc_now
from fullfuel_identity.domain.user.value_objects import Email, UserRole


class User:
    """
    User aggregate root.

    Every user has exactly one password hash. Accounts created through
    Google sign-in get the hash of a random secret nobody knows, so they
    cannot log in with a password but still satisfy the invariant.
    """

    def __init__(
        self,
        email: Union[str, Email],
        name: str,
        password_hash: str,
        username: str | None = None,
        role: Union[str, UserRole] = UserRole.USER,
        profile_picture: str | None = None,
        bio: str | None = None,
        favorite_artists: list[str] | None = None,
        purchased_tickets: list[str] | None = None,
        stripe_customer_id: str | None = None,
        stripe_subscription_id: str | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._id = id or uuid4()
        self._name = name
        self._username = username or None
        self._password_hash = password_hash
        self._role = role if isinstance(role, UserRole) else UserRole(role)
        self._profile_picture = profile_picture
        self._bio = bio
        self._favorite_artists = list(favorite_artists or [])
        self._purchased_tickets = list(purchased_tickets or [])
        self._stripe_customer_id = stripe_customer_id
        self._stripe_subscription_id = stripe_subscription_id
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def name(self) -> str:
        return self._name

    @property
    def username(self) -> str | None:
        return self._username

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role == UserRole.ADMIN

    @property
    def profile_picture(self) -> str | None:
        return self._profile_picture

    @property
    def bio(self) -> str | None:
        return self._bio

    @property
    def favorite_artists(self) -> list[str]:
        return list(self._favorite_artists)

    @property
    def purchased_tickets(self) -> list[str]:
        return list(self._purchased_tickets)

    @property
    def stripe_customer_id(self) -> str | None:
        return self._stripe_customer_id

    @property
    def stripe_subscription_id(self) -> str | None:
        return self._stripe_subscription_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def promote_to_admin(self) -> None:
        self._role = UserRole.ADMIN
        self._updated_at = utc_now()

    def demote_to_user(self) -> None:
        self._role = UserRole.USER
        self._updated_at = utc_now()

    def update_profile(
        self,
        name: str | None = None,
        username: str | None = None,
        bio: str | None = None,
        profile_picture: str | None = None,
        favorite_artists: list[str] | None = None,
    ) -> None:
        """Apply the given profile changes; ``None`` leaves a field untouched."""
        if name is not None:
            self._name = name
        if username is not None:
            self._username = username or None
        if bio is not None:
            self._bio = bio
        if profile_picture is not None:
            self._profile_picture = profile_picture
        if favorite_artists is not None:
            self._favorite_artists = list(favorite_artists)
        self._updated_at = utc_now()

    @classmethod
    def create(
        cls,
        email: Union[str, Email],
        name: str,
        password_hash: str,
        username: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> "User":
        """Create a new user; the username defaults to the email's local part."""
        email_obj = email if isinstance(email, Email) else Email(email)
        return cls(
            email=email_obj,
            name=name,
            password_hash=password_hash,
            username=username or email_obj.local_part,
            role=role,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        email: Union[str, Email],
        name: str,
        password_hash: str,
        username: str | None,
        role: Union[str, UserRole],
        profile_picture: str | None,
        bio: str | None,
        favorite_artists: list[str],
        purchased_tickets: list[str],
        stripe_customer_id: str | None,
        stripe_subscription_id: str | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            name=name,
            password_hash=password_hash,
            username=username,
            role=role,
            profile_picture=profile_picture,
            bio=bio,
            favorite_artists=favorite_artists,
            purchased_tickets=purchased_tickets,
            stripe_customer_id=stripe_customer_id,
            stripe_subscription_id=stripe_subscription_id,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
