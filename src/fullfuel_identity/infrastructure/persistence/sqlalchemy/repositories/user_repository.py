"""SQLAlchemy implementation of UserRepository."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fullfuel_auth.exceptions import StoreFailureError
from fullfuel_identity.domain.shared.time import ensure_tz_aware
from fullfuel_identity.domain.user import (
    DuplicateEmailError,
    DuplicateUsernameError,
    Email,
    User,
    UserRepository,
)
from fullfuel_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _store_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.exception("User store failure during %s", operation)
        msg = f"Credential store failed during {operation}"
        raise StoreFailureError(msg) from e


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        async with _store_errors("find_by_id"):
            model = await self._find_model_by_id(user_id)
        return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value

        stmt = select(UserModel).where(UserModel.email == email_value)
        async with _store_errors("find_by_email"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        return self._map_to_domain(model) if model else None

    async def find_by_username(self, username: str) -> User | None:
        stmt = select(UserModel).where(UserModel.username == username)
        async with _store_errors("find_by_username"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        return self._map_to_domain(model) if model else None

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def exists_by_username(self, username: str) -> bool:
        user = await self.find_by_username(username)
        return user is not None

    async def save(self, user: User) -> None:
        async with _store_errors("save"):
            existing = await self._find_model_by_id(user.id)

            try:
                if existing:
                    self._update_model(existing, user)
                    logger.debug("Updated user: %s", user.id)
                else:
                    self._session.add(self._map_to_model(user))
                    logger.info("Created user: %s (email: %s)", user.id, user.email)

                await self._session.flush()
            except IntegrityError as e:
                detail = str(e.orig) if e.orig is not None else str(e)
                if "username" in detail.lower():
                    raise DuplicateUsernameError(user.username or "") from e
                raise DuplicateEmailError(user.email) from e

    async def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.created_at)
        async with _store_errors("list_all"):
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        return [self._map_to_domain(model) for model in models]

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            name=model.name,
            password_hash=model.password_hash,
            username=model.username,
            role=model.role,
            profile_picture=model.profile_picture,
            bio=model.bio,
            favorite_artists=list(model.favorite_artists or []),
            purchased_tickets=list(model.purchased_tickets or []),
            stripe_customer_id=model.stripe_customer_id,
            stripe_subscription_id=model.stripe_subscription_id,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            name=user.name,
            username=user.username,
            password_hash=user.password_hash,
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

    def _update_model(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.name = user.name
        model.username = user.username
        model.password_hash = user.password_hash
        model.role = user.role.value
        model.profile_picture = user.profile_picture
        model.bio = user.bio
        model.favorite_artists = user.favorite_artists
        model.purchased_tickets = user.purchased_tickets
        model.stripe_customer_id = user.stripe_customer_id
        model.stripe_subscription_id = user.stripe_subscription_id
        model.updated_at = user.updated_at
