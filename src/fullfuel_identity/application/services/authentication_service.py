"""Authentication service for registration, login and Google sign-in."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from fullfuel_auth import (
    AdminRequiredError,
    AuthTimeoutError,
    IdentityVerifier,
    InvalidAssertionError,
    InvalidCredentialsError,
    InvalidTokenError,
    JWTService,
    MissingAssertionError,
    MissingFieldError,
    MissingTokenError,
    PasswordHashingService,
    UnsupportedAuthMethodError,
)
from fullfuel_identity.domain.user import (
    DuplicateEmailError,
    DuplicateUsernameError,
    Email,
    InvalidEmailError,
    User,
    UserNotFoundError,
)

if TYPE_CHECKING:
    from fullfuel_auth import ExternalIdentity
    from fullfuel_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

BEARER_PREFIX = "Bearer "
DEFAULT_EXTERNAL_NAME = "Google User"


@dataclass(frozen=True)
class AuthResult:
    """A freshly issued session token and the user it belongs to."""

    token: str
    user: User


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates fullfuel_auth infrastructure (password hashing, session
    tokens, Google ID token verification) with the User aggregate to
    provide:
    - Registration with email and password
    - Login with email and password
    - Google sign-in and Google registration
    - Resolving the user behind a bearer token, and the admin gate

    Every store round-trip is bounded by ``store_timeout`` seconds.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        identity_verifier: IdentityVerifier,
        store_timeout: float | None = None,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._identity_verifier = identity_verifier
        self._store_timeout = store_timeout

    async def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        username: str | None = None,
    ) -> AuthResult:
        if not name or not email or not password:
            msg = "Name, email, and password are required"
            raise MissingFieldError(msg)

        email_obj = Email(email)
        self._password_service.validate_strength(password)

        if await self._store(self._user_repo.exists_by_email(email_obj)):
            raise DuplicateEmailError(email_obj.value)

        if username and await self._store(self._user_repo.exists_by_username(username)):
            raise DuplicateUsernameError(username)

        password_hash = await self._hash(password)
        user = User.create(
            email=email_obj,
            name=name,
            password_hash=password_hash,
            username=username,
        )
        await self._store(self._user_repo.save(user))

        logger.info("User registered: %s", user.email)
        return AuthResult(token=self.issue_token(user), user=user)

    async def login(self, email: str | None, password: str | None) -> AuthResult:
        if not email or not password:
            msg = "Email and password are required"
            raise MissingFieldError(msg)

        try:
            email_obj = Email(email)
        except InvalidEmailError as e:
            raise InvalidCredentialsError from e

        user = await self._store(self._user_repo.find_by_email(email_obj))
        if user is None:
            logger.info("Login failed for unknown email: %s", email_obj.value)
            raise InvalidCredentialsError

        if not user.password_hash:
            raise UnsupportedAuthMethodError

        if not await self._verify(password, user.password_hash):
            logger.warning("Invalid password for user: %s", user.email)
            raise InvalidCredentialsError

        logger.info("User logged in: %s", user.email)
        return AuthResult(token=self.issue_token(user), user=user)

    async def external_login(self, assertion: str | None) -> AuthResult:
        """Sign in with a Google ID token, creating the account on first use."""
        identity, email = await self._verify_assertion(assertion)

        user = await self._store(self._user_repo.find_by_email(email))
        if user is None:
            user = await self._create_external_user(identity, email)
            logger.info("User created through Google sign-in: %s", user.email)
        else:
            logger.info("User logged in through Google: %s", user.email)

        return AuthResult(token=self.issue_token(user), user=user)

    async def external_register(self, assertion: str | None) -> AuthResult:
        """Register with a Google ID token; an existing account is an error."""
        identity, email = await self._verify_assertion(assertion)

        if await self._store(self._user_repo.exists_by_email(email)):
            raise DuplicateEmailError(email.value)

        user = await self._create_external_user(identity, email)
        logger.info("User registered through Google: %s", user.email)
        return AuthResult(token=self.issue_token(user), user=user)

    async def current_user(self, authorization_header: str | None) -> User:
        """Resolve the user behind an ``Authorization: Bearer <token>`` header.

        Raises
        ------
        MissingTokenError
            If the header is absent or not a bearer header
        InvalidTokenError
            If the token fails verification
        UserNotFoundError
            If the token's user no longer exists
        """
        if not authorization_header or not authorization_header.startswith(
            BEARER_PREFIX,
        ):
            raise MissingTokenError

        token = authorization_header[len(BEARER_PREFIX) :].strip()
        try:
            payload = self._jwt_service.verify_token(token)
        except InvalidTokenError as e:
            logger.warning("Rejected session token: %s", e.message)
            raise InvalidTokenError from e

        user = await self._store(self._user_repo.find_by_id(payload.user_id))
        if user is None:
            raise UserNotFoundError(str(payload.user_id))
        return user

    async def require_admin(self, authorization_header: str | None) -> User:
        user = await self.current_user(authorization_header)
        if not user.is_admin:
            logger.warning("Non-admin user %s attempted an admin operation", user.id)
            raise AdminRequiredError
        return user

    def issue_token(self, user: User) -> str:
        return self._jwt_service.create_token(
            user_id=user.id,
            name=user.name,
            email=user.email,
        )

    async def _verify_assertion(
        self,
        assertion: str | None,
    ) -> tuple[ExternalIdentity, Email]:
        if not assertion:
            raise MissingAssertionError

        identity = await self._identity_verifier.verify(assertion)
        try:
            email = Email(identity.email)
        except InvalidEmailError as e:
            msg = "Invalid token content"
            raise InvalidAssertionError(msg) from e
        return identity, email

    async def _create_external_user(
        self,
        identity: ExternalIdentity,
        email: Email,
    ) -> User:
        # The account gets a password nobody knows
        password_hash = await self._hash(secrets.token_urlsafe(32))
        user = User.create(
            email=email,
            name=identity.name or DEFAULT_EXTERNAL_NAME,
            password_hash=password_hash,
        )
        await self._store(self._user_repo.save(user))
        return user

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self._password_service.hash, password)

    async def _verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(
            self._password_service.verify,
            password,
            password_hash,
        )

    async def _store(self, operation: Awaitable[T]) -> T:
        if self._store_timeout is None:
            return await operation
        try:
            return await asyncio.wait_for(operation, timeout=self._store_timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                "Credential store did not answer within %.1fs",
                self._store_timeout,
            )
            msg = "Credential store timed out"
            raise AuthTimeoutError(msg) from e
