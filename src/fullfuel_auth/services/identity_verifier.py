"""Verification of Google ID tokens used for federated sign-in.

Two strategies exist:

- ``GoogleIdTokenVerifier`` checks the token signature against Google's
  published keys, the audience (our OAuth client id), the issuer and expiry.
- ``UnverifiedIdTokenParser`` only decodes the payload segment. It performs
  no cryptographic check and trusts whatever the caller sent.

``FallbackIdentityVerifier`` chains them. Existing web clients depend on the
fallback, so it is still enabled by default; every identity accepted through
it is tagged ``IdentityTrust.UNVERIFIED`` and logged.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx
import jwt

from fullfuel_auth.exceptions import (
    AuthTimeoutError,
    IncompleteIdentityError,
    InvalidAssertionError,
)
from fullfuel_auth.schemas import ExternalIdentity, IdentityTrust

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


class IdentityVerifier(ABC):
    """Turns an external ID token into an ``ExternalIdentity``."""

    @abstractmethod
    async def verify(self, token: str) -> ExternalIdentity:
        """Return the identity in ``token`` or raise ``InvalidAssertionError``."""

    async def close(self) -> None:
        """Release network resources held by the verifier."""


def _identity_from_claims(
    claims: dict[str, Any],
    trust: IdentityTrust,
    missing_email_error: InvalidAssertionError,
) -> ExternalIdentity:
    email = claims.get("email")
    if not email or not isinstance(email, str):
        raise missing_email_error

    name = claims.get("name")
    subject = claims.get("sub")
    return ExternalIdentity(
        subject=str(subject) if subject is not None else None,
        email=email,
        name=name if isinstance(name, str) and name else None,
        trust=trust,
    )


class GoogleIdTokenVerifier(IdentityVerifier):
    """Verify Google ID tokens against Google's JSON Web Key Set."""

    ALGORITHMS = ["RS256"]

    def __init__(
        self,
        client_id: str,
        jwks_url: str,
        timeout: float = 5.0,
        cache_seconds: int = 3600,
        refresh_interval: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not client_id:
            msg = "Google client id cannot be empty"
            raise ValueError(msg)

        self._client_id = client_id
        self._jwks_url = jwks_url
        self._timeout = timeout
        self._cache_seconds = cache_seconds
        self._refresh_interval = refresh_interval
        self._client = http_client
        self._owns_client = http_client is None
        self._keys: jwt.PyJWKSet | None = None
        self._keys_fetched_at = 0.0
        self._last_forced_refresh: float | None = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def verify(self, token: str) -> ExternalIdentity:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            msg = "Invalid token format"
            raise InvalidAssertionError(msg) from e

        key = await self._signing_key(header.get("kid"))

        try:
            claims = jwt.decode(
                token,
                key.key,
                algorithms=self.ALGORITHMS,
                audience=self._client_id,
                options={"require": ["exp", "iat", "iss", "aud"]},
            )
        except jwt.InvalidTokenError as e:
            msg = f"Google token rejected: {e}"
            raise InvalidAssertionError(msg) from e

        if claims.get("iss") not in GOOGLE_ISSUERS:
            msg = "Google token has an unexpected issuer"
            raise InvalidAssertionError(msg)

        return _identity_from_claims(
            claims,
            IdentityTrust.VERIFIED,
            IncompleteIdentityError(),
        )

    async def _signing_key(self, kid: str | None) -> jwt.PyJWK:
        keys = await self._load_keys()
        key = self._find_key(keys, kid)
        if key is None:
            # Google rotates keys; refresh before giving up, at most once
            # per refresh_interval
            keys = await self._load_keys(force=True)
            key = self._find_key(keys, kid)
        if key is None:
            msg = "Google token signed with an unknown key"
            raise InvalidAssertionError(msg)
        return key

    @staticmethod
    def _find_key(keys: jwt.PyJWKSet, kid: str | None) -> jwt.PyJWK | None:
        for key in keys.keys:
            if kid is None or key.key_id == kid:
                return key
        return None

    def _recently_forced(self) -> bool:
        if self._last_forced_refresh is None:
            return False
        return time.monotonic() - self._last_forced_refresh < self._refresh_interval

    async def _load_keys(self, force: bool = False) -> jwt.PyJWKSet:
        async with self._lock:
            age = time.monotonic() - self._keys_fetched_at
            if self._keys is not None and not force and age < self._cache_seconds:
                return self._keys
            if force and self._keys is not None and self._recently_forced():
                return self._keys
            if force:
                self._last_forced_refresh = time.monotonic()

            try:
                client = await self._get_client()
                response = await client.get(self._jwks_url, timeout=self._timeout)
                response.raise_for_status()
                self._keys = jwt.PyJWKSet.from_dict(response.json())
            except httpx.TimeoutException as e:
                logger.warning("Google key set request timed out: %s", e)
                msg = "Timed out contacting Google"
                raise AuthTimeoutError(msg) from e
            except (httpx.HTTPError, ValueError, jwt.PyJWKError, jwt.PyJWKSetError) as e:
                logger.warning("Could not load Google key set: %s", e)
                msg = "Unable to load Google signing keys"
                raise InvalidAssertionError(msg) from e

            self._keys_fetched_at = time.monotonic()
            logger.debug("Loaded %d Google signing keys", len(self._keys.keys))
            return self._keys


class UnverifiedIdTokenParser(IdentityVerifier):
    """Read the payload of a JWT without checking its signature."""

    async def verify(self, token: str) -> ExternalIdentity:
        parts = token.split(".")
        if len(parts) != 3:
            msg = "Invalid token format"
            raise InvalidAssertionError(msg)

        try:
            claims = json.loads(self._b64decode(parts[1]).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            msg = "Unable to process Google token"
            raise InvalidAssertionError(msg) from e

        if not isinstance(claims, dict):
            msg = "Invalid token content"
            raise InvalidAssertionError(msg)

        return _identity_from_claims(
            claims,
            IdentityTrust.UNVERIFIED,
            InvalidAssertionError("Invalid token content"),
        )

    @staticmethod
    def _b64decode(segment: str) -> bytes:
        # Accept both the standard and the URL-safe alphabet, padded or not
        normalized = segment.replace("+", "-").replace("/", "_").rstrip("=")
        padding = "=" * (-len(normalized) % 4)
        return base64.urlsafe_b64decode(normalized + padding)


class FallbackIdentityVerifier(IdentityVerifier):
    """Try ``primary``; when it rejects the token, try ``fallback``.

    Timeouts from the primary are not retried through the fallback, and
    neither is a correctly signed token that lacks an email.
    """

    def __init__(
        self,
        primary: IdentityVerifier,
        fallback: IdentityVerifier | None = None,
    ):
        self._primary = primary
        self._fallback = fallback

    async def close(self) -> None:
        await self._primary.close()
        if self._fallback is not None:
            await self._fallback.close()

    async def verify(self, token: str) -> ExternalIdentity:
        try:
            return await self._primary.verify(token)
        except (AuthTimeoutError, IncompleteIdentityError):
            raise
        except InvalidAssertionError as e:
            if self._fallback is None:
                raise
            logger.warning("Google token verification failed: %s", e.message)

        identity = await self._fallback.verify(token)
        if not identity.is_verified:
            logger.warning(
                "Accepted UNVERIFIED Google identity for %s (signature not checked)",
                identity.email,
            )
        return identity
