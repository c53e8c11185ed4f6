"""Unit tests for the Google ID token verifiers."""

import base64
import json
import logging
from unittest.mock import AsyncMock

import httpx
import pytest

from fullfuel_auth.exceptions import (
    AuthTimeoutError,
    IncompleteIdentityError,
    InvalidAssertionError,
)
from fullfuel_auth.schemas import ExternalIdentity, IdentityTrust
from fullfuel_auth.services import (
    FallbackIdentityVerifier,
    GoogleIdTokenVerifier,
    UnverifiedIdTokenParser,
)
from tests.shared.fixtures.google import (
    CLIENT_ID,
    jwks,
    make_id_token,
    make_unsigned_token,
)

JWKS_URL = "https://keys.test/certs"


def _verifier(handler, **kwargs) -> GoogleIdTokenVerifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleIdTokenVerifier(
        client_id=CLIENT_ID,
        jwks_url=JWKS_URL,
        http_client=client,
        **kwargs,
    )


def _serve_keys(*kids: str):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=jwks(*kids))

    return handler, calls


class TestGoogleIdTokenVerifier:
    """Tests for signature-checked verification."""

    def test_empty_client_id_raises(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            GoogleIdTokenVerifier(client_id="", jwks_url=JWKS_URL)

    @pytest.mark.asyncio
    async def test_valid_token_is_verified(self):
        """A correctly signed token yields a VERIFIED identity."""
        handler, _ = _serve_keys()
        verifier = _verifier(handler)

        identity = await verifier.verify(make_id_token())

        assert identity.email == "ava@example.com"
        assert identity.name == "Ava"
        assert identity.subject == "1234567890"
        assert identity.trust == IdentityTrust.VERIFIED
        assert identity.is_verified

    @pytest.mark.asyncio
    async def test_keys_are_cached(self):
        """The key set is fetched once for several verifications."""
        handler, calls = _serve_keys()
        verifier = _verifier(handler)

        await verifier.verify(make_id_token())
        await verifier.verify(make_id_token(email="bob@example.com"))

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_key_triggers_refresh(self):
        """A rotated key is picked up by refetching once."""
        served = {"kids": ("test-key-1",)}
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=jwks(*served["kids"]))

        verifier = _verifier(handler)
        await verifier.verify(make_id_token())

        served["kids"] = ("test-key-1", "test-key-2")
        identity = await verifier.verify(make_id_token(kid="test-key-2"))

        assert identity.is_verified
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_unknown_key_refresh_is_rate_limited(self):
        """Repeated unknown key ids refetch the key set once per interval."""
        handler, calls = _serve_keys()
        verifier = _verifier(handler)

        for _ in range(2):
            with pytest.raises(InvalidAssertionError, match="unknown key"):
                await verifier.verify(make_id_token(kid="rogue"))

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_unknown_key_refresh_after_interval(self):
        handler, calls = _serve_keys()
        verifier = _verifier(handler, refresh_interval=0)

        for _ in range(2):
            with pytest.raises(InvalidAssertionError, match="unknown key"):
                await verifier.verify(make_id_token(kid="rogue"))

        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_wrong_audience_rejected(self):
        handler, _ = _serve_keys()
        verifier = _verifier(handler)

        with pytest.raises(InvalidAssertionError):
            await verifier.verify(make_id_token(audience="someone-else"))

    @pytest.mark.asyncio
    async def test_wrong_issuer_rejected(self):
        handler, _ = _serve_keys()
        verifier = _verifier(handler)

        with pytest.raises(InvalidAssertionError, match="issuer"):
            await verifier.verify(make_id_token(issuer="https://evil.example.com"))

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self):
        handler, _ = _serve_keys()
        verifier = _verifier(handler)

        with pytest.raises(InvalidAssertionError):
            await verifier.verify(make_id_token(expires_in=-3600))

    @pytest.mark.asyncio
    async def test_token_without_email_rejected(self):
        handler, _ = _serve_keys()
        verifier = _verifier(handler)

        with pytest.raises(IncompleteIdentityError, match="Invalid Google token payload"):
            await verifier.verify(make_id_token(email=None))

    @pytest.mark.asyncio
    async def test_garbage_token_rejected(self):
        handler, calls = _serve_keys()
        verifier = _verifier(handler)

        with pytest.raises(InvalidAssertionError, match="Invalid token format"):
            await verifier.verify("not-a-jwt")
        assert calls == []

    @pytest.mark.asyncio
    async def test_key_endpoint_failure_rejected(self):
        """An unusable key set is a rejection, not a crash."""
        verifier = _verifier(lambda request: httpx.Response(500))

        with pytest.raises(InvalidAssertionError, match="signing keys"):
            await verifier.verify(make_id_token())

    @pytest.mark.asyncio
    async def test_key_endpoint_timeout_raises_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        verifier = _verifier(handler)

        with pytest.raises(AuthTimeoutError):
            await verifier.verify(make_id_token())


class TestUnverifiedIdTokenParser:
    """Tests for the payload-only parser."""

    def setup_method(self):
        self.parser = UnverifiedIdTokenParser()

    @pytest.mark.asyncio
    async def test_parses_payload_without_signature_check(self):
        token = make_unsigned_token({"email": "ava@example.com", "name": "Ava"})

        identity = await self.parser.verify(token)

        assert identity.email == "ava@example.com"
        assert identity.name == "Ava"
        assert identity.trust == IdentityTrust.UNVERIFIED
        assert not identity.is_verified

    @pytest.mark.asyncio
    async def test_accepts_padded_standard_base64(self):
        """Payload segments with padding or the standard alphabet still decode."""
        payload = base64.b64encode(
            json.dumps({"email": "ava@example.com", "name": "Ava?>"}).encode(),
        ).decode()

        identity = await self.parser.verify(f"header.{payload}.sig")

        assert identity.email == "ava@example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["abc", "a.b", "a.b.c.d"])
    async def test_wrong_segment_count(self, token):
        with pytest.raises(InvalidAssertionError, match="Invalid token format"):
            await self.parser.verify(token)

    @pytest.mark.asyncio
    async def test_undecodable_payload(self):
        with pytest.raises(InvalidAssertionError, match="Unable to process"):
            await self.parser.verify("header.%%%%.sig")

    @pytest.mark.asyncio
    async def test_payload_without_email(self):
        token = make_unsigned_token({"name": "Nobody"})

        with pytest.raises(InvalidAssertionError, match="Invalid token content"):
            await self.parser.verify(token)

    @pytest.mark.asyncio
    async def test_payload_not_an_object(self):
        token = make_unsigned_token(["ava@example.com"])

        with pytest.raises(InvalidAssertionError, match="Invalid token content"):
            await self.parser.verify(token)


class TestFallbackIdentityVerifier:
    """Tests for the verify-then-parse chain."""

    VERIFIED = ExternalIdentity(
        subject="1",
        email="ava@example.com",
        name="Ava",
        trust=IdentityTrust.VERIFIED,
    )
    UNVERIFIED = ExternalIdentity(
        subject=None,
        email="ava@example.com",
        name="Ava",
        trust=IdentityTrust.UNVERIFIED,
    )

    def setup_method(self):
        self.primary = AsyncMock()
        self.fallback = AsyncMock()

    @pytest.mark.asyncio
    async def test_primary_success_skips_fallback(self):
        self.primary.verify.return_value = self.VERIFIED
        verifier = FallbackIdentityVerifier(self.primary, self.fallback)

        identity = await verifier.verify("token")

        assert identity is self.VERIFIED
        self.fallback.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_rejection_uses_fallback(self, caplog):
        self.primary.verify.side_effect = InvalidAssertionError("bad signature")
        self.fallback.verify.return_value = self.UNVERIFIED
        verifier = FallbackIdentityVerifier(self.primary, self.fallback)

        with caplog.at_level(logging.WARNING):
            identity = await verifier.verify("token")

        assert identity.trust == IdentityTrust.UNVERIFIED
        assert "UNVERIFIED" in caplog.text
        assert "ava@example.com" in caplog.text

    @pytest.mark.asyncio
    async def test_fallback_rejection_propagates(self):
        self.primary.verify.side_effect = InvalidAssertionError("bad signature")
        self.fallback.verify.side_effect = InvalidAssertionError("Invalid token format")
        verifier = FallbackIdentityVerifier(self.primary, self.fallback)

        with pytest.raises(InvalidAssertionError, match="Invalid token format"):
            await verifier.verify("token")

    @pytest.mark.asyncio
    async def test_timeout_is_not_retried(self):
        self.primary.verify.side_effect = AuthTimeoutError()
        verifier = FallbackIdentityVerifier(self.primary, self.fallback)

        with pytest.raises(AuthTimeoutError):
            await verifier.verify("token")
        self.fallback.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_incomplete_identity_is_not_retried(self):
        """A verified token without an email never reaches the fallback."""
        self.primary.verify.side_effect = IncompleteIdentityError()
        self.fallback.verify.return_value = self.UNVERIFIED
        verifier = FallbackIdentityVerifier(self.primary, self.fallback)

        with pytest.raises(IncompleteIdentityError, match="Invalid Google token payload"):
            await verifier.verify("token")
        self.fallback.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_without_fallback_primary_error_propagates(self):
        self.primary.verify.side_effect = InvalidAssertionError("bad signature")
        verifier = FallbackIdentityVerifier(self.primary)

        with pytest.raises(InvalidAssertionError, match="bad signature"):
            await verifier.verify("token")

    @pytest.mark.asyncio
    async def test_real_chain_accepts_unsigned_token(self):
        """End to end: an unsigned token passes only through the fallback."""
        verifier = FallbackIdentityVerifier(
            _verifier(_serve_keys()[0]),
            UnverifiedIdTokenParser(),
        )

        identity = await verifier.verify(
            make_unsigned_token({"email": "ava@example.com", "name": "Ava"}),
        )

        assert identity.trust == IdentityTrust.UNVERIFIED

    @pytest.mark.asyncio
    async def test_real_chain_rejects_signed_token_without_email(self):
        verifier = FallbackIdentityVerifier(
            _verifier(_serve_keys()[0]),
            UnverifiedIdTokenParser(),
        )

        with pytest.raises(IncompleteIdentityError, match="Invalid Google token payload"):
            await verifier.verify(make_id_token(email=None))
