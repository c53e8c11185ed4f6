"""JWT token service.

Provides creation and verification of the signed session tokens handed
out after registration and login.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from fullfuel_auth.exceptions import InvalidTokenError
from fullfuel_auth.schemas import TokenPayload


class JWTService:
    """Service for session token creation and verification.

    Tokens are HS256 JWTs carrying ``{id, name, email, iat, exp}``. There is
    no server-side session state; expiry is the only way a token ends.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_token(user_id, "Ava", "ava@example.com")
    >>> payload = service.verify_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"
    REQUIRED_CLAIMS = ("id", "email", "iat", "exp")

    def __init__(
        self,
        secret_key: str,
        token_expire_days: int = DEFAULT_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        token_expire_days
            Days until a token expires (default 7)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expire = timedelta(days=token_expire_days)

    @property
    def expires_in_seconds(self) -> int:
        return int(self._expire.total_seconds())

    def create_token(
        self,
        user_id: UUID,
        name: str,
        email: str,
        expires_delta: timedelta | None = None,
        issued_at: datetime | None = None,
    ) -> str:
        """Create a signed session token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        name
            The user's display name
        email
            The user's email address
        expires_delta
            Custom lifetime (optional)
        issued_at
            Issue time (optional, defaults to now)

        Returns
        -------
        The encoded JWT token string
        """
        now = issued_at or datetime.now(tz=timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._expire)

        payload = {
            "id": str(user_id),
            "name": name,
            "email": email,
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a session token.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": list(self.REQUIRED_CLAIMS)},
            )

            return TokenPayload(
                user_id=UUID(payload["id"]),
                name=payload.get("name") or "",
                email=payload["email"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )

        except jwt.ExpiredSignatureError as e:
            msg = "Token has expired"
            raise InvalidTokenError(msg) from e
        except jwt.InvalidTokenError as e:
            msg = f"Invalid token: {e}"
            raise InvalidTokenError(msg) from e
        except (KeyError, ValueError, TypeError) as e:
            msg = f"Malformed token payload: {e}"
            raise InvalidTokenError(msg) from e
