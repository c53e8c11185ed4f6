"""bcrypt digests for stored account passwords."""

import bcrypt

from fullfuel_auth.exceptions import WeakPasswordError


class PasswordHashingService:
    """Salted bcrypt hashing with a configurable cost factor.

    The salt and cost travel inside the digest, so ``verify`` needs nothing
    but the stored string.

    Examples
    --------
    >>> passwords = PasswordHashingService(rounds=4)
    >>> digest = passwords.hash("secret123")
    >>> passwords.verify("secret123", digest)
    True
    >>> passwords.verify("secret124", digest)
    False
    """

    DEFAULT_ROUNDS = 10

    MAX_BYTES = 72  # bcrypt input limit

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Compare ``password`` with a stored digest in constant time.

        Returns
        -------
        False on mismatch and also when ``password_hash`` is not a bcrypt
        digest at all.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False

    def validate_strength(self, password: str) -> None:
        """Reject passwords bcrypt cannot take.

        Raises
        ------
        WeakPasswordError
            Empty, or over ``MAX_BYTES`` bytes of UTF-8.
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)
