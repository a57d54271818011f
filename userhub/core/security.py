"""Password hashing and JWT creation/verification for authentication."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import ValidationError

from userhub.models.user import Role
from userhub.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from userhub.core.config import Settings

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72


class TokenServiceConfigError(Exception):
    """Raised at startup when the token signing secret is not configured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TokenVerificationError(Exception):
    """Token could not be verified. Subclasses distinguish expiry from a bad token."""

    def __init__(self, message: str = "Error during token verification") -> None:
        self.message = message
        super().__init__(message)


class TokenExpiredError(TokenVerificationError):
    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class TokenInvalidError(TokenVerificationError):
    def __init__(self, message: str = "Invalid token or signature") -> None:
        super().__init__(message)


class PasswordHasher:
    """Salted bcrypt hashing with a work factor fixed at construction."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    @staticmethod
    def _encode(plain_password: str) -> bytes:
        return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        if not plain_password:
            raise ValueError("password must be non-empty")
        return bcrypt.hashpw(
            self._encode(plain_password), bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash. False on mismatch or a malformed hash."""
        try:
            return bcrypt.checkpw(self._encode(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False


class TokenService:
    """
    Issues and verifies signed identity tokens carrying {email, role}.

    Construction fails with TokenServiceConfigError when JWT_SECRET is unset,
    so a misconfigured deployment never reaches the first request.
    """

    def __init__(self, settings: Settings) -> None:
        if settings.JWT_SECRET is None or not settings.JWT_SECRET.get_secret_value().strip():
            raise TokenServiceConfigError("JWT_SECRET is not configured")
        self._secret = settings.JWT_SECRET.get_secret_value()
        self.algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    def issue(self, email: str, role: Role, issued_at: datetime | None = None) -> str:
        """Create a token valid for exactly `lifetime` from issued_at (default: now)."""
        now = issued_at or datetime.now(UTC)
        payload: dict[str, Any] = {
            "email": email,
            "role": Role(role).value,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token; return its identity claims.

        Raises TokenExpiredError past expiry, TokenInvalidError on a bad
        signature, structure or claims, TokenVerificationError otherwise.
        """
        if not isinstance(token, str) or not token:
            raise TokenVerificationError()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError() from e
        try:
            return TokenClaims(email=payload.get("email"), role=payload.get("role"))
        except ValidationError as e:
            raise TokenInvalidError() from e
