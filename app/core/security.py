"""JWT issuance and verification.

The signing configuration is an explicit object built once at startup and
passed to every call, so nothing here reads module-level secrets.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import Settings


@dataclass(frozen=True)
class JWTConfig:
    """Signing parameters for access tokens."""

    secret: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTConfig":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        )


def create_access_token(
    config: JWTConfig,
    subject: str,
    extra_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        config: Signing configuration
        subject: The subject (the user ID)
        extra_claims: Additional claims to include in the token
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(subject),
        "exp": now + expires_delta,
        "iat": now,
        "type": "access",
    }

    if extra_claims:
        to_encode.update(extra_claims)

    return jwt.encode(to_encode, config.secret, algorithm=config.algorithm)


def verify_access_token(config: JWTConfig, token: str) -> dict[str, Any] | None:
    """
    Verify and decode a JWT access token.

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(token, config.secret, algorithms=[config.algorithm])
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None

    return payload
