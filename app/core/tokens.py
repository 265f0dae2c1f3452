"""Signed session tokens (HS256 JWT via PyJWT).

Payload keys: ``userId``, ``email``, ``username``, ``iat``, ``exp``.
Callers treat tokens as opaque and only read claims through
:meth:`TokenCodec.verify`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Protocol

import jwt

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)
REQUIRED_CLAIMS = ["exp", "iat", "userId", "email", "username"]


class IdentityLike(Protocol):
    user_id: int
    email: str
    username: str


@dataclass(frozen=True)
class TokenClaims:
    """Identity assertions carried by a token."""

    user_id: int
    email: str
    username: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenCodec:
    """Issue and verify signed tokens with a server-held secret."""

    def __init__(
        self,
        secret: str,
        lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    def issue(self, identity: IdentityLike, now: datetime | None = None) -> str:
        """Sign ``identity`` into a token expiring ``lifetime`` after ``now``."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "userId": int(identity.user_id),
            "email": identity.email,
            "username": identity.username,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims | None:
        """Return the claims if signature and expiry both hold, else None."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
            return TokenClaims(
                user_id=int(payload["userId"]),
                email=str(payload["email"]),
                username=str(payload["username"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except jwt.ExpiredSignatureError as e:
            logger.warning("Token expired: %s", e)
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid token: %s", e)
            return None
        except (TypeError, ValueError) as e:
            logger.warning("Invalid token claims: %s", e)
            return None

    @staticmethod
    def decode_unverified(token: str) -> dict[str, Any] | None:
        """Decode the payload WITHOUT checking signature or expiry.

        Debugging aid only. Never use the result to authenticate or
        authorize anything.
        """
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError as e:
            logger.error("Failed to decode token: %s", e)
            return None
