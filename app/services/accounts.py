"""Account service: registration, login and profile lookup.

Expected failures (duplicate account, bad credentials, missing user) come
back as tagged :class:`AccountOutcome` values for the route layer to map
onto status codes. Anything else (lost connection, codec failure) raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import OutcomeKind
from app.core.security import PasswordHasher
from app.core.tokens import TokenClaims, TokenCodec
from app.models.user import User
from app.models.user_settings import UserSettings
from app.schemas.auth import AuthResult, UserProfile, UserSummary, normalize_email

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AccountOutcome(Generic[T]):
    kind: OutcomeKind
    data: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK


class AccountService:
    """Orchestrates storage, the password hasher and the token codec."""

    def __init__(self, db: AsyncSession, codec: TokenCodec, hasher: PasswordHasher) -> None:
        self.db = db
        self.codec = codec
        self.hasher = hasher

    def _auth_result(self, user: User) -> AuthResult:
        token = self.codec.issue(
            TokenClaims(user_id=user.id, email=user.email, username=user.username)
        )
        return AuthResult(token=token, user=UserSummary.model_validate(user))

    async def _find_existing(self, email: str, username: str) -> int | None:
        result = await self.db.execute(
            select(User.id).where(or_(User.email == email, User.username == username)).limit(1)
        )
        return result.scalar_one_or_none()

    async def register(self, email: str, username: str, password: str) -> AccountOutcome[AuthResult]:
        """Create a user plus default settings and issue a token.

        The pre-check is only a fast path; the unique constraints on
        ``users.email`` and ``users.username`` decide concurrent races.
        """
        email = normalize_email(email)
        if await self._find_existing(email, username) is not None:
            logger.info("Registration rejected, account exists: %s / %s", email, username)
            return AccountOutcome(OutcomeKind.CONFLICT)

        password_hash = await self.hasher.hash_async(password)

        # User and settings commit together, before any token leaves the service.
        # On any other failure the caller's session rolls both back.
        user = User(email=email, username=username, password_hash=password_hash)
        try:
            self.db.add(user)
            await self.db.flush()
            self.db.add(UserSettings(user_id=user.id))
            await self.db.flush()
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Registration lost uniqueness race: %s / %s", email, username)
            return AccountOutcome(OutcomeKind.CONFLICT)

        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return AccountOutcome(OutcomeKind.OK, self._auth_result(user))

    async def login(self, email: str, password: str) -> AccountOutcome[AuthResult]:
        """Check credentials; unknown email and wrong password look the same."""
        email = normalize_email(email)
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            await self.hasher.dummy_verify_async(password)
            logger.info("Login failed for %s", email)
            return AccountOutcome(OutcomeKind.INVALID_CREDENTIALS)

        if not await self.hasher.verify_async(password, user.password_hash):
            logger.info("Login failed for %s", email)
            return AccountOutcome(OutcomeKind.INVALID_CREDENTIALS)

        logger.info("Login: %s (id=%s)", user.username, user.id)
        return AccountOutcome(OutcomeKind.OK, self._auth_result(user))

    async def get_profile(self, user_id: int) -> AccountOutcome[UserProfile]:
        """Look up a user by id. A valid token does not guarantee the row still exists."""
        user = await self.db.get(User, user_id)
        if user is None:
            return AccountOutcome(OutcomeKind.NOT_FOUND)
        return AccountOutcome(OutcomeKind.OK, UserProfile.model_validate(user))
