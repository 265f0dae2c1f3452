"""FastAPI dependencies: token codec, account service and the auth gate."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import MSG_AUTH_REQUIRED, MSG_INVALID_TOKEN
from app.core.errors import AuthenticationRequired
from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.db.session import get_db
from app.services.accounts import AccountService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Caller identity for the duration of one request."""

    user_id: int
    email: str
    username: str


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_account_service(
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AccountService:
    return AccountService(db, codec, hasher)


def authenticate_authorization(authorization: str | None, codec: TokenCodec) -> AuthenticatedIdentity:
    """Turn an ``Authorization`` header value into an identity or raise.

    Missing headers and non-bearer schemes are rejected before the codec
    is consulted. Any codec failure (bad signature, malformed, expired)
    yields the same rejection.
    """
    if not authorization or not authorization.strip():
        raise AuthenticationRequired(MSG_AUTH_REQUIRED)
    scheme, _, credentials = authorization.strip().partition(" ")
    credentials = credentials.strip()
    if scheme.lower() != BEARER_SCHEME or not credentials:
        raise AuthenticationRequired(MSG_AUTH_REQUIRED)

    claims = codec.verify(credentials)
    if claims is None:
        raise AuthenticationRequired(MSG_INVALID_TOKEN)
    return AuthenticatedIdentity(user_id=claims.user_id, email=claims.email, username=claims.username)


async def get_current_identity(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthenticatedIdentity:
    """Auth gate for protected routes; stores the identity on ``request.state``."""
    identity = authenticate_authorization(request.headers.get("Authorization"), codec)
    request.state.identity = identity
    return identity
