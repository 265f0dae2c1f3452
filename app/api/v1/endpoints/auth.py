"""Auth endpoints: register, login, current user profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import AuthenticatedIdentity, get_account_service, get_current_identity
from app.core.constants import (
    MSG_INVALID_CREDENTIALS,
    MSG_LOGGED_IN,
    MSG_PROFILE,
    MSG_REGISTERED,
    MSG_USER_EXISTS,
    MSG_USER_NOT_FOUND,
)
from app.core.enums import OutcomeKind
from app.schemas.auth import AuthResult, LoginRequest, RegisterRequest, UserProfile
from app.schemas.response import ApiError, ApiResponse
from app.services.accounts import AccountOutcome, AccountService

router = APIRouter()

# Failure outcome -> (status code, client message)
FAILURES: dict[OutcomeKind, tuple[int, str]] = {
    OutcomeKind.CONFLICT: (409, MSG_USER_EXISTS),
    OutcomeKind.INVALID_CREDENTIALS: (401, MSG_INVALID_CREDENTIALS),
    OutcomeKind.NOT_FOUND: (404, MSG_USER_NOT_FOUND),
}


def _failure(outcome: AccountOutcome) -> JSONResponse:
    status_code, message = FAILURES[outcome.kind]
    return JSONResponse(status_code=status_code, content=ApiError(message=message).model_dump(exclude_none=True))


@router.post(
    "/register",
    response_model=ApiResponse[AuthResult],
    status_code=201,
    responses={409: {"model": ApiError}, 400: {"model": ApiError}},
)
async def register(
    payload: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Register a new user and return a session token."""
    outcome = await accounts.register(payload.email, payload.username, payload.password)
    if not outcome.ok:
        return _failure(outcome)
    return ApiResponse[AuthResult](message=MSG_REGISTERED, data=outcome.data)


@router.post(
    "/login",
    response_model=ApiResponse[AuthResult],
    responses={401: {"model": ApiError}, 400: {"model": ApiError}},
)
async def login(
    payload: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Login with email + password."""
    outcome = await accounts.login(payload.email, payload.password)
    if not outcome.ok:
        return _failure(outcome)
    return ApiResponse[AuthResult](message=MSG_LOGGED_IN, data=outcome.data)


@router.get(
    "/me",
    response_model=ApiResponse[UserProfile],
    responses={401: {"model": ApiError}, 404: {"model": ApiError}},
)
async def me(
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    accounts: AccountService = Depends(get_account_service),
):
    """Current user's profile (requires a bearer token)."""
    outcome = await accounts.get_profile(identity.user_id)
    if not outcome.ok:
        return _failure(outcome)
    return ApiResponse[UserProfile](message=MSG_PROFILE, data=outcome.data)
