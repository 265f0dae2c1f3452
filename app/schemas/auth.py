"""Auth request/response schemas."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from app.core.constants import (
    EMAIL_MAX_LENGTH,
    MSG_INVALID_EMAIL,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _validate_email(value: Any, handler: ValidatorFunctionWrapHandler) -> str:
    """Run email-validator's syntax check, then store the address lower-cased."""
    if isinstance(value, str):
        value = value.strip()
    try:
        checked = handler(value)
    except ValidationError:
        raise ValueError(MSG_INVALID_EMAIL) from None
    checked = normalize_email(str(checked))
    if len(checked) > EMAIL_MAX_LENGTH:
        raise ValueError(MSG_INVALID_EMAIL) from None
    return checked


# ── Requests ─────────────────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    email: EmailStr
    username: str
    password: str

    @field_validator("email", mode="wrap")
    @classmethod
    def check_email(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> str:
        return _validate_email(v, handler)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_MIN_LENGTH <= len(v) <= USERNAME_MAX_LENGTH:
            raise ValueError(
                f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
            )
        if not re.match(USERNAME_PATTERN, v):
            raise ValueError("Username can only contain letters, numbers, underscores, and hyphens")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        if not any(ch.isdigit() for ch in v):
            raise ValueError("Password must contain at least one number")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="wrap")
    @classmethod
    def check_email(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> str:
        return _validate_email(v, handler)


# ── Responses ────────────────────────────────────────────────────────────

class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str


class UserProfile(UserSummary):
    created_at: datetime


class AuthResult(BaseModel):
    token: str
    user: UserSummary
