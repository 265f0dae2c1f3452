"""Response envelope shared by all endpoints: ``{message, data?, errors?}``."""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class FieldError(BaseModel):
    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    message: str
    data: Optional[T] = None


class ApiError(BaseModel):
    message: str
    errors: Optional[list[FieldError]] = None
    error: Optional[Any] = None
