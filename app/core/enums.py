"""Shared enums for models and API."""

from enum import Enum


class Theme(str, Enum):
    """UI theme stored in user settings."""

    LIGHT = "light"
    DARK = "dark"


class OutcomeKind(str, Enum):
    """Result tag returned by the account service."""

    OK = "ok"
    CONFLICT = "conflict"  # Duplicate email or username
    INVALID_CREDENTIALS = "invalid_credentials"  # Unknown email or wrong password
    NOT_FOUND = "not_found"
