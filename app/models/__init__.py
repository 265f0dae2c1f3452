"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.user import User
from app.models.user_settings import UserSettings

__all__ = ["User", "UserSettings"]
