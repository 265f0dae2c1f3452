"""UserSettings model - one row per user, created with the user."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_EMAIL_ALERTS,
    DEFAULT_NOTIFICATIONS_ENABLED,
    DEFAULT_THEME,
)
from app.core.enums import Theme
from app.db.base import Base
from app.models.user import _utcnow


class UserSettings(Base):
    """Per-user preferences; primary key doubles as the FK to users."""

    __tablename__ = "user_settings"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    theme: Mapped[Theme] = mapped_column(
        Enum(Theme, name="theme", values_callable=lambda e: [m.value for m in e]),
        default=DEFAULT_THEME,
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(10), default=DEFAULT_CURRENCY, nullable=False)
    notifications_enabled: Mapped[bool] = mapped_column(
        Boolean, default=DEFAULT_NOTIFICATIONS_ENABLED, nullable=False
    )
    email_alerts: Mapped[bool] = mapped_column(Boolean, default=DEFAULT_EMAIL_ALERTS, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="settings")
