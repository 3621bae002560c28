from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from jobhunt.core.database import Base
from jobhunt.models.types import JSONText


class RemotePreference(str, enum.Enum):
    remote_only = "remote_only"
    hybrid = "hybrid"
    onsite = "onsite"
    flexible = "flexible"


class User(Base):
    """The installation's owner. Resolved through jobhunt.core.tenant."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[Optional[str]] = mapped_column(String(320), unique=True, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    preferences: Mapped[Optional["UserPreferences"]] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    desired_titles: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    desired_locations: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    desired_salary_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    remote_preference: Mapped[Optional[RemotePreference]] = mapped_column(
        Enum(RemotePreference, name="remotepreference"), nullable=True
    )
    auto_apply: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    daily_application_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    search_queries: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    user: Mapped[User] = relationship(back_populates="preferences")
