from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from jobhunt.core.database import Base
from jobhunt.models.types import JSONText


class FileKind(str, enum.Enum):
    pdf = "pdf"
    docx = "docx"


# Attributes filled from the LLM-structured profile
PROFILE_FIELDS = (
    "full_name",
    "email",
    "phone",
    "location",
    "summary",
    "skills",
    "experience",
    "education",
    "certifications",
)


class Resume(Base):
    __tablename__ = "resumes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    file_type: Mapped[FileKind] = mapped_column(Enum(FileKind, name="filekind"), nullable=False)

    full_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    skills: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    experience: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    education: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    certifications: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)

    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
