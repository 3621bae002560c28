from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from jobhunt.core.database import Base
from jobhunt.models.types import JSONText


class TailoredResume(Base):
    __tablename__ = "tailored_resumes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    original_resume_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )

    content: Mapped[Optional[dict]] = mapped_column(JSONText, nullable=True)
    changes: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    keywords_applied: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    keywords_skipped: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    honesty_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
