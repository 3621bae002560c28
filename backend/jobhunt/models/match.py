from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jobhunt.core.database import Base
from jobhunt.models.types import JSONText, utcnow


class JobMatchCache(Base):
    """Cached match analysis for one (job, resume) pair. Rows are replaced, never patched."""

    __tablename__ = "job_match_cache"
    __table_args__ = (UniqueConstraint("job_id", "resume_id", name="uq_job_match_cache_pair"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    resume_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False
    )

    confidence_score: Mapped[int] = mapped_column(Integer, nullable=False)
    matched_skills: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    missing_skills: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    transferable_skills: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    strengths: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    gaps: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)
    recommendation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    keywords_detected: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)

    # Set from the caller's clock; cache freshness is measured from it.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
