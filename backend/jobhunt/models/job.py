from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from jobhunt.core.database import Base
from jobhunt.models.types import JSONText


class LocationType(str, enum.Enum):
    remote = "remote"
    hybrid = "hybrid"
    onsite = "onsite"


class Job(Base):
    """A scraped listing. Rows are written only by the scrape upsert."""

    __tablename__ = "jobs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # "<source>-<source-native-id>", unique across boards
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    requirements: Mapped[Optional[list]] = mapped_column(JSONText, nullable=True)

    location: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    location_type: Mapped[Optional[LocationType]] = mapped_column(
        Enum(LocationType, name="locationtype"), nullable=True
    )

    salary_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    salary_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    salary_currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)

    source_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    source_board: Mapped[str] = mapped_column(String(100), nullable=False)
    posted_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
