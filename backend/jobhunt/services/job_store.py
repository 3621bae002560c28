"""
Persistence for scraped jobs: upsert by external id, search, purge.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobhunt.models.job import Job, LocationType
from jobhunt.services.job_sources import ScrapedJob

logger = logging.getLogger(__name__)

# Overwritten on every re-scrape; id, external_id and created_at never change.
MUTABLE_FIELDS = (
    "title",
    "company",
    "description",
    "requirements",
    "location",
    "location_type",
    "salary_min",
    "salary_max",
    "salary_currency",
    "source_url",
    "source_board",
    "posted_date",
)


class UpsertAction(str, enum.Enum):
    created = "created"
    updated = "updated"
    failed = "failed"


@dataclass(frozen=True)
class UpsertOutcome:
    external_id: str
    action: UpsertAction
    error: Optional[str] = None


@dataclass
class UpsertSummary:
    outcomes: List[UpsertOutcome] = field(default_factory=list)

    def _count(self, action: UpsertAction) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action is action)

    @property
    def created(self) -> int:
        return self._count(UpsertAction.created)

    @property
    def updated(self) -> int:
        return self._count(UpsertAction.updated)

    @property
    def failed(self) -> int:
        return self._count(UpsertAction.failed)


def _apply(job: Job, scraped: ScrapedJob) -> None:
    for name in MUTABLE_FIELDS:
        value = getattr(scraped, name)
        if name == "requirements":
            value = list(value) if value else None
        setattr(job, name, value)


def upsert_job(db: Session, scraped: ScrapedJob) -> UpsertOutcome:
    """Insert or update one job in its own transaction. Failures become an outcome."""
    try:
        job = db.query(Job).filter(Job.external_id == scraped.external_id).first()
        if job is None:
            job = Job(external_id=scraped.external_id)
            _apply(job, scraped)
            db.add(job)
            action = UpsertAction.created
        else:
            _apply(job, scraped)
            action = UpsertAction.updated
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error saving job %s: %s", scraped.external_id, exc)
        return UpsertOutcome(scraped.external_id, UpsertAction.failed, str(exc))
    return UpsertOutcome(scraped.external_id, action)


def upsert_jobs(db: Session, jobs: Iterable[ScrapedJob]) -> UpsertSummary:
    summary = UpsertSummary(outcomes=[upsert_job(db, scraped) for scraped in jobs])
    logger.info(
        "Upserted jobs: created=%d updated=%d failed=%d",
        summary.created,
        summary.updated,
        summary.failed,
    )
    return summary


def search_jobs(
    db: Session,
    *,
    search: Optional[str] = None,
    location: Optional[str] = None,
    location_type: Optional[LocationType] = None,
    salary_min: Optional[int] = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[List[Job], int]:
    """Filtered, newest-first page of jobs plus the total match count.

    salary_min keeps only jobs whose stated minimum is at least the given value;
    jobs without a stated minimum are excluded.
    """
    query = db.query(Job)
    if search:
        query = query.filter(
            or_(
                Job.title.icontains(search, autoescape=True),
                Job.company.icontains(search, autoescape=True),
                Job.description.icontains(search, autoescape=True),
            )
        )
    if location:
        query = query.filter(Job.location.icontains(location, autoescape=True))
    if location_type:
        query = query.filter(Job.location_type == location_type)
    if salary_min is not None:
        query = query.filter(Job.salary_min >= salary_min)

    total = query.count()
    jobs = (
        query.order_by(Job.posted_date.desc(), Job.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return jobs, total


def purge_jobs(db: Session, source_board: Optional[str] = None) -> int:
    """Delete jobs (optionally only one board's). Out-of-band maintenance only."""
    query = db.query(Job)
    if source_board:
        query = query.filter(Job.source_board == source_board)
    deleted = query.delete(synchronize_session=False)
    db.commit()
    logger.info("Purged %d job(s)%s", deleted, f" from {source_board}" if source_board else "")
    return deleted
