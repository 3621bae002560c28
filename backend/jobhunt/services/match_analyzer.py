from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import partial
from typing import Any, Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobhunt.core.config import settings
from jobhunt.core.errors import NotFoundError
from jobhunt.models.job import Job
from jobhunt.models.match import JobMatchCache
from jobhunt.models.resume import Resume
from jobhunt.models.types import utcnow
from jobhunt.services.llm import LLMError, claude_chat_json
from jobhunt.services.prompts import build_match_messages
from jobhunt.services.ttl_cache import CachedEntry, TTLMemo

logger = logging.getLogger(__name__)

MatchKey = tuple[uuid.UUID, uuid.UUID]

_MATCH_MAX_TOKENS = 2000


def normalize_score(value: object) -> int:
    """Round to int and clamp to 0-100. Non-numeric input is a malformed reply."""
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError) as exc:
        raise LLMError(f"Score is not a number: {value!r}") from exc
    return max(0, min(100, score))


def string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def as_flag(value: Any) -> bool:
    """JSON booleans pass through; "true"/"yes"/"1" strings are True, other strings False."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


@dataclass(frozen=True)
class KeywordDetection:
    term: str
    in_resume: bool
    can_add_truthfully: bool
    reasoning: str

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "inResume": self.in_resume,
            "canAddTruthfully": self.can_add_truthfully,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "KeywordDetection":
        return cls(
            term=str(data.get("term") or ""),
            in_resume=as_flag(data.get("inResume")),
            can_add_truthfully=as_flag(data.get("canAddTruthfully")),
            reasoning=str(data.get("reasoning") or ""),
        )


@dataclass(frozen=True)
class MatchAnalysis:
    confidence_score: int
    matched_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    transferable_skills: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    recommendation: str = ""
    keywords_detected: List[KeywordDetection] = field(default_factory=list)

    @classmethod
    def from_llm(cls, result: Any) -> "MatchAnalysis":
        if not isinstance(result, dict):
            raise LLMError("Match analysis response was not a JSON object")
        if "confidenceScore" not in result:
            raise LLMError("Match analysis response missing 'confidenceScore'")
        keywords = result.get("keywordsDetected")
        return cls(
            confidence_score=normalize_score(result["confidenceScore"]),
            matched_skills=string_list(result.get("matchedSkills")),
            missing_skills=string_list(result.get("missingSkills")),
            transferable_skills=string_list(result.get("transferableSkills")),
            strengths=string_list(result.get("strengths")),
            gaps=string_list(result.get("gaps")),
            recommendation=str(result.get("recommendation") or ""),
            keywords_detected=[
                KeywordDetection.from_dict(item)
                for item in (keywords if isinstance(keywords, list) else [])
                if isinstance(item, dict)
            ],
        )

    @classmethod
    def from_row(cls, row: JobMatchCache) -> "MatchAnalysis":
        return cls(
            confidence_score=row.confidence_score,
            matched_skills=row.matched_skills or [],
            missing_skills=row.missing_skills or [],
            transferable_skills=row.transferable_skills or [],
            strengths=row.strengths or [],
            gaps=row.gaps or [],
            recommendation=row.recommendation or "",
            keywords_detected=[KeywordDetection.from_dict(k) for k in row.keywords_detected or []],
        )

    def to_dict(self) -> dict:
        return {
            "confidenceScore": self.confidence_score,
            "matchedSkills": list(self.matched_skills),
            "missingSkills": list(self.missing_skills),
            "transferableSkills": list(self.transferable_skills),
            "strengths": list(self.strengths),
            "gaps": list(self.gaps),
            "recommendation": self.recommendation,
            "keywordsDetected": [k.to_dict() for k in self.keywords_detected],
        }


def _load_cached(db: Session, key: MatchKey) -> Optional[CachedEntry[MatchAnalysis]]:
    job_id, resume_id = key
    row = (
        db.query(JobMatchCache)
        .filter(JobMatchCache.job_id == job_id, JobMatchCache.resume_id == resume_id)
        .first()
    )
    if row is None:
        return None
    return CachedEntry(value=MatchAnalysis.from_row(row), stored_at=row.created_at)


def _store_cached(
    db: Session, clock: Callable[[], datetime], key: MatchKey, analysis: MatchAnalysis
) -> MatchAnalysis:
    job_id, resume_id = key
    # Replace any stale row for the pair in the same transaction as the insert.
    db.query(JobMatchCache).filter(
        JobMatchCache.job_id == job_id, JobMatchCache.resume_id == resume_id
    ).delete(synchronize_session=False)
    db.flush()
    row = JobMatchCache(
        job_id=job_id,
        resume_id=resume_id,
        confidence_score=analysis.confidence_score,
        matched_skills=list(analysis.matched_skills),
        missing_skills=list(analysis.missing_skills),
        transferable_skills=list(analysis.transferable_skills),
        strengths=list(analysis.strengths),
        gaps=list(analysis.gaps),
        recommendation=analysis.recommendation,
        keywords_detected=[k.to_dict() for k in analysis.keywords_detected],
        created_at=clock(),
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Another request committed the same pair first; serve its row.
        db.rollback()
        existing = _load_cached(db, key)
        if existing is None:
            raise
        logger.info("Match cache row for job=%s resume=%s was stored concurrently", job_id, resume_id)
        return existing.value
    return MatchAnalysis.from_row(row)


def _compute(db: Session, key: MatchKey) -> MatchAnalysis:
    job_id, resume_id = key
    job = db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    resume = db.get(Resume, resume_id)
    if resume is None:
        raise NotFoundError("Resume not found")

    result = claude_chat_json(build_match_messages(job, resume), max_tokens=_MATCH_MAX_TOKENS)
    analysis = MatchAnalysis.from_llm(result)
    logger.info(
        "Analyzed match job=%s resume=%s: %d%% confidence", job_id, resume_id, analysis.confidence_score
    )
    return analysis


def analyze_job_match(
    db: Session,
    job_id: uuid.UUID,
    resume_id: uuid.UUID,
    clock: Callable[[], datetime] = utcnow,
) -> MatchAnalysis:
    """Match analysis for the pair, served from cache while younger than the TTL."""
    memo: TTLMemo[MatchKey, MatchAnalysis] = TTLMemo(
        ttl=timedelta(hours=settings.MATCH_CACHE_TTL_HOURS),
        load=partial(_load_cached, db),
        store=partial(_store_cached, db, clock),
        clock=clock,
        name="match-analysis",
    )
    return memo.get_or_compute((job_id, resume_id), partial(_compute, db))
