from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy.orm import Session

from jobhunt.core.errors import NotFoundError
from jobhunt.models.job import Job
from jobhunt.models.resume import Resume
from jobhunt.models.tailored_resume import TailoredResume
from jobhunt.models.types import isoformat
from jobhunt.services.llm import LLMError, claude_chat_json
from jobhunt.services.match_analyzer import normalize_score
from jobhunt.services.prompts import build_tailor_messages

logger = logging.getLogger(__name__)

_TAILOR_MAX_TOKENS = 4000


def load_pair(db: Session, job_id: uuid.UUID, resume_id: uuid.UUID) -> Tuple[Job, Resume]:
    job = db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    resume = db.get(Resume, resume_id)
    if resume is None:
        raise NotFoundError("Resume not found")
    return job, resume


def _dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def tailored_to_dict(row: TailoredResume) -> Dict[str, Any]:
    return {
        "id": str(row.id),
        "originalResumeId": str(row.original_resume_id),
        "jobId": str(row.job_id),
        "tailoredResume": row.content or {},
        "changes": row.changes or [],
        "keywordsApplied": row.keywords_applied or [],
        "keywordsNotApplied": row.keywords_skipped or [],
        "honestyScore": row.honesty_score,
        "createdAt": isoformat(row.created_at),
    }


def tailor_resume(
    db: Session, resume_id: uuid.UUID, job_id: uuid.UUID, keywords: Sequence[str] = ()
) -> Dict[str, Any]:
    """Rewrite a resume for a job and store the result with its change log."""
    job, resume = load_pair(db, job_id, resume_id)

    result = claude_chat_json(
        build_tailor_messages(job, resume, list(keywords)), max_tokens=_TAILOR_MAX_TOKENS
    )
    if not isinstance(result, dict) or not isinstance(result.get("tailoredResume"), dict):
        raise LLMError("Tailoring response missing 'tailoredResume'")

    row = TailoredResume(
        original_resume_id=resume.id,
        job_id=job.id,
        content=result["tailoredResume"],
        changes=_dict_list(result.get("changes")),
        keywords_applied=_dict_list(result.get("keywordsApplied")),
        keywords_skipped=_dict_list(result.get("keywordsNotApplied")),
        honesty_score=normalize_score(result.get("honestyScore", 0)),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Tailored resume %s for job %s: %d change(s), honesty %d",
        resume.id,
        job.id,
        len(row.changes or []),
        row.honesty_score,
    )
    return tailored_to_dict(row)
