from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from jobhunt.services.llm import LLMError, claude_chat_text
from jobhunt.services.prompts import build_cover_letter_messages
from jobhunt.services.resume_tailor import load_pair

logger = logging.getLogger(__name__)

_COVER_LETTER_MAX_TOKENS = 1500


def generate_cover_letter(db: Session, resume_id: uuid.UUID, job_id: uuid.UUID) -> str:
    job, resume = load_pair(db, job_id, resume_id)
    letter = claude_chat_text(build_cover_letter_messages(job, resume), max_tokens=_COVER_LETTER_MAX_TOKENS)
    letter = letter.strip()
    if not letter:
        raise LLMError("Cover letter response was empty")
    logger.info("Generated cover letter for job %s (%d words)", job.id, len(letter.split()))
    return letter
