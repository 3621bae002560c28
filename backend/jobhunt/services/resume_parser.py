"""
Service for turning resume files into structured profiles.

Extract text -> clean -> one Claude call -> ParsedResume. Every step either
succeeds or raises; nothing is persisted here.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jobhunt.core.config import settings
from jobhunt.models.resume import FileKind
from jobhunt.services.llm import LLMError, claude_chat_json
from jobhunt.services.match_analyzer import string_list
from jobhunt.services.prompts import build_resume_parse_messages
from jobhunt.services.text_extractor import (
    ResumeTextTooShortError,
    clean_extracted_text,
    extract_text,
)

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _experience_entry(item: dict) -> Dict[str, Any]:
    return {
        "title": _text(item.get("title")) or "",
        "company": _text(item.get("company")) or "",
        "startDate": _text(item.get("startDate")) or "",
        "endDate": _text(item.get("endDate")),
        "description": _text(item.get("description")) or "",
        "achievements": string_list(item.get("achievements")),
    }


def _education_entry(item: dict) -> Dict[str, Any]:
    return {
        "degree": _text(item.get("degree")) or "",
        "institution": _text(item.get("institution")) or "",
        "graduationDate": _text(item.get("graduationDate")) or "",
        "gpa": _text(item.get("gpa")),
    }


@dataclass
class ParsedResume:
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience: List[Dict[str, Any]] = field(default_factory=list)
    education: List[Dict[str, Any]] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)

    @classmethod
    def from_llm(cls, result: Any) -> "ParsedResume":
        if not isinstance(result, dict):
            raise LLMError("Resume parse response was not a JSON object")
        experience = result.get("experience")
        education = result.get("education")
        return cls(
            full_name=_text(result.get("fullName")),
            email=_text(result.get("email")),
            phone=_text(result.get("phone")),
            location=_text(result.get("location")),
            summary=_text(result.get("summary")),
            skills=string_list(result.get("skills")),
            experience=[
                _experience_entry(item)
                for item in (experience if isinstance(experience, list) else [])
                if isinstance(item, dict)
            ],
            education=[
                _education_entry(item)
                for item in (education if isinstance(education, list) else [])
                if isinstance(item, dict)
            ],
            certifications=string_list(result.get("certifications")),
        )

    def as_columns(self) -> Dict[str, Any]:
        """Keyword arguments for the Resume profile columns."""
        return asdict(self)


def parse_resume_text(raw_text: str) -> ParsedResume:
    cleaned = clean_extracted_text(raw_text or "")
    if len(cleaned) < settings.MIN_RESUME_TEXT_LENGTH:
        raise ResumeTextTooShortError(
            "Extracted text is too short or empty. The file may be a scanned image; "
            "try a text-based PDF or a DOCX file."
        )
    logger.info("Parsing %d characters of resume text with Claude", len(cleaned))
    parsed = ParsedResume.from_llm(claude_chat_json(build_resume_parse_messages(cleaned)))
    logger.info("Resume parsed: %d skill(s), %d role(s)", len(parsed.skills), len(parsed.experience))
    return parsed


def parse_resume_file(path: str | Path, file_kind: FileKind) -> ParsedResume:
    logger.info("Extracting text from %s (%s)", Path(path).name, file_kind.value)
    return parse_resume_text(extract_text(path, file_kind))
