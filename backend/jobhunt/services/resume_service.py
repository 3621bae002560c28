"""
Resume lifecycle: store an upload, parse it, keep one primary resume per user.
"""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from jobhunt.core.config import settings
from jobhunt.core.errors import BadRequestError, NotFoundError
from jobhunt.models.resume import PROFILE_FIELDS, FileKind, Resume
from jobhunt.models.user import User
from jobhunt.services.resume_parser import parse_resume_file

logger = logging.getLogger(__name__)

_ALLOWED_MIMETYPES = {
    FileKind.pdf: {"application/pdf"},
    FileKind.docx: {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"},
}


def file_kind_for(filename: str, mimetype: Optional[str] = None) -> FileKind:
    suffix = Path(filename or "").suffix.lower().lstrip(".")
    try:
        kind = FileKind(suffix)
    except ValueError:
        raise BadRequestError("Invalid file type. Only PDF and DOCX files are allowed.") from None
    # application/octet-stream means "unknown" and defers to the extension
    if mimetype and mimetype != "application/octet-stream" and mimetype not in _ALLOWED_MIMETYPES[kind]:
        raise BadRequestError("Invalid file type. Only PDF and DOCX files are allowed.")
    return kind


def display_name(filename: Optional[str]) -> str:
    """Client filename without directory parts, kept as sent (non-ASCII included)."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    return name[:255]


def store_upload(upload: FileStorage) -> tuple[Path, FileKind]:
    """Validate and save an uploaded file under the resume directory."""
    if upload is None or not upload.filename:
        raise BadRequestError("No file uploaded")
    kind = file_kind_for(upload.filename, upload.mimetype)

    directory = settings.resume_dir
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{uuid.uuid4()}.{kind.value}"
    upload.save(str(path))
    logger.info("Stored upload %s as %s", secure_filename(upload.filename), path.name)
    return path, kind


def _remove_file(path: Optional[str | Path]) -> None:
    if not path:
        return
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not delete resume file %s: %s", path, exc)


def list_resumes(db: Session, user: User) -> List[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == user.id)
        .order_by(Resume.is_primary.desc(), Resume.created_at.desc())
        .all()
    )


def get_resume(db: Session, user: User, resume_id: uuid.UUID) -> Resume:
    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == user.id).first()
    if resume is None:
        raise NotFoundError("Resume not found")
    return resume


def create_resume_from_upload(db: Session, user: User, upload: FileStorage) -> Resume:
    """Store, extract and parse an upload, then save it as version 1.

    Any failure before the row is committed removes the stored file.
    """
    path, kind = store_upload(upload)
    try:
        parsed = parse_resume_file(path, kind)
        resume = Resume(
            user_id=user.id,
            file_name=display_name(upload.filename) or path.name,
            file_url=str(path),
            file_type=kind,
            is_primary=False,
            version=1,
            **parsed.as_columns(),
        )
        db.add(resume)
        db.commit()
    except Exception:
        db.rollback()
        _remove_file(path)
        raise
    db.refresh(resume)
    logger.info("Created resume %s for user %s", resume.id, user.id)
    return resume


def reparse_resume(db: Session, user: User, resume_id: uuid.UUID) -> Resume:
    """Re-run parsing on the stored file. The row is only touched once parsing succeeds."""
    resume = get_resume(db, user, resume_id)
    if not resume.file_url or not Path(resume.file_url).exists():
        raise NotFoundError("Resume file not found")

    parsed = parse_resume_file(resume.file_url, resume.file_type)
    for name, value in parsed.as_columns().items():
        setattr(resume, name, value)
    resume.version += 1
    db.commit()
    db.refresh(resume)
    logger.info("Re-parsed resume %s (version %d)", resume.id, resume.version)
    return resume


def _clear_other_primaries(db: Session, user: User, keep_id: uuid.UUID) -> None:
    db.query(Resume).filter(
        Resume.user_id == user.id,
        Resume.id != keep_id,
        Resume.is_primary.is_(True),
    ).update({Resume.is_primary: False}, synchronize_session=False)


def update_resume(db: Session, user: User, resume_id: uuid.UUID, changes: Dict[str, Any]) -> Resume:
    """Apply profile edits and the primary flag. At most one primary per user survives."""
    resume = get_resume(db, user, resume_id)
    for name in PROFILE_FIELDS:
        if name in changes:
            setattr(resume, name, changes[name])

    if "is_primary" in changes and changes["is_primary"] is not None:
        if changes["is_primary"]:
            _clear_other_primaries(db, user, resume.id)
        resume.is_primary = bool(changes["is_primary"])

    resume.version += 1
    db.commit()
    db.refresh(resume)
    return resume


def set_primary(db: Session, user: User, resume_id: uuid.UUID) -> Resume:
    return update_resume(db, user, resume_id, {"is_primary": True})


def delete_resume(db: Session, user: User, resume_id: uuid.UUID) -> None:
    resume = get_resume(db, user, resume_id)
    file_url = resume.file_url
    db.delete(resume)
    db.commit()
    _remove_file(file_url)
    logger.info("Deleted resume %s", resume_id)
