from __future__ import annotations

from uuid import UUID

from flask import Blueprint, jsonify, request

from jobhunt.api.v1.schemas import ResumeUpdate
from jobhunt.api.v1.serializers import resume_to_dict
from jobhunt.core.database import get_db
from jobhunt.core.errors import BadRequestError
from jobhunt.core.tenant import current_owner
from jobhunt.services import resume_service

bp = Blueprint("resumes", __name__)


@bp.post("/resumes")
def upload_resume():
    upload = request.files.get("resume")
    if upload is None:
        raise BadRequestError("No file uploaded. Send the resume as multipart field 'resume'.")

    with get_db() as db:
        owner = current_owner(db)
        resume = resume_service.create_resume_from_upload(db, owner, upload)
        return jsonify(resume_to_dict(resume)), 201


@bp.get("/resumes")
def list_resumes():
    with get_db() as db:
        owner = current_owner(db)
        resumes = resume_service.list_resumes(db, owner)
        return jsonify([resume_to_dict(r) for r in resumes])


@bp.get("/resumes/<uuid:resume_id>")
def get_resume(resume_id: UUID):
    with get_db() as db:
        resume = resume_service.get_resume(db, current_owner(db), resume_id)
        return jsonify(resume_to_dict(resume))


@bp.put("/resumes/<uuid:resume_id>")
def update_resume(resume_id: UUID):
    data = request.get_json(silent=True)
    if data is None:
        raise BadRequestError("Request body must be JSON")
    body = ResumeUpdate.model_validate(data)

    with get_db() as db:
        resume = resume_service.update_resume(db, current_owner(db), resume_id, body.changes())
        return jsonify(resume_to_dict(resume))


@bp.delete("/resumes/<uuid:resume_id>")
def delete_resume(resume_id: UUID):
    with get_db() as db:
        resume_service.delete_resume(db, current_owner(db), resume_id)
    return "", 204


@bp.post("/resumes/<uuid:resume_id>/parse")
def reparse_resume(resume_id: UUID):
    with get_db() as db:
        resume = resume_service.reparse_resume(db, current_owner(db), resume_id)
        return jsonify(resume_to_dict(resume))
