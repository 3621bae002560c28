from __future__ import annotations

import logging
from uuid import UUID

from flask import Blueprint, jsonify, request
from sqlalchemy import func

from jobhunt.api.v1.schemas import ApplicationCreate, ApplicationListQuery, ApplicationUpdate
from jobhunt.api.v1.serializers import application_to_dict
from jobhunt.core.database import get_db
from jobhunt.core.errors import BadRequestError, NotFoundError
from jobhunt.core.tenant import current_owner
from jobhunt.models.application import Application, ApplicationStatus
from jobhunt.models.job import Job
from jobhunt.models.resume import Resume
from jobhunt.models.types import utcnow

logger = logging.getLogger(__name__)

bp = Blueprint("applications", __name__)

# Status -> timestamp column stamped on first entry into that status
_STATUS_TIMESTAMPS = {
    ApplicationStatus.applied: "applied_at",
    ApplicationStatus.viewed: "viewed_at",
    ApplicationStatus.interview_requested: "responded_at",
    ApplicationStatus.offered: "responded_at",
    ApplicationStatus.rejected: "responded_at",
}


def _stamp_status(application: Application) -> None:
    column = _STATUS_TIMESTAMPS.get(application.status)
    if column and getattr(application, column) is None:
        setattr(application, column, utcnow())


def _get_owned(db, owner, application_id: UUID) -> Application:
    application = (
        db.query(Application)
        .filter(Application.id == application_id, Application.user_id == owner.id)
        .first()
    )
    if application is None:
        raise NotFoundError("Application not found")
    return application


def _check_resume(db, owner, resume_id) -> None:
    if resume_id is None:
        return
    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == owner.id).first()
    if resume is None:
        raise NotFoundError("Resume not found")


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        raise BadRequestError("Request body must be JSON")
    return data


@bp.get("/applications")
def list_applications():
    query = ApplicationListQuery.model_validate(request.args.to_dict())

    with get_db() as db:
        owner = current_owner(db)
        q = db.query(Application).filter(Application.user_id == owner.id)
        if query.status:
            q = q.filter(Application.status == query.status)
        total = q.count()
        applications = (
            q.order_by(Application.created_at.desc()).offset(query.offset).limit(query.limit).all()
        )
        return jsonify({
            "applications": [application_to_dict(a) for a in applications],
            "total": total,
            "limit": query.limit,
            "offset": query.offset,
            "hasMore": query.offset + len(applications) < total,
        })


@bp.get("/applications/stats")
def application_stats():
    with get_db() as db:
        owner = current_owner(db)
        rows = (
            db.query(Application.status, func.count(Application.id))
            .filter(Application.user_id == owner.id)
            .group_by(Application.status)
            .all()
        )
        counts = {status.value: 0 for status in ApplicationStatus}
        for status, count in rows:
            counts[status.value] = count
        return jsonify({"total": sum(counts.values()), "byStatus": counts})


@bp.post("/applications")
def create_application():
    body = ApplicationCreate.model_validate(_json_body())

    with get_db() as db:
        owner = current_owner(db)
        if db.get(Job, body.job_id) is None:
            raise NotFoundError("Job not found")
        _check_resume(db, owner, body.resume_id)

        application = Application(
            user_id=owner.id,
            job_id=body.job_id,
            resume_id=body.resume_id,
            status=body.status,
            cover_letter=body.cover_letter,
            notes=body.notes,
            match_score=body.match_score,
        )
        _stamp_status(application)
        db.add(application)
        db.commit()
        db.refresh(application)
        logger.info("Created application %s for job %s", application.id, application.job_id)
        return jsonify(application_to_dict(application)), 201


@bp.get("/applications/<uuid:application_id>")
def get_application(application_id: UUID):
    with get_db() as db:
        application = _get_owned(db, current_owner(db), application_id)
        return jsonify(application_to_dict(application))


@bp.put("/applications/<uuid:application_id>")
def update_application(application_id: UUID):
    body = ApplicationUpdate.model_validate(_json_body())
    changes = body.changes()

    with get_db() as db:
        owner = current_owner(db)
        application = _get_owned(db, owner, application_id)
        if "resume_id" in changes:
            _check_resume(db, owner, changes["resume_id"])
        if changes.get("status") is None:
            changes.pop("status", None)

        for name, value in changes.items():
            setattr(application, name, value)
        _stamp_status(application)
        db.commit()
        db.refresh(application)
        return jsonify(application_to_dict(application))


@bp.delete("/applications/<uuid:application_id>")
def delete_application(application_id: UUID):
    with get_db() as db:
        application = _get_owned(db, current_owner(db), application_id)
        db.delete(application)
        db.commit()
    return "", 204
