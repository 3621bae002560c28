from __future__ import annotations

import logging
from uuid import UUID

from flask import Blueprint, jsonify, request

from jobhunt.api.v1.schemas import (
    AnalyzeMatchRequest,
    CoverLetterRequest,
    JobSearchQuery,
    ScrapeRequest,
    TailorRequest,
)
from jobhunt.api.v1.serializers import job_to_dict
from jobhunt.core.database import get_db
from jobhunt.core.errors import NotFoundError
from jobhunt.core.tenant import current_owner
from jobhunt.models.job import Job
from jobhunt.services.cover_letter import generate_cover_letter
from jobhunt.services.job_scraper import deduplicate_jobs, scrape_all_jobs
from jobhunt.services.job_store import search_jobs, upsert_jobs
from jobhunt.services.match_analyzer import analyze_job_match
from jobhunt.services.resume_tailor import tailor_resume

logger = logging.getLogger(__name__)

bp = Blueprint("jobs", __name__)


def _preference_queries(db) -> list[str]:
    prefs = current_owner(db).preferences
    if prefs is None:
        return []
    return list(prefs.search_queries or prefs.desired_titles or [])


@bp.post("/jobs/scrape")
def scrape_jobs():
    body = ScrapeRequest.model_validate(request.get_json(silent=True) or {})

    with get_db() as db:
        queries = _preference_queries(db) if body.use_preferences else []
        scraped = scrape_all_jobs(queries=queries)
        unique = deduplicate_jobs(scraped)
        summary = upsert_jobs(db, unique)

    logger.info(
        "Scrape request: scraped=%d unique=%d created=%d updated=%d failed=%d",
        len(scraped),
        len(unique),
        summary.created,
        summary.updated,
        summary.failed,
    )
    return jsonify({
        "success": True,
        "scraped": len(scraped),
        "unique": len(unique),
        "created": summary.created,
        "updated": summary.updated,
        "failed": summary.failed,
        "total": summary.created + summary.updated,
    })


@bp.get("/jobs")
def list_jobs():
    query = JobSearchQuery.model_validate(request.args.to_dict())

    with get_db() as db:
        jobs, total = search_jobs(
            db,
            search=query.search,
            location=query.location,
            location_type=query.location_type,
            salary_min=query.salary_min,
            limit=query.limit,
            offset=query.offset,
        )
        return jsonify({
            "jobs": [job_to_dict(job) for job in jobs],
            "total": total,
            "limit": query.limit,
            "offset": query.offset,
            "hasMore": query.offset + len(jobs) < total,
        })


@bp.get("/jobs/<uuid:job_id>")
def get_job(job_id: UUID):
    with get_db() as db:
        job = db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return jsonify(job_to_dict(job))


@bp.post("/jobs/<uuid:job_id>/analyze-match")
def analyze_match(job_id: UUID):
    body = AnalyzeMatchRequest.model_validate(request.get_json(silent=True) or {})

    with get_db() as db:
        analysis = analyze_job_match(db, job_id, body.resume_id)
        return jsonify(analysis.to_dict())


@bp.post("/jobs/<uuid:job_id>/tailor-resume")
def tailor_for_job(job_id: UUID):
    body = TailorRequest.model_validate(request.get_json(silent=True) or {})

    with get_db() as db:
        result = tailor_resume(db, body.resume_id, job_id, body.keywords)
        return jsonify(result), 201


@bp.post("/jobs/<uuid:job_id>/cover-letter")
def cover_letter(job_id: UUID):
    body = CoverLetterRequest.model_validate(request.get_json(silent=True) or {})

    with get_db() as db:
        letter = generate_cover_letter(db, body.resume_id, job_id)
        return jsonify({"coverLetter": letter})
