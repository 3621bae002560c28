from __future__ import annotations

import logging
import time

import click
from flask import Flask, g, request
from flask_cors import CORS

from jobhunt.api.v1 import applications as v1_applications
from jobhunt.api.v1 import jobs as v1_jobs
from jobhunt.api.v1 import resumes as v1_resumes
from jobhunt.api.v1 import user as v1_user
from jobhunt.core.config import settings
from jobhunt.core.database import get_db, init_db
from jobhunt.core.errors import register_error_handlers
from jobhunt.core.logging_config import setup_logging
from jobhunt.models.types import isoformat, utcnow
from jobhunt.services.job_store import purge_jobs

setup_logging()
logger = logging.getLogger("jobhunt.http")

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = settings.MAX_UPLOAD_BYTES

CORS(app, origins=[settings.FRONTEND_URL], supports_credentials=True)

app.register_blueprint(v1_jobs.bp, url_prefix="/api")
app.register_blueprint(v1_resumes.bp, url_prefix="/api")
app.register_blueprint(v1_user.bp, url_prefix="/api")
app.register_blueprint(v1_applications.bp, url_prefix="/api")

register_error_handlers(app)


@app.before_request
def _start_timer():
    g.request_started = time.perf_counter()


@app.after_request
def _log_request(response):
    started = g.get("request_started")
    duration_ms = (time.perf_counter() - started) * 1000 if started else 0.0
    logger.info("%s %s %d %.0fms", request.method, request.path, response.status_code, duration_ms)
    return response


@app.get("/health")
def health():
    return {
        "status": "healthy",
        "timestamp": isoformat(utcnow()),
        "environment": settings.ENVIRONMENT,
    }


@app.get("/api")
def api_info():
    return {
        "name": "Job Hunt AI API",
        "version": "1.0.0",
        "endpoints": {
            "jobs": "/api/jobs",
            "resumes": "/api/resumes",
            "user": "/api/user",
            "applications": "/api/applications",
        },
    }


@app.cli.command("init-db")
def init_db_command():
    """Create all tables without Alembic (local development)."""
    init_db()
    click.echo("Database tables created.")


@app.cli.command("purge-jobs")
@click.option("--source-board", default=None, help="Only delete jobs from this board.")
def purge_jobs_command(source_board):
    """Delete stored job listings."""
    with get_db() as db:
        deleted = purge_jobs(db, source_board=source_board)
    click.echo(f"Deleted {deleted} job(s).")


if __name__ == "__main__":
    app.run(host=settings.API_HOST, port=settings.API_PORT, debug=settings.DEBUG)
