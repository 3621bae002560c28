"""
Application errors and their translation to JSON responses.

Route handlers raise; the handlers registered here decide the status code.
"""
from __future__ import annotations

import logging

from flask import Flask, jsonify
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from jobhunt.core.config import settings
from jobhunt.services.llm import LLMError
from jobhunt.services.text_extractor import ExtractionError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """An error with a client-facing message and HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


def validation_errors(exc: ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def _integrity_message(exc: IntegrityError) -> tuple[str, int]:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    text = str(orig or exc).lower()
    if pgcode == "23505" or "unique" in text:
        return "A record with this value already exists", 409
    if pgcode == "23503" or "foreign key" in text:
        return "Foreign key constraint failed", 400
    return "Database error", 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        return jsonify({"detail": exc.message}), exc.status_code

    @app.errorhandler(ValidationError)
    def _validation_error(exc: ValidationError):
        return jsonify({"detail": "Validation error", "errors": validation_errors(exc)}), 400

    @app.errorhandler(ExtractionError)
    def _extraction_error(exc: ExtractionError):
        logger.warning("Resume extraction failed: %s", exc)
        return jsonify({"detail": str(exc)}), 422

    @app.errorhandler(LLMError)
    def _llm_error(exc: LLMError):
        logger.error("LLM request failed: %s", exc)
        return jsonify({"detail": str(exc)}), 502

    @app.errorhandler(IntegrityError)
    def _integrity_error(exc: IntegrityError):
        message, status = _integrity_message(exc)
        logger.warning("Integrity error (%s): %s", message, exc.orig)
        return jsonify({"detail": message}), status

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(_exc: RequestEntityTooLarge):
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        return jsonify({"detail": f"File exceeds the {limit_mb} MB upload limit"}), 413

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify({"detail": exc.description}), exc.code

    @app.errorhandler(Exception)
    def _unhandled(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return jsonify({"detail": "Internal server error"}), 500
