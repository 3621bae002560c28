from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from jobhunt.api.v1.schemas import PreferencesUpdate
from jobhunt.api.v1.serializers import preferences_to_dict
from jobhunt.core.database import get_db
from jobhunt.core.errors import BadRequestError
from jobhunt.core.tenant import current_owner
from jobhunt.models.user import UserPreferences

logger = logging.getLogger(__name__)

bp = Blueprint("user", __name__)


def _get_or_create_preferences(db) -> UserPreferences:
    owner = current_owner(db)
    if owner.preferences is None:
        owner.preferences = UserPreferences(user_id=owner.id)
        db.flush()
    return owner.preferences


@bp.get("/user/preferences")
def get_preferences():
    with get_db() as db:
        prefs = _get_or_create_preferences(db)
        db.commit()
        db.refresh(prefs)
        return jsonify(preferences_to_dict(prefs))


@bp.put("/user/preferences")
def update_preferences():
    data = request.get_json(silent=True)
    if data is None:
        raise BadRequestError("Request body must be JSON")
    body = PreferencesUpdate.model_validate(data)

    with get_db() as db:
        prefs = _get_or_create_preferences(db)
        for name, value in body.changes().items():
            if name == "auto_apply" and value is None:
                continue
            setattr(prefs, name, value)
        db.commit()
        db.refresh(prefs)
        logger.info("Updated preferences for user %s", prefs.user_id)
        return jsonify(preferences_to_dict(prefs))
