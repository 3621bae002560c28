"""
Owner resolution.

The app is single-tenant with no login step. Everything that belongs to "the
user" goes through an OwnerResolver, so a multi-user deployment only needs a
different resolver (e.g. one reading a session or token).
"""
from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.orm import Session

from jobhunt.core.config import settings
from jobhunt.models.user import User

logger = logging.getLogger(__name__)


class OwnerResolver(Protocol):
    def resolve(self, db: Session) -> User:
        ...


class LocalOwnerResolver:
    """Always resolves to the one local user, creating it on first use."""

    def __init__(self, email: str | None = None, name: str | None = None):
        self.email = email or settings.DEFAULT_USER_EMAIL
        self.name = name or settings.DEFAULT_USER_NAME

    def resolve(self, db: Session) -> User:
        user = db.query(User).filter(User.email == self.email).first()
        if user:
            return user
        user = User(email=self.email, name=self.name)
        db.add(user)
        db.flush()
        logger.info("Created local owner %s", self.email)
        return user


_resolver: OwnerResolver = LocalOwnerResolver()


def get_owner_resolver() -> OwnerResolver:
    return _resolver


def current_owner(db: Session) -> User:
    return get_owner_resolver().resolve(db)
