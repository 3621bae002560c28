"""
Pytest fixtures for Flask-based testing.
Each test gets a fresh in-memory SQLite database; route modules have get_db
patched to yield the test session. LLM and HTTP calls are mocked per test.
"""
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from jobhunt.api.v1 import applications as v1_applications
from jobhunt.api.v1 import jobs as v1_jobs
from jobhunt.api.v1 import resumes as v1_resumes
from jobhunt.api.v1 import user as v1_user
from jobhunt.core.config import settings
from jobhunt.core.database import Base
from jobhunt.main import app as flask_app
from jobhunt.models.job import Job, LocationType
from jobhunt.models.resume import FileKind, Resume
from jobhunt.models.user import User
from jobhunt.services.job_sources import ScrapedJob

ROUTE_MODULES = (v1_jobs, v1_resumes, v1_user, v1_applications)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def storage_dir(tmp_path, monkeypatch):
    """Uploaded files go to a per-test directory."""
    monkeypatch.setattr(settings, "STORAGE_PATH", str(tmp_path / "storage"))
    return tmp_path / "storage"


@pytest.fixture
def client(db_session, monkeypatch):
    """Flask test client whose routes use the test session."""

    @contextmanager
    def override_get_db():
        yield db_session

    for module in ROUTE_MODULES:
        monkeypatch.setattr(module, "get_db", override_get_db)
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as c:
        yield c


@pytest.fixture
def owner(db_session) -> User:
    user = User(email=settings.DEFAULT_USER_EMAIL, name=settings.DEFAULT_USER_NAME)
    db_session.add(user)
    db_session.commit()
    return user


def make_scraped(external_id: str = "remotive-1", **overrides) -> ScrapedJob:
    fields = {
        "title": "Backend Engineer",
        "company": "Acme",
        "description": "Python, Flask and PostgreSQL.",
        "location": "Worldwide",
        "location_type": LocationType.remote,
        "source_url": f"https://example.com/jobs/{external_id}",
        "source_board": "Remotive",
        "external_id": external_id,
        "requirements": ["python", "flask"],
        "posted_date": datetime(2026, 1, 10, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return ScrapedJob(**fields)


def make_job(db: Session, external_id: str = "remotive-1", **overrides) -> Job:
    fields = {
        "external_id": external_id,
        "title": "Backend Engineer",
        "company": "Acme",
        "description": "Python, Flask and PostgreSQL.",
        "requirements": ["python", "flask"],
        "location": "Worldwide",
        "location_type": LocationType.remote,
        "source_url": f"https://example.com/jobs/{external_id}",
        "source_board": "Remotive",
        "posted_date": datetime(2026, 1, 10, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    job = Job(**fields)
    db.add(job)
    db.commit()
    return job


def make_resume(db: Session, user: User, **overrides) -> Resume:
    fields = {
        "user_id": user.id,
        "file_name": "cv.pdf",
        "file_url": None,
        "file_type": FileKind.pdf,
        "full_name": "Ada Lovelace",
        "summary": "Backend developer.",
        "skills": ["Python", "SQL"],
        "experience": [],
        "education": [],
        "certifications": [],
    }
    fields.update(overrides)
    resume = Resume(**fields)
    db.add(resume)
    db.commit()
    return resume
