"""
Request schemas for the v1 API. Bodies and query strings accept camelCase keys
(snake_case also works).
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from jobhunt.core.config import settings
from jobhunt.models.application import ApplicationStatus
from jobhunt.models.job import LocationType
from jobhunt.models.user import RemotePreference


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, by attribute name."""
        return self.model_dump(exclude_unset=True)


class QueryModel(CamelModel):
    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data: Any) -> Any:
        # ?location=&limit= means "not given"
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if not (isinstance(value, str) and not value.strip())}
        return data


class ScrapeRequest(CamelModel):
    use_preferences: bool = False


class JobSearchQuery(QueryModel):
    search: Optional[str] = None
    location: Optional[str] = None
    location_type: Optional[LocationType] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class AnalyzeMatchRequest(CamelModel):
    resume_id: uuid.UUID


class TailorRequest(CamelModel):
    resume_id: uuid.UUID
    keywords: List[str] = Field(default_factory=list)


class CoverLetterRequest(CamelModel):
    resume_id: uuid.UUID


class ResumeUpdate(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    education: Optional[List[Dict[str, Any]]] = None
    certifications: Optional[List[str]] = None
    is_primary: Optional[bool] = None


class PreferencesUpdate(CamelModel):
    desired_titles: Optional[List[str]] = None
    desired_locations: Optional[List[str]] = None
    desired_salary_min: Optional[int] = Field(default=None, ge=0)
    remote_preference: Optional[RemotePreference] = None
    auto_apply: Optional[bool] = None
    daily_application_limit: Optional[int] = Field(default=None, ge=1, le=100)
    search_queries: Optional[List[str]] = None


class ApplicationCreate(CamelModel):
    job_id: uuid.UUID
    resume_id: Optional[uuid.UUID] = None
    status: ApplicationStatus = ApplicationStatus.pending
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    match_score: Optional[int] = Field(default=None, ge=0, le=100)


class ApplicationUpdate(CamelModel):
    resume_id: Optional[uuid.UUID] = None
    status: Optional[ApplicationStatus] = None
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    match_score: Optional[int] = Field(default=None, ge=0, le=100)
    applied_at: Optional[datetime] = None
    viewed_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None


class ApplicationListQuery(QueryModel):
    status: Optional[ApplicationStatus] = None
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)
