"""Unit tests for API request schemas (validation)."""
import uuid

import pytest
from pydantic import ValidationError

from jobhunt.api.v1.schemas import (
    ApplicationCreate,
    JobSearchQuery,
    PreferencesUpdate,
    ResumeUpdate,
    ScrapeRequest,
    TailorRequest,
)
from jobhunt.models.job import LocationType


class TestJobSearchQuery:
    def test_defaults(self):
        q = JobSearchQuery.model_validate({})
        assert q.limit == 20
        assert q.offset == 0
        assert q.search is None

    def test_camel_case_query_strings(self):
        q = JobSearchQuery.model_validate(
            {"locationType": "remote", "salaryMin": "70000", "limit": "5", "offset": "10"}
        )
        assert q.location_type is LocationType.remote
        assert q.salary_min == 70000
        assert (q.limit, q.offset) == (5, 10)

    def test_blank_values_are_ignored(self):
        q = JobSearchQuery.model_validate({"search": "", "limit": " ", "salaryMin": ""})
        assert q.search is None
        assert q.limit == 20
        assert q.salary_min is None

    @pytest.mark.parametrize("limit", ["0", "101", "-1"])
    def test_limit_out_of_range_raises(self, limit):
        with pytest.raises(ValidationError):
            JobSearchQuery.model_validate({"limit": limit})

    def test_unknown_location_type_raises(self):
        with pytest.raises(ValidationError):
            JobSearchQuery.model_validate({"locationType": "moon"})


class TestBodies:
    def test_scrape_accepts_both_spellings(self):
        assert ScrapeRequest.model_validate({"usePreferences": True}).use_preferences is True
        assert ScrapeRequest.model_validate({"use_preferences": True}).use_preferences is True
        assert ScrapeRequest.model_validate({}).use_preferences is False

    def test_tailor_requires_resume_id(self):
        with pytest.raises(ValidationError):
            TailorRequest.model_validate({"keywords": ["python"]})
        body = TailorRequest.model_validate({"resumeId": str(uuid.uuid4())})
        assert body.keywords == []

    def test_resume_update_reports_only_sent_fields(self):
        body = ResumeUpdate.model_validate({"summary": "New", "isPrimary": True})
        assert body.changes() == {"summary": "New", "is_primary": True}

    def test_preferences_limits(self):
        with pytest.raises(ValidationError):
            PreferencesUpdate.model_validate({"dailyApplicationLimit": 0})
        with pytest.raises(ValidationError):
            PreferencesUpdate.model_validate({"remotePreference": "sometimes"})

    def test_application_match_score_range(self):
        with pytest.raises(ValidationError):
            ApplicationCreate.model_validate({"jobId": str(uuid.uuid4()), "matchScore": 101})
