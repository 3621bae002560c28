"""Unit tests for job sources, the aggregator and deduplication (no network calls)."""
import time
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import make_scraped
from jobhunt.models.job import LocationType
from jobhunt.services.job_scraper import deduplicate_jobs, filter_by_queries, scrape_all_jobs
from jobhunt.services.job_sources import ArbeitnowSource, RemotiveSource, parse_salary_range


class FakeSource:
    def __init__(self, name, jobs=None, error=None, delay=0.0):
        self.name = name
        self._jobs = jobs or []
        self._error = error
        self._delay = delay
        self.calls = 0

    def fetch(self):
        self.calls += 1
        time.sleep(self._delay)
        if self._error:
            raise self._error
        return list(self._jobs)


def _response(payload, status=200):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error", response=response)
    else:
        response.raise_for_status.return_value = None
    return response


class TestDeduplicate:
    def test_first_occurrence_wins(self):
        a = make_scraped("remotive-1", title="First")
        b = make_scraped("arbeitnow-x")
        a_again = make_scraped("remotive-1", title="Second")

        result = deduplicate_jobs([a, b, a_again])

        assert len(result) == 2
        assert result[0] is a
        assert result[1] is b

    def test_external_ids_are_distinct(self):
        jobs = [make_scraped(f"remotive-{i % 3}") for i in range(10)]
        ids = [j.external_id for j in deduplicate_jobs(jobs)]
        assert ids == ["remotive-0", "remotive-1", "remotive-2"]

    def test_empty(self):
        assert deduplicate_jobs([]) == []


class TestParseSalaryRange:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("$80k - $100k", (80000, 100000, "USD")),
            ("80000-100000", (80000, 100000, None)),
            ("50,000-60,000 EUR", (50000, 60000, "EUR")),
            ("£45k", (45000, 45000, "GBP")),
            ("$40-50k", (40000, 50000, "USD")),
            ("$100,000 per year + 10% bonus", (100000, 100000, "USD")),
            ("$90k to $120k + 15% bonus", (90000, 120000, "USD")),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_salary_range(text) == expected

    def test_no_numbers(self):
        assert parse_salary_range("Competitive") == (None, None, None)
        assert parse_salary_range(None) == (None, None, None)


class TestRemotiveSource:
    payload = {
        "jobs": [
            {
                "id": 123,
                "title": "Python Developer",
                "company_name": "Remote Co",
                "description": "<p>Build APIs</p>",
                "tags": ["python", "django"],
                "candidate_required_location": "Europe",
                "salary": "$80k - $100k",
                "url": "https://remotive.com/jobs/123",
                "publication_date": "2026-01-05T10:00:00",
            }
        ]
    }

    @patch("jobhunt.services.job_sources.requests.get")
    def test_normalizes_records(self, mock_get):
        mock_get.return_value = _response(self.payload)

        jobs = RemotiveSource().fetch()

        assert len(jobs) == 1
        job = jobs[0]
        assert job.external_id == "remotive-123"
        assert job.location_type is LocationType.remote
        assert (job.salary_min, job.salary_max, job.salary_currency) == (80000, 100000, "USD")
        assert job.requirements == ["python", "django"]
        assert job.posted_date == datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)
        assert mock_get.call_args.kwargs["timeout"] == 10.0

    @patch("jobhunt.services.job_sources.requests.get")
    def test_caps_results(self, mock_get):
        items = [dict(self.payload["jobs"][0], id=i) for i in range(80)]
        mock_get.return_value = _response({"jobs": items})

        assert len(RemotiveSource().fetch()) == 50
        assert len(RemotiveSource(max_results=5).fetch()) == 5

    @patch("jobhunt.services.job_sources.requests.get")
    def test_timeout_returns_empty(self, mock_get):
        mock_get.side_effect = requests.Timeout("read timed out")
        assert RemotiveSource().fetch() == []

    @patch("jobhunt.services.job_sources.requests.get")
    def test_http_error_returns_empty(self, mock_get):
        mock_get.return_value = _response({}, status=503)
        assert RemotiveSource().fetch() == []

    @patch("jobhunt.services.job_sources.requests.get")
    def test_malformed_payload_returns_empty(self, mock_get):
        mock_get.return_value = _response({"jobs": [{"id": 1}]})
        assert RemotiveSource().fetch() == []


class TestArbeitnowSource:
    @patch("jobhunt.services.job_sources.requests.get")
    def test_remote_flag_and_epoch_date(self, mock_get):
        mock_get.return_value = _response({
            "data": [
                {
                    "slug": "backend-dev-berlin",
                    "title": "Backend Dev",
                    "company_name": "Berlin GmbH",
                    "description": "Go and Python",
                    "tags": [],
                    "location": "Berlin",
                    "remote": False,
                    "url": "https://arbeitnow.com/jobs/backend-dev-berlin",
                    "created_at": 1767225600,
                },
                {
                    "slug": "remote-dev",
                    "title": "Remote Dev",
                    "company_name": "Anywhere AG",
                    "description": "",
                    "tags": ["rust"],
                    "location": "",
                    "remote": True,
                    "url": "https://arbeitnow.com/jobs/remote-dev",
                    "created_at": None,
                },
            ]
        })

        onsite, remote = ArbeitnowSource().fetch()

        assert onsite.external_id == "arbeitnow-backend-dev-berlin"
        assert onsite.location_type is LocationType.onsite
        assert onsite.posted_date == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert remote.location_type is LocationType.remote
        assert remote.location == "Remote"
        assert remote.salary_min is None


class TestScrapeAllJobs:
    def test_concatenates_in_source_order(self):
        slow = FakeSource("slow", jobs=[make_scraped("slow-1")], delay=0.05)
        fast = FakeSource("fast", jobs=[make_scraped("fast-1"), make_scraped("fast-2")])

        jobs = scrape_all_jobs(sources=[slow, fast])

        assert [j.external_id for j in jobs] == ["slow-1", "fast-1", "fast-2"]

    def test_one_failure_does_not_affect_others(self):
        broken = FakeSource("broken", error=RuntimeError("boom"))
        ok = FakeSource("ok", jobs=[make_scraped("ok-1")])

        jobs = scrape_all_jobs(sources=[broken, ok])

        assert [j.external_id for j in jobs] == ["ok-1"]
        assert broken.calls == 1

    def test_total_outage_is_empty(self):
        sources = [FakeSource("a", error=RuntimeError("x")), FakeSource("b", error=ValueError("y"))]
        assert scrape_all_jobs(sources=sources) == []

    def test_queries_scope_results(self):
        source = FakeSource(
            "s",
            jobs=[
                make_scraped("s-1", title="Data Engineer", description="Spark", requirements=[]),
                make_scraped("s-2", title="Designer", description="Figma", requirements=["ux"]),
            ],
        )
        jobs = scrape_all_jobs(sources=[source], queries=["data engineer"])
        assert [j.external_id for j in jobs] == ["s-1"]


class TestFilterByQueries:
    def test_matches_requirements_case_insensitive(self):
        job = make_scraped("r-1", title="Engineer", description="", requirements=["Kubernetes"])
        assert filter_by_queries([job], ["kubernetes"]) == [job]

    def test_blank_queries_keep_everything(self):
        jobs = [make_scraped("r-1"), make_scraped("r-2")]
        assert filter_by_queries(jobs, ["", "  "]) == jobs
