"""Unit tests for job persistence: upsert, search and purge (SQLite session)."""
from datetime import datetime, timezone

from conftest import make_job, make_scraped
from jobhunt.models.job import Job, LocationType
from jobhunt.services.job_store import UpsertAction, purge_jobs, search_jobs, upsert_jobs


class TestUpsertJobs:
    def test_second_run_is_all_updates(self, db_session):
        batch = [make_scraped("remotive-1"), make_scraped("remotive-2", title="Data Engineer")]

        first = upsert_jobs(db_session, batch)
        snapshot = {
            j.external_id: (j.id, j.title, j.company, j.requirements)
            for j in db_session.query(Job).all()
        }
        second = upsert_jobs(db_session, batch)

        assert (first.created, first.updated, first.failed) == (2, 0, 0)
        assert (second.created, second.updated, second.failed) == (0, 2, 0)
        assert db_session.query(Job).count() == 2
        after = {
            j.external_id: (j.id, j.title, j.company, j.requirements)
            for j in db_session.query(Job).all()
        }
        assert after == snapshot

    def test_update_overwrites_mutable_fields_only(self, db_session):
        upsert_jobs(db_session, [make_scraped("remotive-1", salary_min=50000)])
        job = db_session.query(Job).filter_by(external_id="remotive-1").one()
        original_id = job.id

        upsert_jobs(db_session, [make_scraped("remotive-1", title="Senior Engineer", salary_min=90000)])
        db_session.expire_all()
        job = db_session.query(Job).filter_by(external_id="remotive-1").one()

        assert job.id == original_id
        assert job.title == "Senior Engineer"
        assert job.salary_min == 90000

    def test_failed_record_is_isolated(self, db_session):
        batch = [
            make_scraped("remotive-1"),
            make_scraped("remotive-bad", title=None),
            make_scraped("remotive-3"),
        ]

        summary = upsert_jobs(db_session, batch)

        assert [o.action for o in summary.outcomes] == [
            UpsertAction.created,
            UpsertAction.failed,
            UpsertAction.created,
        ]
        assert summary.outcomes[1].error
        assert summary.failed == 1
        ids = {j.external_id for j in db_session.query(Job).all()}
        assert ids == {"remotive-1", "remotive-3"}


class TestSearchJobs:
    def _seed(self, db):
        make_job(db, "a", title="Python Developer", salary_min=60000,
                 posted_date=datetime(2026, 1, 1, tzinfo=timezone.utc))
        make_job(db, "b", title="Go Developer", location="Berlin", location_type=LocationType.onsite,
                 salary_min=90000, posted_date=datetime(2026, 1, 3, tzinfo=timezone.utc))
        make_job(db, "c", title="Designer", company="Pixel", description="Figma", requirements=[],
                 salary_min=None, posted_date=datetime(2026, 1, 2, tzinfo=timezone.utc))

    def test_newest_first_with_total(self, db_session):
        self._seed(db_session)
        jobs, total = search_jobs(db_session)
        assert total == 3
        assert [j.external_id for j in jobs] == ["b", "c", "a"]

    def test_text_search_is_case_insensitive(self, db_session):
        self._seed(db_session)
        jobs, total = search_jobs(db_session, search="developer")
        assert total == 2
        assert {j.external_id for j in jobs} == {"a", "b"}

    def test_salary_min_compares_stored_minimum(self, db_session):
        self._seed(db_session)
        jobs, total = search_jobs(db_session, salary_min=70000)
        assert total == 1
        assert jobs[0].external_id == "b"

    def test_location_filters(self, db_session):
        self._seed(db_session)
        jobs, _ = search_jobs(db_session, location="berl", location_type=LocationType.onsite)
        assert [j.external_id for j in jobs] == ["b"]

    def test_pagination(self, db_session):
        self._seed(db_session)
        jobs, total = search_jobs(db_session, limit=2, offset=2)
        assert total == 3
        assert [j.external_id for j in jobs] == ["a"]

    def test_like_wildcards_are_literal(self, db_session):
        self._seed(db_session)
        _, total = search_jobs(db_session, search="%")
        assert total == 0


class TestPurgeJobs:
    def test_purge_by_board(self, db_session):
        make_job(db_session, "remotive-1")
        make_job(db_session, "arbeitnow-1", source_board="Arbeitnow")

        assert purge_jobs(db_session, source_board="Arbeitnow") == 1
        assert [j.external_id for j in db_session.query(Job).all()] == ["remotive-1"]
        assert purge_jobs(db_session) == 1
