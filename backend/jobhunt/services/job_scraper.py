"""
Scrape pipeline: fan out to every source, merge, dedupe.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from jobhunt.services.job_sources import JobSource, ScrapedJob, default_sources

logger = logging.getLogger(__name__)


def scrape_all_jobs(
    sources: Optional[Sequence[JobSource]] = None,
    queries: Optional[Iterable[str]] = None,
) -> List[ScrapedJob]:
    """Run every source concurrently and wait for all of them.

    Results are concatenated in source order. One source failing never affects
    the others; if every source fails the result is simply empty.
    """
    sources = list(sources) if sources is not None else default_sources()
    if not sources:
        return []

    logger.info("Starting job scrape across %d source(s)", len(sources))
    with ThreadPoolExecutor(max_workers=len(sources)) as executor:
        futures = [executor.submit(source.fetch) for source in sources]

    all_jobs: List[ScrapedJob] = []
    succeeded = failed = 0
    for source, future in zip(sources, futures):
        try:
            jobs = future.result()
        except Exception as exc:
            failed += 1
            logger.error("%s failed: %s", source.name, exc)
            continue
        succeeded += 1
        logger.info("%s: %d jobs", source.name, len(jobs))
        all_jobs.extend(jobs)

    logger.info(
        "Scrape finished: %d jobs (%d source(s) ok, %d failed)", len(all_jobs), succeeded, failed
    )

    if queries:
        all_jobs = filter_by_queries(all_jobs, queries)
    return all_jobs


def filter_by_queries(jobs: Iterable[ScrapedJob], queries: Iterable[str]) -> List[ScrapedJob]:
    """Keep jobs mentioning at least one query (case-insensitive)."""
    terms = [q.strip().lower() for q in queries if q and q.strip()]
    if not terms:
        return list(jobs)

    def _matches(job: ScrapedJob) -> bool:
        haystack = " ".join(
            [job.title, job.company, job.description, " ".join(job.requirements)]
        ).lower()
        return any(term in haystack for term in terms)

    kept = [job for job in jobs if _matches(job)]
    logger.info("Search queries kept %d job(s)", len(kept))
    return kept


def deduplicate_jobs(jobs: Iterable[ScrapedJob]) -> List[ScrapedJob]:
    """One job per external_id; the first occurrence wins and keeps its position."""
    seen: set[str] = set()
    unique: List[ScrapedJob] = []
    for job in jobs:
        if job.external_id in seen:
            continue
        seen.add(job.external_id)
        unique.append(job)
    return unique
