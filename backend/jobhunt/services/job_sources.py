"""
Job board adapters.

Each source polls one public board wholesale and maps its payload onto
ScrapedJob. A source never raises: any failure is logged and yields [].
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

import requests

from jobhunt.core.config import settings
from jobhunt.models.job import LocationType
from jobhunt.models.types import utcnow

logger = logging.getLogger(__name__)

_SALARY_NUMBER_RE = re.compile(r"(\d[\d,.]*)\s*([kK%])?")
_SALARY_RANGE_RE = re.compile(
    r"(\d[\d,.]*)\s*([kK])?\s*(?:-|–|to)\s*[$€£]?\s*(\d[\d,.]*)\s*([kK])?"
)
_CURRENCY_SYMBOLS = {"$": "USD", "€": "EUR", "£": "GBP"}
_CURRENCY_CODE_RE = re.compile(r"\b(USD|EUR|GBP|CAD|AUD|CHF|INR)\b", re.IGNORECASE)


@dataclass(frozen=True)
class ScrapedJob:
    title: str
    company: str
    description: str
    location: str
    location_type: LocationType
    source_url: str
    source_board: str
    external_id: str
    requirements: List[str] = field(default_factory=list)
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: Optional[str] = None
    posted_date: datetime = field(default_factory=utcnow)


def _salary_amount(number: str, suffix: Optional[str]) -> Optional[int]:
    try:
        value = float(number.replace(",", "").rstrip("."))
    except ValueError:
        return None
    if suffix and suffix.lower() == "k":
        value *= 1000
    return int(value)


def parse_salary_range(text: Optional[str]) -> tuple[Optional[int], Optional[int], Optional[str]]:
    """Parse free-form salary text like "$80k - $100k" or "50,000-60,000 EUR".

    Returns (min, max, currency); a single figure is used for both bounds.
    Only the first range (or first figure) counts, so "+ 10% bonus" is ignored,
    and a k on the upper figure carries to the lower one ("$40-50k").
    """
    if not text:
        return None, None, None

    values: list[Optional[int]] = []
    match = _SALARY_RANGE_RE.search(text)
    if match:
        low_number, low_k, high_number, high_k = match.groups()
        values = [_salary_amount(low_number, low_k or high_k), _salary_amount(high_number, high_k)]
    else:
        for single in _SALARY_NUMBER_RE.finditer(text):
            if single.group(2) == "%":
                continue
            values = [_salary_amount(single.group(1), single.group(2))]
            break
    values = [v for v in values if v is not None]
    if not values:
        return None, None, None

    currency = None
    for symbol, code in _CURRENCY_SYMBOLS.items():
        if symbol in text:
            currency = code
            break
    if currency is None:
        match = _CURRENCY_CODE_RE.search(text)
        currency = match.group(1).upper() if match else None

    low, high = values[0], values[1] if len(values) > 1 else values[0]
    return min(low, high), max(low, high), currency


def _parse_iso_datetime(value: Any) -> datetime:
    if not value:
        return utcnow()
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return utcnow()
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class JobSource(ABC):
    """One upstream board. Subclasses describe the payload; fetch() owns the I/O."""

    name: str
    api_url: str

    def __init__(self, timeout: Optional[float] = None, max_results: Optional[int] = None):
        self.timeout = timeout if timeout is not None else settings.SCRAPE_TIMEOUT_SECONDS
        self.max_results = max_results if max_results is not None else settings.SCRAPE_MAX_PER_SOURCE

    @abstractmethod
    def extract_items(self, payload: Any) -> List[dict]:
        """Pull the list of raw postings out of the response body."""

    @abstractmethod
    def normalize(self, item: dict) -> ScrapedJob:
        """Map one raw posting onto the common record."""

    def fetch(self) -> List[ScrapedJob]:
        try:
            response = requests.get(self.api_url, timeout=self.timeout)
            response.raise_for_status()
            items = self.extract_items(response.json())
            return [self.normalize(item) for item in items[: self.max_results]]
        except requests.Timeout as exc:
            logger.error("%s scrape failed: timeout=True after %.0fs: %s", self.name, self.timeout, exc)
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.error("%s scrape failed: status=%s timeout=False: %s", self.name, status, exc)
        except Exception as exc:
            logger.error("%s scrape failed: timeout=False: %s: %s", self.name, type(exc).__name__, exc)
        return []


class RemotiveSource(JobSource):
    """Remotive: remote-only tech jobs. Docs: https://remotive.com/api/remote-jobs"""

    name = "Remotive"
    api_url = "https://remotive.com/api/remote-jobs"

    def extract_items(self, payload: Any) -> List[dict]:
        return list(payload.get("jobs") or [])

    def normalize(self, item: dict) -> ScrapedJob:
        salary_min, salary_max, currency = parse_salary_range(item.get("salary"))
        return ScrapedJob(
            title=item["title"],
            company=item["company_name"],
            description=item.get("description") or "",
            requirements=[str(tag) for tag in item.get("tags") or []],
            location=item.get("candidate_required_location") or "Remote",
            location_type=LocationType.remote,
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=currency,
            source_url=item["url"],
            source_board=self.name,
            external_id=f"remotive-{item['id']}",
            posted_date=_parse_iso_datetime(item.get("publication_date")),
        )


class ArbeitnowSource(JobSource):
    """Arbeitnow: European job board. Docs: https://www.arbeitnow.com/api/job-board-api"""

    name = "Arbeitnow"
    api_url = "https://www.arbeitnow.com/api/job-board-api"

    def extract_items(self, payload: Any) -> List[dict]:
        return list(payload.get("data") or [])

    def normalize(self, item: dict) -> ScrapedJob:
        created = item.get("created_at")
        posted = datetime.fromtimestamp(int(created), tz=timezone.utc) if created else utcnow()
        return ScrapedJob(
            title=item["title"],
            company=item["company_name"],
            description=item.get("description") or "",
            requirements=[str(tag) for tag in item.get("tags") or []],
            location=item.get("location") or "Remote",
            location_type=LocationType.remote if item.get("remote") else LocationType.onsite,
            source_url=item["url"],
            source_board=self.name,
            external_id=f"arbeitnow-{item['slug']}",
            posted_date=posted,
        )


def default_sources() -> List[JobSource]:
    """Registered sources, in the order their results are concatenated."""
    return [RemotiveSource(), ArbeitnowSource()]
