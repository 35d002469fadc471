"""
Holiday data sources backed by the timor.tech and holiday-cn web APIs.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from time_workdays.core.errors import InvalidResponseShape, UpstreamUnavailable
from time_workdays.data.schemas import (
    Config,
    NateDay,
    NateYearResponse,
    Provider,
    TimorEntry,
    TimorYearResponse,
    YearHolidayData,
)

logger = logging.getLogger(__name__)

# Name marker of a compensatory workday in timor entries
MAKEUP_MARKER = "补班"


class JsonFetcher:
    """Fetches JSON documents over HTTP with a per-request timeout."""

    def __init__(
        self,
        user_agent: str,
        default_timeout_ms: int,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            user_agent: User-Agent header sent with every request.
            default_timeout_ms: Timeout used when a call does not pass one.
            transport: Optional httpx transport (used by tests to stub the network).
        """
        self.user_agent = user_agent
        self.default_timeout_ms = default_timeout_ms
        self.transport = transport

    def get_json(self, url: str, timeout_ms: Optional[int] = None) -> Any:
        """
        GET a URL and decode its JSON body.

        Args:
            url: Document URL.
            timeout_ms: Request timeout in milliseconds.

        Returns:
            Decoded JSON value.

        Raises:
            UpstreamUnavailable: On network errors, timeouts, non-2xx status
                or a body that is not JSON.
        """
        timeout = (timeout_ms or self.default_timeout_ms) / 1000
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        logger.debug(f"GET {url} (timeout {timeout:.1f}s)")

        # httpx timeouts apply per phase; the deadline bounds the whole request
        deadline = time.monotonic() + timeout
        try:
            with httpx.Client(
                headers=headers, timeout=timeout, transport=self.transport
            ) as client:
                with client.stream("GET", url) as response:
                    chunks = []
                    for chunk in response.iter_bytes():
                        if time.monotonic() > deadline:
                            raise UpstreamUnavailable(url, f"timeout after {timeout:.1f}s")
                        chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(url, f"timeout after {timeout:.1f}s") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(url, str(e) or type(e).__name__) from e

        body = b"".join(chunks)
        if not response.is_success:
            text = body[:200].decode("utf-8", errors="replace")
            raise UpstreamUnavailable(url, f"HTTP {response.status_code}: {text}")

        try:
            return json.loads(body)
        except ValueError as e:
            raise UpstreamUnavailable(url, f"response is not JSON: {e}") from e


class HolidayDataSource(ABC):
    """A provider of official holiday and makeup-workday dates for a year."""

    provider: Provider

    def __init__(self, fetcher: JsonFetcher):
        self.fetcher = fetcher

    @property
    def name(self) -> str:
        return self.provider.value

    @abstractmethod
    def fetch_year(self, year: int, timeout_ms: Optional[int] = None) -> YearHolidayData:
        """
        Fetch and normalize the holiday data of a full year.

        Args:
            year: Calendar year.
            timeout_ms: Request timeout in milliseconds.

        Returns:
            YearHolidayData with holiday and makeup dates of the year.

        Raises:
            UpstreamUnavailable: If the provider cannot be reached.
            InvalidResponseShape: If the document does not match the schema.
        """

    def _invalid(self) -> InvalidResponseShape:
        return InvalidResponseShape(f"provider {self.name} unavailable or invalid response")


class TimorHolidaySource(HolidayDataSource):
    """timor.tech: one document per year, holidays keyed by MM-DD."""

    provider = Provider.TIMOR

    def __init__(self, fetcher: JsonFetcher, url_template: str):
        super().__init__(fetcher)
        self.url_template = url_template

    def fetch_year(self, year: int, timeout_ms: Optional[int] = None) -> YearHolidayData:
        payload = self.fetcher.get_json(self.url_template.format(year=year), timeout_ms)
        try:
            document = TimorYearResponse.model_validate(payload)
        except ValidationError as e:
            logger.debug(f"timor response rejected: {e}")
            raise self._invalid() from e

        data = YearHolidayData()
        for key, raw_entry in document.holiday.items():
            try:
                entry = TimorEntry.model_validate(raw_entry)
            except ValidationError:
                logger.debug(f"Skipping malformed timor entry {key!r}")
                continue

            if entry.holiday:
                data.holiday_dates.add(entry.date)
            elif isinstance(entry.name, str) and MAKEUP_MARKER in entry.name:
                data.makeup_dates.add(entry.date)

        return data


class NateHolidaySource(HolidayDataSource):
    """holiday-cn: one document per year on GitHub, mirrored by jsDelivr."""

    provider = Provider.NATE

    def __init__(self, fetcher: JsonFetcher, url_template: str, mirror_url_template: str):
        super().__init__(fetcher)
        self.url_template = url_template
        self.mirror_url_template = mirror_url_template

    def fetch_year(self, year: int, timeout_ms: Optional[int] = None) -> YearHolidayData:
        payload = self._fetch_with_mirror(year, timeout_ms)
        try:
            document = NateYearResponse.model_validate(payload)
        except ValidationError as e:
            logger.debug(f"nate response rejected: {e}")
            raise self._invalid() from e

        data = YearHolidayData()
        for raw_day in document.days:
            try:
                day = NateDay.model_validate(raw_day)
            except ValidationError:
                logger.debug(f"Skipping malformed nate entry {raw_day!r}")
                continue

            if day.isOffDay:
                data.holiday_dates.add(day.date)
            elif _is_weekend(day.date):
                # holiday-cn does not label makeup days; a working weekend day is one
                data.makeup_dates.add(day.date)

        return data

    def _fetch_with_mirror(self, year: int, timeout_ms: Optional[int]) -> Any:
        primary = self.url_template.format(year=year)
        try:
            return self.fetcher.get_json(primary, timeout_ms)
        except UpstreamUnavailable as e:
            logger.warning(f"nate primary failed ({e}), retrying on mirror")

        return self.fetcher.get_json(self.mirror_url_template.format(year=year), timeout_ms)


def _is_weekend(date_str: str) -> bool:
    try:
        # weekday(): Monday=0 .. Sunday=6
        return date.fromisoformat(date_str).weekday() >= 5
    except ValueError:
        return False


def build_sources(fetcher: JsonFetcher, config: Config) -> Dict[Provider, HolidayDataSource]:
    """Create one data source per supported provider."""
    return {
        Provider.TIMOR: TimorHolidaySource(fetcher, config.timor_url),
        Provider.NATE: NateHolidaySource(fetcher, config.nate_url, config.nate_mirror_url),
    }
