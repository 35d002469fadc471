"""
Workday resolver: combines weekday arithmetic with provider holiday data.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Set

import httpx
from pydantic import ValidationError

from time_workdays.core.errors import UnsupportedProvider
from time_workdays.core.holiday_provider import HolidayDataSource, JsonFetcher, build_sources
from time_workdays.data.schemas import (
    CalendarQuery,
    Config,
    Provider,
    WorkdayResult,
    iso_date,
)

logger = logging.getLogger(__name__)


class WorkdayResolver:
    """Resolves the workdays, holidays and makeup workdays of a month."""

    def __init__(self, sources: Dict[Provider, HolidayDataSource]):
        """
        Initialize the resolver.

        Args:
            sources: Holiday data source per provider.
        """
        self.sources = sources

    @classmethod
    def from_config(
        cls, config: Config, transport: Optional[httpx.BaseTransport] = None
    ) -> "WorkdayResolver":
        """Build a resolver whose fetcher carries the configured user agent and timeout."""
        fetcher = JsonFetcher(
            user_agent=config.user_agent,
            default_timeout_ms=config.default_timeout_ms,
            transport=transport,
        )
        return cls(build_sources(fetcher, config))

    def resolve(self, year: int, month: int, provider: str, timeout_ms: int) -> WorkdayResult:
        """
        Resolve the workday set of a month.

        Args:
            year: Calendar year (>= 1970).
            month: Calendar month (1-12).
            provider: Provider name ('timor' or 'nate').
            timeout_ms: Fetch timeout in milliseconds.

        Returns:
            WorkdayResult with sorted, duplicate-free date lists.

        Raises:
            UnsupportedProvider: If the provider is unknown (no network call is made).
            ValueError: If year, month or timeout are out of range.
            UpstreamUnavailable: If the provider cannot be reached.
            InvalidResponseShape: If the provider document is malformed.
        """
        source = self._select_source(provider)
        try:
            query = CalendarQuery(
                year=year, month=month, provider=source.provider, timeout_ms=timeout_ms
            )
        except ValidationError as e:
            raise ValueError(f"Invalid calendar query: {e}") from e

        return self.resolve_query(query)

    def resolve_query(self, query: CalendarQuery) -> WorkdayResult:
        """Resolve a validated query."""
        source = self._select_source(query.provider)
        logger.info(f"Resolving {query.year}-{query.month:02d} via {source.name}")

        # Both upstream APIs publish per-year documents
        year_data = source.fetch_year(query.year, query.timeout_ms)

        prefix = query.month_prefix
        holiday_set = {d for d in year_data.holiday_dates if d.startswith(prefix)}
        makeup_set = {d for d in year_data.makeup_dates if d.startswith(prefix)}

        workdays = self._ordinary_workdays(query.year, query.month, query.days_in_month, holiday_set)

        # Makeup days are added without a holiday check, so they win over holidays
        for makeup in makeup_set:
            if makeup not in workdays:
                workdays.append(makeup)

        return WorkdayResult(
            provider=query.provider,
            year=query.year,
            month=query.month,
            workdays=sorted(workdays),
            holidays=sorted(holiday_set),
            makeup_workdays=sorted(makeup_set),
            errors=0,
        )

    def _select_source(self, provider) -> HolidayDataSource:
        try:
            key = Provider(provider)
        except ValueError:
            raise UnsupportedProvider(str(provider)) from None

        source = self.sources.get(key)
        if source is None:
            raise UnsupportedProvider(key.value)
        return source

    @staticmethod
    def _ordinary_workdays(year: int, month: int, day_count: int, holiday_set: Set[str]) -> List[str]:
        """Weekdays (Monday-Friday) of the month that are not holidays."""
        workdays = []
        for day in range(1, day_count + 1):
            # weekday(): Monday=0 .. Sunday=6
            is_weekend = date(year, month, day).weekday() >= 5
            date_str = iso_date(year, month, day)
            if not is_weekend and date_str not in holiday_set:
                workdays.append(date_str)
        return workdays
