"""
Core logic for the time and workdays tools.
"""

from time_workdays.core.calculator import WorkdayResolver
from time_workdays.core.holiday_provider import (
    HolidayDataSource,
    JsonFetcher,
    NateHolidaySource,
    TimorHolidaySource,
    build_sources,
)

__all__ = [
    "HolidayDataSource",
    "JsonFetcher",
    "NateHolidaySource",
    "TimorHolidaySource",
    "WorkdayResolver",
    "build_sources",
]
