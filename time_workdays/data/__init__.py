"""
Data models and schemas for the time and workdays tools.
"""

from time_workdays.data.schemas import (
    CalendarQuery,
    Config,
    Provider,
    TimeResult,
    WorkdayResult,
    YearHolidayData,
)

__all__ = [
    "CalendarQuery",
    "Config",
    "Provider",
    "TimeResult",
    "WorkdayResult",
    "YearHolidayData",
]
