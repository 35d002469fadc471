"""
Data models for the time and workdays tools using Pydantic.
"""

import calendar
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Set

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
)


class Provider(str, Enum):
    """Supported holiday calendar providers."""

    TIMOR = "timor"  # timor.tech year API
    NATE = "nate"  # NateScarlet/holiday-cn on GitHub


PROVIDER_DESCRIPTIONS = {
    Provider.TIMOR: "timor.tech holiday year API",
    Provider.NATE: "NateScarlet holiday-cn (GitHub raw, jsDelivr mirror)",
}


class CalendarQuery(BaseModel):
    """Request for the workday set of one month."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1970, description="Calendar year")
    month: int = Field(..., ge=1, le=12, description="Calendar month (1-12)")
    provider: Provider = Field(..., description="Holiday data provider")
    timeout_ms: int = Field(..., gt=0, description="Fetch timeout in milliseconds")

    @property
    def month_prefix(self) -> str:
        """Date prefix shared by every day of the month, e.g. '2024-02-'."""
        return f"{self.year}-{self.month:02d}-"

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)


class YearHolidayData(BaseModel):
    """Normalized holiday data of one provider for a full year."""

    holiday_dates: Set[str] = Field(default_factory=set, description="Official non-working days")
    makeup_dates: Set[str] = Field(default_factory=set, description="Weekend days turned into workdays")


class WorkdayResult(BaseModel):
    """Workdays, holidays and makeup workdays of one month."""

    provider: Provider = Field(..., description="Provider the data came from")
    year: int = Field(..., description="Calendar year")
    month: int = Field(..., ge=1, le=12, description="Calendar month")
    workdays: List[str] = Field(default_factory=list, description="Working days, ascending")
    holidays: List[str] = Field(default_factory=list, description="Official holidays, ascending")
    makeup_workdays: List[str] = Field(
        default_factory=list, description="Weekend days scheduled as workdays, ascending"
    )
    errors: int = Field(default=0, ge=0, description="Always 0, failures raise instead")
    calculation_timestamp: datetime = Field(
        default_factory=datetime.now, description="When the result was computed"
    )

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON object exposed by the get_workdays_from_api tool."""
        return {
            "provider": self.provider.value,
            "year": self.year,
            "month": self.month,
            "workdays": list(self.workdays),
            "holidays": list(self.holidays),
            "makeup_workdays": list(self.makeup_workdays),
            "errors": self.errors,
        }


class TimeResult(BaseModel):
    """Current time rendered for a time zone."""

    timezone: str = Field(..., description="Requested zone ('local' or IANA name)")
    text: str = Field(..., description="Time rendered through the format template")
    offset: str = Field(..., description="UTC offset as +HH:MM")


class TimorEntry(BaseModel):
    """One day record of the timor.tech year API."""

    model_config = ConfigDict(extra="ignore")

    date: StrictStr
    holiday: StrictBool
    name: Any = None


class TimorYearResponse(BaseModel):
    """Envelope of https://timor.tech/api/holiday/year/{year}."""

    model_config = ConfigDict(extra="ignore")

    code: StrictInt
    holiday: Dict[str, Any]

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: int) -> int:
        """The API reports success with code 0."""
        if v != 0:
            raise ValueError(f"timor reported failure code {v}")
        return v


class NateDay(BaseModel):
    """One day record of the holiday-cn year document."""

    model_config = ConfigDict(extra="ignore")

    date: StrictStr
    isOffDay: StrictBool
    name: Any = None


class NateYearResponse(BaseModel):
    """Envelope of a holiday-cn {year}.json document."""

    model_config = ConfigDict(extra="ignore")

    days: List[Any]


OUTPUT_FORMATS = ("console", "json", "csv", "both")


class Config(BaseModel):
    """Configuration for the time and workdays tools."""

    user_agent: str = Field(default="mcp-time-workdays/1.1", description="User-Agent for provider requests")
    default_timeout: float = Field(default=8.0, gt=0, description="Default fetch timeout in seconds")
    default_provider: Provider = Field(default=Provider.TIMOR, description="Provider used when none is given")
    default_timezone: str = Field(default="local", description="Zone used to derive default year/month")
    timor_url: str = Field(
        default="https://timor.tech/api/holiday/year/{year}",
        description="timor year API URL template",
    )
    nate_url: str = Field(
        default="https://raw.githubusercontent.com/NateScarlet/holiday-cn/master/{year}.json",
        description="holiday-cn primary URL template",
    )
    nate_mirror_url: str = Field(
        default="https://cdn.jsdelivr.net/gh/NateScarlet/holiday-cn@master/{year}.json",
        description="holiday-cn mirror URL template",
    )
    output_format: str = Field(
        default="console", description="Default CLI output: console, json, csv or both"
    )
    output_directory: str = Field(default="results", description="Directory for output files")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"output format must be one of {', '.join(OUTPUT_FORMATS)}")
        return v

    @property
    def default_timeout_ms(self) -> int:
        return int(self.default_timeout * 1000)


def days_in_month(year: int, month: int) -> int:
    """Number of days of a month in the proleptic Gregorian calendar."""
    return calendar.monthrange(year, month)[1]


def iso_date(year: int, month: int, day: int) -> str:
    return f"{year}-{month:02d}-{day:02d}"
