"""
FastAPI REST API for the time and workdays tools.
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from time_workdays import __version__
from time_workdays.config.manager import ConfigManager
from time_workdays.core.calculator import WorkdayResolver
from time_workdays.core.clock import DEFAULT_TIME_FORMAT, LOCAL_TZ, get_current_time
from time_workdays.core.errors import (
    InvalidResponseShape,
    UnsupportedProvider,
    UnsupportedTimeZone,
    UpstreamUnavailable,
)
from time_workdays.data.schemas import PROVIDER_DESCRIPTIONS, Provider, TimeResult
from time_workdays.mcp_server import timeout_to_ms


# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()

# Initialize components
resolver = WorkdayResolver.from_config(config)


# API Models
class WorkdaysResponse(BaseModel):
    """Response model for a month's workdays."""

    provider: str
    year: int
    month: int
    workdays: List[str]
    holidays: List[str]
    makeup_workdays: List[str]
    errors: int


class ProviderInfo(BaseModel):
    """Information about a holiday data provider."""

    name: str
    source: str


# FastAPI app
app = FastAPI(
    title="Time & Workdays API",
    description="Current time per time zone and official Chinese workdays per month",
    version=__version__,
)


@app.get("/")
async def root():
    """API root endpoint with basic info."""
    return {
        "name": "Time & Workdays API",
        "version": __version__,
        "endpoints": {
            "GET /time": "Current time in a time zone",
            "GET /workdays/{year}/{month}": "Workdays, holidays and makeup workdays of a month",
            "GET /providers": "List holiday data providers",
        },
    }


@app.get("/time", response_model=TimeResult)
def current_time(
    tz: str = Query(LOCAL_TZ, description="IANA time zone name or 'local'"),
    fmt: str = Query(DEFAULT_TIME_FORMAT, description="Format template"),
):
    """Get the current time in a time zone."""
    try:
        return get_current_time(tz, fmt)
    except UnsupportedTimeZone as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/workdays/{year}/{month}", response_model=WorkdaysResponse)
def get_workdays(
    year: int,
    month: int,
    provider: str = Query(config.default_provider.value, description="timor or nate"),
    timeout: Optional[float] = Query(None, description="Request timeout in seconds"),
):
    """
    Get the workdays of a month.

    Args:
        year: Year (>= 1970)
        month: Month (1-12)
    """
    timeout_ms = timeout_to_ms(timeout, default=config.default_timeout)
    try:
        result = resolver.resolve(year, month, provider, timeout_ms)
    except UnsupportedProvider as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (UpstreamUnavailable, InvalidResponseShape) as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return WorkdaysResponse(**result.to_payload())


@app.get("/providers", response_model=List[ProviderInfo])
async def list_providers():
    """List the supported holiday data providers."""
    return [
        ProviderInfo(name=provider.value, source=PROVIDER_DESCRIPTIONS[provider])
        for provider in Provider
    ]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
