"""
Errors raised by the clock and the workday resolver.
"""


class WorkdayError(Exception):
    """Base class for all failures surfaced to tool callers."""


class UnsupportedProvider(WorkdayError):
    """The requested provider is not one of the supported calendars."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"unsupported provider: {provider}")


class UpstreamUnavailable(WorkdayError):
    """Network error, non-2xx status or timeout while fetching provider data."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"request to {url} failed: {reason}")


class InvalidResponseShape(WorkdayError):
    """Fetched JSON does not match the provider's expected schema."""


class UnsupportedTimeZone(WorkdayError):
    """The time zone identifier cannot be resolved."""

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"unsupported time zone: {timezone}")
