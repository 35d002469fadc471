"""
Time-zone-aware clock with a small token-based formatter.
"""

from datetime import datetime, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from time_workdays.core.errors import UnsupportedTimeZone
from time_workdays.data.schemas import TimeResult

LOCAL_TZ = "local"
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S%z"


def resolve_zone(timezone_name: Optional[str]) -> Optional[tzinfo]:
    """
    Resolve a zone identifier.

    Args:
        timezone_name: 'local' (or empty) for the host zone, otherwise an IANA name.

    Returns:
        A ZoneInfo, or None for the host's local zone.

    Raises:
        UnsupportedTimeZone: If the name is not a known IANA zone.
    """
    if not timezone_name or timezone_name == LOCAL_TZ:
        return None
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise UnsupportedTimeZone(timezone_name) from e


def now_in_zone(timezone_name: Optional[str] = LOCAL_TZ) -> datetime:
    """Current aware datetime in the given zone."""
    zone = resolve_zone(timezone_name)
    if zone is None:
        return datetime.now().astimezone()
    return datetime.now(zone)


def format_offset(moment: datetime) -> str:
    """Render the UTC offset of an aware datetime as +HH:MM."""
    offset = moment.utcoffset() or timedelta()
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_time(moment: datetime, fmt: str = DEFAULT_TIME_FORMAT) -> str:
    """
    Render a datetime through a template.

    Only %Y, %m, %d, %H, %M, %S and %z are substituted; any other text is
    kept as is. %z renders as +HH:MM.
    """
    replacements = [
        ("%Y", str(moment.year)),
        ("%m", f"{moment.month:02d}"),
        ("%d", f"{moment.day:02d}"),
        ("%H", f"{moment.hour:02d}"),
        ("%M", f"{moment.minute:02d}"),
        ("%S", f"{moment.second:02d}"),
        ("%z", format_offset(moment)),
    ]
    text = fmt
    for token, value in replacements:
        text = text.replace(token, value)
    return text


def get_current_time(
    timezone_name: Optional[str] = LOCAL_TZ, fmt: Optional[str] = DEFAULT_TIME_FORMAT
) -> TimeResult:
    """Get the current time in a zone, rendered through fmt."""
    moment = now_in_zone(timezone_name)
    return TimeResult(
        timezone=timezone_name or LOCAL_TZ,
        text=format_time(moment, fmt or DEFAULT_TIME_FORMAT),
        offset=format_offset(moment),
    )
