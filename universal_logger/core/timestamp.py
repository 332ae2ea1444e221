"""
Timestamp generation with short-lived caching

Supported formats:
- ISO: ISO 8601 UTC with milliseconds, e.g. "2023-12-25T12:00:00.000Z"
- UTC: RFC 1123 style, e.g. "Mon, 25 Dec 2023 12:00:00 GMT"
- UNIX: whole seconds since the epoch, e.g. "1703505600"
- locale: en-US style local time, e.g. "12/25/2023, 12:00:00 PM",
  optionally in an IANA time zone
"""

from datetime import datetime, timezone, tzinfo
from email.utils import format_datetime
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union
import threading
import time

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class TimestampFormat(str, Enum):
    """Timestamp output formats."""

    ISO = "ISO"
    UTC = "UTC"
    UNIX = "UNIX"
    LOCALE = "locale"

    @classmethod
    def coerce(cls, value: Union["TimestampFormat", str, None]) -> "TimestampFormat":
        """Convert value to a format; unknown values fall back to ISO."""
        if isinstance(value, TimestampFormat):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return cls.ISO


def _resolve_zone(time_zone: Optional[str]) -> Optional[tzinfo]:
    if not time_zone:
        return None
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def format_timestamp(
    epoch: float,
    fmt: Union[TimestampFormat, str] = TimestampFormat.ISO,
    time_zone: Optional[str] = None,
) -> str:
    """
    Render an epoch time in the requested format.

    Args:
        epoch: Seconds since the epoch
        fmt: Output format (unknown formats fall back to ISO)
        time_zone: IANA zone name, only used by the locale format

    Returns:
        Formatted timestamp string
    """
    fmt = TimestampFormat.coerce(fmt)
    moment = datetime.fromtimestamp(epoch, tz=timezone.utc)

    if fmt is TimestampFormat.UTC:
        return format_datetime(moment, usegmt=True)
    if fmt is TimestampFormat.UNIX:
        return str(int(epoch))
    if fmt is TimestampFormat.LOCALE:
        zone = _resolve_zone(time_zone)
        local = moment.astimezone(zone) if zone else moment.astimezone()
        hour = local.hour % 12 or 12
        meridiem = "AM" if local.hour < 12 else "PM"
        return (
            f"{local.month}/{local.day}/{local.year}, "
            f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
        )
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimestampProvider:
    """
    Produce "now" strings, caching the last value per format.

    A cached string is reused for at most cache_ttl_ms milliseconds after it
    was computed. A TTL of 0 disables caching.

    Thread Safety:
        The cache is guarded by an internal lock.

    Example:
        provider = TimestampProvider(cache_ttl_ms=1000)
        provider.now("UNIX")
        provider.now("locale", "America/New_York")
    """

    def __init__(
        self,
        cache_ttl_ms: int = 1000,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize timestamp provider.

        Args:
            cache_ttl_ms: Maximum age of a cached value in milliseconds
            clock: Time source returning epoch seconds (default: time.time)
        """
        self.cache_ttl_ms = cache_ttl_ms
        self._clock = clock or time.time
        self._cache: Dict[Tuple[TimestampFormat, Optional[str]], Tuple[float, str]] = {}
        self._lock = threading.Lock()

    def now(
        self,
        fmt: Union[TimestampFormat, str] = TimestampFormat.ISO,
        time_zone: Optional[str] = None,
    ) -> str:
        """Return the current time in the requested format."""
        fmt = TimestampFormat.coerce(fmt)
        current = self._clock()
        if self.cache_ttl_ms <= 0:
            return format_timestamp(current, fmt, time_zone)

        key = (fmt, time_zone)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                computed_at, value = cached
                if 0 <= (current - computed_at) * 1000 < self.cache_ttl_ms:
                    return value
            value = format_timestamp(current, fmt, time_zone)
            self._cache[key] = (current, value)
            return value

    def clear(self) -> None:
        """Drop all cached values."""
        with self._lock:
            self._cache.clear()


def get_timestamp(fmt: Union[TimestampFormat, str] = TimestampFormat.ISO, time_zone: Optional[str] = None) -> str:
    """Uncached current timestamp."""
    return format_timestamp(time.time(), fmt, time_zone)
