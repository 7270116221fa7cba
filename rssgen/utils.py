from __future__ import annotations

import email.utils as email_utils
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser


def sanitize(url: Optional[str]) -> Optional[str]:
    """
    Normalise an outward facing URL before it goes into the feed.

    Surrounding whitespace is dropped and an empty value becomes None so the
    caller can treat it as absent.
    """
    if url is None:
        return None
    url = url.strip()
    return url or None


def ensure_utc(dt: datetime) -> datetime:
    """
    Return a timezone aware datetime in UTC.

    The RSS specification recommends RFC 2822 dates in GMT.
    To keep things predictable we always normalise to UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_rfc2822(dt: datetime) -> str:
    """
    Format a datetime in RFC 2822 format for RSS pubDate / lastBuildDate.

    Example: Tue, 03 Jun 2003 09:39:21 GMT
    """
    dt_utc = ensure_utc(dt)
    return email_utils.format_datetime(dt_utc, usegmt=True)


def coerce_datetime(value: Union[datetime, str, int, float, None]) -> Optional[datetime]:
    """
    Turn whatever a feed description file holds into a datetime.

    Strings are parsed with dateutil, so ISO 8601 as well as RFC 2822 and
    most human written dates work. Numbers are taken as a unix timestamp.

    Examples:
        "2024-01-10T12:34:00Z"
        "Wed, 10 Jan 2024 12:34:00 GMT"
        1704890040
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Cannot interpret {value!r} as a date")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"Cannot parse date {value!r}") from exc
    raise TypeError(f"Cannot interpret {value!r} as a date")
