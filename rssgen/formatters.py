from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Dict, Union
from urllib.parse import urlsplit

from rssgen.errors import InvalidDuration, MalformedMediaURL
from rssgen.models import Category, MediaRef
from rssgen.utils import sanitize

MIME_CATEGORIES = ("image", "audio", "video")


def _url_extension(url: Any, field: str) -> str:
    """Return the last dot separated segment of the URL path."""
    cleaned = sanitize(url) if isinstance(url, str) else None
    if not cleaned:
        raise MalformedMediaURL(field, url)
    try:
        parts = urlsplit(cleaned)
    except ValueError as exc:
        raise MalformedMediaURL(field, url) from exc
    if not parts.scheme or not (parts.netloc or parts.path):
        raise MalformedMediaURL(field, url)
    return parts.path.split(".")[-1]


def format_enclosure(
    media: Union[MediaRef, str, Mapping],
    mime_category: str = "image",
    field: str = "enclosure",
) -> Dict[str, Any]:
    """
    Build the ``<enclosure>`` node for a media reference.

    The type defaults to ``<mime_category>/<extension>`` where the extension
    is taken verbatim from the URL path, and the length defaults to 0 since
    the resource is never fetched. Fields set on a structured reference win
    over both defaults.

    Args:
        media: A URL string or a MediaRef (a mapping is coerced).
        mime_category: One of image, audio or video.
        field: Name of the item field the reference came from, used in errors.

    Raises:
        MalformedMediaURL: the reference URL is not an absolute URL.
    """
    if mime_category not in MIME_CATEGORIES:
        raise ValueError(f"Unknown media category {mime_category!r}")
    ref = MediaRef.coerce(media)
    extension = _url_extension(ref.url, field)

    attributes: Dict[str, Any] = {
        "url": ref.url,
        "length": 0,
        "type": f"{mime_category}/{extension}",
    }
    attributes.update(ref.overrides())
    attributes["url"] = sanitize(ref.url)
    return {"_attributes": attributes}


def format_category(category: Union[Category, str, Mapping]) -> Dict[str, Any]:
    category = Category.coerce(category)
    node: Dict[str, Any] = {"_text": category.name}
    if category.is_scoped:
        node["_attributes"] = {"domain": category.domain}
    return node


def format_duration(duration: Union[int, float]) -> str:
    """
    Format a duration in seconds as ``MM:SS``, or ``H:MM:SS`` from one hour up.

    Fractional seconds are truncated.
    """
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise InvalidDuration(duration)
    if not math.isfinite(duration) or duration < 0:
        raise InvalidDuration(duration)

    total = int(duration)
    seconds = total % 60
    minutes = (total // 60) % 60
    hours = total // 3600

    minutes_seconds = f"{minutes:02d}:{seconds:02d}"
    if hours > 0:
        return f"{hours}:{minutes_seconds}"
    return minutes_seconds
