from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from rssgen.models import Author, Category, Extension, Feed, FeedOptions, Item, MediaRef
from rssgen.utils import coerce_datetime

log = logging.getLogger(__name__)

# camelCase spellings accepted in feed description files
KEY_ALIASES = {
    "feedLinks": "feed_links",
}


def _normalise_keys(data: Mapping) -> Dict[str, Any]:
    return {KEY_ALIASES.get(key, key): value for key, value in data.items()}


def _media(value: Any) -> Optional[MediaRef]:
    if not value:
        return None
    return MediaRef.coerce(value)


def _as_list(value: Any, field: str) -> List[Any]:
    """Return the value if it is a list, anything else counts as empty."""
    if value is None or isinstance(value, list):
        return value or []
    log.warning("Ignoring %s: expected a list, got %s", field, type(value).__name__)
    return []


def _extensions(values: Any) -> List[Extension]:
    return [
        Extension(name=value["name"], objects=value.get("objects"))
        for value in _as_list(values, "extensions")
    ]


def options_from_dict(data: Mapping) -> FeedOptions:
    data = _normalise_keys(data)
    author = data.get("author")
    return FeedOptions(
        title=data.get("title", ""),
        link=data.get("link", ""),
        description=data.get("description", ""),
        updated=coerce_datetime(data.get("updated")),
        language=data.get("language"),
        ttl=data.get("ttl"),
        image=data.get("image"),
        copyright=data.get("copyright"),
        docs=data.get("docs"),
        generator=data.get("generator"),
        feed=data.get("feed"),
        feed_links=data.get("feed_links"),
        hub=data.get("hub"),
        podcast=bool(data.get("podcast", False)),
        category=data.get("category"),
        author=Author.coerce(author) if author else None,
    )


def item_from_dict(data: Mapping) -> Item:
    return Item(
        title=data.get("title"),
        link=data.get("link"),
        guid=data.get("guid"),
        id=data.get("id"),
        date=coerce_datetime(data.get("date")),
        published=coerce_datetime(data.get("published")),
        description=data.get("description"),
        content=data.get("content"),
        author=[Author.coerce(author) for author in _as_list(data.get("author"), "item author")],
        category=[Category.coerce(category) for category in _as_list(data.get("category"), "item category")],
        enclosure=_media(data.get("enclosure")),
        image=_media(data.get("image")),
        audio=_media(data.get("audio")),
        video=_media(data.get("video")),
        extensions=_extensions(data.get("extensions")),
    )


def feed_from_dict(data: Mapping) -> Feed:
    """
    Build a Feed from a plain mapping, as read from a JSON or YAML file.

    The mapping holds ``options`` plus optional ``items``, ``categories`` and
    ``extensions`` lists. Dates may be datetimes, strings or unix timestamps.
    """
    if "options" not in data:
        raise ValueError("Feed description has no 'options' section")

    feed = Feed(options=options_from_dict(data["options"]))
    for category in _as_list(data.get("categories"), "categories"):
        feed.add_category(category)
    for item in _as_list(data.get("items"), "items"):
        feed.add_item(item_from_dict(item))
    for extension in _extensions(data.get("extensions")):
        feed.add_extension(extension)
    return feed


def load_feed(path: Path) -> Feed:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)

    if not isinstance(data, Mapping):
        raise ValueError(f"{path} does not contain a feed description mapping")

    feed = feed_from_dict(data)
    log.info("Loaded feed %r with %d items from %s", feed.options.title, len(feed.items), path)
    return feed
