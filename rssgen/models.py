from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union


@dataclass
class Author:
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union["Author", Mapping]) -> "Author":
        if isinstance(value, Author):
            return value
        return cls(name=value.get("name"), email=value.get("email"))


@dataclass
class Category:
    """
    A channel or item category.

    ``Category("News")`` is a bare name, ``Category("News", domain=...)``
    additionally names the taxonomy the category belongs to.
    """

    name: str
    domain: Optional[str] = None

    @property
    def is_scoped(self) -> bool:
        return self.domain is not None

    @classmethod
    def coerce(cls, value: Union["Category", str, Mapping]) -> "Category":
        if isinstance(value, Category):
            return value
        if isinstance(value, str):
            return cls(name=value)
        return cls(name=value.get("name"), domain=value.get("domain"))


@dataclass
class MediaRef:
    """
    Reference to a media file attached to an item.

    Either a bare URL (``MediaRef.from_url``) or a structured reference whose
    non-empty fields override the values derived from the URL when the
    enclosure is written.
    """

    url: str
    type: Optional[str] = None
    length: Optional[int] = None
    title: Optional[str] = None
    duration: Optional[float] = None
    is_structured: bool = True

    @classmethod
    def from_url(cls, url: str) -> "MediaRef":
        return cls(url=url, is_structured=False)

    @classmethod
    def coerce(cls, value: Union["MediaRef", str, Mapping]) -> "MediaRef":
        if isinstance(value, MediaRef):
            return value
        if isinstance(value, str):
            return cls.from_url(value)
        return cls(
            url=value.get("url"),
            type=value.get("type"),
            length=value.get("length"),
            title=value.get("title"),
            duration=value.get("duration"),
        )

    def overrides(self) -> Dict[str, Any]:
        """Caller supplied enclosure attributes, in declaration order."""
        if not self.is_structured:
            return {}
        values = {
            "url": self.url,
            "type": self.type,
            "length": self.length,
            "title": self.title,
            "duration": self.duration,
        }
        return {key: value for key, value in values.items() if value is not None}

    def without_duration(self) -> "MediaRef":
        return dataclasses.replace(self, duration=None)


@dataclass
class Extension:
    """A caller built fragment written verbatim under the tag ``name``."""

    name: str
    objects: Any


@dataclass
class FeedOptions:
    title: str
    link: str
    description: str
    updated: Optional[datetime] = None
    language: Optional[str] = None
    ttl: Optional[int] = None
    image: Optional[str] = None
    copyright: Optional[str] = None
    docs: Optional[str] = None
    generator: Optional[str] = None
    feed: Optional[str] = None
    feed_links: Optional[Dict[str, str]] = None
    hub: Optional[str] = None
    podcast: bool = False
    category: Optional[str] = None
    author: Optional[Author] = None

    @property
    def self_link(self) -> Optional[str]:
        return self.feed or (self.feed_links or {}).get("rss")


@dataclass
class Item:
    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    id: Optional[str] = None
    date: Optional[datetime] = None
    published: Optional[datetime] = None
    description: Optional[str] = None
    content: Optional[str] = None
    author: List[Author] = field(default_factory=list)
    category: List[Category] = field(default_factory=list)
    enclosure: Optional[MediaRef] = None
    image: Optional[MediaRef] = None
    audio: Optional[MediaRef] = None
    video: Optional[MediaRef] = None
    extensions: List[Extension] = field(default_factory=list)


@dataclass
class Feed:
    options: FeedOptions
    items: List[Item] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    extensions: List[Extension] = field(default_factory=list)

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def add_category(self, category: Union[Category, str, Mapping]) -> None:
        self.categories.append(Category.coerce(category))

    def add_extension(self, extension: Extension) -> None:
        self.extensions.append(extension)

    def rss2(self, pretty: bool = True, indent: int = 4) -> str:
        from rssgen.rss import generate_rss2

        return generate_rss2(self, pretty=pretty, indent=indent)
