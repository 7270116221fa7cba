from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from rssgen.config import (
    DEFAULT_DOCS,
    GENERATOR,
    NS_ATOM,
    NS_CONTENT,
    NS_DC,
    NS_GOOGLEPLAY,
    NS_ITUNES,
    RSS_MEDIA_TYPE,
    XML_DECLARATION,
)
from rssgen.encoder import encode
from rssgen.formatters import format_category, format_duration, format_enclosure
from rssgen.models import Feed, FeedOptions, Item, MediaRef
from rssgen.utils import format_rfc2822, sanitize

log = logging.getLogger(__name__)

# Item media fields in evaluation order with the MIME category used for the
# derived enclosure type. They share one <enclosure> slot, the last one set wins.
MEDIA_FIELDS = (
    ("enclosure", "image"),
    ("image", "image"),
    ("audio", "audio"),
    ("video", "video"),
)


def generate_rss2(feed: Feed, pretty: bool = True, indent: int = 4) -> str:
    """Build an RSS 2.0 feed as a UTF-8 XML string."""
    document = build_document(feed)
    xml = encode(document, pretty=pretty, indent=indent, ignore_comments=True)
    log.debug("Rendered RSS 2.0 feed %r with %d items", feed.options.title, len(feed.items))
    return xml


def build_document(feed: Feed) -> Dict[str, Any]:
    """
    Build the node tree of the whole document.

    Namespace declarations are computed from the finished channel, so they
    always match what was actually emitted.
    """
    channel = build_channel(feed)
    attributes = {"version": "2.0"}
    attributes.update(namespace_attributes(channel, podcast=feed.options.podcast))
    return {
        "_declaration": {"_attributes": dict(XML_DECLARATION)},
        "rss": {"_attributes": attributes, "channel": channel},
    }


def namespace_attributes(channel: Dict[str, Any], podcast: bool = False) -> Dict[str, str]:
    attributes: Dict[str, str] = {}
    if "atom:link" in channel:
        attributes["xmlns:atom"] = NS_ATOM
    if any("content:encoded" in item for item in channel.get("item", [])):
        attributes["xmlns:dc"] = NS_DC
        attributes["xmlns:content"] = NS_CONTENT
    if podcast:
        attributes["xmlns:googleplay"] = NS_GOOGLEPLAY
        attributes["xmlns:itunes"] = NS_ITUNES
    return attributes


def build_channel(feed: Feed) -> Dict[str, Any]:
    options = feed.options
    updated = options.updated or datetime.now(timezone.utc)
    link = sanitize(options.link)

    # core fields, written even when empty
    channel: Dict[str, Any] = {
        "title": {"_text": options.title},
        "link": {"_text": link},
        "description": {"_text": options.description},
        "lastBuildDate": {"_text": format_rfc2822(updated)},
        "docs": {"_text": options.docs or DEFAULT_DOCS},
        "generator": {"_text": options.generator or GENERATOR},
    }

    if options.language:
        channel["language"] = {"_text": options.language}

    if options.ttl:
        channel["ttl"] = {"_text": options.ttl}

    image = sanitize(options.image)
    if image:
        channel["image"] = {
            "title": {"_text": options.title},
            "url": {"_text": image},
            "link": {"_text": link},
        }

    if options.copyright:
        channel["copyright"] = {"_text": options.copyright}

    if feed.categories:
        channel["category"] = [format_category(category) for category in feed.categories]

    self_link = options.self_link
    if self_link:
        channel["atom:link"] = [
            {
                "_attributes": {
                    "href": sanitize(self_link),
                    "rel": "self",
                    "type": RSS_MEDIA_TYPE,
                }
            }
        ]

    # The hub link takes the place of the self link rather than joining it
    if options.hub:
        channel["atom:link"] = {"_attributes": {"href": sanitize(options.hub), "rel": "hub"}}

    channel["item"] = [build_item(entry, podcast=options.podcast) for entry in feed.items]

    for extension in feed.extensions:
        channel[extension.name] = extension.objects

    if options.podcast:
        channel.update(podcast_elements(options))

    return channel


def podcast_elements(options: FeedOptions) -> Dict[str, Any]:
    """
    Channel elements for podcast directories.

    Google Play and iTunes each have their own vocabulary, every value is
    written to both.
    """
    elements: Dict[str, Any] = {}

    if options.category:
        elements["googleplay:category"] = {"_text": options.category}
        elements["itunes:category"] = {"_text": options.category}

    author = options.author
    if author is not None and author.email:
        elements["googleplay:owner"] = {"_text": author.email}
        elements["itunes:owner"] = {"itunes:email": {"_text": author.email}}

    if author is not None and author.name:
        elements["googleplay:author"] = {"_text": author.name}
        elements["itunes:author"] = {"_text": author.name}

    href = sanitize(options.image)
    if href:
        elements["googleplay:image"] = {"_attributes": {"href": href}}
        elements["itunes:image"] = {"_attributes": {"href": href}}

    return elements


def build_item(entry: Item, podcast: bool = False) -> Dict[str, Any]:
    item: Dict[str, Any] = {}

    if entry.title:
        item["title"] = {"_cdata": entry.title}

    link = sanitize(entry.link)
    if link:
        item["link"] = {"_text": link}

    guid = entry.guid or entry.id or link
    if guid:
        item["guid"] = {"_text": guid}

    published = entry.published or entry.date
    if published:
        item["pubDate"] = {"_text": format_rfc2822(published)}

    if entry.description:
        item["description"] = {"_cdata": entry.description}

    if entry.content:
        item["content:encoded"] = {"_cdata": entry.content}

    authors = [f"{author.email} ({author.name})" for author in entry.author if author.email and author.name]
    if len(authors) < len(entry.author):
        log.warning(
            "Dropped %d author(s) without both name and email from item %r",
            len(entry.author) - len(authors),
            entry.title or entry.link,
        )
    if authors:
        item["author"] = [{"_text": author} for author in authors]

    if entry.category:
        item["category"] = [format_category(category) for category in entry.category]

    enclosure, duration = item_media(entry, podcast=podcast)
    if enclosure is not None:
        item["enclosure"] = enclosure
    if duration is not None:
        item["itunes:duration"] = {"_text": format_duration(duration)}

    for extension in entry.extensions:
        item[extension.name] = extension.objects

    return item


def item_media(entry: Item, podcast: bool = False) -> Tuple[Optional[Dict[str, Any]], Optional[float]]:
    """
    Resolve the item's media fields into one enclosure and an optional duration.

    Every field that is set is formatted (and so validated), the last one in
    MEDIA_FIELDS order is kept. In podcast mode a structured audio reference
    gives up its duration to ``itunes:duration`` instead of the enclosure.
    """
    present: List[Tuple[str, str, MediaRef]] = [
        (name, category, MediaRef.coerce(getattr(entry, name)))
        for name, category in MEDIA_FIELDS
        if getattr(entry, name)
    ]
    if len(present) > 1:
        log.warning(
            "Item %r sets %s, only %s is written as the enclosure",
            entry.title or entry.link,
            ", ".join(name for name, _, _ in present),
            present[-1][0],
        )

    enclosure = None
    duration = None
    for name, category, ref in present:
        if name == "audio" and podcast and ref.is_structured and ref.duration:
            duration = ref.duration
            ref = ref.without_duration()
        enclosure = format_enclosure(ref, category, field=name)
    return enclosure, duration
