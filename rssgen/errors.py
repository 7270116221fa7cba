from __future__ import annotations


class RssgenError(Exception):
    """Base class for every error raised by rssgen."""


class MalformedMediaURL(RssgenError, ValueError):
    """
    A media reference could not be parsed as an absolute URL.

    Raised while deriving the enclosure type from the URL path. Rendering
    aborts on this error, no partial document is produced.
    """

    def __init__(self, field: str, url: object) -> None:
        self.field = field
        self.url = url
        super().__init__(f"{field}: {url!r} is not an absolute URL")


class InvalidDuration(RssgenError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"duration must be a finite, non-negative number of seconds, got {value!r}"
        )


class XmlEncodingError(RssgenError):
    """The node tree contains something the XML encoder cannot express."""
