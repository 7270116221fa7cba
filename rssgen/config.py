GENERATOR = "rssgen"
DEFAULT_DOCS = "https://validator.w3.org/feed/docs/rss2.html"
RSS_MEDIA_TYPE = "application/rss+xml"

XML_DECLARATION = {"version": "1.0", "encoding": "utf-8"}

NS_ATOM = "http://www.w3.org/2005/Atom"
NS_DC = "http://purl.org/dc/elements/1.1/"
NS_CONTENT = "http://purl.org/rss/1.0/modules/content/"
NS_GOOGLEPLAY = "http://www.google.com/schemas/play-podcasts/1.0"
NS_ITUNES = "http://www.itunes.com/dtds/podcast-1.0.dtd"
NS_MEDIA = "http://search.yahoo.com/mrss/"

# Declared on the root when an extension uses the prefix without declaring it
KNOWN_NAMESPACES = {
    "atom": NS_ATOM,
    "content": NS_CONTENT,
    "dc": NS_DC,
    "googleplay": NS_GOOGLEPLAY,
    "itunes": NS_ITUNES,
    "media": NS_MEDIA,
    "podcast": "https://podcastindex.org/namespace/1.0",
    "slash": "http://purl.org/rss/1.0/modules/slash/",
    "sy": "http://purl.org/rss/1.0/modules/syndication/",
    "georss": "http://www.georss.org/georss",
}
