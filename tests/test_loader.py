import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from lxml import etree

import context  # noqa: F401

import build_feed
from rssgen.loader import feed_from_dict, item_from_dict, load_feed
from rssgen.models import MediaRef

DESCRIPTION = {
    "options": {
        "title": "Podcast",
        "link": "https://example.com",
        "description": "Weekly episodes",
        "updated": "2024-01-10T12:34:00Z",
        "feedLinks": {"rss": "https://example.com/rss.xml"},
        "podcast": True,
        "author": {"name": "Jane", "email": "jane@example.com"},
    },
    "categories": ["Technology", {"name": "Science", "domain": "http://x"}],
    "items": [
        {
            "title": "Episode 1",
            "link": "https://example.com/1",
            "published": "2024-01-09T08:00:00Z",
            "category": ["Intro"],
            "audio": {"url": "https://example.com/1.mp3", "duration": 90},
        },
        {"title": "Episode 2", "image": "https://example.com/2.png"},
    ],
    "extensions": [{"name": "webMaster", "objects": {"_text": "ops@example.com"}}],
}


class TestLoader(unittest.TestCase):
    def test_feed_from_dict(self):
        feed = feed_from_dict(DESCRIPTION)

        assert feed.options.feed_links == {"rss": "https://example.com/rss.xml"}
        assert feed.options.self_link == "https://example.com/rss.xml"
        assert feed.options.updated == datetime(2024, 1, 10, 12, 34, tzinfo=timezone.utc)
        assert feed.options.author.email == "jane@example.com"
        assert [c.name for c in feed.categories] == ["Technology", "Science"]
        assert feed.categories[1].domain == "http://x"

        first, second = feed.items
        assert first.audio == MediaRef(url="https://example.com/1.mp3", duration=90)
        assert second.image == MediaRef.from_url("https://example.com/2.png")
        assert feed.extensions[0].name == "webMaster"

    def test_item_author_and_category_must_be_lists(self):
        data = {
            "options": {"title": "t", "link": "https://example.com", "description": "d"},
            "categories": "Channel",
            "items": [
                {
                    "title": "One",
                    "category": "News",
                    "author": {"name": "J", "email": "j@e.x"},
                }
            ],
        }
        with self.assertLogs("rssgen.loader", level="WARNING") as logs:
            feed = feed_from_dict(data)

        assert feed.categories == []
        assert feed.items[0].category == []
        assert feed.items[0].author == []
        assert len(logs.output) == 3

    def test_list_values_are_kept(self):
        item = item_from_dict(
            {"category": ["News", {"name": "Tech", "domain": "http://x"}], "author": [{"name": "J", "email": "j@e.x"}]}
        )
        assert [c.name for c in item.category] == ["News", "Tech"]
        assert item.author[0].email == "j@e.x"

    def test_missing_options(self):
        with self.assertRaises(ValueError):
            feed_from_dict({"items": []})

    def test_load_yaml(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "feed.yaml"
            path.write_text(
                "options:\n"
                "  title: From YAML\n"
                "  link: https://example.com\n"
                "  description: test\n"
                "items:\n"
                "  - title: One\n"
                "    guid: one\n",
                encoding="utf-8",
            )
            feed = load_feed(path)

        assert feed.options.title == "From YAML"
        assert feed.items[0].guid == "one"


class TestBuildFeed(unittest.TestCase):
    def test_main_writes_output(self):
        with tempfile.TemporaryDirectory() as tmp:
            input_path = Path(tmp) / "feed.json"
            output_path = Path(tmp) / "out" / "rss.xml"
            input_path.write_text(json.dumps(DESCRIPTION), encoding="utf-8")

            xml = build_feed.main(["--input", str(input_path), "--output", str(output_path)])

            assert output_path.read_text(encoding="utf-8") == xml

        root = etree.fromstring(xml.encode("utf-8"))
        channel = root.find("channel")
        assert channel.findtext("lastBuildDate") == "Wed, 10 Jan 2024 12:34:00 GMT"
        assert channel.findtext("webMaster") == "ops@example.com"
        assert set(root.nsmap) == {"atom", "googleplay", "itunes"}

        items = channel.findall("item")
        assert items[0].findtext("{http://www.itunes.com/dtds/podcast-1.0.dtd}duration") == "01:30"
        assert items[1].find("enclosure").get("type") == "image/png"

    def test_compact_flag(self):
        args = build_feed.parse_args(["--input", "feed.json", "--compact", "--indent", "2"])
        assert args.compact is True
        assert args.indent == 2
        assert args.output == build_feed.DEFAULT_OUTPUT


if __name__ == "__main__":
    unittest.main()
