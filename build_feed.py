from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rssgen.loader import load_feed
from rssgen.rss import generate_rss2

logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)

DEFAULT_OUTPUT = "feeds/rss.xml"
DEFAULT_INDENT = 4


def build_feed(input_path: Path, pretty: bool = True, indent: int = DEFAULT_INDENT) -> str:
    """Load a feed description file and render it as RSS 2.0."""
    feed = load_feed(input_path)
    return generate_rss2(feed, pretty=pretty, indent=indent)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a feed description as RSS 2.0.")
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Feed description file (.json, .yaml or .yml)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help="Output path for the generated RSS XML",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Write the XML without indentation.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=DEFAULT_INDENT,
        help="Indentation width in spaces when pretty printing.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> str:
    args = parse_args(argv)
    feed_xml = build_feed(Path(args.input), pretty=not args.compact, indent=args.indent)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(feed_xml, encoding="utf-8")
    log.info("Wrote %s", output_path)
    return feed_xml


if __name__ == "__main__":
    # python build_feed.py --input feed.json --output feeds/rss.xml
    main()
