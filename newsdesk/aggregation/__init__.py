"""Feed aggregation: fetching, parsing and dedup of RSS/Atom sources."""

from .dedup import deduplicate_items, normalize_title, title_similarity
from .feed_fetcher import FeedFetcher
from .rss import parse_feed

__all__ = [
    "FeedFetcher",
    "deduplicate_items",
    "normalize_title",
    "title_similarity",
    "parse_feed",
]
