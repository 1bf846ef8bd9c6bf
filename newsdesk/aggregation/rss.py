"""RSS/Atom feed parsing."""

import calendar
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import feedparser

from ..models.content import FeedItem, FeedSource
from ..utils.html import strip_html, truncate

logger = logging.getLogger(__name__)

SNIPPET_MAX_CHARS = 300


def parse_feed(
    text: str,
    source: FeedSource,
    trust_score: float,
    limit: int = 20,
) -> list[FeedItem]:
    """
    Parse feed text into FeedItems attributed to `source`.
    Entries without a title are skipped; at most `limit` items are returned.
    """
    feed = feedparser.parse(text)

    if feed.bozo and feed.bozo_exception:
        logger.warning(f"Feed parsing warning for {source.url}: {feed.bozo_exception}")

    items = []
    for entry in feed.entries[:limit]:
        try:
            item = _parse_entry(entry, source, trust_score)
        except (ValueError, TypeError) as e:
            logger.debug(f"Error parsing RSS entry from {source.name}: {e}")
            continue
        if item:
            items.append(item)

    return items


def _parse_entry(entry: dict, source: FeedSource, trust_score: float) -> Optional[FeedItem]:
    """Parse a feed entry into a FeedItem."""
    title = strip_html(entry.get("title"))
    if not title:
        return None

    # Get content/description
    body = entry.get("summary") or entry.get("description") or ""
    if not body and entry.get("content"):
        body = entry.content[0].get("value", "")
    snippet = truncate(strip_html(body), SNIPPET_MAX_CHARS) or None

    link = entry.get("link") or ""

    return FeedItem(
        title=title,
        link=link,
        pub_date=_parse_date(entry),
        source=source.name,
        source_type=source.type,
        trust_score=trust_score,
        source_bias=source.bias,
        snippet=snippet,
        guid=entry.get("id") or link or None,
    )


def _parse_date(entry: dict) -> datetime:
    """Parse date from various RSS date formats, always UTC-aware."""
    date_fields = ["published", "updated", "created"]

    for field in date_fields:
        parsed = entry.get(f"{field}_parsed")
        if parsed:
            try:
                # feedparser normalizes *_parsed to UTC
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
            except (OverflowError, ValueError, TypeError):
                pass

        raw = entry.get(field)
        if raw:
            try:
                value = parsedate_to_datetime(raw)
            except (TypeError, ValueError):
                continue
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)

    return datetime.now(timezone.utc)
