"""Feed Fetcher for concurrently pulling configured RSS/Atom sources."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from .dedup import deduplicate_items
from .rss import parse_feed
from ..exceptions import NetworkError
from ..models.content import (
    FeedConfig,
    FeedItem,
    FeedSource,
    SourceCategory,
    SourcePriority,
)
from ..scoring.trust import trust_score
from ..utils.cache import CacheBackend, InMemoryCache, cache_key

logger = logging.getLogger(__name__)

USER_AGENT = "Newsdesk/1.0 (Feed Fetcher)"
DEFAULT_CACHE_TTL_SECONDS = 15 * 60


class FeedFetcher:
    """
    Fetches every source of a category concurrently, then applies the
    recency cutoff, fuzzy dedup and newest-first ordering.

    The raw feed body of each source is cached by URL, so trust overrides
    changed after a fetch still apply to cached entries.
    """

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[CacheBackend] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        timeout: float = 15.0,
    ):
        self.config = config or FeedConfig()
        self._client = client
        self._cache = cache or InMemoryCache()
        self._cache_enabled = True
        self._cache_ttl = cache_ttl_seconds
        self._timeout = timeout

        self.fetch_count = 0
        self.error_count = 0
        self.cache_hits = 0
        self.last_fetch: Optional[datetime] = None

    # ============== Configuration ==============

    def get_categories(self) -> list[str]:
        """Categories that have at least one source."""
        return [name for name, sources in self.config.feeds.items() if sources]

    def add_feed(
        self,
        category: str,
        name: str,
        url: str,
        type: SourceCategory = SourceCategory.NEWSLETTER,
        priority: SourcePriority = SourcePriority.MEDIUM,
    ) -> bool:
        """
        Add a source to a category (created if needed).
        Returns False if a source with that URL is already in the category.
        """
        sources = self.config.feeds.setdefault(category, [])
        if any(s.url == url for s in sources):
            return False

        sources.append(FeedSource(name=name, url=url, type=type, priority=priority))
        logger.info(f"Added feed {name} to {category}")
        return True

    def remove_feed(self, category: str, url: str) -> bool:
        """Remove a source by URL. Returns True if something was removed."""
        sources = self.config.feeds.get(category)
        if not sources:
            return False

        remaining = [s for s in sources if s.url != url]
        if len(remaining) == len(sources):
            return False

        self.config.feeds[category] = remaining
        self._cache.delete(cache_key("feed", url))
        logger.info(f"Removed feed {url} from {category}")
        return True

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Feed cache cleared")

    def set_cache_config(
        self,
        enabled: Optional[bool] = None,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        if enabled is not None:
            self._cache_enabled = enabled
        if ttl_seconds is not None:
            self._cache_ttl = ttl_seconds

    def get_stats(self) -> dict:
        """Get fetcher statistics."""
        return {
            "categories": len(self.get_categories()),
            "total_feeds": sum(len(s) for s in self.config.feeds.values()),
            "feeds_by_category": {
                name: len(sources) for name, sources in self.config.feeds.items()
            },
            "cache_enabled": self._cache_enabled,
            "cache_ttl_seconds": self._cache_ttl,
            "cache": self._cache.stats(),
            "fetch_count": self.fetch_count,
            "error_count": self.error_count,
            "cache_hits": self.cache_hits,
            "last_fetch": self.last_fetch.isoformat() if self.last_fetch else None,
        }

    # ============== Fetching ==============

    async def fetch_category(self, category: str) -> list[FeedItem]:
        """Fetch, filter, dedup and sort all items of one category."""
        if self._client is not None:
            return await self._fetch_category(self._client, category)

        async with self._new_client() as client:
            return await self._fetch_category(client, category)

    async def fetch_all_categories(self) -> dict[str, list[FeedItem]]:
        """Fetch every category concurrently."""
        categories = self.get_categories()

        if self._client is not None:
            return await self._fetch_categories(self._client, categories)

        async with self._new_client() as client:
            return await self._fetch_categories(client, categories)

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def _fetch_categories(
        self,
        client: httpx.AsyncClient,
        categories: list[str],
    ) -> dict[str, list[FeedItem]]:
        results = await asyncio.gather(
            *[self._fetch_category(client, name) for name in categories]
        )
        return dict(zip(categories, results))

    async def _fetch_category(self, client: httpx.AsyncClient, category: str) -> list[FeedItem]:
        sources = self.config.feeds.get(category)
        if not sources:
            logger.warning(f"Unknown or empty feed category: {category}")
            return []

        # Sources fail independently; each returns [] on error
        per_source = await asyncio.gather(
            *[self._fetch_source(client, source) for source in sources]
        )
        items = [item for batch in per_source for item in batch]

        # Recency cutoff runs before dedup so a stale item never wins a slot
        cutoff = datetime.now(timezone.utc) - timedelta(hours=self.config.settings.max_age_hours)
        recent = [item for item in items if item.pub_date >= cutoff]

        unique = deduplicate_items(recent, self.config.settings.dedup_threshold)
        unique.sort(key=lambda item: item.pub_date, reverse=True)

        self.last_fetch = datetime.now(timezone.utc)
        logger.info(
            f"Category {category}: {len(items)} fetched, {len(recent)} recent, "
            f"{len(unique)} after dedup"
        )
        return unique

    async def _fetch_source(self, client: httpx.AsyncClient, source: FeedSource) -> list[FeedItem]:
        try:
            text = await self._fetch_raw(client, source)
        except NetworkError as e:
            self.error_count += 1
            logger.error(f"Error fetching feed {source.name} ({e.url}): {e.message}")
            return []

        score = trust_score(source.type, source.trust_score, self.config.source_trust_scores)
        return parse_feed(text, source, score, limit=self.config.settings.max_items_per_feed)

    async def _fetch_raw(self, client: httpx.AsyncClient, source: FeedSource) -> str:
        key = cache_key("feed", source.url)

        if self._cache_enabled:
            cached = self._cache.get(key)
            if isinstance(cached, str):
                self.cache_hits += 1
                logger.debug(f"Cache hit for {source.url}")
                return cached

        try:
            response = await client.get(source.url, timeout=httpx.Timeout(self._timeout))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"HTTP {e.response.status_code}", url=source.url) from e
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or type(e).__name__, url=source.url) from e

        self.fetch_count += 1
        text = response.text

        if self._cache_enabled:
            self._cache.set(key, text, ttl=self._cache_ttl)

        return text
