"""
News Digest - personalized digest over the configured feeds.

Items are scored against the caller's interest profile, truncated per
category, matched against active goals and summarized into highlights.
"""

import asyncio
import json
import logging
import re
from typing import Optional

from ..aggregation.feed_fetcher import FeedFetcher
from ..analysis.perspective_tracker import analyze_feed_perspectives
from ..exceptions import NewsdeskError
from ..llm.base import CompletionRequest, Message
from ..llm.router import CHEAPEST, ModelRouter
from ..models.content import FeedItem
from ..models.digest import (
    CategoryDigest,
    DigestItem,
    DigestStats,
    Goal,
    GoalRelevantItem,
    InterestProfile,
    NewsDigest,
    RelevanceLevel,
)
from ..scoring.relevance import AdditiveRelevance, RelevanceStrategy
from ..utils.validation import validate_string_list

logger = logging.getLogger(__name__)

MAX_HIGHLIGHTS = 5
MAX_GOAL_RELEVANT = 5
NO_ITEMS_HIGHLIGHT = "No news items found matching your interests"

HIGHLIGHTS_SYSTEM_PROMPT = (
    "You are a news summarizer. Create brief, informative highlights from news headlines."
)

HIGHLIGHTS_PROMPT = """Summarize these news items into 3-5 key highlights. Each highlight should be 1-2 sentences, capturing the most important developments.

News Items:
{items}

Respond with a JSON array of highlight strings. Example:
["First highlight about major development", "Second highlight about another trend"]"""


def find_goal_relevance(item: FeedItem, goals: list[Goal]) -> Optional[tuple[str, str]]:
    """(goal title, reason) for the first goal word longer than 3 chars found in the item."""
    title = item.title.lower()
    snippet = (item.snippet or "").lower()

    for goal in goals:
        for word in re.split(r"\W+", goal.title.lower()):
            if len(word) > 3 and (word in title or word in snippet):
                return goal.title, f'Contains keyword "{word}" from your goal'

    return None


def _parse_highlights(content: str) -> list[str]:
    """JSON array if present, else one highlight per non-empty line."""
    start = content.find("[")
    end = content.rfind("]")
    if start != -1 and end > start:
        try:
            parsed = json.loads(content[start:end + 1])
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return validate_string_list(parsed, max_items=MAX_HIGHLIGHTS)

    lines = [line.strip().lstrip("-*").strip() for line in content.splitlines()]
    return [line for line in lines if line][:MAX_HIGHLIGHTS]


class NewsDigestBuilder:
    """Builds NewsDigests from a FeedFetcher and an interest profile."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        profile: Optional[InterestProfile] = None,
        router: Optional[ModelRouter] = None,
        strategy: Optional[RelevanceStrategy] = None,
    ):
        self.fetcher = fetcher
        self.profile = profile or InterestProfile()
        self.router = router
        self.strategy = strategy or AdditiveRelevance(
            self.profile, max_age_hours=fetcher.config.settings.max_age_hours,
        )

    async def build_digest(
        self,
        categories: Optional[list[str]] = None,
        max_items_per_category: int = 10,
        generate_highlights: bool = True,
    ) -> NewsDigest:
        """
        Fetch, score, truncate and summarize.

        Items in each category are ordered by relevance score, then recency.
        """
        feeds = await self._fetch(categories)

        max_items = min(max_items_per_category, self.profile.max_items)
        active_goals = self.profile.active_goals

        digest_categories: list[CategoryDigest] = []
        goal_relevant: list[GoalRelevantItem] = []
        selected: list[FeedItem] = []
        high_relevance = 0

        for category, items in feeds.items():
            scored = [(item, self.strategy.score(item)) for item in items]
            scored.sort(key=lambda pair: (pair[1].score, pair[0].pub_date), reverse=True)
            top = scored[:max_items]

            for item, _ in top:
                match = find_goal_relevance(item, active_goals)
                if match:
                    goal_relevant.append(GoalRelevantItem(
                        item=item, related_goal=match[0], relevance_reason=match[1],
                    ))

            high_relevance += sum(1 for _, s in top if s.relevance == RelevanceLevel.HIGH)
            selected.extend(item for item, _ in top)

            digest_categories.append(CategoryDigest(
                name=category,
                items=[
                    DigestItem(
                        title=item.title,
                        link=item.link,
                        source=item.source,
                        relevance=score.relevance,
                        summary=item.snippet,
                        pub_date=item.pub_date,
                    )
                    for item, score in top
                ],
                item_count=len(top),
            ))

        highlights: list[str] = []
        if generate_highlights and digest_categories:
            highlights = await self._generate_highlights(digest_categories)

        digest = NewsDigest(
            categories=digest_categories,
            highlights=highlights,
            goal_relevant=goal_relevant[:MAX_GOAL_RELEVANT],
            stats=DigestStats(
                total_items=len(selected),
                high_relevance=high_relevance,
                categories_processed=len(digest_categories),
            ),
            perspective=analyze_feed_perspectives(selected),
        )

        logger.info(
            f"Digest: {digest.stats.total_items} items in {digest.stats.categories_processed} "
            f"categories, {high_relevance} high relevance"
        )
        return digest

    async def build_quick_digest(
        self,
        categories: Optional[list[str]] = None,
        max_items_per_category: int = 10,
    ) -> NewsDigest:
        """Digest without model-generated highlights."""
        return await self.build_digest(
            categories=categories,
            max_items_per_category=max_items_per_category,
            generate_highlights=False,
        )

    async def build_category_digest(
        self,
        category: str,
        max_items: int = 10,
        generate_highlights: bool = True,
    ) -> NewsDigest:
        return await self.build_digest(
            categories=[category],
            max_items_per_category=max_items,
            generate_highlights=generate_highlights,
        )

    async def _fetch(self, categories: Optional[list[str]]) -> dict[str, list[FeedItem]]:
        if not categories:
            return await self.fetcher.fetch_all_categories()

        results = await asyncio.gather(*[self.fetcher.fetch_category(c) for c in categories])
        return dict(zip(categories, results))

    async def _generate_highlights(self, categories: list[CategoryDigest]) -> list[str]:
        high_items = [
            (c.name, item)
            for c in categories
            for item in c.items
            if item.relevance == RelevanceLevel.HIGH
        ]

        if not high_items:
            # Fall back to the top items of each category
            top_items = [(c.name, item) for c in categories for item in c.items[:2]]
            if not top_items:
                return [NO_ITEMS_HIGHLIGHT]
            return [f"[{name}] {item.title}" for name, item in top_items[:MAX_HIGHLIGHTS]]

        fallback = [f"[{name}] {item.title}" for name, item in high_items[:MAX_HIGHLIGHTS]]

        if self.router is None:
            return fallback

        try:
            response = await self.router.complete(CompletionRequest(
                model=CHEAPEST,
                messages=[
                    Message(role="system", content=HIGHLIGHTS_SYSTEM_PROMPT),
                    Message(role="user", content=HIGHLIGHTS_PROMPT.format(
                        items="\n".join(f"- [{name}] {item.title}" for name, item in high_items),
                    )),
                ],
                max_tokens=500,
                temperature=0.3,
            ))
        except NewsdeskError as e:
            logger.error(f"Failed to generate highlights: {e.message}")
            return fallback

        return _parse_highlights(response.content) or fallback
