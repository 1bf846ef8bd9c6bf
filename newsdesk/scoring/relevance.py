"""
Relevance scoring of feed items against a caller's interests.

Two strategies coexist and are selected by name:
- AdditiveRelevance: weighted keyword hits + trust + recency points
- RatioRelevance: keyword overlap ratio * 0.8 + recency * 0.2
"""

import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..models.content import FeedItem
from ..models.digest import Interest, InterestProfile, RelevanceLevel, RelevanceScore


def extract_interest_keywords(interests: Iterable[Interest]) -> set[str]:
    """Topics, subtopics and their individual words longer than 2 chars."""
    keywords: set[str] = set()

    for interest in interests:
        for phrase in [interest.topic, *interest.subtopics]:
            phrase = phrase.lower().strip()
            if not phrase:
                continue
            keywords.add(phrase)
            for word in re.split(r"\s+", phrase):
                if len(word) > 2:
                    keywords.add(word)

    return keywords


def recency_factor(
    pub_date: datetime,
    max_age_hours: float,
    now: Optional[datetime] = None,
) -> float:
    """1.0 for a brand new item, decaying linearly to 0.0 at max_age_hours."""
    now = now or datetime.now(timezone.utc)
    age_hours = max(0.0, (now - pub_date).total_seconds() / 3600)
    if max_age_hours <= 0:
        return 0.0
    return max(0.0, 1.0 - age_hours / max_age_hours)


def _item_text(item: FeedItem) -> str:
    return f"{item.title.lower()} {(item.snippet or '').lower()}"


class RelevanceStrategy:
    """Base class for relevance scorers."""

    name = "base"

    def __init__(self, profile: InterestProfile, max_age_hours: float = 48):
        self.profile = profile
        self.max_age_hours = max_age_hours
        self.high_keywords = extract_interest_keywords(profile.high_priority)
        self.medium_keywords = extract_interest_keywords(profile.medium_priority)
        self.low_keywords = extract_interest_keywords(profile.low_priority)

    def score(self, item: FeedItem, now: Optional[datetime] = None) -> RelevanceScore:
        raise NotImplementedError


class AdditiveRelevance(RelevanceStrategy):
    """
    Additive scoring used for the news digest.

    +3 / +2 / +1 per matched high / medium / low keyword, plus trust * 2,
    plus up to one point of recency. High >= 6, medium >= 3.
    """

    name = "additive"

    HIGH_THRESHOLD = 6.0
    MEDIUM_THRESHOLD = 3.0

    def score(self, item: FeedItem, now: Optional[datetime] = None) -> RelevanceScore:
        content = _item_text(item)
        matched: list[str] = []
        score = 0.0

        for keywords, weight in (
            (self.high_keywords, 3),
            (self.medium_keywords, 2),
            (self.low_keywords, 1),
        ):
            for keyword in keywords:
                if keyword in content:
                    score += weight
                    matched.append(keyword)

        score += item.trust_score * 2
        score += recency_factor(item.pub_date, self.max_age_hours, now)

        if score >= self.HIGH_THRESHOLD:
            relevance = RelevanceLevel.HIGH
        elif score >= self.MEDIUM_THRESHOLD:
            relevance = RelevanceLevel.MEDIUM
        else:
            relevance = RelevanceLevel.LOW

        return RelevanceScore(
            relevance=relevance,
            score=score,
            matched_interests=sorted(set(matched)),
        )


class RatioRelevance(RelevanceStrategy):
    """
    Ratio scoring: overlap * 0.8 + recency * 0.2, both in [0, 1].

    Overlap is matched keywords over min(total keywords, 5), capped at 1,
    so a handful of hits saturates it regardless of profile size.
    High >= 0.6, medium >= 0.3.
    """

    name = "ratio"

    OVERLAP_WEIGHT = 0.8
    RECENCY_WEIGHT = 0.2
    SATURATION = 5
    HIGH_THRESHOLD = 0.6
    MEDIUM_THRESHOLD = 0.3

    def score(self, item: FeedItem, now: Optional[datetime] = None) -> RelevanceScore:
        content = _item_text(item)
        keywords = self.high_keywords | self.medium_keywords | self.low_keywords
        matched = sorted(k for k in keywords if k in content)

        if keywords:
            overlap = min(1.0, len(matched) / min(len(keywords), self.SATURATION))
        else:
            overlap = 0.0

        recency = recency_factor(item.pub_date, self.max_age_hours, now)
        score = overlap * self.OVERLAP_WEIGHT + recency * self.RECENCY_WEIGHT

        if score >= self.HIGH_THRESHOLD:
            relevance = RelevanceLevel.HIGH
        elif score >= self.MEDIUM_THRESHOLD:
            relevance = RelevanceLevel.MEDIUM
        else:
            relevance = RelevanceLevel.LOW

        return RelevanceScore(relevance=relevance, score=score, matched_interests=matched)


RELEVANCE_STRATEGIES: dict[str, type[RelevanceStrategy]] = {
    AdditiveRelevance.name: AdditiveRelevance,
    RatioRelevance.name: RatioRelevance,
}


def get_relevance_strategy(
    name: str,
    profile: InterestProfile,
    max_age_hours: float = 48,
) -> RelevanceStrategy:
    """Build a relevance strategy by name."""
    strategy_class = RELEVANCE_STRATEGIES.get(name)
    if not strategy_class:
        raise ValueError(f"Unknown relevance strategy: {name}")
    return strategy_class(profile, max_age_hours)
