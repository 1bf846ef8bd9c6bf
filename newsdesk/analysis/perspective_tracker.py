"""
Perspective Tracker - source diversity and political balance.

Classifies sources by known leaning and international reach, scores how
balanced a set is, and flags coverage gaps.
"""

import logging
from typing import Iterable, Optional

from ..models.content import Bias, FeedItem, SourceCategory
from ..models.perspective import (
    PerspectiveAnalysis,
    PerspectiveBalance,
    SourceDiversity,
    SourceRef,
    TrustRange,
)
from ..models.research import ResearchSource
from ..scoring.trust import get_source_bias

logger = logging.getLogger(__name__)


INTERNATIONAL_SOURCES = (
    "bbc",
    "reuters",
    "afp",
    "al jazeera",
    "france 24",
    "deutsche welle",
    "dw",
    "the guardian",
    "the economist",
    "financial times",
    "nikkei",
    "south china morning post",
)

IDEAL_RATIO = 1 / 3


def is_international_source(source_name: str) -> bool:
    name_lower = source_name.lower()
    return any(fragment in name_lower for fragment in INTERNATIONAL_SOURCES)


def analyze_perspective_balance(sources: Iterable[SourceRef]) -> PerspectiveBalance:
    """Count sources per leaning; explicit bias wins over the name lookup."""
    balance = PerspectiveBalance()

    for source in sources:
        if is_international_source(source.name):
            balance.international += 1

        if source.category == SourceCategory.TRADE:
            balance.trade += 1

        bias = source.bias if source.bias and source.bias != Bias.UNKNOWN else get_source_bias(source.name)

        if bias == Bias.LEFT:
            balance.left += 1
        elif bias == Bias.CENTER:
            balance.center += 1
        elif bias == Bias.RIGHT:
            balance.right += 1
        else:
            balance.unknown += 1

    return balance


def analyze_from_feed_items(items: Iterable[FeedItem]) -> PerspectiveBalance:
    return analyze_perspective_balance(
        SourceRef(name=item.source, bias=item.source_bias, category=item.source_type)
        for item in items
    )


def analyze_from_research_sources(sources: Iterable[ResearchSource]) -> PerspectiveBalance:
    return analyze_perspective_balance(SourceRef(name=source.title) for source in sources)


def generate_perspective_warnings(balance: PerspectiveBalance) -> list[str]:
    """Warnings for imbalanced coverage."""
    total = balance.political

    if total == 0:
        return ["No sources to analyze for perspective balance"]

    warnings = []
    left_ratio = balance.left / total
    right_ratio = balance.right / total
    center_ratio = balance.center / total

    if left_ratio > 0.6:
        warnings.append(f"Coverage skews left-leaning ({round(left_ratio * 100)}% of sources)")

    if right_ratio > 0.6:
        warnings.append(f"Coverage skews right-leaning ({round(right_ratio * 100)}% of sources)")

    if center_ratio < 0.2 and total > 3:
        warnings.append("Low representation of centrist/neutral sources")

    if balance.international == 0 and total > 3:
        warnings.append("Missing international perspective")

    unknown_ratio = balance.unknown / (total + balance.unknown)
    if unknown_ratio > 0.5:
        warnings.append(f"{round(unknown_ratio * 100)}% of sources have unknown bias classification")

    return warnings


def generate_diversity_recommendations(balance: PerspectiveBalance) -> list[str]:
    """One recommendation per triggered warning condition."""
    total = balance.political

    if total == 0:
        return ["Add diverse news sources to your feeds"]

    recommendations = []

    if balance.left / total > 0.6:
        recommendations.append("Consider adding center-right sources like WSJ or The Economist")

    if balance.right / total > 0.6:
        recommendations.append("Consider adding center-left sources like NYT or The Guardian")

    if balance.center / total < 0.2 and total > 3:
        recommendations.append("Add wire services like Reuters or AP for neutral coverage")

    if balance.international == 0 and total > 3:
        recommendations.append("Add international sources like BBC, Reuters, or Al Jazeera")

    if balance.unknown / (total + balance.unknown) > 0.5:
        recommendations.append("Set an explicit bias on sources that cannot be classified by name")

    if balance.trade == 0 and total > 5:
        recommendations.append("Consider adding industry-specific trade publications")

    return recommendations


def calculate_diversity_score(balance: PerspectiveBalance) -> int:
    """
    Diversity score (0-100), higher is more balanced.

    Deviation of left/center/right ratios from 1/3 each costs 75 points
    per unit; international sources add 3 each up to 10; the unknown
    fraction costs up to 15.
    """
    political = balance.political
    if political == 0:
        return 0

    deviation = sum(
        abs(count / political - IDEAL_RATIO)
        for count in (balance.left, balance.center, balance.right)
    )
    balance_score = max(0.0, 100 - deviation * 75)

    international_bonus = min(10, balance.international * 3)

    unknown_penalty = balance.unknown / (political + balance.unknown) * 15

    return round(max(0.0, min(100.0, balance_score + international_bonus - unknown_penalty)))


def get_dominant_perspective(balance: PerspectiveBalance) -> Optional[Bias]:
    total = balance.political
    if total == 0:
        return None

    if balance.left / total > 0.5:
        return Bias.LEFT
    if balance.right / total > 0.5:
        return Bias.RIGHT
    if balance.center / total > 0.6:
        return Bias.CENTER

    return None


def analyze_perspectives(sources: Iterable[SourceRef]) -> PerspectiveAnalysis:
    """Full analysis: balance, warnings, recommendations, dominant view, score."""
    balance = analyze_perspective_balance(sources)
    return _analysis_from_balance(balance)


def analyze_feed_perspectives(items: Iterable[FeedItem]) -> PerspectiveAnalysis:
    return _analysis_from_balance(analyze_from_feed_items(items))


def _analysis_from_balance(balance: PerspectiveBalance) -> PerspectiveAnalysis:
    analysis = PerspectiveAnalysis(
        balance=balance,
        warnings=generate_perspective_warnings(balance),
        recommendations=generate_diversity_recommendations(balance),
        dominant_perspective=get_dominant_perspective(balance),
        diversity_score=calculate_diversity_score(balance),
    )
    logger.debug(
        f"Perspective analysis: score {analysis.diversity_score}, "
        f"{len(analysis.warnings)} warnings"
    )
    return analysis


def analyze_source_diversity(items: list[FeedItem]) -> SourceDiversity:
    """Unique sources, counts per type, bias distribution and trust spread."""
    source_types: dict[str, int] = {}
    for item in items:
        key = item.source_type.value
        source_types[key] = source_types.get(key, 0) + 1

    trust_scores = [item.trust_score for item in items]
    if trust_scores:
        trust_range = TrustRange(
            min=min(trust_scores),
            max=max(trust_scores),
            avg=sum(trust_scores) / len(trust_scores),
        )
    else:
        trust_range = TrustRange()

    return SourceDiversity(
        unique_sources=len({item.source for item in items}),
        source_types=source_types,
        bias_distribution=analyze_from_feed_items(items),
        trust_score_range=trust_range,
    )
