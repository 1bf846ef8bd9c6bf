"""Perspective and source diversity analysis."""

from .perspective_tracker import (
    analyze_feed_perspectives,
    analyze_from_feed_items,
    analyze_from_research_sources,
    analyze_perspective_balance,
    analyze_perspectives,
    analyze_source_diversity,
    calculate_diversity_score,
    generate_diversity_recommendations,
    generate_perspective_warnings,
    get_dominant_perspective,
    is_international_source,
)

__all__ = [
    "analyze_feed_perspectives",
    "analyze_from_feed_items",
    "analyze_from_research_sources",
    "analyze_perspective_balance",
    "analyze_perspectives",
    "analyze_source_diversity",
    "calculate_diversity_score",
    "generate_diversity_recommendations",
    "generate_perspective_warnings",
    "get_dominant_perspective",
    "is_international_source",
]
