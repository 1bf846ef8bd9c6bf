"""
Trust & Confidence Model.

Pure functions: source category -> static trust weight, and
multi-signal evidence -> leveled confidence assessment.
"""

from typing import Optional
from urllib.parse import urlparse

from ..models.content import Bias, SourceCategory
from ..models.research import ConfidenceAssessment, ConfidenceLevel


# Trust scores by source category (0-1, higher = more reliable)
SOURCE_TRUST_SCORES: dict[SourceCategory, float] = {
    SourceCategory.WIRE: 0.95,
    SourceCategory.MAJOR: 0.85,
    SourceCategory.INVESTIGATIVE: 0.85,
    SourceCategory.ANALYSIS: 0.80,
    SourceCategory.TRADE: 0.75,
    SourceCategory.NEWSLETTER: 0.70,
    SourceCategory.AGGREGATOR: 0.60,
    SourceCategory.SOCIAL: 0.40,
}

DEFAULT_TRUST_SCORE = 0.5

# Trust assumed for a cited page whose publisher we cannot classify
UNKNOWN_DOMAIN_TRUST = 0.6

# Publisher domains the research pipeline can classify
KNOWN_DOMAIN_CATEGORIES: dict[str, SourceCategory] = {
    "reuters.com": SourceCategory.WIRE,
    "apnews.com": SourceCategory.WIRE,
    "afp.com": SourceCategory.WIRE,
    "bbc.com": SourceCategory.MAJOR,
    "bbc.co.uk": SourceCategory.MAJOR,
    "nytimes.com": SourceCategory.MAJOR,
    "wsj.com": SourceCategory.MAJOR,
    "washingtonpost.com": SourceCategory.MAJOR,
    "theguardian.com": SourceCategory.MAJOR,
    "economist.com": SourceCategory.MAJOR,
    "ft.com": SourceCategory.MAJOR,
    "propublica.org": SourceCategory.INVESTIGATIVE,
    "theintercept.com": SourceCategory.INVESTIGATIVE,
    "nature.com": SourceCategory.ANALYSIS,
    "science.org": SourceCategory.ANALYSIS,
    "arxiv.org": SourceCategory.ANALYSIS,
    "schneier.com": SourceCategory.ANALYSIS,
    "krebsonsecurity.com": SourceCategory.ANALYSIS,
    "techcrunch.com": SourceCategory.TRADE,
    "theverge.com": SourceCategory.TRADE,
    "arstechnica.com": SourceCategory.TRADE,
    "wired.com": SourceCategory.TRADE,
    "substack.com": SourceCategory.NEWSLETTER,
    "news.ycombinator.com": SourceCategory.AGGREGATOR,
    "reddit.com": SourceCategory.AGGREGATOR,
    "twitter.com": SourceCategory.SOCIAL,
    "x.com": SourceCategory.SOCIAL,
}

# Known political leanings of major outlets, used for perspective tracking
KNOWN_SOURCE_BIASES: dict[str, Bias] = {
    # Center/Neutral
    "Reuters": Bias.CENTER,
    "Associated Press": Bias.CENTER,
    "AP": Bias.CENTER,
    "AFP": Bias.CENTER,
    "BBC": Bias.CENTER,
    "The Economist": Bias.CENTER,
    # Left-leaning
    "The Guardian": Bias.LEFT,
    "New York Times": Bias.LEFT,
    "NYT": Bias.LEFT,
    "Washington Post": Bias.LEFT,
    "MSNBC": Bias.LEFT,
    "Vox": Bias.LEFT,
    # Right-leaning
    "Wall Street Journal": Bias.RIGHT,
    "WSJ": Bias.RIGHT,
    "Fox News": Bias.RIGHT,
    "National Review": Bias.RIGHT,
}

CONFIDENCE_REASONS: dict[ConfidenceLevel, str] = {
    ConfidenceLevel.HIGH: "Multiple independent confirmations from trusted sources",
    ConfidenceLevel.MEDIUM: "Some supporting evidence with limited independent confirmation",
    ConfidenceLevel.LOW: "Single or unverified sources with gaps",
    ConfidenceLevel.SPECULATIVE: "Inference only, no direct evidence",
}


def trust_score(
    category: SourceCategory,
    override: Optional[float] = None,
    category_overrides: Optional[dict[SourceCategory, float]] = None,
) -> float:
    """
    Resolve the trust score for a source.

    Order: explicit per-source override, config-level category override,
    static table, then DEFAULT_TRUST_SCORE.
    """
    if override is not None:
        return override
    if category_overrides and category in category_overrides:
        return category_overrides[category]
    return SOURCE_TRUST_SCORES.get(category, DEFAULT_TRUST_SCORE)


def domain_category(url: str) -> Optional[SourceCategory]:
    """Classify a URL's publisher by hostname, matching parent domains too."""
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return None
    if host.startswith("www."):
        host = host[4:]
    for domain, category in KNOWN_DOMAIN_CATEGORIES.items():
        if host == domain or host.endswith(f".{domain}"):
            return category
    return None


def domain_trust_score(url: str) -> float:
    """Trust for a cited page, inferred from its publisher domain."""
    category = domain_category(url)
    if category is None:
        return UNKNOWN_DOMAIN_TRUST
    return SOURCE_TRUST_SCORES[category]


def assess_confidence(
    independent_sources: int,
    avg_trust_score: float,
    has_contradictions: bool,
) -> ConfidenceAssessment:
    """
    Calculate confidence from source verification.

    score = min(100, sources*20 + avg_trust*60), scaled by 0.7 when the
    narratives contradict each other.
    """
    score = min(100.0, independent_sources * 20 + avg_trust_score * 60)

    if has_contradictions:
        score *= 0.7

    if score >= 80:
        level = ConfidenceLevel.HIGH
    elif score >= 50:
        level = ConfidenceLevel.MEDIUM
    elif score >= 20:
        level = ConfidenceLevel.LOW
    else:
        level = ConfidenceLevel.SPECULATIVE

    return ConfidenceAssessment(
        level=level,
        score=max(0.0, score),
        reason=CONFIDENCE_REASONS[level],
        source_count=independent_sources,
    )


def get_source_bias(source_name: str) -> Bias:
    """Bias for a source name: exact match first, then substring."""
    if source_name in KNOWN_SOURCE_BIASES:
        return KNOWN_SOURCE_BIASES[source_name]

    name_lower = source_name.lower()
    for name, bias in KNOWN_SOURCE_BIASES.items():
        if name.lower() in name_lower:
            return bias

    return Bias.UNKNOWN
