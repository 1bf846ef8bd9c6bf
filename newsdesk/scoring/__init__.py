"""Trust, confidence and relevance scoring."""

from .trust import (
    KNOWN_SOURCE_BIASES,
    SOURCE_TRUST_SCORES,
    assess_confidence,
    domain_trust_score,
    get_source_bias,
    trust_score,
)
from .relevance import (
    AdditiveRelevance,
    RatioRelevance,
    RelevanceStrategy,
    get_relevance_strategy,
)

__all__ = [
    "KNOWN_SOURCE_BIASES",
    "SOURCE_TRUST_SCORES",
    "assess_confidence",
    "domain_trust_score",
    "get_source_bias",
    "trust_score",
    "AdditiveRelevance",
    "RatioRelevance",
    "RelevanceStrategy",
    "get_relevance_strategy",
]
