"""
newsdesk - verified multi-source news and research

Ingests RSS/Atom feeds and multi-model research narratives, deduplicates
them, verifies every cited link against request-forgery tricks, scores
trust and perspective diversity, and merges narratives into a synthesis.

Pipeline stages:
1. Aggregation - concurrent feed fetching, recency filter, fuzzy dedup
2. Verification - offline URL security checks + bounded HEAD batches
3. Research - parallel model lenses, pooled verification, synthesis
4. Analysis - trust, confidence and perspective diversity scoring
5. Digest - interest relevance, goal matching, highlights
"""

__version__ = "0.1.0"

# Errors
from .exceptions import (
    ConfigError,
    NetworkError,
    NewsdeskError,
    ProviderError,
    ProviderUnavailableError,
    ResponseParseError,
    UrlSecurityError,
)

# Configuration
from .config.settings import Settings, get_settings
from .config.feeds import load_feed_config

# Aggregation
from .aggregation.feed_fetcher import FeedFetcher
from .aggregation.dedup import deduplicate_items

# Research
from .research.url_verifier import UrlVerifier, filter_valid_urls, verification_stats
from .research.research_orchestrator import ResearchOrchestrator
from .research.extraction import extract_json_object

# Models and routing
from .llm.router import ModelRouter
from .llm.base import CompletionRequest, CompletionResponse

# Scoring and analysis
from .scoring.trust import assess_confidence, trust_score
from .scoring.relevance import AdditiveRelevance, RatioRelevance, get_relevance_strategy
from .analysis.perspective_tracker import analyze_perspectives, analyze_source_diversity

# Digest
from .synthesis.news_digest import NewsDigestBuilder

# Wiring
from .pipeline import Newsdesk, create_newsdesk
from .utils.validation import validate_url_security

__all__ = [
    "__version__",
    # Errors
    "ConfigError",
    "NetworkError",
    "NewsdeskError",
    "ProviderError",
    "ProviderUnavailableError",
    "ResponseParseError",
    "UrlSecurityError",
    # Configuration
    "Settings",
    "get_settings",
    "load_feed_config",
    # Aggregation
    "FeedFetcher",
    "deduplicate_items",
    # Research
    "UrlVerifier",
    "filter_valid_urls",
    "verification_stats",
    "ResearchOrchestrator",
    "extract_json_object",
    "validate_url_security",
    # Models and routing
    "ModelRouter",
    "CompletionRequest",
    "CompletionResponse",
    # Scoring and analysis
    "assess_confidence",
    "trust_score",
    "AdditiveRelevance",
    "RatioRelevance",
    "get_relevance_strategy",
    "analyze_perspectives",
    "analyze_source_diversity",
    # Digest
    "NewsDigestBuilder",
    # Wiring
    "Newsdesk",
    "create_newsdesk",
]
