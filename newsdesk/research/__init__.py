"""Research: URL verification, structured extraction and multi-model orchestration."""

from .extraction import extract_json_object, extract_json_object_strict
from .research_orchestrator import (
    RESEARCH_LENSES,
    ResearchOrchestrator,
    detect_contradictions,
    parse_sources,
)
from .url_verifier import (
    UrlVerifier,
    annotate_sources,
    filter_valid_urls,
    verification_stats,
)

__all__ = [
    "extract_json_object",
    "extract_json_object_strict",
    "RESEARCH_LENSES",
    "ResearchOrchestrator",
    "detect_contradictions",
    "parse_sources",
    "UrlVerifier",
    "annotate_sources",
    "filter_valid_urls",
    "verification_stats",
]
