"""Data models for the newsdesk pipeline."""

from .content import (
    Bias,
    FeedConfig,
    FeedItem,
    FeedSettings,
    FeedSource,
    SourceCategory,
    SourcePriority,
)
from .research import (
    ComparisonResult,
    ComparisonSide,
    ConfidenceAssessment,
    ConfidenceLevel,
    DefinitionResult,
    FactAssessment,
    FactCheckResult,
    QuickResearchResult,
    ReportConfidence,
    ResearchPerspective,
    ResearchReport,
    ResearchSource,
    VerificationResult,
)
from .perspective import (
    PerspectiveAnalysis,
    PerspectiveBalance,
    SourceDiversity,
    SourceRef,
    TrustRange,
)
from .digest import (
    CategoryDigest,
    DigestItem,
    DigestStats,
    Goal,
    GoalRelevantItem,
    Interest,
    InterestProfile,
    NewsDigest,
    RelevanceLevel,
    RelevanceScore,
)

__all__ = [
    # Feed models
    "Bias",
    "FeedConfig",
    "FeedItem",
    "FeedSettings",
    "FeedSource",
    "SourceCategory",
    "SourcePriority",
    # Research models
    "ComparisonResult",
    "ComparisonSide",
    "ConfidenceAssessment",
    "ConfidenceLevel",
    "DefinitionResult",
    "FactAssessment",
    "FactCheckResult",
    "QuickResearchResult",
    "ReportConfidence",
    "ResearchPerspective",
    "ResearchReport",
    "ResearchSource",
    "VerificationResult",
    # Perspective models
    "PerspectiveAnalysis",
    "PerspectiveBalance",
    "SourceDiversity",
    "SourceRef",
    "TrustRange",
    # Digest models
    "CategoryDigest",
    "DigestItem",
    "DigestStats",
    "Goal",
    "GoalRelevantItem",
    "Interest",
    "InterestProfile",
    "NewsDigest",
    "RelevanceLevel",
    "RelevanceScore",
]
