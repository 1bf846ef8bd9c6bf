"""
Research models for the verification pipeline.
Represents verified links, per-model perspectives and the merged report.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VerificationResult(BaseModel):
    """
    Outcome of checking one URL.
    Produced once per URL per batch and never cached across batches.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str
    valid: bool
    status: Optional[int] = None
    error: Optional[str] = None
    title: Optional[str] = None
    content_preview: Optional[str] = Field(default=None, alias="contentPreview")
    verified_at: datetime = Field(default_factory=utc_now, alias="verifiedAt")


class ResearchSource(BaseModel):
    """
    A source cited by a model.
    `verified` starts False and is only set from a matching VerificationResult.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = "Untitled"
    url: str
    verified: bool = False
    snippet: Optional[str] = None
    verification_error: Optional[str] = Field(default=None, alias="verificationError")


class ResearchPerspective(BaseModel):
    """One model's independent narrative plus its cited sources."""

    model_config = ConfigDict(populate_by_name=True)

    model: str
    summary: str
    key_findings: list[str] = Field(default_factory=list, alias="keyFindings")
    sources: list[ResearchSource] = Field(default_factory=list)


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SPECULATIVE = "speculative"


class ConfidenceAssessment(BaseModel):
    """How well-supported a finding is. Derived at synthesis time, never stored."""

    model_config = ConfigDict(populate_by_name=True)

    level: ConfidenceLevel
    score: float = Field(..., ge=0.0, le=100.0)
    reason: str
    source_count: int = Field(default=0, alias="sourceCount")


class ReportConfidence(BaseModel):
    """The slice of a ConfidenceAssessment that goes into a report."""

    level: ConfidenceLevel
    score: float


class ResearchReport(BaseModel):
    """Output of standard and deep research."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    synthesis: str
    perspectives: list[ResearchPerspective] = Field(default_factory=list)
    total_cost: float = Field(default=0.0, alias="totalCost")
    timestamp: datetime = Field(default_factory=utc_now)
    confidence: Optional[ReportConfidence] = None

    @property
    def all_sources(self) -> list[ResearchSource]:
        return [s for p in self.perspectives for s in p.sources]

    @property
    def verified_count(self) -> int:
        return sum(1 for s in self.all_sources if s.verified)


class QuickResearchResult(BaseModel):
    """Output of single-model research."""

    query: str
    summary: str
    sources: list[ResearchSource] = Field(default_factory=list)
    model: str
    cost: float = 0.0
    timestamp: datetime = Field(default_factory=utc_now)


class ComparisonSide(BaseModel):
    topic: str
    summary: str = ""
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)


class ComparisonResult(BaseModel):
    """Two-sided pros/cons comparison. Sources are not verified."""

    model_config = ConfigDict(populate_by_name=True)

    topic_a: ComparisonSide = Field(..., alias="topicA")
    topic_b: ComparisonSide = Field(..., alias="topicB")
    comparison: str = ""
    recommendation: str = ""
    cost: float = 0.0


class FactAssessment(str, Enum):
    LIKELY_TRUE = "likely_true"
    LIKELY_FALSE = "likely_false"
    UNCERTAIN = "uncertain"
    NEEDS_CONTEXT = "needs_context"


class FactCheckResult(BaseModel):
    claim: str
    assessment: FactAssessment = FactAssessment.UNCERTAIN
    explanation: str
    sources: list[ResearchSource] = Field(default_factory=list)
    cost: float = 0.0


class DefinitionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    term: str
    definition: str
    related_terms: list[str] = Field(default_factory=list, alias="relatedTerms")
    sources: list[ResearchSource] = Field(default_factory=list)
    cost: float = 0.0
