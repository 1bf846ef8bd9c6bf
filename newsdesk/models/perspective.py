"""Perspective balance models."""

from typing import Optional

from pydantic import BaseModel, Field

from .content import Bias, SourceCategory


class PerspectiveBalance(BaseModel):
    """Source counts per leaning. Derived per analysis call."""

    left: int = 0
    center: int = 0
    right: int = 0
    international: int = 0
    trade: int = 0
    unknown: int = 0

    @property
    def political(self) -> int:
        return self.left + self.center + self.right


class SourceRef(BaseModel):
    """Minimal description of a source for bias classification."""

    name: str
    bias: Optional[Bias] = None
    category: Optional[SourceCategory] = None


class PerspectiveAnalysis(BaseModel):
    balance: PerspectiveBalance
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    dominant_perspective: Optional[Bias] = None
    diversity_score: int = Field(default=0, ge=0, le=100)


class TrustRange(BaseModel):
    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0


class SourceDiversity(BaseModel):
    unique_sources: int = 0
    source_types: dict[str, int] = Field(default_factory=dict)
    bias_distribution: PerspectiveBalance = Field(default_factory=PerspectiveBalance)
    trust_score_range: TrustRange = Field(default_factory=TrustRange)
