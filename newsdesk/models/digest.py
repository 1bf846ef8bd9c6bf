"""
Digest models.
The caller's interest profile in, the rendered-agnostic news digest out.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .content import FeedItem
from .perspective import PerspectiveAnalysis
from .research import utc_now


class RelevanceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Interest(BaseModel):
    topic: str
    subtopics: list[str] = Field(default_factory=list)


class Goal(BaseModel):
    title: str
    description: Optional[str] = None
    progress: float = Field(default=0.0, ge=0.0, le=1.0)


class InterestProfile(BaseModel):
    """What the caller cares about. Owned by the host application."""

    high_priority: list[Interest] = Field(default_factory=list)
    medium_priority: list[Interest] = Field(default_factory=list)
    low_priority: list[Interest] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    max_items: int = Field(default=10, ge=1)

    @property
    def active_goals(self) -> list[Goal]:
        return [g for g in self.goals if g.progress < 1]


class RelevanceScore(BaseModel):
    relevance: RelevanceLevel
    score: float
    matched_interests: list[str] = Field(default_factory=list)


class DigestItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    link: str
    source: str
    relevance: RelevanceLevel
    summary: Optional[str] = None
    pub_date: datetime = Field(..., alias="pubDate")


class CategoryDigest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    items: list[DigestItem] = Field(default_factory=list)
    item_count: int = Field(default=0, alias="itemCount")


class GoalRelevantItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item: FeedItem
    related_goal: str = Field(..., alias="relatedGoal")
    relevance_reason: str = Field(..., alias="relevanceReason")


class DigestStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(default=0, alias="totalItems")
    high_relevance: int = Field(default=0, alias="highRelevance")
    categories_processed: int = Field(default=0, alias="categoriesProcessed")


class NewsDigest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated: datetime = Field(default_factory=utc_now)
    categories: list[CategoryDigest] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    goal_relevant: list[GoalRelevantItem] = Field(default_factory=list, alias="goalRelevant")
    stats: DigestStats = Field(default_factory=DigestStats)
    perspective: Optional[PerspectiveAnalysis] = None
