"""
Feed models for the news pipeline.
Source configuration and the normalized item every feed entry becomes.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

TrustScore = Annotated[float, Field(ge=0.0, le=1.0)]


class SourceCategory(str, Enum):
    """
    Source category types:
    - wire: AP, Reuters, AFP - highest factual reliability
    - major: NYT, WSJ, BBC - good for analysis
    - trade: TechCrunch, industry pubs - domain expertise
    - newsletter: curated summaries
    - aggregator: HN, Reddit - fast, needs verification
    - analysis: expert opinion blogs
    - investigative: deep research journalism
    - social: sentiment and speed, low reliability
    """
    WIRE = "wire"
    MAJOR = "major"
    TRADE = "trade"
    NEWSLETTER = "newsletter"
    AGGREGATOR = "aggregator"
    ANALYSIS = "analysis"
    INVESTIGATIVE = "investigative"
    SOCIAL = "social"


class SourcePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Bias(str, Enum):
    """Known political leaning of an outlet."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    UNKNOWN = "unknown"


class FeedSource(BaseModel):
    """A configured RSS/Atom source. Read-only at runtime."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str
    type: SourceCategory = SourceCategory.NEWSLETTER
    priority: SourcePriority = SourcePriority.MEDIUM
    bias: Optional[Bias] = None
    trust_score: Optional[float] = Field(default=None, ge=0.0, le=1.0, alias="trustScore")


class FeedSettings(BaseModel):
    """Global fetch settings."""

    max_items_per_feed: int = Field(default=20, ge=1)
    max_age_hours: float = Field(default=48, gt=0)
    dedup_threshold: float = Field(default=0.8, ge=0.0, le=1.0)


class FeedConfig(BaseModel):
    """
    Category name -> ordered list of sources, plus global settings.
    An empty config is valid and means zero categories.
    """

    feeds: dict[str, list[FeedSource]] = Field(default_factory=dict)
    source_trust_scores: dict[SourceCategory, TrustScore] = Field(default_factory=dict)
    settings: FeedSettings = Field(default_factory=FeedSettings)


class FeedItem(BaseModel):
    """
    Unified item model for every feed entry.
    Produced per fetch cycle and cached with a TTL; the publish time never changes.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    link: str = ""
    pub_date: datetime
    source: str = Field(..., description="Display name of the configured source")
    source_type: SourceCategory
    trust_score: float = Field(..., ge=0.0, le=1.0)
    source_bias: Optional[Bias] = Field(default=None, description="Leaning configured on the source, if any")
    snippet: Optional[str] = None
    guid: Optional[str] = Field(default=None, description="Stable dedup key from the feed")
