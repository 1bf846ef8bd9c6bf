"""Digest synthesis over fetched feeds."""

from .news_digest import NewsDigestBuilder, find_goal_relevance

__all__ = ["NewsDigestBuilder", "find_goal_relevance"]
