"""
Pytest configuration and fixtures for newsdesk tests.

Network is faked with httpx.MockTransport; models are faked with an
in-memory completion provider registered under every provider name.
"""

import os
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Callable, Optional, Union
from xml.sax.saxutils import escape

import httpx
import pytest

# Keep real credentials out of tests
for _var in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "OPENROUTER_API_KEY", "KIMI_API_KEY", "MOONSHOT_API_KEY"):
    os.environ.pop(_var, None)


# ============================================================
# HTTP Fixtures
# ============================================================

@pytest.fixture
def make_client():
    """Build an AsyncClient whose requests go to `handler`."""
    def _make(handler: Callable) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _make


def rss_feed(entries: list[dict], title: str = "Test Feed") -> str:
    """
    Render an RSS 2.0 document.
    Each entry: title, link, pub_date (aware datetime), optional description.
    """
    items = []
    for entry in entries:
        description = entry.get("description")
        items.append(
            "<item>"
            f"<title>{escape(entry['title'])}</title>"
            f"<link>{escape(entry['link'])}</link>"
            f"<guid>{escape(entry['link'])}</guid>"
            f"<pubDate>{format_datetime(entry['pub_date'], usegmt=True)}</pubDate>"
            + (f"<description>{escape(description)}</description>" if description else "")
            + "</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{escape(title)}</title><link>https://example.com</link>"
        "<description>Test</description>"
        + "".join(items)
        + "</channel></rss>"
    )


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def hours_ago(now):
    def _hours_ago(hours: float) -> datetime:
        return now - timedelta(hours=hours)
    return _hours_ago


# ============================================================
# Model Fixtures
# ============================================================

Reply = Union[str, Exception, Callable]


class FakeProvider:
    """
    In-memory completion provider.

    `replies` maps a provider model id (e.g. "moonshot-v1-8k") to a string,
    an exception to raise, or a callable taking the CompletionRequest.
    """

    def __init__(self, replies: Optional[dict[str, Reply]] = None, default: Reply = "{}"):
        self.replies = replies or {}
        self.default = default
        self.calls: list[tuple[str, object]] = []

    @property
    def is_configured(self) -> bool:
        return True

    async def complete(self, model, request):
        from newsdesk.llm.base import ProviderResponse

        self.calls.append((model, request))
        reply = self.replies.get(model, self.default)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(request)
        return ProviderResponse(content=reply, input_tokens=1000, output_tokens=500)

    def called_models(self) -> list[str]:
        return [model for model, _ in self.calls]


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def make_router():
    """Router with one FakeProvider behind every provider name, keyed by alias."""
    def _make(replies: Optional[dict[str, Reply]] = None, default: Reply = "{}"):
        from newsdesk.llm.router import DEFAULT_MODELS, ModelRouter

        by_model_id = {DEFAULT_MODELS[alias].model: reply for alias, reply in (replies or {}).items()}
        provider = FakeProvider(by_model_id, default=default)
        router = ModelRouter({"kimi": provider, "openrouter": provider, "gemini": provider})
        return router, provider
    return _make


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def make_item(now):
    """Build a FeedItem with sensible defaults."""
    def _make(title: str, **overrides):
        from newsdesk.models.content import FeedItem, SourceCategory

        fields = {
            "title": title,
            "link": f"https://example.com/{abs(hash(title))}",
            "pub_date": now,
            "source": "Example News",
            "source_type": SourceCategory.NEWSLETTER,
            "trust_score": 0.7,
        }
        fields.update(overrides)
        return FeedItem(**fields)
    return _make


@pytest.fixture
def sample_feed_config():
    """Two categories, four sources."""
    from newsdesk.config.feeds import parse_feed_config

    return parse_feed_config({
        "feeds": {
            "world": [
                {"name": "Reuters", "url": "https://feeds.example.com/reuters.xml", "type": "wire"},
                {"name": "Morning Brief", "url": "https://feeds.example.com/brief.xml", "type": "newsletter"},
            ],
            "tech": [
                {"name": "Ars Technica", "url": "https://feeds.example.com/ars.xml", "type": "trade"},
                {"name": "Hacker News", "url": "https://feeds.example.com/hn.xml", "type": "aggregator"},
            ],
        },
        "settings": {"max_items_per_feed": 20, "max_age_hours": 48, "dedup_threshold": 0.8},
    })


@pytest.fixture
def make_rss():
    return rss_feed
