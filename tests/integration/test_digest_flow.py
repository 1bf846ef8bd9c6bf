"""
Integration tests for the digest: YAML config -> feed fetch -> scoring ->
highlights, with feeds and the model API behind one mock transport.
"""

import json
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import httpx
import pytest


FEEDS_YAML = """
feeds:
  tech:
    - name: Ars Technica
      url: https://feeds.example.com/ars.xml
      type: trade
    - name: Hacker News
      url: https://feeds.example.com/hn.xml
      type: aggregator
  world:
    - name: Reuters
      url: https://feeds.example.com/reuters.xml
      type: wire
    - name: The Guardian
      url: https://feeds.example.com/guardian.xml
      type: major
settings:
  max_age_hours: 24
"""


def _rss(*entries):
    items = "".join(
        f"<item><title>{title}</title><link>{link}</link>"
        f"<pubDate>{format_datetime(when, usegmt=True)}</pubDate></item>"
        for title, link, when in entries
    )
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>t</title>{items}</channel></rss>'


@pytest.fixture
def feed_server():
    now = datetime.now(timezone.utc)
    feeds = {
        "/ars.xml": _rss(
            ("Open source AI model tops benchmarks", "https://ars.example/ai", now - timedelta(hours=1)),
            ("Battery tech breakthrough", "https://ars.example/battery", now - timedelta(hours=3)),
        ),
        "/hn.xml": _rss(
            ("Open source AI model tops benchmarks!", "https://hn.example/1", now - timedelta(hours=2)),
            ("Ancient laptop still boots", "https://hn.example/old", now - timedelta(hours=30)),
        ),
        "/reuters.xml": _rss(
            ("Trade talks resume in Geneva", "https://reuters.example/trade", now - timedelta(hours=4)),
        ),
    }
    state = {"feed_requests": [], "completions": 0}

    def handler(request):
        if request.url.path.endswith("/chat/completions"):
            state["completions"] += 1
            return httpx.Response(200, json={
                "choices": [{"message": {"content": json.dumps(["Open source AI leads benchmarks"])}}],
                "usage": {"prompt_tokens": 100, "completion_tokens": 20},
            })
        state["feed_requests"].append(request.url.path)
        body = feeds.get(request.url.path)
        if body is None:
            return httpx.Response(503)
        return httpx.Response(200, text=body)

    return handler, state


@pytest.fixture
def app(monkeypatch, tmp_path, feed_server):
    from newsdesk.config.settings import Settings
    from newsdesk.pipeline import create_newsdesk

    feeds_path = tmp_path / "feeds.yaml"
    feeds_path.write_text(FEEDS_YAML)
    monkeypatch.setenv("NEWSDESK_FEEDS_PATH", str(feeds_path))
    monkeypatch.setenv("NEWSDESK_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("OPENROUTER_API_KEY", "or-test")

    handler, state = feed_server
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return create_newsdesk(Settings(_env_file=None), client=client, setup_logging=False), state


@pytest.fixture
def profile():
    from newsdesk.models.digest import Goal, Interest, InterestProfile

    return InterestProfile(
        high_priority=[Interest(topic="open source", subtopics=["AI model"])],
        goals=[Goal(title="Contribute to open source")],
    )


@pytest.mark.integration
class TestDigestFlow:
    """Digest over real fetcher, file cache and router wiring."""

    @pytest.mark.asyncio
    async def test_full_digest(self, app, profile):
        """Test dedup, recency, failing feeds, goals and highlights together."""
        newsdesk, state = app

        digest = await newsdesk.digest_builder(profile).build_digest()

        categories = {c.name: c for c in digest.categories}
        tech_titles = [i.title for i in categories["tech"].items]
        assert tech_titles[0] == "Open source AI model tops benchmarks"
        assert categories["tech"].items[0].source == "Ars Technica"
        assert "Ancient laptop still boots" not in tech_titles
        assert len(tech_titles) == 2

        assert [i.title for i in categories["world"].items] == ["Trade talks resume in Geneva"]

        assert digest.highlights == ["Open source AI leads benchmarks"]
        assert state["completions"] == 1
        assert digest.goal_relevant[0].related_goal == "Contribute to open source"
        assert digest.stats.categories_processed == 2
        assert digest.perspective.balance.center == 1

    @pytest.mark.asyncio
    async def test_second_digest_served_from_cache(self, app, profile):
        """Test feeds are fetched once within the cache TTL; failed feeds are retried."""
        newsdesk, state = app
        builder = newsdesk.digest_builder(profile)

        await builder.build_quick_digest()
        await builder.build_quick_digest()

        assert sorted(state["feed_requests"]) == sorted([
            "/ars.xml", "/hn.xml", "/reuters.xml", "/guardian.xml", "/guardian.xml",
        ])
        assert newsdesk.fetcher.get_stats()["cache"]["backend"] == "file"

    @pytest.mark.asyncio
    async def test_category_management(self, app, profile):
        """Test a feed added at runtime is fetched in the next digest."""
        newsdesk, state = app

        assert newsdesk.fetcher.add_feed("science", "Nature", "https://feeds.example.com/ars.xml")
        digest = await newsdesk.digest_builder(profile).build_category_digest("science", generate_highlights=False)

        assert digest.categories[0].name == "science"
        assert digest.categories[0].item_count == 2
