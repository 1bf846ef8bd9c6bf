"""
Unit tests for RSS/Atom parsing.
"""

from datetime import datetime, timezone

import pytest

PUBLISHED = datetime(2024, 3, 1, 12, 30, 0, tzinfo=timezone.utc)

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <id>urn:example:feed</id>
  <updated>2024-03-01T12:30:00Z</updated>
  <entry>
    <title>Atom entry title</title>
    <link href="https://example.org/atom/1"/>
    <id>urn:example:entry:1</id>
    <updated>2024-03-01T10:00:00+02:00</updated>
    <content type="html">&lt;p&gt;Body of the &lt;em&gt;entry&lt;/em&gt;&lt;/p&gt;</content>
  </entry>
</feed>
"""


def _source(**overrides):
    from newsdesk.models.content import FeedSource, SourceCategory

    fields = {"name": "Example Wire", "url": "https://example.com/rss", "type": SourceCategory.WIRE}
    fields.update(overrides)
    return FeedSource(**fields)


@pytest.mark.unit
class TestParseFeed:
    """Tests for parse_feed."""

    def test_rss_items(self, make_rss):
        """Test RSS entries become attributed FeedItems."""
        from newsdesk.aggregation.rss import parse_feed
        from newsdesk.models.content import SourceCategory

        text = make_rss([
            {"title": "First story", "link": "https://example.com/1", "pub_date": PUBLISHED},
            {"title": "Second story", "link": "https://example.com/2", "pub_date": PUBLISHED},
        ])

        items = parse_feed(text, _source(), 0.95)

        assert [i.title for i in items] == ["First story", "Second story"]
        first = items[0]
        assert first.link == "https://example.com/1"
        assert first.guid == "https://example.com/1"
        assert first.source == "Example Wire"
        assert first.source_type == SourceCategory.WIRE
        assert first.trust_score == 0.95
        assert first.pub_date == PUBLISHED
        assert first.pub_date.tzinfo is not None
        assert first.source_bias is None

    def test_configured_bias_carried(self, make_rss):
        """Test a bias set on the source reaches every item."""
        from newsdesk.aggregation.rss import parse_feed
        from newsdesk.models.content import Bias

        text = make_rss([{"title": "Council vote", "link": "https://example.com/v", "pub_date": PUBLISHED}])

        items = parse_feed(text, _source(name="Valley Gazette", bias=Bias.LEFT), 0.7)

        assert items[0].source_bias == Bias.LEFT

    def test_snippet_is_plain_text(self, make_rss):
        """Test HTML in descriptions is stripped."""
        from newsdesk.aggregation.rss import parse_feed

        text = make_rss([{
            "title": "Story",
            "link": "https://example.com/1",
            "pub_date": PUBLISHED,
            "description": "<p>Hello <b>world</b> &amp; friends</p>",
        }])

        assert parse_feed(text, _source(), 0.9)[0].snippet == "Hello world & friends"

    def test_snippet_truncated(self, make_rss):
        """Test long descriptions are cut to the snippet limit."""
        from newsdesk.aggregation.rss import SNIPPET_MAX_CHARS, parse_feed

        text = make_rss([{
            "title": "Story",
            "link": "https://example.com/1",
            "pub_date": PUBLISHED,
            "description": "word " * 200,
        }])

        snippet = parse_feed(text, _source(), 0.9)[0].snippet
        assert len(snippet) == SNIPPET_MAX_CHARS

    def test_missing_description(self, make_rss):
        """Test items without a body have no snippet."""
        from newsdesk.aggregation.rss import parse_feed

        text = make_rss([{"title": "Story", "link": "https://example.com/1", "pub_date": PUBLISHED}])

        assert parse_feed(text, _source(), 0.9)[0].snippet is None

    def test_limit(self, make_rss):
        """Test at most `limit` entries are parsed."""
        from newsdesk.aggregation.rss import parse_feed

        text = make_rss([
            {"title": f"Story {i}", "link": f"https://example.com/{i}", "pub_date": PUBLISHED}
            for i in range(10)
        ])

        assert len(parse_feed(text, _source(), 0.9, limit=3)) == 3

    def test_untitled_entries_skipped(self, make_rss):
        """Test entries with an empty title are dropped."""
        from newsdesk.aggregation.rss import parse_feed

        text = make_rss([
            {"title": "", "link": "https://example.com/1", "pub_date": PUBLISHED},
            {"title": "Kept", "link": "https://example.com/2", "pub_date": PUBLISHED},
        ])

        assert [i.title for i in parse_feed(text, _source(), 0.9)] == ["Kept"]

    def test_atom_feed(self):
        """Test Atom entries: id as guid, content as snippet, offset dates in UTC."""
        from newsdesk.aggregation.rss import parse_feed

        items = parse_feed(ATOM_FEED, _source(), 0.8)

        assert len(items) == 1
        item = items[0]
        assert item.title == "Atom entry title"
        assert item.link == "https://example.org/atom/1"
        assert item.guid == "urn:example:entry:1"
        assert item.snippet == "Body of the entry"
        assert item.pub_date == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_garbage_input(self):
        """Test unparseable text yields no items rather than an error."""
        from newsdesk.aggregation.rss import parse_feed

        assert parse_feed("this is not a feed", _source(), 0.9) == []
