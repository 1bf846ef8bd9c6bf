"""
Unit tests for fuzzy title deduplication.
"""

import pytest


@pytest.mark.unit
class TestTitleSimilarity:
    """Tests for title normalization and Jaccard similarity."""

    def test_normalize_title(self):
        """Test lowercase, punctuation stripped, whitespace collapsed."""
        from newsdesk.aggregation.dedup import normalize_title

        assert normalize_title("  Breaking:  Fed Raises   Rates! ") == "breaking fed raises rates"

    def test_identical_titles(self):
        """Test punctuation and case do not matter."""
        from newsdesk.aggregation.dedup import title_similarity

        assert title_similarity("Fed raises rates", "FED RAISES RATES!") == 1.0

    def test_short_words_ignored(self):
        """Test words of two characters or fewer do not count."""
        from newsdesk.aggregation.dedup import title_similarity

        assert title_similarity("AI is on the rise", "AI rise of the") == 1.0

    def test_partial_overlap(self):
        """Test Jaccard ratio of significant words."""
        from newsdesk.aggregation.dedup import title_similarity

        score = title_similarity(
            "Apple releases new iPhone model today",
            "Apple releases new iPhone model",
        )
        assert score == pytest.approx(5 / 6)

    def test_unrelated(self):
        """Test disjoint titles score zero."""
        from newsdesk.aggregation.dedup import title_similarity

        assert title_similarity("Markets rally on earnings", "Storm hits coastal towns") == 0.0


@pytest.mark.unit
class TestDeduplicateItems:
    """Tests for deduplicate_items."""

    def test_keeps_distinct_items(self, make_item):
        """Test nothing is dropped when titles differ."""
        from newsdesk.aggregation.dedup import deduplicate_items

        items = [make_item("Markets rally on earnings"), make_item("Storm hits coastal towns")]
        assert deduplicate_items(items) == items

    def test_higher_trust_wins(self, make_item):
        """Test a more trusted duplicate replaces the kept item."""
        from newsdesk.aggregation.dedup import deduplicate_items

        blog = make_item("Apple releases new iPhone model today", trust_score=0.6, source="Blog")
        wire = make_item("Apple releases new iPhone model", trust_score=0.95, source="Reuters")

        result = deduplicate_items([blog, wire])
        assert len(result) == 1
        assert result[0].source == "Reuters"

    def test_equal_trust_keeps_first(self, make_item):
        """Test ties keep the earlier item."""
        from newsdesk.aggregation.dedup import deduplicate_items

        first = make_item("Fed raises interest rates again", source="First")
        second = make_item("Fed raises interest rates again!", source="Second")

        result = deduplicate_items([first, second])
        assert [i.source for i in result] == ["First"]

    def test_lower_trust_duplicate_dropped(self, make_item):
        """Test a less trusted duplicate never displaces the kept item."""
        from newsdesk.aggregation.dedup import deduplicate_items

        wire = make_item("Fed raises interest rates", trust_score=0.95, source="Reuters")
        social = make_item("Fed raises interest rates", trust_score=0.4, source="Social")

        result = deduplicate_items([wire, social])
        assert [i.source for i in result] == ["Reuters"]

    def test_threshold(self, make_item):
        """Test a stricter threshold keeps near-duplicates apart."""
        from newsdesk.aggregation.dedup import deduplicate_items

        items = [
            make_item("Apple releases new iPhone model today"),
            make_item("Apple releases new iPhone model"),
        ]
        assert len(deduplicate_items(items, threshold=0.8)) == 1
        assert len(deduplicate_items(items, threshold=0.9)) == 2

    def test_idempotent(self, make_item):
        """Test running dedup on its own output changes nothing."""
        from newsdesk.aggregation.dedup import deduplicate_items

        items = [
            make_item("Apple releases new iPhone model today", trust_score=0.6),
            make_item("Storm hits coastal towns", trust_score=0.7),
            make_item("Apple releases new iPhone model", trust_score=0.95),
            make_item("Storm hits coastal towns overnight", trust_score=0.9),
            make_item("Markets rally on earnings", trust_score=0.7),
        ]
        once = deduplicate_items(items)
        assert deduplicate_items(once) == once
        assert len(once) == 3

    def test_empty(self):
        from newsdesk.aggregation.dedup import deduplicate_items

        assert deduplicate_items([]) == []
