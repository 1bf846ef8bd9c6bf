"""
Fuzzy title deduplication.

Titles are normalized (lowercase, punctuation stripped, whitespace
collapsed) and compared by Jaccard similarity of their word sets.
"""

import re
from typing import Iterable

from ..models.content import FeedItem


def normalize_title(title: str) -> str:
    title = re.sub(r"[^a-z0-9\s]", "", title.lower())
    return re.sub(r"\s+", " ", title).strip()


def _words(title: str) -> frozenset[str]:
    return frozenset(w for w in normalize_title(title).split(" ") if len(w) > 2)


def title_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the significant words of two titles."""
    words_a = _words(a)
    words_b = _words(b)

    if not words_a and not words_b:
        # Nothing significant to compare; fall back to exact normalized match
        return 1.0 if normalize_title(a) == normalize_title(b) else 0.0

    union = words_a | words_b
    return len(words_a & words_b) / len(union)


def deduplicate_items(items: Iterable[FeedItem], threshold: float = 0.8) -> list[FeedItem]:
    """
    Drop near-duplicate items.

    Each item is compared with every item kept so far. When similarity
    reaches `threshold` the higher-trust item occupies the slot; on equal
    trust the earlier item stays. Applying this twice changes nothing.
    """
    current = list(items)
    while True:
        kept = _dedup_pass(current, threshold)
        # A replacement can leave two kept items similar; repeat until stable
        if len(kept) == len(current):
            return kept
        current = kept


def _dedup_pass(items: list[FeedItem], threshold: float) -> list[FeedItem]:
    kept: list[FeedItem] = []
    kept_words: list[frozenset[str]] = []

    for item in items:
        words = _words(item.title)
        duplicate_of = None

        for index, existing in enumerate(kept):
            if _similar(item.title, words, existing.title, kept_words[index], threshold):
                duplicate_of = index
                break

        if duplicate_of is None:
            kept.append(item)
            kept_words.append(words)
        elif item.trust_score > kept[duplicate_of].trust_score:
            kept[duplicate_of] = item
            kept_words[duplicate_of] = words

    return kept


def _similar(
    title_a: str,
    words_a: frozenset[str],
    title_b: str,
    words_b: frozenset[str],
    threshold: float,
) -> bool:
    if not words_a and not words_b:
        return normalize_title(title_a) == normalize_title(title_b)
    return len(words_a & words_b) / len(words_a | words_b) >= threshold
