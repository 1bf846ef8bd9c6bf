"""HTML to plain text helpers for feed snippets and page previews."""

import html
import re
from typing import Optional

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_RE = re.compile(
    r"<(script|style|noscript|svg|template|iframe)[^>]*>.*?</\1>",
    re.DOTALL | re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]+>")
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.DOTALL | re.IGNORECASE)


def strip_html(text: Optional[str]) -> str:
    """Strip HTML markup and return compact plain text."""
    text = text or ""
    text = _COMMENT_RE.sub(" ", text)
    text = _BLOCK_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def extract_title(page: str) -> Optional[str]:
    """Contents of the first <title> element, whitespace-normalized."""
    match = _TITLE_RE.search(page or "")
    if not match:
        return None
    title = re.sub(r"\s+", " ", html.unescape(match.group(1))).strip()
    return title or None


def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit]
