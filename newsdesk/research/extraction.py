"""
Structured extraction from model output.

Models are asked for JSON but often wrap it in prose or code fences. The
best-effort extractor takes the span from the first "{" to the last "}";
callers fall back to treating the raw text as the answer when it fails.
"""

import json
import logging
from typing import Any, Optional

from ..exceptions import ResponseParseError

logger = logging.getLogger(__name__)


def extract_json_object_strict(text: str) -> dict[str, Any]:
    """
    Extract the first JSON object embedded in `text`.

    Raises:
        ResponseParseError: if no JSON object can be decoded
    """
    if not text:
        raise ResponseParseError("Empty response", raw="")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ResponseParseError("No JSON object found in response", raw=text[:500])

    try:
        parsed = json.loads(text[start:end + 1])
    except json.JSONDecodeError:
        # Trailing prose may contain braces; decode just the leading object
        try:
            parsed, _ = json.JSONDecoder().raw_decode(text[start:])
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Invalid JSON in response: {e}", raw=text[:500]) from e

    if not isinstance(parsed, dict):
        raise ResponseParseError("Response JSON is not an object", raw=text[:500])

    return parsed


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Best-effort variant: returns None instead of raising."""
    try:
        return extract_json_object_strict(text)
    except ResponseParseError as e:
        logger.debug(f"Structured extraction failed, using raw text: {e.message}")
        return None
