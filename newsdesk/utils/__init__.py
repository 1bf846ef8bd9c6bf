"""Utility modules for newsdesk."""

from .cache import CacheBackend, FileCache, InMemoryCache, cache_key
from .logger import JsonFormatter, configure_logging
from .html import extract_title, strip_html, truncate
from .validation import (
    is_safe_url,
    validate_string,
    validate_string_list,
    validate_url_security,
)

__all__ = [
    "CacheBackend",
    "FileCache",
    "InMemoryCache",
    "cache_key",
    "JsonFormatter",
    "configure_logging",
    "extract_title",
    "strip_html",
    "truncate",
    "is_safe_url",
    "validate_string",
    "validate_string_list",
    "validate_url_security",
]
