"""
Input Validation and Security Utilities for newsdesk.

URLs cited by language models are untrusted input. Everything here runs
without network I/O so a rejected URL never leaves the process.
"""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from ..exceptions import UrlSecurityError

logger = logging.getLogger(__name__)


# ============== URL Security ==============

ALLOWED_SCHEMES = ("http", "https")

# Checked against the raw string, independent of parsing
BLOCKED_SCHEMES = ("file:", "ftp:", "gopher:", "data:", "javascript:", "vbscript:")

# Exact hosts, also blocked as parent domains (sub.localhost)
BLOCKED_HOSTS = (
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "::1",
    "[::1]",
    "169.254.169.254",
    "metadata.google.internal",
)

BLOCKED_HOST_PATTERNS = (
    re.compile(r"^10\."),
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\."),
    re.compile(r"^192\.168\."),
    re.compile(r"^169\.254\."),
    re.compile(r"^f[cd][0-9a-f]{0,2}:"),
    re.compile(r"^fe80:"),
)

URL_ALLOWED_CHARS = re.compile(r"^[a-zA-Z0-9:/\-._~?#\[\]@!$&'()*+,;=%]+$")
PERCENT_ENCODED = re.compile(r"%[0-9a-fA-F]{2}")
NUMERIC_HOST_PART = re.compile(r"0x[0-9a-f]*|\d+", re.IGNORECASE)


def _is_internal_ip(host: str) -> bool:
    """Check if a literal IP address belongs to a loopback/private/reserved range."""
    try:
        addr = ipaddress.ip_address(host)
    except ValueError:
        return False
    return (
        addr.is_private
        or addr.is_loopback
        or addr.is_link_local
        or addr.is_unspecified
        or addr.is_reserved
        or addr.is_multicast
    )


def _is_blocked_host(host: str) -> bool:
    for blocked in BLOCKED_HOSTS:
        if host == blocked or host.endswith(f".{blocked}"):
            return True
    if any(pattern.match(host) for pattern in BLOCKED_HOST_PATTERNS):
        return True
    return _is_internal_ip(host)


def _is_obfuscated_ip(host: str) -> bool:
    """Decimal, hex or octal encodings of an address (2130706433, 0x7f.1)."""
    parts = host.rstrip(".").split(".")
    if len(parts) > 4 or not all(NUMERIC_HOST_PART.fullmatch(p) for p in parts):
        return False
    try:
        ipaddress.ip_address(host)
        return False
    except ValueError:
        return True


def validate_url_security(url: str) -> None:
    """
    Validate a URL against request-forgery tricks.

    Raises:
        UrlSecurityError: with a human-readable reason when the URL is unsafe
    """
    if not url or not isinstance(url, str):
        raise UrlSecurityError("Invalid URL format")

    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError:
        raise UrlSecurityError("Invalid URL format")

    if not parsed.scheme or (not parsed.netloc and parsed.scheme in ALLOWED_SCHEMES):
        raise UrlSecurityError("Invalid URL format")

    # Check scheme
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise UrlSecurityError(f"Only HTTP/HTTPS URLs allowed, got: {parsed.scheme}:")

    # Check for blocked schemes in the URL string itself
    url_lower = url.lower()
    for scheme in BLOCKED_SCHEMES:
        if scheme in url_lower:
            raise UrlSecurityError(f"Blocked URL scheme detected: {scheme}")

    if not hostname:
        raise UrlSecurityError("Invalid URL format")

    host = hostname.lower()

    if _is_blocked_host(host):
        logger.warning(f"Blocked internal URL: {url}")
        raise UrlSecurityError(f"Internal/private URL not allowed: {host}")

    # Check for URL encoding tricks
    if PERCENT_ENCODED.search(parsed.netloc):
        raise UrlSecurityError("Percent-encoded hostnames not allowed")

    if "%25" in url:
        raise UrlSecurityError("Double-encoded URLs not allowed")

    if _is_obfuscated_ip(host):
        raise UrlSecurityError(f"Obfuscated IP address not allowed: {host}")

    # Character allowlisting
    if not URL_ALLOWED_CHARS.match(url):
        raise UrlSecurityError("URL contains invalid characters")


def is_safe_url(url: str) -> tuple[bool, str]:
    """Non-raising form of validate_url_security."""
    try:
        validate_url_security(url)
    except UrlSecurityError as e:
        return False, e.reason
    return True, ""


# ============== Input Validation ==============

def validate_string(
    value: Optional[str],
    max_length: int = 255,
    default: str = '',
    strip: bool = True,
) -> str:
    """
    Validate and sanitize string input from untrusted model output.

    Args:
        value: The value to validate (non-strings are coerced)
        max_length: Maximum allowed length
        default: Returned when the value is missing or empty
        strip: Whether to strip whitespace

    Returns:
        The validated string
    """
    if value is None:
        return default

    value = str(value)

    if strip:
        value = value.strip()

    if not value:
        return default

    if len(value) > max_length:
        value = value[:max_length]

    return value


def validate_string_list(values, max_items: int = 20, max_length: int = 500) -> list[str]:
    """Coerce a model-provided list into a list of non-empty strings."""
    if not isinstance(values, list):
        return []
    cleaned = [validate_string(v, max_length=max_length) for v in values[:max_items]]
    return [v for v in cleaned if v]
