"""
URL Verifier - checks that cited links are real and safely reachable.

Links usually come from model output, so every URL passes the offline
security checks in utils.validation before any request is made.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import httpx

from ..exceptions import UrlSecurityError
from ..models.research import ResearchSource, VerificationResult
from ..utils.html import extract_title, strip_html, truncate
from ..utils.validation import is_safe_url

logger = logging.getLogger(__name__)

USER_AGENT = "Newsdesk/1.0 (URL Verification)"
PREVIEW_MAX_CHARS = 200
DEFAULT_TIMEOUT = 10.0
DEFAULT_CONCURRENCY = 5
MAX_REDIRECTS = 5


class UrlVerifier:
    """
    Verifies URLs with HEAD requests in bounded sequential chunks.
    Redirects are followed by hand so every hop passes the security checks.

    Nothing is cached: each batch checks every URL it is given.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self._client = client
        self.timeout = timeout
        self.concurrency = max(1, concurrency)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(follow_redirects=False) as client:
            yield client

    async def verify(
        self,
        url: str,
        timeout: Optional[float] = None,
        verify_content: bool = False,
    ) -> VerificationResult:
        """Verify a single URL. Never raises."""
        async with self._session() as client:
            return await self._verify(client, url, timeout or self.timeout, verify_content)

    async def verify_batch(
        self,
        urls: list[str],
        concurrency: Optional[int] = None,
        timeout: Optional[float] = None,
        verify_content: bool = False,
    ) -> list[VerificationResult]:
        """
        Verify URLs in chunks of `concurrency`; each chunk completes before
        the next starts. Results keep the input order.
        """
        chunk_size = max(1, concurrency or self.concurrency)
        timeout = timeout or self.timeout
        results: list[VerificationResult] = []

        async with self._session() as client:
            for i in range(0, len(urls), chunk_size):
                chunk = urls[i:i + chunk_size]
                results.extend(await asyncio.gather(
                    *[self._verify(client, url, timeout, verify_content) for url in chunk]
                ))

        valid = sum(1 for r in results if r.valid)
        logger.info(f"Verified {len(results)} URLs: {valid} valid, {len(results) - valid} invalid")
        return results

    async def verify_and_annotate(
        self,
        sources: list[ResearchSource],
        timeout: Optional[float] = None,
    ) -> list[ResearchSource]:
        """Return copies of `sources` with verified flags set; each URL checked once."""
        unique_urls = list(dict.fromkeys(s.url for s in sources))
        results = await self.verify_batch(unique_urls, timeout=timeout)
        return annotate_sources(sources, results)

    async def is_reachable(self, url: str, timeout: float = 5.0) -> bool:
        result = await self.verify(url, timeout=timeout)
        return result.valid

    async def _verify(
        self,
        client: httpx.AsyncClient,
        url: str,
        timeout: float,
        verify_content: bool,
    ) -> VerificationResult:
        safe, reason = is_safe_url(url)
        if not safe:
            logger.debug(f"Rejected {url}: {reason}")
            return VerificationResult(url=url, valid=False, error=reason)

        headers = {"User-Agent": USER_AGENT}

        try:
            response = await self._request(client, "HEAD", url, headers, timeout)
        except UrlSecurityError as e:
            logger.warning(f"Redirect from {url} rejected: {e.reason}")
            return VerificationResult(url=url, valid=False, error=e.reason)
        except httpx.TooManyRedirects:
            return VerificationResult(url=url, valid=False, error="Too many redirects")
        except httpx.TimeoutException:
            return VerificationResult(url=url, valid=False, error="Request timeout")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return VerificationResult(url=url, valid=False, error=str(e) or type(e).__name__)

        if not response.is_success:
            return VerificationResult(
                url=url,
                valid=False,
                status=response.status_code,
                error=f"HTTP {response.status_code}",
            )

        result = VerificationResult(url=url, valid=True, status=response.status_code)

        if verify_content:
            title, preview = await self._fetch_content(client, url, headers, timeout)
            result = result.model_copy(update={"title": title, "content_preview": preview})

        return result

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: dict,
        timeout: float,
    ) -> httpx.Response:
        """
        Send a request, following up to MAX_REDIRECTS hops.

        Raises:
            UrlSecurityError: if a redirect points at an unsafe URL
            httpx.TooManyRedirects: if the hop limit is exceeded
        """
        for _ in range(MAX_REDIRECTS + 1):
            response = await client.request(
                method,
                url,
                headers=headers,
                timeout=httpx.Timeout(timeout),
                follow_redirects=False,
            )
            location = response.headers.get("Location")
            if not response.is_redirect or not location:
                return response

            url = str(response.url.join(location))
            safe, reason = is_safe_url(url)
            if not safe:
                raise UrlSecurityError(f"Redirect to unsafe URL blocked: {reason}")

        raise httpx.TooManyRedirects(f"Exceeded {MAX_REDIRECTS} redirects", request=response.request)

    async def _fetch_content(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict,
        timeout: float,
    ) -> tuple[Optional[str], Optional[str]]:
        """Title and text preview of the page; (None, None) if the GET fails."""
        try:
            response = await self._request(client, "GET", url, headers, timeout)
            response.raise_for_status()
        except (UrlSecurityError, httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Content fetch failed for {url}: {e}")
            return None, None

        page = response.text
        preview = truncate(strip_html(page), PREVIEW_MAX_CHARS)
        return extract_title(page), preview or None


def annotate_sources(
    sources: Iterable[ResearchSource],
    results: Iterable[VerificationResult],
) -> list[ResearchSource]:
    """Copy verification outcomes onto sources by URL."""
    by_url = {r.url: r for r in results}
    annotated = []
    for source in sources:
        result = by_url.get(source.url)
        if result is None:
            annotated.append(source)
            continue
        annotated.append(source.model_copy(update={
            "verified": result.valid,
            "verification_error": None if result.valid else result.error,
        }))
    return annotated


def filter_valid_urls(results: Iterable[VerificationResult]) -> list[str]:
    return [r.url for r in results if r.valid]


def verification_stats(results: list[VerificationResult]) -> dict:
    """Totals plus invalid results grouped by the error text before the first colon."""
    total = len(results)
    valid = sum(1 for r in results if r.valid)

    error_breakdown: dict[str, int] = {}
    for r in results:
        if r.valid:
            continue
        key = (r.error or "Unknown").split(":")[0].strip() or "Unknown"
        error_breakdown[key] = error_breakdown.get(key, 0) + 1

    return {
        "total": total,
        "valid": valid,
        "invalid": total - valid,
        "valid_percent": round(valid / total * 100) if total else 0,
        "error_breakdown": error_breakdown,
    }
