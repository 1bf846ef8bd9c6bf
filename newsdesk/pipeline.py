"""
Service wiring - builds the fetcher, verifier, router, orchestrator and
digest builder from Settings.

Usage:
    newsdesk = create_newsdesk()
    report = await newsdesk.orchestrator.standard_research("quantum computing")
    digest = await newsdesk.digest_builder(profile).build_digest()
"""

import logging
from typing import Optional

import httpx

from .aggregation.feed_fetcher import FeedFetcher
from .config.feeds import load_feed_config
from .config.settings import Settings, get_settings
from .llm.router import ModelRouter
from .models.digest import InterestProfile
from .research.research_orchestrator import ResearchOrchestrator
from .research.url_verifier import UrlVerifier
from .synthesis.news_digest import NewsDigestBuilder
from .utils.cache import FileCache
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)


class Newsdesk:
    """Explicitly constructed services sharing one configuration."""

    def __init__(
        self,
        settings: Settings,
        fetcher: FeedFetcher,
        verifier: UrlVerifier,
        router: ModelRouter,
    ):
        self.settings = settings
        self.fetcher = fetcher
        self.verifier = verifier
        self.router = router
        self.orchestrator = ResearchOrchestrator(router, verifier)

    def digest_builder(self, profile: Optional[InterestProfile] = None) -> NewsDigestBuilder:
        return NewsDigestBuilder(self.fetcher, profile=profile, router=self.router)


def create_newsdesk(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
    setup_logging: bool = True,
) -> Newsdesk:
    """
    Build all services from settings (environment + .env when omitted).

    Providers without a credential are registered but unavailable; the
    first completion raises ProviderUnavailableError if none is set.
    """
    settings = settings or get_settings()

    if setup_logging:
        configure_logging(settings.log_level, settings.log_file)

    fetcher = FeedFetcher(
        config=load_feed_config(settings.feeds_path),
        client=client,
        cache=FileCache(settings.cache_dir),
        cache_ttl_seconds=settings.feed_cache_ttl_seconds,
    )
    verifier = UrlVerifier(
        client=client,
        timeout=settings.verify_timeout_seconds,
        concurrency=settings.verify_concurrency,
    )
    router = ModelRouter.from_settings(settings, client=client)

    available = router.available_models()
    if available:
        logger.info(f"Models available: {', '.join(available)}")
    else:
        logger.warning("No model credentials configured; research and highlights will fail")

    return Newsdesk(settings, fetcher, verifier, router)
