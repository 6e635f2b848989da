"""Feed and article retrieval with per-domain pacing and stealth profiles."""

import asyncio
from typing import Optional

import httpx

from newsdesk.adapters.feeds import parse_feed
from newsdesk.adapters.fetch.profiles import (
    error_page,
    host_of,
    matching_domain,
    protected_headers,
    standard_headers,
)
from newsdesk.adapters.fetch.rate_limiter import DomainRateLimiter
from newsdesk.config import FetcherConfig
from newsdesk.core import FeedParseError, ParsedFeed
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

BLOCKED_STATUS_CODES = (403, 429)


class RateLimitedFetcher:
    """Fetch feed documents and article pages.

    Article requests are paced per domain. Hosts on the protected list get a
    full browser header profile, a cookie-keeping client, longer delays and
    one warm-up retry when blocked. ``fetch_article`` never raises: failures
    come back as a synthetic HTML page explaining what went wrong.
    """

    def __init__(
        self,
        config: Optional[FetcherConfig] = None,
        rate_limiter: Optional[DomainRateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or FetcherConfig()
        self.rate_limiter = rate_limiter or DomainRateLimiter(
            min_spacing=self.config.min_domain_spacing,
            jitter=self.config.pacing_jitter,
        )
        self._transport = transport
        self._protected_client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "RateLimitedFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the long-lived client used for protected domains."""
        if self._protected_client is not None:
            await self._protected_client.aclose()
            self._protected_client = None

    def is_protected(self, url: str) -> bool:
        return matching_domain(host_of(url), self.config.protected_domains) is not None

    async def fetch_feeds(self, urls: list[str]) -> list[ParsedFeed]:
        """Fetch and parse all feeds concurrently.

        Unreachable or malformed feeds are left out of the result.
        """
        if not urls:
            return []

        async with httpx.AsyncClient(
            timeout=self.config.feed_timeout,
            follow_redirects=True,
            headers={"User-Agent": self.config.feed_user_agent},
            transport=self._transport,
        ) as client:
            results = await asyncio.gather(*(self._fetch_feed(client, url) for url in urls))

        feeds = [feed for feed in results if feed is not None]
        logger.info("Fetched feeds", requested=len(urls), loaded=len(feeds))
        return feeds

    async def _fetch_feed(self, client: httpx.AsyncClient, url: str) -> Optional[ParsedFeed]:
        try:
            response = await client.get(url)
            response.raise_for_status()
            return parse_feed(response.content, source_url=url)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, FeedParseError) as e:
            logger.warning("Failed to load feed", url=url, error=str(e) or type(e).__name__)
            return None

    async def fetch_article(self, url: str) -> str:
        """Fetch article HTML; a failure yields a synthetic error page."""
        try:
            # urlsplit raises ValueError on malformed hosts
            domain = host_of(url)
            protected = self.is_protected(url)
            delay_bounds = self.config.protected_delay if protected else self.config.standard_delay

            await self.rate_limiter.acquire(domain, self.rate_limiter.random_delay(delay_bounds))

            if protected:
                response = await self._get_protected(url)
                if response.status_code in BLOCKED_STATUS_CODES:
                    logger.info("Blocked by protected site, warming up", url=url, status=response.status_code)
                    async with self.rate_limiter.exclusive(domain):
                        response = await self._recover(url, domain)
            else:
                response = await self._get_standard(url)

            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Article request rejected", url=url, status=e.response.status_code)
            return error_page(url, f"HTTP {e.response.status_code} {e.response.reason_phrase}".strip())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("Article request failed", url=url, error=str(e) or type(e).__name__)
            return error_page(url, str(e) or type(e).__name__)

        if not response.text.strip():
            return error_page(url, "empty response")
        return response.text

    async def fetch_image(self, url: str) -> Optional[bytes]:
        """Download an image; None on any failure."""
        try:
            async with httpx.AsyncClient(
                timeout=self.config.standard_timeout,
                follow_redirects=True,
                headers=standard_headers(),
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.debug("Failed to load image", url=url, error=str(e))
            return None

    async def _get_standard(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.config.standard_timeout,
            follow_redirects=True,
            headers=standard_headers(),
            transport=self._transport,
        ) as client:
            return await client.get(url)

    async def _get_protected(self, url: str, referer: Optional[str] = None) -> httpx.Response:
        client = self._get_protected_client()
        headers = protected_headers(referer) if referer else protected_headers()
        if referer:
            headers["Sec-Fetch-Site"] = "same-origin"
        return await client.get(url, headers=headers)

    async def _recover(self, url: str, domain: str) -> httpx.Response:
        """Visit the landing page for cookies, then retry once with it as referer.

        Must run while holding ``domain`` on the rate limiter, so no other
        request to the domain can be sent between the two recovery requests.
        """
        site = matching_domain(domain, self.config.protected_domains) or domain
        landing_page = self.config.landing_pages.get(site) or f"https://{domain}/"

        await self.rate_limiter.wait_turn(domain)
        self.rate_limiter.touch(domain)
        await self._get_protected(landing_page)
        await self.rate_limiter.sleep(self.rate_limiter.random_delay(self.config.recovery_delay))

        self.rate_limiter.touch(domain)
        return await self._get_protected(url, referer=landing_page)

    def _get_protected_client(self) -> httpx.AsyncClient:
        # One client per fetcher so cookies persist across protected requests
        if self._protected_client is None:
            self._protected_client = httpx.AsyncClient(
                timeout=self.config.protected_timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._protected_client
