"""Business logic use cases."""

import asyncio
from typing import Optional

from newsdesk.adapters.extractors import ExtractorRegistry
from newsdesk.adapters.fetch import RateLimitedFetcher
from newsdesk.core import ArticleDocument, FeedItem, ParsedFeed, ReadHistoryStore, UnreadCounts
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)


class ReaderService:
    """Service tying fetching, extraction and read history together."""

    def __init__(
        self,
        fetcher: RateLimitedFetcher,
        registry: ExtractorRegistry,
        history: ReadHistoryStore,
        feed_urls: Optional[list[str]] = None,
    ) -> None:
        self.fetcher = fetcher
        self.registry = registry
        self.history = history
        self.feed_urls = list(feed_urls or [])

    async def load_feeds(self, urls: Optional[list[str]] = None) -> list[ParsedFeed]:
        """Fetch all configured feeds; unreachable feeds are skipped."""
        return await self.fetcher.fetch_feeds(list(urls) if urls is not None else self.feed_urls)

    def unread_counts(self, feed: ParsedFeed) -> UnreadCounts:
        """Count unread and new items of a feed, then mark all of them displayed.

        An item is unread until it is opened and new only the first time it is
        counted.
        """
        links = [item.link for item in feed.items]
        unread = [link for link in links if not self.history.is_opened(link)]
        new = [link for link in unread if not self.history.has_been_displayed(link)]

        self.history.mark_displayed_batch(links)
        return UnreadCounts(total=len(links), unread=len(unread), new=len(new))

    def counts_by_feed(self, feeds: list[ParsedFeed]) -> dict[str, UnreadCounts]:
        return {feed.source_url: self.unread_counts(feed) for feed in feeds}

    async def open_article(self, item: FeedItem) -> ArticleDocument:
        """Fetch, extract and record an article as opened.

        Summary enrichment, when configured on the registry, continues in the
        background after this returns.
        """
        html = await self.fetcher.fetch_article(item.link)
        document = self.registry.extract(html, item)
        # Writes the history file; kept off the event loop
        await asyncio.to_thread(self.history.mark_opened, item.link)
        logger.info("Opened article", url=item.link, extractor=document.extractor)
        return document

    async def load_image(self, item: FeedItem) -> Optional[bytes]:
        """Download an item's thumbnail once and cache it on the item."""
        if item.loaded_image is not None or not item.image_url:
            return item.loaded_image
        item.loaded_image = await self.fetcher.fetch_image(item.image_url)
        return item.loaded_image

    async def load_images(self, feed: ParsedFeed) -> int:
        """Load thumbnails of all items in a feed concurrently."""
        images = await asyncio.gather(*(self.load_image(item) for item in feed.items))
        return sum(1 for image in images if image is not None)

    def find_item(self, feeds: list[ParsedFeed], url: str) -> Optional[FeedItem]:
        for feed in feeds:
            for item in feed.items:
                if item.link == url:
                    return item
        return None
