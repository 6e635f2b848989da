"""Shared extraction machinery for site adapters."""

import re
from abc import abstractmethod
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from newsdesk.adapters.fetch.profiles import FETCH_ERROR_MARKER
from newsdesk.core import ArticleDocument, ArticleExtractor, ContentBlock, FeedItem

NO_HEADLINE = "No headline found"
NO_AUTHOR = "No author found"
NO_DATE = "No date found"
NO_CONTENT = "No main content found"
FETCH_FAILED_SUMMARY = "No content available for summary."

_WHITESPACE_RUN = re.compile(r"\s{2,}")


def node_text(node: Optional[Tag]) -> str:
    """Stripped text of ``node``, empty for None."""
    if node is None:
        return ""
    return node.get_text().strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def select_text(soup: BeautifulSoup | Tag, selector: str, default: str = "") -> str:
    """Text of the first match of a CSS selector, or ``default``."""
    return node_text(soup.select_one(selector)) or default


def image_source(img: Optional[Tag]) -> str:
    """``src`` of an image, falling back to the lazy-loading ``data-src``."""
    if img is None:
        return ""
    return (img.get("src") or img.get("data-src") or "").strip()


def paragraph_blocks(texts: Iterable[str]) -> list[ContentBlock]:
    return [ContentBlock.paragraph(text) for text in texts if text]


def is_fetch_error_page(soup: BeautifulSoup) -> bool:
    return soup.find("meta", attrs={"name": FETCH_ERROR_MARKER}) is not None


def fetch_error_document(soup: BeautifulSoup, item: FeedItem, extractor: str) -> ArticleDocument:
    """Degraded document for a synthetic fetch-error page."""
    message = node_text(soup.find("p", class_="fetch-error")) or "The article could not be loaded."
    document = ArticleDocument(
        headline=item.title or "Article unavailable",
        author=NO_AUTHOR,
        published_date=item.pub_date,
        blocks=[ContentBlock.paragraph(message, role="error")],
        source_url=item.link,
        image_url=item.image_url,
        extractor=extractor,
    )
    document.summary.fail(FETCH_FAILED_SUMMARY)
    return document


class BaseExtractor(ArticleExtractor):
    """Template for site adapters.

    Subclasses implement ``parse``; this class handles fetch-error pages and
    guarantees the document carries at least one body block.
    """

    name = "base"
    missing_body_message = NO_CONTENT

    def extract(self, html: str, item: FeedItem) -> ArticleDocument:
        soup = BeautifulSoup(html or "", "html.parser")
        if is_fetch_error_page(soup):
            return fetch_error_document(soup, item, self.name)

        document = self.parse(soup, item)
        document.source_url = document.source_url or item.link
        document.extractor = self.name
        if not document.has_body:
            document.blocks.append(ContentBlock.paragraph(self.missing_body_message, role="notice"))
        return document

    @abstractmethod
    def parse(self, soup: BeautifulSoup, item: FeedItem) -> ArticleDocument:
        """Build the document from parsed HTML."""
        pass
