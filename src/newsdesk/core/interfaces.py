"""Core interfaces for adapters."""

from abc import ABC, abstractmethod

from newsdesk.core.entities import ArticleDocument, FeedItem


class ArticleExtractor(ABC):
    """Interface for site-specific article extraction."""

    name: str = "extractor"

    @abstractmethod
    def extract(self, html: str, item: FeedItem) -> ArticleDocument:
        """Parse raw article HTML plus feed metadata into a document."""
        pass


class Summarizer(ABC):
    """Interface for generative summarization."""

    @abstractmethod
    async def summarize(self, body_text: str) -> str:
        """Summarize article text."""
        pass
