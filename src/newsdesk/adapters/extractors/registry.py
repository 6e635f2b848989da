"""Domain-based dispatch of article HTML to site adapters."""

from typing import Callable, Optional

from newsdesk.adapters.extractors.base import NO_AUTHOR, NO_HEADLINE
from newsdesk.adapters.extractors.generic import GenericExtractor
from newsdesk.adapters.extractors.hltv import HLTVExtractor
from newsdesk.adapters.extractors.spiegel import SpiegelExtractor
from newsdesk.adapters.extractors.tagesschau import TagesschauExtractor
from newsdesk.adapters.extractors.taz import TazExtractor
from newsdesk.adapters.summary import SummaryEnricher
from newsdesk.core import ArticleDocument, ArticleExtractor, ContentBlock, FeedItem
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

UrlPredicate = Callable[[str], bool]
Rule = tuple[UrlPredicate, ArticleExtractor]

PARSE_ERROR_SUMMARY = "No content available for summary."


def domain_match(fragment: str) -> UrlPredicate:
    """Predicate matching URLs that contain ``fragment`` (case-insensitive)."""
    needle = fragment.lower()

    def predicate(url: str) -> bool:
        return needle in url.lower()

    predicate.__name__ = f"domain_match({fragment!r})"
    return predicate


class ExtractorRegistry:
    """Ordered list of (predicate, adapter) rules with a fallback adapter.

    The first rule whose predicate accepts the article URL wins. Selection
    depends on the URL only.
    """

    def __init__(
        self,
        rules: Optional[list[Rule]] = None,
        fallback: Optional[ArticleExtractor] = None,
        enricher: Optional[SummaryEnricher] = None,
    ) -> None:
        self.rules: list[Rule] = list(rules or [])
        self.fallback = fallback or GenericExtractor()
        self.enricher = enricher

    @classmethod
    def default(cls, enricher: Optional[SummaryEnricher] = None) -> "ExtractorRegistry":
        return cls(
            rules=[
                (domain_match("taz.de"), TazExtractor()),
                (domain_match("tagesschau.de"), TagesschauExtractor()),
                (domain_match("hltv.org"), HLTVExtractor()),
                (domain_match("spiegel.de"), SpiegelExtractor()),
            ],
            fallback=GenericExtractor(),
            enricher=enricher,
        )

    def register(self, fragment: str, extractor: ArticleExtractor) -> None:
        """Append a rule for URLs containing ``fragment``."""
        self.rules.append((domain_match(fragment), extractor))

    def select(self, url: str) -> ArticleExtractor:
        for predicate, extractor in self.rules:
            if predicate(url):
                return extractor
        return self.fallback

    def extract(self, html: str, item: FeedItem) -> ArticleDocument:
        """Turn article HTML into a document; never raises.

        With an enricher configured, summarization is started in the
        background and the document is returned right away.
        """
        extractor = self.select(item.link)
        try:
            document = extractor.extract(html, item)
        except Exception as e:
            logger.exception("Extractor failed", extractor=extractor.name, url=item.link)
            document = ArticleDocument(
                headline=item.title or NO_HEADLINE,
                author=NO_AUTHOR,
                published_date=item.pub_date,
                blocks=[ContentBlock.paragraph(f"Error parsing article: {e}", role="error")],
                source_url=item.link,
                image_url=item.image_url,
                extractor=extractor.name,
            )
            document.summary.fail(PARSE_ERROR_SUMMARY)

        if self.enricher is not None:
            self.enricher.attach(document)
        return document
