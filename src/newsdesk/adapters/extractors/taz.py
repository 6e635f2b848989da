"""taz.de article adapter."""

import re

from bs4 import BeautifulSoup

from newsdesk.adapters.extractors.base import (
    NO_AUTHOR,
    NO_HEADLINE,
    BaseExtractor,
    node_text,
    paragraph_blocks,
    select_text,
)
from newsdesk.core import ArticleDocument, ContentBlock, FeedItem


class TazExtractor(BaseExtractor):
    """taz marks up its body as one corpus element; paragraphs are separated by whitespace runs."""

    name = "taz"

    def parse(self, soup: BeautifulSoup, item: FeedItem) -> ArticleDocument:
        headline = select_text(soup, "h2", NO_HEADLINE)
        author = select_text(soup, ".author-name-wrapper", NO_AUTHOR)

        corpus = node_text(soup.select_one(".main-article-corpus"))
        paragraphs = [line.strip() for line in re.split(r"\s{2,}", corpus) if line.strip()]

        blocks: list[ContentBlock] = []
        if item.image_url:
            blocks.append(ContentBlock.image(item.image_url))
        blocks.extend(paragraph_blocks(paragraphs))

        return ArticleDocument(
            headline=headline,
            author=author,
            published_date=item.pub_date,
            blocks=blocks,
            image_url=item.image_url,
            body_text="\n".join(paragraphs),
        )
