"""tagesschau.de article adapter."""

from bs4 import BeautifulSoup

from newsdesk.adapters.extractors.base import NO_AUTHOR, NO_DATE, NO_HEADLINE, BaseExtractor, node_text, select_text
from newsdesk.core import ArticleDocument, ContentBlock, FeedItem


class TagesschauExtractor(BaseExtractor):
    name = "tagesschau"

    def parse(self, soup: BeautifulSoup, item: FeedItem) -> ArticleDocument:
        headline = select_text(soup, "h1.seitenkopf__headline", NO_HEADLINE)
        published = select_text(soup, "p.metatextline", NO_DATE)

        blocks: list[ContentBlock] = []
        if item.image_url:
            blocks.append(ContentBlock.image(item.image_url))

        # Subheadings and text paragraphs in document order
        body_lines: list[str] = []
        for node in soup.select("h2, p.textabsatz"):
            text = node_text(node)
            if not text:
                continue
            body_lines.append(text)
            if node.name == "h2":
                blocks.append(ContentBlock.heading(text))
            else:
                blocks.append(ContentBlock.paragraph(text))

        return ArticleDocument(
            headline=headline,
            author=NO_AUTHOR,
            published_date=published,
            blocks=blocks,
            image_url=item.image_url,
            body_text="\n".join(body_lines),
        )
