"""spiegel.de article adapter."""

from bs4 import BeautifulSoup

from newsdesk.adapters.extractors.base import NO_HEADLINE, BaseExtractor, image_source, node_text, select_text
from newsdesk.core import ArticleDocument, ContentBlock, FeedItem

UNKNOWN_AUTHOR = "Unknown author"


class SpiegelExtractor(BaseExtractor):
    name = "spiegel"

    def parse(self, soup: BeautifulSoup, item: FeedItem) -> ArticleDocument:
        headline = select_text(soup, "span.font-extrabold", item.title or NO_HEADLINE)
        kicker = select_text(soup, "span.font-bold")
        lead = select_text(soup, "div.RichText--sans")

        authors = [node_text(a) for a in soup.select("a[href*='/impressum/autor']")]
        authors = list(dict.fromkeys(a for a in authors if a))
        author = ", ".join(authors) if authors else UNKNOWN_AUTHOR

        published = select_text(soup, "time", item.pub_date)

        img = soup.select_one("picture img") or soup.select_one("img.spgfx-aiImg")
        image_url = image_source(img) or item.image_url

        # Nested RichText containers repeat their paragraphs
        texts = (node_text(p) for p in soup.select("section[class*='RichText'] p, div[class*='RichText'] p"))
        paragraphs = [text for text in dict.fromkeys(texts) if text and text != lead]

        blocks: list[ContentBlock] = []
        if kicker:
            blocks.append(ContentBlock.paragraph(kicker, role="kicker"))
        if lead:
            blocks.append(ContentBlock.paragraph(lead, role="lead"))
        if image_url:
            blocks.append(ContentBlock.image(image_url))
        blocks.extend(ContentBlock.paragraph(p) for p in paragraphs)

        return ArticleDocument(
            headline=headline,
            author=author,
            published_date=published,
            blocks=blocks,
            image_url=image_url,
            # Paywalled articles only expose the lead
            body_text="\n".join(paragraphs) or lead,
        )
