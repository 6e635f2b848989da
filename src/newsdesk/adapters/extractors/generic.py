"""Fallback adapter for sites without a dedicated extractor."""

from bs4 import BeautifulSoup

from newsdesk.adapters.extractors.base import (
    NO_AUTHOR,
    NO_HEADLINE,
    BaseExtractor,
    collapse_whitespace,
    node_text,
)
from newsdesk.core import ArticleDocument, ContentBlock, FeedItem


def _meta(soup: BeautifulSoup, *keys: str) -> str:
    for key in keys:
        tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
        if tag is not None and tag.get("content"):
            return tag["content"].strip()
    return ""


class GenericExtractor(BaseExtractor):
    """Heuristic extraction from common markup and OpenGraph metadata."""

    name = "generic"

    def parse(self, soup: BeautifulSoup, item: FeedItem) -> ArticleDocument:
        headline = (
            node_text(soup.find("h1"))
            or _meta(soup, "og:title")
            or item.title
            or NO_HEADLINE
        )
        author = _meta(soup, "author", "article:author") or NO_AUTHOR

        time_node = soup.find("time")
        published = ""
        if time_node is not None:
            published = time_node.get("datetime") or node_text(time_node)
        published = published or _meta(soup, "article:published_time") or item.pub_date

        image_url = _meta(soup, "og:image") or item.image_url

        container = soup.find("article") or soup.find("main") or soup.body or soup
        blocks: list[ContentBlock] = []
        body_lines: list[str] = []
        for node in container.find_all(["h2", "h3", "p"]):
            text = collapse_whitespace(node.get_text())
            if not text:
                continue
            body_lines.append(text)
            if node.name == "p":
                blocks.append(ContentBlock.paragraph(text))
            else:
                blocks.append(ContentBlock.heading(text))

        if image_url:
            blocks.insert(0, ContentBlock.image(image_url))

        return ArticleDocument(
            headline=headline,
            author=author,
            published_date=published,
            blocks=blocks,
            image_url=image_url,
            body_text="\n".join(body_lines),
        )
