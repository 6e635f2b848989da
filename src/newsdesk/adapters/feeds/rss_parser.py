"""RSS 2.0 and Atom feed parsing."""

from typing import Optional
from xml.etree import ElementTree as ET

from bs4 import BeautifulSoup

from newsdesk.core import FeedItem, FeedParseError, ParsedFeed
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

ATOM = "{http://www.w3.org/2005/Atom}"
CONTENT_ENCODED = "{http://purl.org/rss/1.0/modules/content/}encoded"
MEDIA = "{http://search.yahoo.com/mrss/}"


def parse_feed(xml_content: bytes | str, source_url: str = "") -> ParsedFeed:
    """Parse an RSS 2.0 or Atom document.

    Args:
        xml_content: Raw feed document
        source_url: URL the document was fetched from, used when the channel
            carries no link of its own

    Raises:
        FeedParseError: If the document is not well-formed XML or not a feed
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise FeedParseError(f"Malformed feed XML: {e}") from e

    if root.tag == f"{ATOM}feed":
        return _parse_atom(root, source_url)

    channel = root.find("channel")
    if root.tag != "rss" and channel is None:
        raise FeedParseError(f"Unsupported feed root element: {root.tag}")

    if channel is None:
        feed = ParsedFeed(source_url=source_url, title="Unknown Feed", link=source_url, pub_date="Unknown date")
    else:
        feed = ParsedFeed(
            source_url=source_url,
            title=_text(channel, "title") or "No title",
            link=_text(channel, "link") or source_url,
            pub_date=_text(channel, "pubDate") or "No pubDate",
        )

    for item in root.iter("item"):
        try:
            feed_item = _parse_rss_item(item)
        except ValueError:
            logger.debug("Skipping feed entry without link", source=source_url)
            continue
        feed.items.append(feed_item)

    return feed


def _parse_rss_item(item: ET.Element) -> FeedItem:
    link = _text(item, "link") or _text(item, "guid")
    image_url = (
        _image_from_html(_text(item, CONTENT_ENCODED))
        or _attr(item.find(f"{MEDIA}content"), "url")
        or _attr(item.find(f"{MEDIA}thumbnail"), "url")
        or _image_enclosure(item)
    )
    return FeedItem(
        link=link,
        title=_text(item, "title"),
        image_url=image_url,
        pub_date=_text(item, "pubDate") or "No date available",
    )


def _parse_atom(root: ET.Element, source_url: str) -> ParsedFeed:
    feed = ParsedFeed(
        source_url=source_url,
        title=_text(root, f"{ATOM}title") or "No title",
        link=_atom_link(root) or source_url,
        pub_date=_text(root, f"{ATOM}updated") or "No pubDate",
    )

    for entry in root.findall(f"{ATOM}entry"):
        link = _atom_link(entry) or _text(entry, f"{ATOM}id")
        if not link:
            continue
        image_url = (
            _image_from_html(_text(entry, f"{ATOM}content"))
            or _attr(entry.find(f"{MEDIA}thumbnail"), "url")
        )
        feed.items.append(FeedItem(
            link=link,
            title=_text(entry, f"{ATOM}title"),
            image_url=image_url,
            pub_date=(
                _text(entry, f"{ATOM}published")
                or _text(entry, f"{ATOM}updated")
                or "No date available"
            ),
        ))

    return feed


def _text(element: Optional[ET.Element], tag: str) -> str:
    if element is None:
        return ""
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _attr(element: Optional[ET.Element], name: str) -> Optional[str]:
    if element is None:
        return None
    return element.get(name) or None


def _atom_link(element: ET.Element) -> str:
    for link in element.findall(f"{ATOM}link"):
        if link.get("rel", "alternate") == "alternate" and link.get("href"):
            return link.get("href", "").strip()
    return ""


def _image_enclosure(item: ET.Element) -> Optional[str]:
    for enclosure in item.findall("enclosure"):
        if enclosure.get("type", "").startswith("image/") and enclosure.get("url"):
            return enclosure.get("url")
    return None


def _image_from_html(fragment: str) -> Optional[str]:
    """First ``<img src>`` of an embedded HTML fragment."""
    if not fragment or "<img" not in fragment:
        return None
    img = BeautifulSoup(fragment, "html.parser").find("img", src=True)
    return img["src"] if img else None
