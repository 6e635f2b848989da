"""Tests for RSS and Atom feed parsing."""

import pytest

from newsdesk.adapters.feeds import parse_feed
from newsdesk.core import FeedParseError

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>tagesschau.de - Inland</title>
    <link>https://www.tagesschau.de/inland</link>
    <pubDate>Sat, 01 Mar 2025 10:00:00 +0100</pubDate>
    <item>
      <title>Bundestag beschliesst Haushalt</title>
      <link>https://www.tagesschau.de/inland/haushalt-100.html</link>
      <pubDate>Sat, 01 Mar 2025 09:30:00 +0100</pubDate>
      <content:encoded><![CDATA[<p><img src="https://images.tagesschau.de/a.jpg" alt=""/>Text</p>]]></content:encoded>
    </item>
    <item>
      <title>Nur GUID</title>
      <guid>https://www.tagesschau.de/inland/guid-only-100.html</guid>
      <media:thumbnail url="https://images.tagesschau.de/thumb.jpg"/>
    </item>
    <item>
      <title>Mit Enclosure</title>
      <link>https://www.tagesschau.de/inland/enclosure-100.html</link>
      <enclosure url="https://images.tagesschau.de/enc.jpg" type="image/jpeg" length="1"/>
    </item>
    <item>
      <title>Ohne Link</title>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <link href="https://atom.test/" rel="alternate"/>
  <link href="https://atom.test/feed" rel="self"/>
  <updated>2025-03-01T10:00:00Z</updated>
  <entry>
    <title>First entry</title>
    <link href="https://atom.test/posts/1"/>
    <id>urn:uuid:1</id>
    <published>2025-03-01T09:00:00Z</published>
  </entry>
  <entry>
    <title>Entry with id only</title>
    <id>https://atom.test/posts/2</id>
    <updated>2025-03-01T08:00:00Z</updated>
  </entry>
</feed>
"""


def test_parse_rss_channel_metadata() -> None:
    feed = parse_feed(RSS_FEED.encode("utf-8"), source_url="https://www.tagesschau.de/inland/index~rss2.xml")

    assert feed.title == "tagesschau.de - Inland"
    assert feed.link == "https://www.tagesschau.de/inland"
    assert feed.pub_date == "Sat, 01 Mar 2025 10:00:00 +0100"
    assert feed.source_url == "https://www.tagesschau.de/inland/index~rss2.xml"


def test_parse_rss_items() -> None:
    feed = parse_feed(RSS_FEED.encode("utf-8"))

    # The entry without link or guid is dropped
    assert [item.title for item in feed.items] == ["Bundestag beschliesst Haushalt", "Nur GUID", "Mit Enclosure"]

    first, guid_only, enclosure = feed.items
    assert first.link == "https://www.tagesschau.de/inland/haushalt-100.html"
    assert first.image_url == "https://images.tagesschau.de/a.jpg"
    assert first.pub_date == "Sat, 01 Mar 2025 09:30:00 +0100"

    assert guid_only.link == "https://www.tagesschau.de/inland/guid-only-100.html"
    assert guid_only.image_url == "https://images.tagesschau.de/thumb.jpg"
    assert guid_only.pub_date == "No date available"

    assert enclosure.image_url == "https://images.tagesschau.de/enc.jpg"


def test_parse_rss_without_channel_metadata() -> None:
    feed = parse_feed("<rss><channel><item><link>https://a.test/1</link></item></channel></rss>", "https://a.test/rss")

    assert feed.title == "No title"
    assert feed.link == "https://a.test/rss"
    assert feed.pub_date == "No pubDate"
    assert len(feed.items) == 1


def test_parse_atom_feed() -> None:
    feed = parse_feed(ATOM_FEED.encode("utf-8"), source_url="https://atom.test/feed")

    assert feed.title == "Example Atom"
    assert feed.link == "https://atom.test/"
    assert [item.link for item in feed.items] == ["https://atom.test/posts/1", "https://atom.test/posts/2"]
    assert feed.items[0].pub_date == "2025-03-01T09:00:00Z"
    assert feed.items[1].pub_date == "2025-03-01T08:00:00Z"


def test_malformed_xml_raises() -> None:
    with pytest.raises(FeedParseError):
        parse_feed(b"<rss><channel><item>")


def test_unsupported_document_raises() -> None:
    with pytest.raises(FeedParseError, match="Unsupported"):
        parse_feed("<html><body>Not a feed</body></html>")
