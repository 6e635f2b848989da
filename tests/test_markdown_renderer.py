"""Tests for markdown rendering."""

from newsdesk.adapters.render import MarkdownArticleRenderer
from newsdesk.config import FormattingConfig
from newsdesk.core import ArticleDocument, ContentBlock, FeedItem, ParsedFeed, UnreadCounts


def make_document() -> ArticleDocument:
    return ArticleDocument(
        headline="NAVI beat FaZe",
        author="Alice & Bob",
        published_date="1/3/2025",
        source_url="https://www.hltv.org/news/1/x",
        blocks=[
            ContentBlock.paragraph("Lead", role="lead"),
            ContentBlock.image("https://img.test/a.jpg", "Caption"),
            ContentBlock.heading("Match Results"),
            ContentBlock.table("IEM", [["NAVI", "2 - 1", "FaZe"], ["13", "Mirage"]]),
            ContentBlock.paragraph("Body text."),
        ],
    )


def test_render_article_layout() -> None:
    renderer = MarkdownArticleRenderer()
    document = make_document()
    document.summary.resolve("AI Summary (Model: m, Time: 1ms, Words: 2→1 (50.0% reduction))\nKurz.")

    text = renderer.render_article(document)

    assert text.startswith("# NAVI beat FaZe\n")
    assert "*Alice & Bob | 1/3/2025*" in text
    assert "> Kurz." in text
    assert "**Lead**" in text
    assert "![Caption](https://img.test/a.jpg)" in text
    assert "### Match Results" in text
    assert "| NAVI | 2 - 1 | FaZe |" in text
    assert "| 13 | Mirage |  |" in text
    assert text.index("Lead") < text.index("Body text.")


def test_render_article_pending_summary() -> None:
    renderer = MarkdownArticleRenderer()
    document = make_document()
    document.summary.advance_tick()

    assert "> Loading summary." in renderer.render_article(document)


def test_render_article_wraps_paragraphs() -> None:
    renderer = MarkdownArticleRenderer(FormattingConfig(line_width=20))
    document = ArticleDocument(
        headline="H",
        author="A",
        published_date="D",
        blocks=[ContentBlock.paragraph("word " * 20)],
    )

    body = renderer.render_article(document).split("\n")
    assert all(len(line) <= 20 for line in body if line.startswith("word"))


def test_render_feed_list_marks_opened_items() -> None:
    feed = ParsedFeed(
        source_url="https://taz.de/rss",
        title="taz",
        link="https://taz.de/",
        pub_date="today",
        items=[FeedItem(link="https://taz.de/!1/", title="Eins"), FeedItem(link="https://taz.de/!2/", title="Zwei")],
    )
    counts = {"https://taz.de/rss": UnreadCounts(total=2, unread=1, new=1)}

    text = MarkdownArticleRenderer().render_feed_list([feed], counts, {"https://taz.de/!1/"})

    assert "## taz (1 unread, +1 new)" in text
    assert "- [x] [Eins](https://taz.de/!1/)" in text
    assert "- [ ] [Zwei](https://taz.de/!2/)" in text


def test_render_feed_list_hides_opened_items() -> None:
    feed = ParsedFeed(
        source_url="https://taz.de/rss",
        title="taz",
        link="https://taz.de/",
        pub_date="today",
        items=[FeedItem(link="https://taz.de/!1/", title="Eins")],
    )
    renderer = MarkdownArticleRenderer(FormattingConfig(show_opened_articles=False))

    text = renderer.render_feed_list([feed], opened={"https://taz.de/!1/"})

    assert "Eins" not in text


def test_render_empty_feed_list() -> None:
    assert MarkdownArticleRenderer().render_feed_list([]) == "No feeds could be loaded.\n"


def test_format_counts_without_new() -> None:
    assert MarkdownArticleRenderer.format_counts(UnreadCounts(total=5, unread=3, new=0)) == "3 unread"
