"""Markdown rendering of feeds and articles for the terminal."""

import textwrap
from typing import Optional

from newsdesk.config import FormattingConfig
from newsdesk.core import ArticleDocument, BlockKind, ContentBlock, ParsedFeed, UnreadCounts


class MarkdownArticleRenderer:
    """Render documents and feed listings as markdown."""

    def __init__(self, formatting: Optional[FormattingConfig] = None) -> None:
        self.formatting = formatting or FormattingConfig()

    def render_article(self, document: ArticleDocument) -> str:
        """Render a document: header, summary, then its blocks in order."""
        lines = [
            f"# {document.headline}",
            "",
            f"*{document.author} | {document.published_date}*",
            "",
        ]
        if document.source_url:
            lines.extend([f"<{document.source_url}>", ""])

        lines.extend(self._format_summary(document))

        for block in document.blocks:
            lines.extend(self._format_block(block))

        return "\n".join(lines).rstrip() + "\n"

    def render_feed_list(
        self,
        feeds: list[ParsedFeed],
        counts: Optional[dict[str, UnreadCounts]] = None,
        opened: Optional[set[str]] = None,
    ) -> str:
        """Render feeds with their items, marking opened items."""
        if not feeds:
            return "No feeds could be loaded.\n"

        counts = counts or {}
        opened = opened or set()
        lines: list[str] = []

        for feed in feeds:
            heading = f"## {feed.title}"
            feed_counts = counts.get(feed.source_url)
            if feed_counts is not None:
                heading += f" ({self.format_counts(feed_counts)})"
            lines.extend([heading, ""])

            for item in feed.items:
                was_opened = item.link in opened
                if was_opened and not self.formatting.show_opened_articles:
                    continue
                marker = "x" if was_opened else " "
                lines.append(f"- [{marker}] [{item.title or item.link}]({item.link}) *{item.pub_date}*")
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"

    @staticmethod
    def format_counts(counts: UnreadCounts) -> str:
        if counts.new:
            return f"{counts.unread} unread, +{counts.new} new"
        return f"{counts.unread} unread"

    def _format_summary(self, document: ArticleDocument) -> list[str]:
        slot = document.summary
        lines = ["> **Summary**", ">"]
        for line in slot.text.splitlines() or [""]:
            lines.append(f"> {line}".rstrip())
        lines.append("")
        return lines

    def _format_block(self, block: ContentBlock) -> list[str]:
        if block.kind is BlockKind.HEADING:
            return [f"### {block.text}", ""]

        if block.kind is BlockKind.IMAGE:
            caption = block.attributes.get("caption", "")
            lines = [f"![{caption}]({block.attributes.get('src', '')})"]
            if caption:
                lines.append(f"*{caption}*")
            lines.append("")
            return lines

        if block.kind is BlockKind.TABLE:
            return self._format_table(block)

        text = self._wrap(block.text)
        role = block.attributes.get("role")
        if role in ("lead", "kicker"):
            text = f"**{text}**"
        elif role in ("notice", "error"):
            text = f"_{text}_"
        return [text, ""]

    def _format_table(self, block: ContentBlock) -> list[str]:
        if not block.rows:
            return []
        width = max(len(row) for row in block.rows)
        rows = [row + [""] * (width - len(row)) for row in block.rows]

        lines = []
        if block.text:
            lines.extend([f"**{block.text}**", ""])
        lines.append("| " + " | ".join(rows[0]) + " |")
        lines.append("|" + "---|" * width)
        for row in rows[1:]:
            lines.append("| " + " | ".join(row) + " |")
        lines.append("")
        return lines

    def _wrap(self, text: str) -> str:
        if self.formatting.line_width <= 0:
            return text
        return textwrap.fill(text, width=self.formatting.line_width)
