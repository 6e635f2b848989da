"""Presentation adapters."""

from newsdesk.adapters.render.markdown_renderer import MarkdownArticleRenderer

__all__ = ["MarkdownArticleRenderer"]
