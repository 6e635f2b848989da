"""Core domain layer."""

from newsdesk.core.entities import (
    ArticleDocument,
    BlockKind,
    ContentBlock,
    FeedItem,
    ParsedFeed,
    SummarySlot,
    SummaryState,
    UnreadCounts,
)
from newsdesk.core.errors import FeedParseError, NewsdeskError, SummaryError
from newsdesk.core.interfaces import ArticleExtractor, Summarizer
from newsdesk.core.read_history import ReadHistoryStore

__all__ = [
    "ArticleDocument",
    "BlockKind",
    "ContentBlock",
    "FeedItem",
    "ParsedFeed",
    "SummarySlot",
    "SummaryState",
    "UnreadCounts",
    "NewsdeskError",
    "FeedParseError",
    "SummaryError",
    "ArticleExtractor",
    "Summarizer",
    "ReadHistoryStore",
]
