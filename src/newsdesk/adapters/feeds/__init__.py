"""Feed document parsing."""

from newsdesk.adapters.feeds.rss_parser import parse_feed

__all__ = ["parse_feed"]
