"""Exceptions raised inside the pipeline.

None of these escape the public operations: callers receive degraded results
instead.
"""


class NewsdeskError(Exception):
    """Base class for pipeline errors."""


class FeedParseError(NewsdeskError):
    """Feed document is not valid RSS or Atom."""


class SummaryError(NewsdeskError):
    """Summarization request failed or returned an unusable response."""
