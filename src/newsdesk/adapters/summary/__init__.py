"""Summary enrichment."""

from newsdesk.adapters.summary.enricher import LoadingTicker, SummaryEnricher

__all__ = ["LoadingTicker", "SummaryEnricher"]
