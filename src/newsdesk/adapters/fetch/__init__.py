"""HTTP retrieval of feeds and articles."""

from newsdesk.adapters.fetch.http_fetcher import RateLimitedFetcher
from newsdesk.adapters.fetch.rate_limiter import DomainRateLimiter

__all__ = ["RateLimitedFetcher", "DomainRateLimiter"]
