"""CLI entry point for newsdesk."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from newsdesk.adapters.extractors import ExtractorRegistry
from newsdesk.adapters.fetch import RateLimitedFetcher
from newsdesk.adapters.llm import GeminiSummarizer
from newsdesk.adapters.render import MarkdownArticleRenderer
from newsdesk.adapters.summary import SummaryEnricher
from newsdesk.config import Settings, get_settings
from newsdesk.core import FeedItem, ReadHistoryStore
from newsdesk.use_cases import ReaderService
from newsdesk.utils.logging_config import configure_logging

app = typer.Typer(help="Read news feeds with per-site article extraction and AI summaries.")

ConfigOption = typer.Option(None, "--config", "-c", help="Path to config.yaml")


def _load(config: Optional[Path]) -> tuple[Settings, ReadHistoryStore]:
    configure_logging()
    settings = get_settings(config)
    history = ReadHistoryStore(settings.history_path).load()
    return settings, history


def _build_enricher(settings: Settings, enabled: bool) -> Optional[SummaryEnricher]:
    if not enabled:
        return None
    if not settings.gemini_api_key:
        print("⚠️  GOOGLE_GEMINI_API_KEY not set, summaries disabled")
        return None
    summarizer = GeminiSummarizer(settings.gemini_api_key, settings.gemini, settings.prompts)
    return SummaryEnricher(
        summarizer,
        max_concurrent=settings.summary.max_concurrent,
        tick_interval=settings.summary.tick_interval,
        request_timeout=settings.summary.request_timeout,
    )


@app.command()
def feeds(config: Optional[Path] = ConfigOption) -> None:
    """List the items of all configured feeds with unread counts."""
    settings, history = _load(config)
    asyncio.run(_list_feeds(settings, history))


async def _list_feeds(settings: Settings, history: ReadHistoryStore) -> None:
    renderer = MarkdownArticleRenderer(settings.formatting)

    async with RateLimitedFetcher(settings.fetcher) as fetcher:
        service = ReaderService(fetcher, ExtractorRegistry.default(), history, settings.feed_urls)
        loaded = await service.load_feeds()

    if len(loaded) < len(settings.feed_urls):
        print(f"⚠️  {len(settings.feed_urls) - len(loaded)} of {len(settings.feed_urls)} feeds could not be loaded")

    counts = service.counts_by_feed(loaded)
    print(renderer.render_feed_list(loaded, counts, set(history.opened)))


@app.command()
def read(
    url: str = typer.Argument(..., help="Article URL"),
    title: str = typer.Option("", "--title", help="Title to use when the page has none"),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Generate an AI summary"),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Fetch, extract and render a single article."""
    settings, history = _load(config)
    asyncio.run(_read_article(settings, history, FeedItem(link=url, title=title), summary))


async def _read_article(settings: Settings, history: ReadHistoryStore, item: FeedItem, summary: bool) -> None:
    renderer = MarkdownArticleRenderer(settings.formatting)
    enricher = _build_enricher(settings, summary and settings.summary.enabled)
    registry = ExtractorRegistry.default(enricher)

    async with RateLimitedFetcher(settings.fetcher) as fetcher:
        service = ReaderService(fetcher, registry, history)
        document = await service.open_article(item)

    if enricher is not None:
        if document.summary.is_pending:
            print(f"⏳ {document.summary.text}", flush=True)
        try:
            await enricher.drain()
        finally:
            await enricher.aclose()

    print(renderer.render_article(document))


@app.command("history")
def show_history(config: Optional[Path] = ConfigOption) -> None:
    """Show read history statistics."""
    _, history = _load(config)
    stats = history.get_stats()
    print(f"📚 Read history: {stats['path']}")
    print(f"  • Opened articles: {stats['opened']}")
    print(f"  • Displayed articles: {stats['displayed']}")


@app.command()
def prune(
    days: Optional[int] = typer.Option(None, "--days", help="Maximum entry age in days"),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Remove history entries older than the configured age."""
    settings, history = _load(config)
    max_age = days if days is not None else settings.history.max_age_days
    removed = history.prune(max_age)
    if removed:
        print(f"✓ Removed {removed} entries older than {max_age} days")
    else:
        print(f"✓ Nothing older than {max_age} days")


if __name__ == "__main__":
    app()
