"""Background population of article summary slots."""

import asyncio
from typing import Optional

from newsdesk.core import ArticleDocument, Summarizer, SummarySlot
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

NO_CONTENT_MESSAGE = "No content available for summary."
ERROR_MESSAGE = "Error generating summary."


class LoadingTicker:
    """Advance a pending slot's loading indicator at a fixed interval.

    The ticker listens to the slot and stops on the first notification that
    the slot left ``pending``.
    """

    def __init__(self, slot: SummarySlot, interval: float = 0.5) -> None:
        self.slot = slot
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        finished = asyncio.Event()

        def on_change(slot: SummarySlot) -> None:
            if not slot.is_pending:
                finished.set()

        unsubscribe = self.slot.subscribe(on_change)
        try:
            while self.slot.is_pending:
                try:
                    await asyncio.wait_for(finished.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    self.slot.advance_tick()
                else:
                    break
        finally:
            unsubscribe()


class SummaryEnricher:
    """Attach generated summaries to documents without blocking extraction.

    Each attached document gets one background task. The number of
    summarization calls in flight at once is capped by a semaphore, and each
    call is bounded by ``request_timeout``.
    """

    def __init__(
        self,
        summarizer: Summarizer,
        max_concurrent: int = 4,
        tick_interval: float = 0.5,
        request_timeout: float = 60.0,
    ) -> None:
        self.summarizer = summarizer
        self.tick_interval = tick_interval
        self.request_timeout = request_timeout
        self._semaphore = asyncio.Semaphore(max(1, max_concurrent))
        self._tasks: set[asyncio.Task] = set()
        self._tickers: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def attach(self, document: ArticleDocument, body_text: Optional[str] = None) -> Optional[asyncio.Task]:
        """Start summarizing ``document`` in the background.

        Must be called from a running event loop. Returns the background task,
        or None when there was nothing to summarize and the slot was failed
        right away.
        """
        slot = document.summary
        if not slot.is_pending:
            return None

        text = (body_text if body_text is not None else document.body_text).strip()
        if not text:
            slot.fail(NO_CONTENT_MESSAGE)
            return None

        ticker = LoadingTicker(slot, self.tick_interval).start()
        self._tickers.add(ticker)
        ticker.add_done_callback(self._tickers.discard)

        task = asyncio.get_running_loop().create_task(self._enrich(slot, text, document.source_url))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        def fail_if_cancelled(done: asyncio.Task) -> None:
            # A task cancelled before its first step never runs _enrich
            if done.cancelled():
                slot.fail(ERROR_MESSAGE)

        task.add_done_callback(fail_if_cancelled)
        return task

    async def _enrich(self, slot: SummarySlot, text: str, source_url: str) -> None:
        try:
            async with self._semaphore:
                summary = await asyncio.wait_for(self.summarizer.summarize(text), timeout=self.request_timeout)
        except Exception as e:
            logger.warning("Summary generation failed", url=source_url, error=str(e) or type(e).__name__)
            slot.fail(ERROR_MESSAGE)
        else:
            slot.resolve(summary)

    async def drain(self) -> None:
        """Wait for every attached summary to finish."""
        while self._tasks or self._tickers:
            await asyncio.gather(*self._tasks, *self._tickers, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding summaries; their slots end in ``error``."""
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
