"""Gemini API client for article summarization."""

import asyncio
import time
from typing import Any, Optional

import httpx

from newsdesk.config import GeminiConfig, PromptsConfig
from newsdesk.core import SummaryError, Summarizer
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

SUMMARY_RULE = "─" * 35


def count_words(text: str) -> int:
    return len(text.split())


def format_summary(summary: str, model: str, elapsed_ms: float, source_text: str) -> str:
    """Prefix a summary with model, latency and word reduction."""
    original_words = count_words(source_text)
    summary_words = count_words(summary)
    reduction = 100 - (summary_words / original_words * 100) if original_words else 0.0
    header = (
        f"AI Summary (Model: {model}, Time: {elapsed_ms:.0f}ms, "
        f"Words: {original_words}→{summary_words} ({reduction:.1f}% reduction))"
    )
    return f"{header}\n{SUMMARY_RULE}\n{summary}"


class GeminiSummarizer(Summarizer):
    """Summarize article text with Gemini ``generateContent``."""

    def __init__(
        self,
        api_key: str,
        config: Optional[GeminiConfig] = None,
        prompts: Optional[PromptsConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.config = config or GeminiConfig()
        self.prompts = prompts or PromptsConfig()
        self.model = self.config.model
        self.max_retries = max(1, self.config.max_retries)
        self.initial_retry_delay = self.config.initial_retry_delay
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/models/{self.model}:generateContent"

    def build_prompt(self, body_text: str, max_sentences: Optional[int] = None) -> str:
        return self.prompts.summary.format(
            max_sentences=max_sentences or self.config.max_sentences,
            text=body_text,
        )

    async def summarize(self, body_text: str, max_sentences: Optional[int] = None) -> str:
        """Summarize ``body_text`` and prefix the result with request metadata.

        Raises:
            SummaryError: On network failure, HTTP error or malformed response
        """
        prompt = self.build_prompt(body_text, max_sentences)
        started = time.perf_counter()
        data = await self._call_api(prompt)
        elapsed_ms = (time.perf_counter() - started) * 1000

        summary, model = self._extract_text(data)
        logger.info("Summary generated", model=model, elapsed_ms=round(elapsed_ms))
        return format_summary(summary, model, elapsed_ms, body_text)

    async def _call_api(self, prompt: str) -> dict[str, Any]:
        """POST the prompt, retrying 429 and 5xx with exponential backoff."""
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        last_error = "no attempt made"

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                    response = await client.post(
                        self.endpoint,
                        params={"key": self.api_key},
                        headers={"content-type": "application/json"},
                        json=payload,
                    )
            except httpx.HTTPError as e:
                last_error = f"network error: {e}"
                logger.warning("Gemini request failed", attempt=attempt + 1, error=str(e))
            else:
                if response.status_code == 200:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise SummaryError(f"Response is not JSON: {e}") from e

                if response.status_code != 429 and response.status_code < 500:
                    raise SummaryError(f"Gemini API returned HTTP {response.status_code}")

                last_error = f"HTTP {response.status_code}"
                logger.warning("Gemini API busy", attempt=attempt + 1, status=response.status_code)

            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.initial_retry_delay * (2 ** attempt))

        raise SummaryError(f"Gemini API call failed: {last_error}")

    def _extract_text(self, data: Any) -> tuple[str, str]:
        """Pull ``candidates[0].content.parts[0].text`` and the model name."""
        try:
            candidate = data["candidates"][0]
            text = candidate["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise SummaryError(f"Malformed Gemini response: missing {e}") from e

        if not isinstance(text, str) or not text.strip():
            raise SummaryError("Gemini response contained no summary text")

        model = self.model
        model_info = candidate.get("modelInfo") if isinstance(candidate, dict) else None
        if isinstance(model_info, dict) and model_info.get("name"):
            model = str(model_info["name"])
        return text.strip(), model
