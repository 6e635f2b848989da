"""Tests for Gemini client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from newsdesk.adapters.llm import GeminiSummarizer, format_summary
from newsdesk.config import GeminiConfig
from newsdesk.core import SummaryError

ARTICLE = "Der Bundestag hat am Freitag den Haushalt fuer das kommende Jahr beschlossen und damit lange Verhandlungen beendet."


@pytest.fixture
def gemini_config() -> GeminiConfig:
    """Create config with fast retries."""
    return GeminiConfig(max_retries=3, initial_retry_delay=0.0)


def make_response(status_code: int, payload: object = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def patched_client(mock_client_class: MagicMock, *responses: MagicMock) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    mock_client.post.side_effect = list(responses)
    mock_client_class.return_value = mock_client
    return mock_client


def test_format_summary_header() -> None:
    text = format_summary("eins zwei", "gemini-2.0-flash", 1234.4, "eins zwei drei vier")

    header, rule, body = text.split("\n", 2)
    assert header == "AI Summary (Model: gemini-2.0-flash, Time: 1234ms, Words: 4→2 (50.0% reduction))"
    assert set(rule) == {"─"}
    assert body == "eins zwei"


def test_build_prompt_contains_limit_and_text(gemini_config: GeminiConfig) -> None:
    summarizer = GeminiSummarizer("test-key", gemini_config)

    prompt = summarizer.build_prompt(ARTICLE, max_sentences=3)

    assert "3 sentences" in prompt
    assert ARTICLE in prompt


@pytest.mark.asyncio
async def test_summarize_success(gemini_config: GeminiConfig) -> None:
    """Test successful summary generation."""
    summarizer = GeminiSummarizer("test-key", gemini_config)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = patched_client(mock_client_class, make_response(200, {
            "candidates": [{
                "content": {"parts": [{"text": " Der Haushalt steht. "}]},
                "modelInfo": {"name": "gemini-2.0-flash-001"},
            }]
        }))

        result = await summarizer.summarize(ARTICLE)

    assert result.startswith("AI Summary (Model: gemini-2.0-flash-001, Time: ")
    assert result.endswith("\nDer Haushalt steht.")

    call = mock_client.post.call_args
    assert call.args[0].endswith("/models/gemini-2.0-flash:generateContent")
    assert call.kwargs["params"] == {"key": "test-key"}
    assert ARTICLE in call.kwargs["json"]["contents"][0]["parts"][0]["text"]


@pytest.mark.asyncio
async def test_summarize_without_model_info_uses_configured_model(gemini_config: GeminiConfig) -> None:
    summarizer = GeminiSummarizer("test-key", gemini_config)

    with patch("httpx.AsyncClient") as mock_client_class:
        patched_client(mock_client_class, make_response(200, {
            "candidates": [{"content": {"parts": [{"text": "Kurz."}]}}]
        }))

        result = await summarizer.summarize(ARTICLE)

    assert "Model: gemini-2.0-flash," in result


@pytest.mark.asyncio
async def test_malformed_response_raises(gemini_config: GeminiConfig) -> None:
    summarizer = GeminiSummarizer("test-key", gemini_config)

    with patch("httpx.AsyncClient") as mock_client_class:
        patched_client(mock_client_class, make_response(200, {"candidates": []}))

        with pytest.raises(SummaryError, match="Malformed"):
            await summarizer.summarize(ARTICLE)


@pytest.mark.asyncio
async def test_non_json_response_raises(gemini_config: GeminiConfig) -> None:
    summarizer = GeminiSummarizer("test-key", gemini_config)

    with patch("httpx.AsyncClient") as mock_client_class:
        patched_client(mock_client_class, make_response(200, ValueError("Expecting value")))

        with pytest.raises(SummaryError, match="not JSON"):
            await summarizer.summarize(ARTICLE)


@pytest.mark.asyncio
async def test_client_error_is_not_retried(gemini_config: GeminiConfig) -> None:
    summarizer = GeminiSummarizer("test-key", gemini_config)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = patched_client(mock_client_class, make_response(400))

        with pytest.raises(SummaryError, match="HTTP 400"):
            await summarizer.summarize(ARTICLE)

    assert mock_client.post.call_count == 1


@pytest.mark.asyncio
async def test_retry_on_server_error(gemini_config: GeminiConfig) -> None:
    """Test retry logic on 503 and rate limit errors."""
    summarizer = GeminiSummarizer("test-key", gemini_config)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = patched_client(
            mock_client_class,
            make_response(503),
            make_response(429),
            make_response(200, {"candidates": [{"content": {"parts": [{"text": "Ok."}]}}]}),
        )

        result = await summarizer.summarize(ARTICLE)

    assert result.endswith("Ok.")
    assert mock_client.post.call_count == 3


@pytest.mark.asyncio
async def test_default_config_makes_single_attempt() -> None:
    summarizer = GeminiSummarizer("test-key")

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client.post.side_effect = httpx.ConnectError("unreachable")
        mock_client_class.return_value = mock_client

        with pytest.raises(SummaryError, match="network error"):
            await summarizer.summarize(ARTICLE)

    assert mock_client.post.call_count == 1
