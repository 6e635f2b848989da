"""LLM adapters."""

from newsdesk.adapters.llm.gemini_client import GeminiSummarizer, format_summary

__all__ = ["GeminiSummarizer", "format_summary"]
