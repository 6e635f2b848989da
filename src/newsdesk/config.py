"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_FEED_URLS = [
    "https://taz.de/!p4608;rss/",
    "https://www.tagesschau.de/inland/index~rss2.xml",
    "https://www.tagesschau.de/investigativ/index~rss2.xml",
    "https://www.tagesschau.de/wirtschaft/index~rss2.xml",
    "https://www.tagesschau.de/ausland/index~rss2.xml",
    "https://www.tagesschau.de/inland/regional/bayern/index~rss2.xml",
    "https://www.hltv.org/rss/news",
]


@dataclass
class FetcherConfig:
    """HTTP fetching, pacing and anti-blocking settings."""
    feed_timeout: float = 10.0
    standard_timeout: float = 15.0
    protected_timeout: float = 60.0
    min_domain_spacing: float = 5.0
    pacing_jitter: tuple[float, float] = (1.0, 3.0)
    standard_delay: tuple[float, float] = (0.1, 0.5)
    protected_delay: tuple[float, float] = (1.0, 4.0)
    recovery_delay: tuple[float, float] = (2.0, 3.0)
    feed_user_agent: str = "newsdesk feed reader"
    protected_domains: list[str] = field(default_factory=lambda: ["hltv.org"])
    landing_pages: dict[str, str] = field(default_factory=lambda: {
        "hltv.org": "https://www.hltv.org/",
    })


@dataclass
class GeminiConfig:
    """Gemini API settings."""
    model: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    max_sentences: int = 5
    timeout: float = 30.0
    max_retries: int = 1
    initial_retry_delay: float = 2.0


@dataclass
class SummaryConfig:
    """Background summary enrichment settings."""
    enabled: bool = True
    max_concurrent: int = 4
    tick_interval: float = 0.5
    request_timeout: float = 60.0


@dataclass
class HistoryConfig:
    """Read history settings."""
    path: Path = Path.home() / ".newsdesk" / "article_history.yaml"
    max_age_days: int = 30


@dataclass
class FormattingConfig:
    """Presentation preferences handed to the renderer."""
    line_width: int = 88
    show_opened_articles: bool = True


@dataclass
class PromptsConfig:
    """Prompts for the summarizer."""
    summary: str = (
        "Summarize the following article professionally, impartially and without "
        "judgement in at most {max_sentences} sentences. Answer in the original "
        "language of the article:\n\n{text}"
    )


@dataclass
class Settings:
    """Application settings."""

    # API keys (from environment only)
    gemini_api_key: str = ""

    feed_urls: list[str] = field(default_factory=lambda: list(DEFAULT_FEED_URLS))

    # Config sections
    fetcher: FetcherConfig = field(default_factory=FetcherConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    formatting: FormattingConfig = field(default_factory=FormattingConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)

    @property
    def history_path(self) -> Path:
        return self.history.path

    @property
    def summaries_enabled(self) -> bool:
        return self.summary.enabled and bool(self.gemini_api_key)


_TUPLE_FIELDS = {"pacing_jitter", "standard_delay", "protected_delay", "recovery_delay"}


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get application settings from YAML config and environment."""
    if config_path is None:
        config_path = Path(os.getenv("NEWSDESK_CONFIG", "config.yaml"))
    config = load_config(config_path)

    settings = Settings(
        gemini_api_key=os.getenv("GOOGLE_GEMINI_API_KEY", ""),
    )

    if "feeds" in config:
        settings.feed_urls = [str(url) for url in config["feeds"] or []]

    if "fetcher" in config:
        for key, value in config["fetcher"].items():
            if key in _TUPLE_FIELDS:
                value = tuple(float(v) for v in value)
            setattr(settings.fetcher, key, value)

    if "gemini" in config:
        for key, value in config["gemini"].items():
            setattr(settings.gemini, key, value)

    if "summary" in config:
        for key, value in config["summary"].items():
            setattr(settings.summary, key, value)

    if "history" in config:
        for key, value in config["history"].items():
            if key == "path":
                value = Path(value).expanduser()
            setattr(settings.history, key, value)

    if "formatting" in config:
        for key, value in config["formatting"].items():
            setattr(settings.formatting, key, value)

    if "prompts" in config:
        settings.prompts = PromptsConfig(**config["prompts"])

    return settings
