"""Durable record of which articles were opened or already shown."""

import os
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable

import yaml

from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

OPENED_KEY = "openedArticles"
DISPLAYED_KEY = "displayedArticles"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReadHistoryStore:
    """Track opened and displayed article URLs in a YAML file.

    Opening an article always counts as displaying it. Every mutation that
    changes the read flag is written through to disk; read or write errors
    fall back to in-memory state and are logged.
    """

    def __init__(self, path: Path, clock: Callable[[], datetime] = _utc_now) -> None:
        self.path = Path(path)
        self._clock = clock
        self._lock = threading.RLock()
        self._opened: dict[str, datetime] = {}
        self._displayed: dict[str, datetime] = {}

    @property
    def opened(self) -> dict[str, datetime]:
        with self._lock:
            return dict(self._opened)

    @property
    def displayed(self) -> dict[str, datetime]:
        with self._lock:
            return dict(self._displayed)

    def is_opened(self, url: str) -> bool:
        """Check if article was opened (read)."""
        with self._lock:
            return bool(url) and url in self._opened

    def has_been_displayed(self, url: str) -> bool:
        """Check if article was shown in a listing before."""
        with self._lock:
            return bool(url) and url in self._displayed

    def mark_opened(self, url: str) -> None:
        """Mark article as read and persist immediately."""
        if not url:
            return
        with self._lock:
            now = self._clock()
            self._opened[url] = now
            self._displayed.setdefault(url, now)
            self.save()

    def mark_displayed(self, url: str) -> None:
        """Record the first time an article was listed. Never overwrites."""
        if not url:
            return
        with self._lock:
            self._displayed.setdefault(url, self._clock())

    def mark_displayed_batch(self, urls: Iterable[str]) -> None:
        """Mark many articles as displayed and save once."""
        with self._lock:
            changed = False
            for url in urls:
                if url and url not in self._displayed:
                    self._displayed[url] = self._clock()
                    changed = True
            if changed:
                self.save()

    def prune(self, max_age_days: int = 30) -> int:
        """Remove entries strictly older than ``max_age_days``.

        Returns:
            Number of entries removed from both maps
        """
        with self._lock:
            cutoff = self._clock() - timedelta(days=max_age_days)
            removed = 0
            for entries in (self._opened, self._displayed):
                stale = [url for url, seen_at in entries.items() if seen_at < cutoff]
                for url in stale:
                    del entries[url]
                removed += len(stale)

            if removed:
                logger.info("Pruned read history", removed=removed, max_age_days=max_age_days)
                self.save()
            return removed

    def load(self) -> "ReadHistoryStore":
        """Replace in-memory state with the file contents.

        A missing or unreadable file leaves the store empty.
        """
        with self._lock:
            self._opened = {}
            self._displayed = {}
            if not self.path.exists():
                return self

            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ValueError(f"expected a mapping, got {type(data).__name__}")
                self._opened = self._parse_entries(data.get(OPENED_KEY))
                self._displayed = self._parse_entries(data.get(DISPLAYED_KEY))
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.warning("Could not load read history", path=str(self.path), error=str(e))
                self._opened = {}
                self._displayed = {}
            return self

    def save(self) -> None:
        """Write both maps to disk. Errors are logged, not raised."""
        with self._lock:
            record = {
                OPENED_KEY: {url: ts.isoformat() for url, ts in self._opened.items()},
                DISPLAYED_KEY: {url: ts.isoformat() for url, ts in self._displayed.items()},
            }
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, "w", encoding="utf-8") as f:
                    yaml.safe_dump(record, f, allow_unicode=True, default_flow_style=False, sort_keys=True)
                os.replace(tmp_path, self.path)
            except OSError as e:
                logger.warning("Could not save read history", path=str(self.path), error=str(e))

    def get_stats(self) -> dict:
        """Get statistics about the stored history."""
        with self._lock:
            return {
                "opened": len(self._opened),
                "displayed": len(self._displayed),
                "path": str(self.path),
            }

    @staticmethod
    def _parse_entries(raw: object) -> dict[str, datetime]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ValueError("history section must be a mapping")

        entries: dict[str, datetime] = {}
        for url, value in raw.items():
            # PyYAML may already have turned an ISO timestamp into a datetime
            seen_at = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
            if seen_at.tzinfo is None:
                seen_at = seen_at.replace(tzinfo=timezone.utc)
            entries[str(url)] = seen_at
        return entries
