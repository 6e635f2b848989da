"""News feed reader with per-site article extraction and AI summaries."""

__version__ = "0.1.0"
