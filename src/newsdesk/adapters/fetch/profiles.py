"""Request header profiles and domain classification."""

import html
from typing import Optional
from urllib.parse import urlsplit

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
SEARCH_ENGINE_REFERER = "https://www.google.com/"
FETCH_ERROR_MARKER = "newsdesk-fetch-error"


def host_of(url: str) -> str:
    """Lower-cased host of ``url`` without a leading ``www.``."""
    host = (urlsplit(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def matching_domain(host: str, domains: list[str]) -> Optional[str]:
    """Return the entry of ``domains`` that ``host`` equals or is a subdomain of."""
    for domain in domains:
        domain = domain.lower()
        if host == domain or host.endswith("." + domain):
            return domain
    return None


def standard_headers() -> dict[str, str]:
    """Lightweight browser-like headers for ordinary sites."""
    return {
        "User-Agent": BROWSER_USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "de-DE,de;q=0.9,en-US;q=0.8,en;q=0.7",
    }


def protected_headers(referer: str = SEARCH_ENGINE_REFERER) -> dict[str, str]:
    """Full header set of a desktop Chrome navigation."""
    return {
        "User-Agent": BROWSER_USER_AGENT,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/avif,image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9,de;q=0.8",
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "max-age=0",
        "Referer": referer,
        "sec-ch-ua": '"Chromium";v="124", "Google Chrome";v="124", "Not-A.Brand";v="99"',
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "cross-site",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
    }


def error_page(url: str, reason: str) -> str:
    """Synthetic HTML describing a failed article fetch."""
    safe_url = html.escape(url, quote=True)
    safe_reason = html.escape(reason, quote=True)
    return (
        "<!DOCTYPE html>\n"
        "<html><head>"
        f'<meta name="{FETCH_ERROR_MARKER}" content="{safe_reason}">'
        "<title>Article unavailable</title></head>\n"
        "<body><h1>Article unavailable</h1>\n"
        f'<p class="fetch-error">The article at <a href="{safe_url}">{safe_url}</a> '
        f"could not be loaded: {safe_reason}</p>\n"
        "</body></html>\n"
    )
