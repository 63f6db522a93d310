"""URL extraction and canonicalization."""

from __future__ import annotations

from urllib.parse import urlparse, urlunparse
import re

URL_PATTERN = re.compile(r"https?://[^\s<>()\[\]{}\"']+", re.IGNORECASE)


def extract_urls(text: str) -> list[str]:
    """Extract HTTP(S) URLs from text."""

    urls = URL_PATTERN.findall(text or "")
    return list(dict.fromkeys(canonicalize_url(item.rstrip(".,;:!?")) for item in urls if item.strip()))


def canonicalize_url(url: str) -> str:
    """Normalize URL to a stable lowercase host form."""

    raw = (url or "").strip()
    if not raw:
        return ""
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        return raw
    normalized = parsed._replace(netloc=parsed.netloc.lower())
    return urlunparse(normalized)


def url_domain(url: str) -> str:
    parsed = urlparse((url or "").strip())
    return (parsed.hostname or "").lower()
