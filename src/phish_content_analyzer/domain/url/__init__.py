"""URL helpers."""

from phish_content_analyzer.domain.url.extract import canonicalize_url, extract_urls, url_domain

__all__ = ["canonicalize_url", "extract_urls", "url_domain"]
