# sitemap_scout/exceptions.py
"""
Failure taxonomy for fetching and parsing sitemaps.

Only the fetcher and the extractors raise these; the crawler turns them into
``MapSiteError`` entries of a ``MapSiteResult``.
"""
from __future__ import annotations

from typing import Optional


class SitemapScoutError(Exception):
    """Base class for all SitemapScout errors."""


class TransportError(SitemapScoutError):
    """Network failure, timeout or non-2xx status after the retry budget ran out."""

    def __init__(self, message: str, *, url: str = "", attempts: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.attempts = attempts


class ContentTypeRejected(SitemapScoutError):
    """Declared Content-Type is not in the allow-list. Never retried."""

    def __init__(self, content_type: Optional[str]) -> None:
        super().__init__(f'Response rejected, invalid "Content-Type" header: {content_type}.')
        self.content_type = content_type


class DecodeError(SitemapScoutError):
    """Body could not be decompressed or decoded as UTF-8."""


class ExtractorFailure(SitemapScoutError):
    """The URL extractor crashed on a document."""
