# sitemap_scout/crawler/fetcher.py
"""
Fetcher module: one logical GET of a sitemap document with retry, timeout,
content-type gatekeeping, optional proxying and transparent gunzip.
"""
from __future__ import annotations

import asyncio
import gzip
import zlib
from typing import Any, Dict, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, TooManyRedirects

from sitemap_scout.config import FetchConfig
from sitemap_scout.crawler.models import FetchSession
from sitemap_scout.exceptions import ContentTypeRejected, DecodeError, TransportError
from sitemap_scout.logger import logger

__all__ = ("ALLOWED_CONTENT_TYPES", "MAX_REDIRECTS", "SitemapFetcher", "decode_body")

ALLOWED_CONTENT_TYPES: Sequence[str] = (
    "text/xml",
    "application/xml",
    "application/rss+xml",
    "application/gzip",
    "application/x-gzip",
)
MAX_REDIRECTS = 5
_GZIP_MAGIC = b"\x1f\x8b"


def is_allowed_content_type(content_type: Optional[str]) -> bool:
    """Substring match so that ``; charset=...`` suffixes are tolerated."""
    if not content_type:
        return False
    lowered = content_type.lower()
    return any(allowed in lowered for allowed in ALLOWED_CONTENT_TYPES)


def decode_body(body: bytes, content_type: str = "") -> str:
    """
    Turn a raw payload into text.

    Gzip payloads are decompressed first, whatever they are labelled as (some
    servers label gzip as zip); the rest is UTF-8. A body declared as gzip/zip
    without the gzip magic number was already inflated by the transport.
    """
    if body[:2] == _GZIP_MAGIC:
        try:
            body = gzip.decompress(body)
        except (OSError, EOFError, zlib.error) as exc:
            raise DecodeError(f"Could not decompress payload: {exc}") from exc
    elif "zip" in content_type.lower():
        logger.debug("Payload declared as %s is not gzip, decoding as is", content_type)
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Payload is not valid UTF-8: {exc}") from exc


class SitemapFetcher:
    """Fetches sitemap documents; settings are read from ``config`` on every call."""

    def __init__(self, config: FetchConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = False

    async def __aenter__(self) -> SitemapFetcher:
        if self.session is None or self.session.closed:
            self.session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        self._owns_session = False

    def _make_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.config.user_agent}
        if self.config.validate_content_type:
            headers["Accept"] = ", ".join(ALLOWED_CONTENT_TYPES)
        return headers

    def _request_options(self) -> Dict[str, Any]:
        seconds = self.config.timeout_ms / 1000
        options: Dict[str, Any] = {
            "headers": self._make_headers(),
            "timeout": ClientTimeout(sock_connect=seconds, sock_read=seconds),
            # aiohttp gives up when the hop count reaches max_redirects
            "max_redirects": MAX_REDIRECTS + 1,
        }
        if self.config.proxy_uri:
            # the proxy terminates TLS itself, upstream certificates are not checked
            options["proxy"] = self.config.proxy_uri
            options["ssl"] = False
        return options

    async def _get(self, url: str) -> tuple[bytes, str]:
        async with self.session.get(url, **self._request_options()) as resp:
            resp.raise_for_status()
            body = await resp.read()
            return body, resp.headers.get("Content-Type", "")

    async def fetch(self, url: str) -> str:
        """
        Fetch *url* and return its decoded text.

        Raises TransportError once ``1 + max_retries`` attempts failed, or at
        once when more than MAX_REDIRECTS hops are needed. ContentTypeRejected
        and DecodeError are raised without retrying.
        """
        if self.session is None or self.session.closed:
            raise RuntimeError("Session not initialized")

        session = FetchSession(url)
        while True:
            session.attempts += 1
            try:
                body, content_type = await self._get(url)
                break
            except TooManyRedirects as exc:
                # a redirect loop answers the same way every time
                raise TransportError(
                    f"Request to {url} failed after {session.attempts} attempt(s): "
                    f"more than {MAX_REDIRECTS} redirects",
                    url=url,
                    attempts=session.attempts,
                ) from exc
            except (ClientError, asyncio.TimeoutError) as exc:
                reason = str(exc) or type(exc).__name__
                if session.attempts > self.config.max_retries:
                    logger.debug("Giving up on %s after %d attempts", url, session.attempts)
                    raise TransportError(
                        f"Request to {url} failed after {session.attempts} attempt(s): {reason}",
                        url=url,
                        attempts=session.attempts,
                    ) from exc
                logger.debug(
                    "Retry %d/%d for %s: %s", session.attempts, self.config.max_retries, url, reason
                )
                if self.config.retry_backoff:
                    await asyncio.sleep(min(self.config.retry_backoff * 2 ** (session.attempts - 1), 60))

        if self.config.validate_content_type and not is_allowed_content_type(content_type):
            raise ContentTypeRejected(content_type)

        text = decode_body(body, content_type)
        logger.debug("Fetched %s (%d bytes, %d attempt(s))", url, len(body), session.attempts)
        return text
