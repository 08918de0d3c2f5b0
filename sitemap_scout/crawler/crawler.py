# === FILE: sitemap_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence, Union

from aiohttp import ClientSession

from sitemap_scout.config import ParserConfig
from sitemap_scout.crawler.fetcher import SitemapFetcher, decode_body
from sitemap_scout.crawler.models import (
    DEPTH_EXCEEDED_MESSAGE,
    DocumentKind,
    MapSiteResult,
    RecursionState,
)
from sitemap_scout.exceptions import ExtractorFailure
from sitemap_scout.logger import logger
from sitemap_scout.parser.sitemap_parser import LocExtractor, get_extractor, is_index_document
from sitemap_scout.utils import chunked

__all__ = ("BUFFER_URL", "SitemapCrawler")

BUFFER_URL = "<buffer>"


class SitemapCrawler:
    """Recursive sitemap mapper: classify, extract, fan out over index children."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        extractor: Optional[LocExtractor] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.extractor: LocExtractor = extractor or get_extractor(self.config.extractor)
        self.session: Optional[ClientSession] = None
        self._state = RecursionState()

    @property
    def max_depth(self) -> int:
        return self.config.max_depth

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        self.config.max_depth = value

    @property
    def current_depth(self) -> int:
        """Deepest index level entered by the last traversal."""
        return self._state.current_depth

    async def __aenter__(self) -> SitemapCrawler:
        self.session = ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    @asynccontextmanager
    async def _fetcher(self) -> AsyncIterator[SitemapFetcher]:
        # reuse the crawler's session when inside ``async with``
        async with SitemapFetcher(self.config.fetch, self.session) as fetcher:
            yield fetcher

    async def run(self, url: str) -> MapSiteResult:
        """Fetch *url* and map the whole sitemap tree below it. Never raises."""
        logger.info("Mapping %s", url)
        start = time.monotonic()
        self._state = RecursionState()
        try:
            async with self._fetcher() as fetcher:
                text = await fetcher.fetch(url)
                result = await self._classify_and_merge(fetcher, url, text, 0)
        except Exception as exc:
            logger.error("Mapping %s failed: %s", url, exc)
            return MapSiteResult.failure(url, str(exc))
        self._log_summary(url, result, time.monotonic() - start)
        return result

    async def from_buffer(self, data: Union[bytes, str], url: str = BUFFER_URL) -> MapSiteResult:
        """Map a document already in memory; only index children are fetched."""
        start = time.monotonic()
        self._state = RecursionState()
        try:
            text = data if isinstance(data, str) else decode_body(data)
            async with self._fetcher() as fetcher:
                result = await self._classify_and_merge(fetcher, url, text, 0)
        except Exception as exc:
            logger.error("Mapping %s failed: %s", url, exc)
            return MapSiteResult.failure(url, str(exc))
        self._log_summary(url, result, time.monotonic() - start)
        return result

    async def _classify_and_merge(
        self, fetcher: SitemapFetcher, url: str, text: str, depth: int
    ) -> MapSiteResult:
        result = MapSiteResult()
        if not text:
            return result

        is_index = is_index_document(text)
        result.classify(DocumentKind.INDEX if is_index else DocumentKind.SITEMAP)
        locations = self._extract(url, text)

        if not is_index:
            result.urls.extend(locations)
            return result

        if depth >= self.config.max_depth:
            logger.warning("Depth %d reached at %s, %d children skipped", depth, url, len(locations))
            result.add_error(url, DEPTH_EXCEEDED_MESSAGE)
            return result

        # entered once for the whole level, before any child is spawned
        self._state.enter_level(depth + 1)
        for branch in await self._expand(fetcher, locations, depth + 1):
            result.merge(branch)
        return result

    def _extract(self, url: str, text: str) -> List[str]:
        try:
            return self.extractor.extract(text)
        except Exception as exc:
            raise ExtractorFailure(f"Could not extract locations from {url}: {exc}") from exc

    async def _expand(
        self, fetcher: SitemapFetcher, locations: Sequence[str], depth: int
    ) -> List[MapSiteResult]:
        branches: List[MapSiteResult] = []
        pause = self.config.batch_pause_ms / 1000
        batches = list(chunked(locations, self.config.batch_size))
        for number, batch in enumerate(batches, start=1):
            branches.extend(
                await asyncio.gather(*(self._branch(fetcher, loc, depth) for loc in batch))
            )
            if pause and number < len(batches):
                await asyncio.sleep(pause)
        return branches

    async def _branch(self, fetcher: SitemapFetcher, url: str, depth: int) -> MapSiteResult:
        try:
            text = await fetcher.fetch(url)
            return await self._classify_and_merge(fetcher, url, text, depth)
        except Exception as exc:
            logger.warning("Failed %s: %s", url, exc)
            branch = MapSiteResult()
            branch.add_error(url, str(exc))
            return branch

    def _log_summary(self, url: str, result: MapSiteResult, duration: float) -> None:
        logger.info(
            "Mapped %s: %s, %d urls, %d errors, depth %d in %.2f s",
            url,
            result.kind.value,
            len(result.urls),
            len(result.errors),
            self._state.current_depth,
            duration,
        )

    # alias kept for callers used to the crawler vocabulary
    map_site = run
