# File: sitemap_scout/engine.py
"""sitemap_scout.engine: entry points for mapping a sitemap from the CLI or other code."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from sitemap_scout.config import ParserConfig
from sitemap_scout.crawler.crawler import SitemapCrawler
from sitemap_scout.crawler.models import MapSiteResult
from sitemap_scout.logger import logger

__all__ = ["Engine", "map_buffer", "map_site"]


async def map_site(cfg: ParserConfig, url: str) -> MapSiteResult:
    """
    Map the sitemap tree rooted at *url*.

    Parameters
    ----------
    cfg : ParserConfig
        Traversal and fetch settings.
    url : str
        Sitemap or sitemap index URL.
    """
    async with SitemapCrawler(cfg) as crawler:
        return await crawler.run(url)


async def map_buffer(cfg: ParserConfig, data: bytes, source: str = "<buffer>") -> MapSiteResult:
    """Map a sitemap already in memory (e.g. read from disk); index children are still fetched."""
    async with SitemapCrawler(cfg) as crawler:
        return await crawler.from_buffer(data, url=source)


class Engine:
    """Synchronous facade: one config, as many sitemaps as needed."""

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()

    def map_site(self, url: str) -> MapSiteResult:
        """Run :func:`map_site` on a fresh event loop."""
        logger.info("Starting map of %s", url)
        return asyncio.run(map_site(self.config, url))

    def map_file(self, path: Union[str, Path]) -> MapSiteResult:
        """Read a local sitemap (plain or gzip) and map it."""
        p = Path(path).expanduser()
        data = p.read_bytes()
        return asyncio.run(map_buffer(self.config, data, source=str(p)))
