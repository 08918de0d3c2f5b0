# sitemap_scout/__init__.py
"""
SitemapScout package initializer.
Defines the package version and exposes the public API.
"""
__version__ = "0.1.0"

from sitemap_scout.config import FetchConfig, ParserConfig, load_config
from sitemap_scout.crawler.crawler import SitemapCrawler
from sitemap_scout.crawler.fetcher import SitemapFetcher
from sitemap_scout.crawler.models import DocumentKind, MapSiteError, MapSiteResult

__all__ = [
    "__version__",
    "DocumentKind",
    "FetchConfig",
    "MapSiteError",
    "MapSiteResult",
    "ParserConfig",
    "SitemapCrawler",
    "SitemapFetcher",
    "load_config",
]
