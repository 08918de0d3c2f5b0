# File: tests/conftest.py
import asyncio
import gzip
from collections import Counter
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Callable, Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from sitemap_scout.config import FetchConfig, ParserConfig

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

FIVE_URLS = [
    "http://www.example.com/",
    "http://www.example.com/catalog?item=12&desc=vacation_hawaii",
    "http://www.example.com/catalog?item=73&desc=vacation_new_zealand",
    "http://www.example.com/catalog?item=74&desc=vacation_newfoundland",
    "http://www.example.com/catalog?item=83&desc=vacation_usa",
]


def _escape(url: str) -> str:
    return url.replace("&", "&amp;")


def build_urlset(*locs: str) -> str:
    """Plain <urlset> document with one <url> per location."""
    entries = "".join(
        f"\n  <url>\n    <loc>{_escape(loc)}</loc>\n    <changefreq>weekly</changefreq>\n  </url>"
        for loc in locs
    )
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns="{SITEMAP_NS}">{entries}\n</urlset>\n'


def build_index(*locs: str) -> str:
    """<sitemapindex> document referencing child sitemaps."""
    entries = "".join(
        f"\n  <sitemap>\n    <loc>{_escape(loc)}</loc>\n    <lastmod>2024-01-01</lastmod>\n  </sitemap>"
        for loc in locs
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n<sitemapindex xmlns="{SITEMAP_NS}">'
        f"{entries}\n</sitemapindex>\n"
    )


@dataclass
class Route:
    body: Union[str, bytes]
    content_type: str = "application/xml"
    status: int = 200
    fail_times: int = 0
    delay: float = 0.0
    location: str = ""


class SitemapHost:
    """In-process HTTP host serving registered sitemap documents."""

    def __init__(self) -> None:
        self.base = ""
        self.routes: Dict[str, Route] = {}
        self.hits: Counter = Counter()
        self.headers: List[Dict[str, str]] = []

    def url(self, path: str) -> str:
        return f"{self.base}{path}"

    def add(self, path: str, body: Union[str, bytes], **kwargs) -> str:
        self.routes[path] = Route(body, **kwargs)
        return self.url(path)

    def add_redirect_chain(self, hops: int, body: str) -> str:
        """/r/{hops} redirects to /r/{hops-1} and so on; /r/0 serves *body*."""
        self.add("/r/0", body)
        for n in range(1, hops + 1):
            self.add(f"/r/{n}", "", location=f"/r/{n - 1}")
        return self.url(f"/r/{hops}")

    async def handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.hits[path] += 1
        self.headers.append(dict(request.headers))
        route = self.routes.get(path)
        if route is None:
            return web.Response(status=404)
        if route.delay:
            await asyncio.sleep(route.delay)
        if self.hits[path] <= route.fail_times:
            return web.Response(status=500)
        if route.location:
            return web.Response(status=302, headers={"Location": route.location})
        body = route.body.encode("utf-8") if isinstance(route.body, str) else route.body
        return web.Response(
            body=body, status=route.status, headers={"Content-Type": route.content_type}
        )


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def sitemap_host(unused_tcp_port: int) -> AsyncIterator[SitemapHost]:
    host = SitemapHost()
    app = web.Application()
    app.router.add_route("GET", "/{tail:.*}", host.handle)
    async for base in _serve_app(app, unused_tcp_port):
        host.base = base
        yield host


@pytest.fixture()
def urlset() -> Callable[..., str]:
    return build_urlset


@pytest.fixture()
def index() -> Callable[..., str]:
    return build_index


@pytest.fixture()
def five_urls() -> List[str]:
    return list(FIVE_URLS)


@pytest.fixture()
def gzipped() -> Callable[[str], bytes]:
    return lambda text: gzip.compress(text.encode("utf-8"))


@pytest.fixture()
def fetch_config() -> FetchConfig:
    """Fast-failing fetch settings for local servers."""
    return FetchConfig(max_retries=1, timeout_ms=1000, user_agent="TestAgent/1.0")


@pytest.fixture()
def parser_config(fetch_config) -> ParserConfig:
    return ParserConfig(max_depth=2, fetch=fetch_config)
