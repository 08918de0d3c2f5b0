# File: tests/test_sitemap_parser.py
import pytest

from sitemap_scout.parser.sitemap_parser import (
    LineLocExtractor,
    XmlLocExtractor,
    get_extractor,
    is_index_document,
)

NAMESPACED = """<?xml version="1.0" encoding="UTF-8"?>
<ns:urlset xmlns:ns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <ns:url><ns:loc>http://www.example.com/a</ns:loc></ns:url>
  <ns:url><ns:loc>http://www.example.com/b</ns:loc></ns:url>
</ns:urlset>
"""

MEDIA = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"
        xmlns:image="http://www.google.com/schemas/sitemap-image/1.1"
        xmlns:vid="http://www.google.com/schemas/sitemap-video/1.1">
  <url>
    <loc>http://www.example.com/gallery</loc>
    <image:image><image:loc>http://www.example.com/photo.jpg</image:loc></image:image>
    <vid:video><vid:content_loc>http://www.example.com/v.mp4</vid:content_loc><vid:loc>http://www.example.com/v</vid:loc></vid:video>
  </url>
  <url><loc>http://www.example.com/about</loc></url>
</urlset>
"""

ONE_LINE = (
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
    "<url><loc>http://www.example.com/1</loc></url>"
    "<url><loc>http://www.example.com/2</loc></url>"
    "<url><loc>http://www.example.com/3</loc></url></urlset>"
)

PRETTY = """<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url>
    <loc>
      http://www.example.com/spaced
    </loc>
  </url>
  <url><loc><![CDATA[http://www.example.com/cdata?a=1&b=2]]></loc></url>
</urlset>
"""

EXTRACTORS = [LineLocExtractor, XmlLocExtractor]


@pytest.mark.parametrize("extractor_cls", EXTRACTORS)
def test_extracts_in_document_order(extractor_cls, urlset, five_urls):
    assert extractor_cls().extract(urlset(*five_urls)) == five_urls


@pytest.mark.parametrize("extractor_cls", EXTRACTORS)
def test_namespaced_locs_are_folded(extractor_cls):
    assert extractor_cls().extract(NAMESPACED) == [
        "http://www.example.com/a",
        "http://www.example.com/b",
    ]


@pytest.mark.parametrize("extractor_cls", EXTRACTORS)
def test_media_locs_are_skipped(extractor_cls):
    assert extractor_cls().extract(MEDIA) == [
        "http://www.example.com/gallery",
        "http://www.example.com/about",
    ]


@pytest.mark.parametrize("extractor_cls", EXTRACTORS)
def test_single_line_document(extractor_cls):
    assert extractor_cls().extract(ONE_LINE) == [
        "http://www.example.com/1",
        "http://www.example.com/2",
        "http://www.example.com/3",
    ]


@pytest.mark.parametrize("extractor_cls", EXTRACTORS)
def test_whitespace_and_cdata(extractor_cls):
    assert extractor_cls().extract(PRETTY) == [
        "http://www.example.com/spaced",
        "http://www.example.com/cdata?a=1&b=2",
    ]


@pytest.mark.parametrize("extractor_cls", EXTRACTORS)
def test_empty_document(extractor_cls):
    assert extractor_cls().extract("") == []


def test_line_extractor_survives_truncated_markup():
    broken = "<urlset><url><loc>http://www.example.com/ok</loc></url><url><loc>http://www.exa"
    assert LineLocExtractor().extract(broken) == ["http://www.example.com/ok"]


def test_index_detection(index, urlset):
    assert is_index_document(index("http://www.example.com/s1.xml"))
    assert is_index_document('<x:sitemapindex xmlns:x="..."><x:sitemap id="1"><x:loc>u</x:loc></x:sitemap>')
    assert not is_index_document(urlset("http://www.example.com/"))
    # the root tag alone is not an index marker
    assert not is_index_document("<sitemapindex></sitemapindex>")


def test_get_extractor():
    assert isinstance(get_extractor("lines"), LineLocExtractor)
    assert isinstance(get_extractor("xml"), XmlLocExtractor)
    with pytest.raises(ValueError):
        get_extractor("regex")
