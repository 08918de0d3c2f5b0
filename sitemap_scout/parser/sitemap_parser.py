# File: sitemap_scout/parser/sitemap_parser.py
"""sitemap_scout.parser.sitemap_parser: document classification and <loc> extraction.

Two interchangeable extractors are provided:

* :class:`LineLocExtractor` rewrites the text so every ``<loc>`` sits on its own
  line and scans line by line. It copes with truncated or sloppy XML.
* :class:`XmlLocExtractor` parses the document with lxml in recover mode.

Both skip image and video sitemap extensions, whose ``<image:loc>`` /
``<video:loc>`` entries point at media rather than pages.

Example:
```python
from sitemap_scout.parser.sitemap_parser import LineLocExtractor, is_index_document

with open('sitemap.xml', encoding='utf-8') as f:
    content = f.read()
print(is_index_document(content), LineLocExtractor().extract(content))
```
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Protocol, Set
from xml.sax.saxutils import unescape

from lxml import etree

__all__ = (
    "MEDIA_NAMESPACES",
    "LocExtractor",
    "LineLocExtractor",
    "XmlLocExtractor",
    "get_extractor",
    "is_index_document",
)

MEDIA_NAMESPACES: FrozenSet[str] = frozenset(
    {
        "http://www.google.com/schemas/sitemap-image/1.1",
        "http://www.google.com/schemas/sitemap-video/1.1",
    }
)
_MEDIA_PREFIXES: FrozenSet[str] = frozenset({"image", "video"})

_INDEX_MARKER_RE = re.compile(r"<(?:[\w.-]+:)?sitemap(?:\s[^>]*)?>")
_XMLNS_RE = re.compile(r"""xmlns:([\w.-]+)\s*=\s*["']([^"']*)["']""")
_LOC_OPEN_RE = re.compile(r"<(?:([\w.-]+):)?loc>\s*")
_LOC_CLOSE_RE = re.compile(r"\s*</(?:([\w.-]+):)?loc>")
_LOC_LINE_RE = re.compile(r"<loc>(.*?)</loc>")
_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>")


class LocExtractor(Protocol):
    """Anything able to turn a document into candidate location strings."""

    def extract(self, text: str) -> List[str]:
        ...


def is_index_document(text: str) -> bool:
    """True when the text contains a ``<sitemap>`` element, whatever its prefix."""
    return _INDEX_MARKER_RE.search(text) is not None


def _media_prefixes(text: str) -> Set[str]:
    """Prefixes bound to image/video namespaces, plus the conventional ones."""
    prefixes = set(_MEDIA_PREFIXES)
    for prefix, uri in _XMLNS_RE.findall(text):
        if uri.strip() in MEDIA_NAMESPACES:
            prefixes.add(prefix)
    return prefixes


class LineLocExtractor:
    """Line-scanning extractor, tolerant of namespaces and broken markup."""

    def _normalize(self, text: str) -> List[str]:
        skipped = _media_prefixes(text)

        def fold_open(match: re.Match[str]) -> str:
            if match.group(1) in skipped:
                return "\n" + match.group(0)
            return "\n<loc>"

        def fold_close(match: re.Match[str]) -> str:
            if match.group(1) in skipped:
                return match.group(0) + "\n"
            return "</loc>\n"

        text = _LOC_OPEN_RE.sub(fold_open, text)
        text = _LOC_CLOSE_RE.sub(fold_close, text)
        return text.splitlines()

    def extract(self, text: str) -> List[str]:
        urls: List[str] = []
        for line in self._normalize(text):
            match = _LOC_LINE_RE.search(line)
            if not match:
                continue
            value = match.group(1).strip()
            cdata = _CDATA_RE.fullmatch(value)
            if cdata:
                value = cdata.group(1).strip()
            else:
                value = unescape(value)
            if value:
                urls.append(value)
        return urls


class XmlLocExtractor:
    """Structural extractor on top of lxml."""

    def extract(self, text: str) -> List[str]:
        text = text.strip()
        if not text:
            return []
        parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
        root = etree.fromstring(text.encode("utf-8"), parser=parser)
        if root is None:
            return []
        urls: List[str] = []
        for loc in root.findall(".//{*}loc"):
            if etree.QName(loc).namespace in MEDIA_NAMESPACES:
                continue
            if loc.text and loc.text.strip():
                urls.append(loc.text.strip())
        return urls


_EXTRACTORS: Dict[str, type] = {
    "lines": LineLocExtractor,
    "xml": XmlLocExtractor,
}


def get_extractor(name: str) -> LocExtractor:
    """Return a fresh extractor registered under *name*."""
    try:
        return _EXTRACTORS[name]()
    except KeyError:
        raise ValueError(f"Unknown extractor: {name!r}") from None
