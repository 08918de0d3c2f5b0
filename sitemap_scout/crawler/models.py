# sitemap_scout/crawler/models.py
"""
Data models for the SitemapScout crawler.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

DEPTH_EXCEEDED_MESSAGE = "Maximum recursive depth reached, more sites available."


class DocumentKind(str, Enum):
    """Classification of a fetched document."""

    SITEMAP = "sitemap"
    INDEX = "index"


@dataclass(slots=True)
class MapSiteError:
    """One failed location: the URL that triggered it and why."""

    url: str
    reason: str


@dataclass(slots=True)
class MapSiteResult:
    """Flat result of mapping one sitemap tree."""

    kind: DocumentKind = DocumentKind.SITEMAP
    urls: List[str] = field(default_factory=list)
    errors: List[MapSiteError] = field(default_factory=list)
    # set once a non-empty document wrote ``kind``
    classified: bool = field(default=False, repr=False, compare=False)

    def classify(self, kind: DocumentKind) -> None:
        self.kind = kind
        self.classified = True

    def add_error(self, url: str, reason: str) -> None:
        self.errors.append(MapSiteError(url, reason))

    def merge(self, other: MapSiteResult) -> None:
        """Fold a child branch into this result. A classified child overwrites ``kind``."""
        self.urls.extend(other.urls)
        self.errors.extend(other.errors)
        if other.classified:
            self.classify(other.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "urls": list(self.urls),
            "errors": [{"url": e.url, "reason": e.reason} for e in self.errors],
        }

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the result."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)

    @classmethod
    def failure(cls, url: str, reason: str) -> MapSiteResult:
        """Single-error result returned when a whole traversal fails."""
        return cls(errors=[MapSiteError(url, reason)])


@dataclass(slots=True)
class FetchSession:
    """Bookkeeping of one logical fetch; lives only inside a single ``fetch`` call."""

    url: str
    attempts: int = 0


@dataclass(slots=True)
class RecursionState:
    """Deepest index level entered during one traversal."""

    current_depth: int = 0

    def enter_level(self, depth: int) -> None:
        if depth > self.current_depth:
            self.current_depth = depth
