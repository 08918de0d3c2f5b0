# File: sitemap_scout/utils.py
"""sitemap_scout.utils: small helpers for URL lists."""

from __future__ import annotations

from typing import Collection, Iterator, List, Optional, Sequence, TypeVar

from sitemap_scout.logger import logger

__all__: Sequence[str] = (
    "chunked",
    "remove_duplicates",
)

T = TypeVar("T")


def chunked(items: Sequence[T], size: Optional[int]) -> Iterator[Sequence[T]]:
    """Slice *items* into consecutive batches of *size*; ``None`` yields one batch."""
    if not items:
        return
    if size is None or size >= len(items):
        yield items
        return
    for start in range(0, len(items), size):
        yield items[start : start + size]


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Remove duplicate URLs, keeping the first occurrence."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
