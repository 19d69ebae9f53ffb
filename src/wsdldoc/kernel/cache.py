"""Lazy, never-evicted memo caches owned by one document instance.

Each entry is tri-state: a key that was never computed is absent from the
table, and a computed miss is stored as ``None``. A confirmed miss therefore
costs one lookup, not another resolution.

The caches are not synchronized. Two threads racing on the first access to the
same key can both compute it; confine a document to one thread.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# Marks a key that has not been computed yet (distinct from a cached None).
_UNCOMPUTED = object()


@dataclass(frozen=True)
class CacheStats:
    """Counters for one memo cache."""
    hits: int
    misses: int
    size: int


class MemoCache(Generic[K, V]):
    """Insert-only memo table. Insertion is the only mutation."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: Dict[K, Optional[V]] = {}
        self._hits = 0
        self._misses = 0

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def lookup(self, key: K) -> object:
        """Return the cached value, or the uncomputed marker when the key is new."""
        return self._entries.get(key, _UNCOMPUTED)

    def get_or_compute(self, key: K, compute: Callable[[], Optional[V]]) -> Optional[V]:
        """Return the cached value for ``key``, computing and storing it on first access."""
        cached = self._entries.get(key, _UNCOMPUTED)
        if cached is not _UNCOMPUTED:
            self._hits += 1
            return cached  # type: ignore[return-value]

        self._misses += 1
        value = compute()
        self._entries[key] = value
        logger.debug("%s cache: stored %r (%s)", self.name, key, "absent" if value is None else "found")
        return value

    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))


def is_uncomputed(value: object) -> bool:
    """True when ``value`` is the marker returned by MemoCache.lookup for a new key."""
    return value is _UNCOMPUTED


@dataclass
class DocumentCaches:
    """Every memo a document owns, threaded explicitly into the kernel components."""
    resolution: MemoCache = field(default_factory=lambda: MemoCache("resolution"))
    definitions: MemoCache = field(default_factory=lambda: MemoCache("definition"))

    def info(self) -> Dict[str, CacheStats]:
        return {
            "resolution": self.resolution.stats(),
            "definitions": self.definitions.stats(),
        }
