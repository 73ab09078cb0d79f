"""Bounded caches for the URL value codec and parameter extraction.

Components:
- CacheStats: Hit/miss counters for a single cache
- BoundedCache: String-keyed cache for decoded values
- IdentityCache: Object-identity keyed cache for encoded composite values
- SourceCache: Weakly keyed cache for whole-source extraction results
- CacheConfig: Global cache configuration

None of the caches evict individual entries. Once a cache holds ``max_size``
entries further insertions are skipped until the cache is cleared. Entries are
idempotent, so concurrent writers may race without affecting results.

Decoded lists, dicts and sets are deep-copied into and out of the decode and
source caches, so mutating a returned value never changes a later hit.
"""

import copy
import threading
import weakref
from typing import Any, Final, Optional

from mypy_extensions import mypyc_attr

from urlstate.exceptions import ImproperConfigurationError
from urlstate.utils.logging import get_logger

__all__ = (
    "DEFAULT_MAX_SIZE",
    "BoundedCache",
    "CacheConfig",
    "CacheStats",
    "CacheStatsSnapshot",
    "IdentityCache",
    "SourceCache",
    "clear_url_state_caches",
    "get_cache_config",
    "get_cache_stats",
    "get_decode_cache",
    "get_encode_cache",
    "get_source_cache",
    "log_cache_stats",
    "update_cache_config",
)

DEFAULT_MAX_SIZE: Final = 1000

CACHE_STATS_SLOTS: Final = ("hits", "misses", "skipped")


def _detached(value: Any) -> Any:
    """Deep-copy mutable containers so cached state is never shared with callers."""
    if isinstance(value, (list, dict, set)):
        return copy.deepcopy(value)
    return value


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStats:
    """Cache statistics tracking."""

    __slots__ = CACHE_STATS_SLOTS

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.skipped = 0

    @property
    def hit_rate(self) -> float:
        """Cache hit rate as percentage."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_skip(self) -> None:
        """Record an insertion refused because the cache is full."""
        self.skipped += 1

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.skipped = 0

    def __repr__(self) -> str:
        return (
            f"CacheStats(hit_rate={self.hit_rate:.1f}%, "
            f"hits={self.hits}, misses={self.misses}, skipped={self.skipped})"
        )


@mypyc_attr(allow_interpreted_subclasses=False)
class BoundedCache:
    """String-keyed cache without eviction.

    Args:
        max_size: Maximum number of entries
    """

    __slots__ = ("_data", "_max_size", "_stats")

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self._data: dict[str, Any] = {}
        self._max_size = max_size
        self._stats = CacheStats()

    @property
    def max_size(self) -> int:
        return self._max_size

    def lookup(self, key: str) -> "tuple[bool, Any]":
        """Look up a key.

        ``None`` and the ``Empty`` sentinel are valid cached values, so the
        result carries an explicit hit flag.

        Args:
            key: Exact encoded string

        Returns:
            Tuple of (hit, value); value is None on a miss
        """
        try:
            value = self._data[key]
        except KeyError:
            self._stats.record_miss()
            return False, None
        self._stats.record_hit()
        return True, _detached(value)

    def put(self, key: str, value: Any) -> bool:
        """Store a value if capacity remains.

        Args:
            key: Exact encoded string
            value: Decoded value

        Returns:
            True if the entry is now cached
        """
        if key in self._data:
            self._data[key] = _detached(value)
            return True
        if len(self._data) >= self._max_size:
            self._stats.record_skip()
            return False
        self._data[key] = _detached(value)
        return True

    def clear(self) -> None:
        self._data.clear()
        self._stats.reset()

    def size(self) -> int:
        return len(self._data)

    def get_stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


@mypyc_attr(allow_interpreted_subclasses=False)
class IdentityCache:
    """Cache keyed by object identity rather than equality.

    Composite values such as dicts and lists are unhashable, and hashing them by
    content would cost as much as encoding them. Entries keep a strong reference
    to their key object so its ``id()`` cannot be reused while cached; cached
    objects must not be mutated afterwards.

    Args:
        max_size: Maximum number of entries
    """

    __slots__ = ("_data", "_max_size", "_stats")

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self._data: dict[int, tuple[Any, str]] = {}
        self._max_size = max_size
        self._stats = CacheStats()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, obj: Any) -> Optional[str]:
        """Return the cached encoding for ``obj`` or None."""
        entry = self._data.get(id(obj))
        if entry is None or entry[0] is not obj:
            self._stats.record_miss()
            return None
        self._stats.record_hit()
        return entry[1]

    def put(self, obj: Any, encoded: str) -> bool:
        key = id(obj)
        if key not in self._data and len(self._data) >= self._max_size:
            self._stats.record_skip()
            return False
        self._data[key] = (obj, encoded)
        return True

    def clear(self) -> None:
        self._data.clear()
        self._stats.reset()

    def size(self) -> int:
        return len(self._data)

    def get_stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, obj: object) -> bool:
        entry = self._data.get(id(obj))
        return entry is not None and entry[0] is obj


@mypyc_attr(allow_interpreted_subclasses=False)
class SourceCache:
    """Cache of extraction results keyed weakly by parameter-source identity.

    An entry disappears when its source is garbage collected, so a fresh
    source instance always starts from a miss. Content changes to a live source
    are never detected; sources are expected to be read-only.

    Args:
        max_size: Maximum number of entries
    """

    __slots__ = ("__weakref__", "_data", "_max_size", "_stats")

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self._data: dict[int, tuple[weakref.ref[Any], dict[str, Any]]] = {}
        self._max_size = max_size
        self._stats = CacheStats()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, source: Any) -> Optional[dict[str, Any]]:
        """Return a copy of the cached extraction for ``source`` or None."""
        entry = self._data.get(id(source))
        if entry is None or entry[0]() is not source:
            self._stats.record_miss()
            return None
        self._stats.record_hit()
        return _detached(entry[1])

    def put(self, source: Any, result: dict[str, Any]) -> bool:
        key = id(source)
        if key not in self._data and len(self._data) >= self._max_size:
            self._stats.record_skip()
            return False
        self_ref = weakref.ref(self)

        def _discard(ref: "weakref.ref[Any]") -> None:
            cache = self_ref()
            if cache is None:
                return
            current = cache._data.get(key)
            if current is not None and current[0] is ref:
                del cache._data[key]

        self._data[key] = (weakref.ref(source, _discard), _detached(result))
        return True

    def clear(self) -> None:
        self._data.clear()
        self._stats.reset()

    def size(self) -> int:
        return len(self._data)

    def get_stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._data)


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheConfig:
    """Global cache configuration for urlstate.

    Args:
        enabled: Use the codec and extraction caches. Output is identical either way.
        max_size: Capacity of each cache.
    """

    __slots__ = ("enabled", "max_size")

    def __init__(self, *, enabled: bool = True, max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size < 0:
            msg = f"Cache max_size must be zero or positive, got {max_size}"
            raise ImproperConfigurationError(msg)
        self.enabled = enabled
        self.max_size = max_size

    def __repr__(self) -> str:
        return f"CacheConfig(enabled={self.enabled}, max_size={self.max_size})"


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStatsSnapshot:
    """Entry counts and counters for the three codec caches."""

    __slots__ = (
        "decode_hits",
        "decode_misses",
        "decode_size",
        "encode_hits",
        "encode_misses",
        "encode_size",
        "max_size",
        "source_hits",
        "source_misses",
        "source_size",
    )

    def __init__(self) -> None:
        self.encode_size = 0
        self.decode_size = 0
        self.source_size = 0
        self.encode_hits = 0
        self.encode_misses = 0
        self.decode_hits = 0
        self.decode_misses = 0
        self.source_hits = 0
        self.source_misses = 0
        self.max_size = 0

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in self.__slots__}

    def __repr__(self) -> str:
        return (
            f"CacheStatsSnapshot(encode_size={self.encode_size}, decode_size={self.decode_size}, "
            f"source_size={self.source_size}, max_size={self.max_size})"
        )


_global_cache_config: Optional[CacheConfig] = None
_encode_cache: Optional[IdentityCache] = None
_decode_cache: Optional[BoundedCache] = None
_source_cache: Optional[SourceCache] = None
_cache_lock = threading.Lock()


def get_cache_config() -> CacheConfig:
    """Get the global cache configuration."""
    global _global_cache_config
    if _global_cache_config is None:
        _global_cache_config = CacheConfig()
    return _global_cache_config


def get_encode_cache() -> IdentityCache:
    """Get the process-wide encode cache."""
    global _encode_cache
    if _encode_cache is None:
        with _cache_lock:
            if _encode_cache is None:
                _encode_cache = IdentityCache(get_cache_config().max_size)
    return _encode_cache


def get_decode_cache() -> BoundedCache:
    """Get the process-wide decode cache."""
    global _decode_cache
    if _decode_cache is None:
        with _cache_lock:
            if _decode_cache is None:
                _decode_cache = BoundedCache(get_cache_config().max_size)
    return _decode_cache


def get_source_cache() -> SourceCache:
    """Get the process-wide parameter-source cache."""
    global _source_cache
    if _source_cache is None:
        with _cache_lock:
            if _source_cache is None:
                _source_cache = SourceCache(get_cache_config().max_size)
    return _source_cache


def clear_url_state_caches() -> None:
    """Clear the encode, decode and source caches."""
    if _encode_cache is not None:
        _encode_cache.clear()
    if _decode_cache is not None:
        _decode_cache.clear()
    if _source_cache is not None:
        _source_cache.clear()


def update_cache_config(config: CacheConfig) -> None:
    """Replace the global cache configuration.

    Existing caches are dropped and recreated lazily with the new capacity.

    Args:
        config: New cache configuration to apply globally
    """
    global _global_cache_config, _encode_cache, _decode_cache, _source_cache
    with _cache_lock:
        _global_cache_config = config
        _encode_cache = None
        _decode_cache = None
        _source_cache = None

    logger = get_logger("urlstate.cache")
    logger.info(
        "Cache configuration updated - all caches cleared",
        extra={"extra_fields": {"enabled": config.enabled, "max_size": config.max_size}},
    )


def get_cache_stats() -> CacheStatsSnapshot:
    """Get entry counts and hit/miss counters for all caches."""
    stats = CacheStatsSnapshot()
    stats.max_size = get_cache_config().max_size
    if _encode_cache is not None:
        stats.encode_size = _encode_cache.size()
        stats.encode_hits = _encode_cache.get_stats().hits
        stats.encode_misses = _encode_cache.get_stats().misses
    if _decode_cache is not None:
        stats.decode_size = _decode_cache.size()
        stats.decode_hits = _decode_cache.get_stats().hits
        stats.decode_misses = _decode_cache.get_stats().misses
    if _source_cache is not None:
        stats.source_size = _source_cache.size()
        stats.source_hits = _source_cache.get_stats().hits
        stats.source_misses = _source_cache.get_stats().misses
    return stats


def log_cache_stats() -> None:
    """Log cache statistics."""
    logger = get_logger("urlstate.cache")
    stats = get_cache_stats()
    logger.info("Cache Statistics: %s", stats, extra={"extra_fields": stats.as_dict()})
