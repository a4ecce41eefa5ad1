"""Disk-based cache for fetched JSON schemas.

Uses :mod:`diskcache` to persist schema documents on the filesystem with a
configurable time-to-live (TTL).  Cache keys are SHA-256 hashes of the
schema URL.  The cache is off unless :attr:`~swank.models.CacheConfig.enabled`
is set, in which case repeated runs for the same spec version skip the
network.

See Also:
    :class:`~swank.models.CacheConfig` -- controls ``enabled`` and
    ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from swank.models import CacheConfig


class SchemaCache:
    """Disk-backed cache of schema documents keyed by URL.

    Args:
        cache_dir: Root directory for the cache.  A ``schemas/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = SchemaCache("/tmp/swank-cache", CacheConfig(enabled=True))
        cache.set(url, schema)
        hit = cache.get(url)
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "schemas"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, url: str) -> Optional[dict[str, Any]]:
        """Return the cached schema for *url*, or ``None`` on a miss."""
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(url))

    def set(self, url: str, schema: dict[str, Any]) -> None:
        """Store *schema* for *url*.  Ignored when caching is disabled."""
        if self._cache is None:
            return
        self._cache.set(self._make_key(url), schema, expire=self._config.ttl_seconds)

    def invalidate(self, url: str) -> None:
        """Remove the entry for *url*."""
        if self._cache is None:
            return
        self._cache.delete(self._make_key(url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return ``enabled`` and, when enabled, ``size``, ``directory``, ``ttl_seconds``."""
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "schemas"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    def _make_key(self, url: str) -> str:
        return hashlib.sha256(url.encode()).hexdigest()
