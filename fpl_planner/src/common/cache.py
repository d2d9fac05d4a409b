"""
Caching utilities for FPL Planner.

Two flavours of cache live here:

- ``CacheManager`` persists raw API responses to disk (gzip) with a
  metadata sidecar and a TTL, so repeated runs do not hammer the FPL API.
- ``TTLCache`` is a small in-memory key/value store with a declared TTL and
  an explicit ``reset()``. Components that need session-scoped caches
  (league standings, peer squads, league metrics) own one of these instead
  of sharing module-level state.
"""

import json
import pickle
import hashlib
import gzip
import time
from pathlib import Path
from typing import Any, Callable, Dict, Hashable, Optional, Tuple
from .config import get_config, get_logger

logger = get_logger(__name__)


class CacheManager:
    """
    Disk cache of API payloads, one directory per category.

    Each entry is ``<md5(key)>.cache`` (gzip) plus ``<md5(key)>.meta``
    (JSON: key, payload format, write time). Dicts and lists are stored as
    JSON, anything else is pickled.
    """

    def __init__(self, cache_dir: Optional[Path] = None):
        config = get_config()
        self.cache_dir = Path(cache_dir) if cache_dir else config.cache_dir
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.default_ttl = config.get("performance.cache_ttl_hours", 24) * 3600

        logger.debug(f"Disk cache at {self.cache_dir}")

    def _paths(self, key: str, category: str) -> Tuple[Path, Path]:
        category_dir = self.cache_dir / category
        category_dir.mkdir(exist_ok=True)
        digest = hashlib.md5(key.encode()).hexdigest()
        return category_dir / f"{digest}.cache", category_dir / f"{digest}.meta"

    @staticmethod
    def _read_metadata(meta_path: Path) -> Optional[Dict[str, Any]]:
        try:
            with open(meta_path, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError):
            return None

    def get(self, key: str, category: str = "general", ttl: Optional[int] = None) -> Optional[Any]:
        """
        Read an entry.

        Args:
            key: Cache key
            category: Subdirectory the entry lives in
            ttl: Maximum age in seconds (``performance.cache_ttl_hours`` if None)

        Returns:
            Stored payload, or None when missing, stale or unreadable
        """
        data_path, meta_path = self._paths(key, category)
        if not data_path.exists():
            return None

        metadata = self._read_metadata(meta_path)
        if metadata is None or "stored_at" not in metadata:
            return None

        age = time.time() - float(metadata["stored_at"])
        if age > (ttl or self.default_ttl):
            return None

        try:
            with gzip.open(data_path, 'rb') as f:
                raw = f.read()
            if metadata.get("format") == "json":
                return json.loads(raw.decode())
            return pickle.loads(raw)
        except (OSError, ValueError, pickle.UnpicklingError) as e:
            logger.debug(f"Unreadable cache entry {key} ({category}): {e}")
            return None

    def set(self, key: str, data: Any, category: str = "general"):
        """Write an entry; failures are logged, never raised."""
        data_path, meta_path = self._paths(key, category)

        try:
            if isinstance(data, (dict, list)):
                payload, fmt = json.dumps(data).encode(), "json"
            else:
                payload, fmt = pickle.dumps(data), "pickle"

            with gzip.open(data_path, 'wb') as f:
                f.write(payload)
            with open(meta_path, 'w') as f:
                json.dump({"key": key, "format": fmt, "stored_at": time.time(), "size": len(payload)}, f)

            logger.debug(f"Cached {key} ({category}, {len(payload)} bytes)")
        except (OSError, TypeError, pickle.PicklingError) as e:
            logger.warning(f"Failed to cache {key}: {e}")

    def delete(self, key: str, category: str = "general"):
        for path in self._paths(key, category):
            path.unlink(missing_ok=True)

    def clear_category(self, category: str):
        """Remove every entry in a category."""
        category_dir = self.cache_dir / category
        if not category_dir.exists():
            return
        removed = 0
        for path in category_dir.iterdir():
            path.unlink()
            removed += 1
        logger.info(f"Cleared {removed} files from cache category '{category}'")


class TTLCache:
    """
    In-memory key/value store whose entries expire after ``ttl_seconds``.

    Writes are last-write-wins; there is no in-flight de-duplication, so two
    overlapping fetches for the same key simply store twice.
    """

    def __init__(
        self,
        ttl_seconds: float,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def _is_fresh(self, stored_at: float) -> bool:
        return (self._clock() - stored_at) < self.ttl_seconds

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None when missing or stale."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if not self._is_fresh(stored_at):
            del self._entries[key]
            logger.debug(f"{self.name}: entry {key!r} expired")
            return None

        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def delete(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def reset(self) -> None:
        """Drop every entry."""
        if self._entries:
            logger.debug(f"{self.name}: cleared {len(self._entries)} entries")
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return sum(1 for stored_at, _ in self._entries.values() if self._is_fresh(stored_at))


# Global cache manager instance
_cache_manager = None


def get_cache() -> CacheManager:
    """Get global cache manager instance."""
    global _cache_manager
    if _cache_manager is None:
        _cache_manager = CacheManager()
    return _cache_manager
