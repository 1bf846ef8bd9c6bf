"""
Caching Module for newsdesk.

Caches raw feed bodies between fetches. Entries carry their own
expiry; an entry that cannot be read is treated as absent.
"""

import json
import time
import hashlib
import logging
from typing import Optional, Any
from pathlib import Path
from threading import Lock

logger = logging.getLogger(__name__)


class CacheBackend:
    """Base cache backend interface."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def clear(self) -> bool:
        raise NotImplementedError

    def stats(self) -> dict:
        return {}


def _expired(entry: dict) -> bool:
    expires_at = entry.get('expires_at')
    return expires_at is not None and time.time() > expires_at


def _make_entry(key: str, value: Any, ttl: int) -> dict:
    now = time.time()
    return {
        'key': key,
        'value': value,
        'created_at': now,
        'expires_at': now + ttl if ttl > 0 else None,
    }


class InMemoryCache(CacheBackend):
    """
    Thread-safe in-memory cache with TTL support.

    Used by default and in tests.
    """

    def __init__(self, max_size: int = 1000):
        self._cache: dict[str, dict] = {}
        self._lock = Lock()
        self._max_size = max_size

    def _evict_if_needed(self):
        """Evict oldest entries if cache is full."""
        if len(self._cache) >= self._max_size:
            # Remove 10% of oldest entries
            entries = sorted(
                self._cache.items(),
                key=lambda x: x[1].get('created_at', 0)
            )
            for key, _ in entries[:max(1, self._max_size // 10)]:
                del self._cache[key]

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if _expired(entry):
                del self._cache[key]
                return None

            return entry.get('value')

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        with self._lock:
            if key not in self._cache:
                self._evict_if_needed()
            self._cache[key] = _make_entry(key, value, ttl)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> bool:
        with self._lock:
            self._cache.clear()
            return True

    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            expired = sum(1 for e in self._cache.values() if _expired(e))
            return {
                'backend': 'memory',
                'size': len(self._cache),
                'max_size': self._max_size,
                'expired_entries': expired,
            }


class FileCache(CacheBackend):
    """
    File-based cache for persistence across restarts.

    One JSON file per key, named by the md5 of the key.
    Values must be JSON-serializable.
    """

    def __init__(self, cache_dir: str = "cache/feeds"):
        self._cache_dir = Path(cache_dir)
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _get_path(self, key: str) -> Path:
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return self._cache_dir / f"{key_hash}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._get_path(key)

        with self._lock:
            if not path.exists():
                return None

            try:
                with open(path, 'r', encoding='utf-8') as f:
                    entry = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
                logger.warning(f"Failed to read cache file {path}: {e}")
                return None

            if not isinstance(entry, dict) or entry.get('key') != key:
                return None

            if _expired(entry):
                path.unlink(missing_ok=True)
                return None

            return entry.get('value')

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        path = self._get_path(key)

        with self._lock:
            try:
                with open(path, 'w', encoding='utf-8') as f:
                    json.dump(_make_entry(key, value, ttl), f)
                return True
            except (OSError, TypeError, ValueError) as e:
                logger.warning(f"Failed to write cache file {path}: {e}")
                return False

    def delete(self, key: str) -> bool:
        path = self._get_path(key)

        with self._lock:
            if path.exists():
                path.unlink(missing_ok=True)
                return True
            return False

    def clear(self) -> bool:
        with self._lock:
            for path in self._cache_dir.glob("*.json"):
                try:
                    path.unlink()
                except OSError as e:
                    logger.warning(f"Failed to remove cache file {path}: {e}")
            return True

    def stats(self) -> dict:
        with self._lock:
            return {
                'backend': 'file',
                'size': len(list(self._cache_dir.glob("*.json"))),
                'cache_dir': str(self._cache_dir),
            }


def cache_key(*parts: str) -> str:
    """Build a namespaced cache key."""
    return ":".join(parts)
