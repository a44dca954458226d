"""In-memory cache backend."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, NamedTuple

from kima.cache.base import Cache

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    value: Any
    stored_at: float
    expires_at: float | None


class MemoryCache(Cache):
    """Process-local cache with per-key expiration.

    Args:
        default_expiration: TTL applied when ``set()`` gets ``expiration=0``
            (0 = no expiry).
    """

    def __init__(self, default_expiration: int = 0) -> None:
        self._default_expiration = default_expiration
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        entry = self._entry(key)
        return entry.value if entry else None

    def get_by_file(self, key: str, file_path: str | Path) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None

        try:
            modified = Path(file_path).stat().st_mtime
        except FileNotFoundError:
            logger.debug("Cache reference file missing: %s", file_path)
            return None

        return entry.value if entry.stored_at >= modified else None

    def get_timestamp(self, key: str) -> float | None:
        entry = self._entry(key)
        return entry.stored_at if entry else None

    def set(self, key: str, value: Any, expiration: int = 0) -> bool:
        ttl = expiration or self._default_expiration
        now = time.time()
        with self._lock:
            self._entries[key] = _Entry(value, now, now + ttl if ttl > 0 else None)
        return True

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _entry(self, key: str) -> _Entry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at is not None and entry.expires_at <= time.time():
                del self._entries[key]
                return None
            return entry
