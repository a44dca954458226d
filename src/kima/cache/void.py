"""Void cache — the null object among cache backends."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from kima.cache.base import Cache


class VoidCache(Cache):
    """Cache that stores nothing; every lookup is a miss."""

    def get(self, key: str) -> Any | None:
        return None

    def get_by_file(self, key: str, file_path: str | Path) -> Any | None:
        return None

    def get_timestamp(self, key: str) -> float | None:
        return None

    def set(self, key: str, value: Any, expiration: int = 0) -> bool:
        return False
