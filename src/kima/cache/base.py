"""Cache interface shared by every cache backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class Cache(ABC):
    """Abstract key/value cache.

    Backends are chosen by configuration through ``create_cache()``.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Retrieve a value, or None if missing or expired."""

    @abstractmethod
    def get_by_file(self, key: str, file_path: str | Path) -> Any | None:
        """Retrieve a value only if it was stored after the file last changed.

        The file's modification time replaces the expiration as the validity
        reference.
        """

    @abstractmethod
    def get_timestamp(self, key: str) -> float | None:
        """Return when a key was stored (epoch seconds), or None."""

    @abstractmethod
    def set(self, key: str, value: Any, expiration: int = 0) -> bool:
        """Store a value.

        Args:
            key: Cache key.
            value: Value to cache.
            expiration: Time-to-live in seconds (0 = no expiry).

        Returns:
            Whether the value was stored.
        """
