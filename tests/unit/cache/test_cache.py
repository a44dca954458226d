"""Tests for cache backends and backend selection."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from kima.cache import Cache, MemoryCache, VoidCache, create_cache
from kima.config.settings import CacheSettings


class TestVoidCache:
    def test_stores_nothing(self, tmp_path: Path) -> None:
        cache = VoidCache()
        assert cache.set("k", "v") is False
        assert cache.get("k") is None
        assert cache.get_by_file("k", tmp_path / "f") is None
        assert cache.get_timestamp("k") is None


class TestMemoryCache:
    def test_set_and_get(self) -> None:
        cache = MemoryCache()
        assert cache.set("k", {"a": 1}) is True
        assert cache.get("k") == {"a": 1}
        assert cache.get("missing") is None

    def test_expiration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        now = 1_000.0
        monkeypatch.setattr(time, "time", lambda: now)
        cache = MemoryCache()
        cache.set("k", "v", expiration=10)

        now = 1_009.0
        assert cache.get("k") == "v"
        now = 1_010.0
        assert cache.get("k") is None
        assert cache.get_timestamp("k") is None

    def test_default_expiration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        now = 50.0
        monkeypatch.setattr(time, "time", lambda: now)
        cache = MemoryCache(default_expiration=5)
        cache.set("k", "v")
        now = 60.0
        assert cache.get("k") is None

    def test_timestamp(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(time, "time", lambda: 123.0)
        cache = MemoryCache()
        cache.set("k", "v")
        assert cache.get_timestamp("k") == 123.0

    def test_get_by_file(self, tmp_path: Path) -> None:
        source = tmp_path / "template.html"
        source.write_text("<p>hi</p>")
        os.utime(source, (1_000, 1_000))

        cache = MemoryCache()
        cache.set("k", "rendered")
        assert cache.get_by_file("k", source) == "rendered"

        # file changed after the value was cached
        future = time.time() + 3600
        os.utime(source, (future, future))
        assert cache.get_by_file("k", source) is None

    def test_get_by_file_missing_file(self, tmp_path: Path) -> None:
        cache = MemoryCache()
        cache.set("k", "v")
        assert cache.get_by_file("k", tmp_path / "gone") is None

    def test_delete_and_clear(self) -> None:
        cache = MemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")
        assert cache.get("a") is None
        cache.clear()
        assert cache.get("b") is None


class TestCreateCache:
    def test_default_is_void(self) -> None:
        assert isinstance(create_cache(), VoidCache)

    def test_memory_backend(self) -> None:
        cache = create_cache(CacheSettings(backend="memory", default_expiration=30))
        assert isinstance(cache, MemoryCache)
        assert isinstance(cache, Cache)
