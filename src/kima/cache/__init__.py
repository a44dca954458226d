"""Cache layer — pluggable cache backends selected by configuration."""

from kima.cache.base import Cache
from kima.cache.manager import create_cache
from kima.cache.memory import MemoryCache
from kima.cache.void import VoidCache

__all__ = ["Cache", "MemoryCache", "VoidCache", "create_cache"]
