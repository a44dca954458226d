"""Configuration layer."""

from kima.config.settings import CacheSettings, ConfigProvider, SearchSettings, Settings

__all__ = ["CacheSettings", "ConfigProvider", "SearchSettings", "Settings"]
