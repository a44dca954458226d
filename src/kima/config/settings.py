"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (KIMA_ prefix)
  2. YAML config file (if specified)
  3. Default values

The ``Settings`` object doubles as the search layer's config provider:
``get_core_options()`` hands out the connection options of one Solr core.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ConfigProvider(Protocol):
    """Anything able to supply per-core connection options."""

    def get_core_options(self, core: str) -> dict[str, Any] | None:
        """Return the connection options of ``core``, or ``None`` if unconfigured."""
        ...


class SearchSettings(BaseModel):
    """Search backend configuration."""

    enabled: bool = Field(default=True, description="Whether the Solr search capability is available")
    solr: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Connection options per Solr core, keyed by core name",
    )

    @field_validator("solr", mode="before")
    @classmethod
    def _parse_cores(cls, v: Any) -> dict[str, dict[str, Any]]:
        """Parse cores from a JSON string (env var) or a mapping."""
        if v is None:
            return {}
        if isinstance(v, str):
            import json

            parsed = json.loads(v) if v else {}
            if not isinstance(parsed, dict):
                raise ValueError("Solr cores must be a JSON object keyed by core name")
            return parsed
        return dict(v)


class CacheSettings(BaseModel):
    """Cache configuration."""

    backend: Literal["void", "memory"] = Field(default="void", description="Cache backend: void, memory")
    default_expiration: int = Field(default=0, ge=0, description="Default TTL in seconds (0 = no expiry)")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the KIMA_ prefix.
    Nested settings use double underscores: KIMA_SEARCH__ENABLED=false

    Example:
        KIMA_SEARCH__SOLR='{"products": {"hostname": "solr", "port": 8983}}'
        KIMA_CACHE__BACKEND=memory
        KIMA_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "KIMA_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="Kima", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def get_core_options(self, core: str) -> dict[str, Any] | None:
        """Return a copy of the connection options for a Solr core.

        Args:
            core: The core name.

        Returns:
            The options mapping, or ``None`` when the core is missing or empty.
        """
        options = self.search.solr.get(str(core))
        if not options:
            return None
        return dict(options)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they win
        over environment variables for the keys they set.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
