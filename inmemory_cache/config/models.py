"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration. JSON parsing prefers `orjson` when available for speed, but
intentionally falls back to the Python standard library's `json` module so
`orjson` stays an optional dependency.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.cache import LRUCache

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _normalize_level(value: str) -> str:
    level = value.upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
    return level


class CacheConfig(BaseModel):
    """File-based cache configuration.

    Attributes
    ----------
    capacity: int
        Maximum number of entries the cache holds.
    name: str
        Label used in log records.
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    """

    capacity: int = Field(..., ge=1, description="Maximum number of entries")
    name: str = Field("cache", min_length=1, description="Cache label for logs")
    log_level: str = Field("INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Upper-case and validate the level name."""
        return _normalize_level(value)

    @staticmethod
    def load(path: Path) -> "CacheConfig":
        """Load cache config from a JSON file."""
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return CacheConfig.model_validate(data)

    def build_cache(self) -> LRUCache[Any, Any]:
        """Construct a new cache from this configuration."""
        return LRUCache(self.capacity, name=self.name)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    capacity: int
        Default cache capacity. Defaults to 128.
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="INMEMORY_CACHE_")

    capacity: int = Field(128, ge=1)
    log_level: str = Field("INFO")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Upper-case and validate the level name."""
        return _normalize_level(value)
