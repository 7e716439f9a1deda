"""Tests for cache configuration models."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from inmemory_cache import LRUCache
from inmemory_cache.config.models import CacheConfig, EnvSettings


def test_load_from_json(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cache.json"
    cfg_path.write_text(
        json.dumps({"capacity": 42, "name": "sessions", "log_level": "debug"})
    )

    cfg = CacheConfig.load(cfg_path)

    assert cfg.capacity == 42
    assert cfg.name == "sessions"
    assert cfg.log_level == "DEBUG"


def test_build_cache_uses_capacity_and_name() -> None:
    cache = CacheConfig(capacity=5, name="thumbs").build_cache()

    assert isinstance(cache, LRUCache)
    assert cache.capacity == 5
    assert cache.name == "thumbs"


def test_build_cache_returns_new_instances() -> None:
    cfg = CacheConfig(capacity=5)
    assert cfg.build_cache() is not cfg.build_cache()


@pytest.mark.parametrize("capacity", [0, -3])
def test_non_positive_capacity_rejected(capacity: int) -> None:
    with pytest.raises(ValidationError):
        CacheConfig(capacity=capacity)


def test_capacity_is_required(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cache.json"
    cfg_path.write_text("{}")

    with pytest.raises(ValidationError):
        CacheConfig.load(cfg_path)


def test_unknown_log_level_rejected() -> None:
    with pytest.raises(ValidationError, match="log_level"):
        CacheConfig(capacity=1, log_level="LOUD")


def test_env_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INMEMORY_CACHE_CAPACITY", raising=False)
    monkeypatch.delenv("INMEMORY_CACHE_LOG_LEVEL", raising=False)

    settings = EnvSettings(_env_file=None)

    assert settings.capacity == 128
    assert settings.log_level == "INFO"


def test_env_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INMEMORY_CACHE_CAPACITY", "64")
    monkeypatch.setenv("INMEMORY_CACHE_LOG_LEVEL", "warning")

    settings = EnvSettings(_env_file=None)

    assert settings.capacity == 64
    assert settings.log_level == "WARNING"


def test_env_settings_reject_zero_capacity(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INMEMORY_CACHE_CAPACITY", "0")

    with pytest.raises(ValidationError):
        EnvSettings(_env_file=None)
