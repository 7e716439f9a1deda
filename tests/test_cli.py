"""Demo CLI smoke tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from inmemory_cache import LRUCache
from inmemory_cache.cli import main, run_demo


def test_run_demo_walkthrough() -> None:
    lines = []
    cache: LRUCache[str, int] = LRUCache(3)

    run_demo(cache, echo=lines.append)

    assert lines == [
        "Adding items to the cache...",
        "Cache filled.",
        "Retrieving item with key 'B': 2",
        "Adding item with key 'D', value 4...",
        "Evicted: Key = A, Value = 1",
        "Trying to retrieve evicted item with key 'A'...",
        "Item with key 'A' not found!",
        "Removing item with key 'C'...",
        "Item with key 'C' removed successfully.",
        "Final state of the cache:",
        "Key 'B': 2",
        "Key 'D': 4",
    ]
    # The demo's printer is detached afterwards
    assert len(cache.evicted) == 0


def test_main_with_capacity_flag(capsys, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INMEMORY_CACHE_CAPACITY", raising=False)

    assert main(["--capacity", "3"]) == 0

    out = capsys.readouterr().out
    assert "Evicted: Key = A, Value = 1" in out
    assert "Item with key 'A' not found!" in out


def test_main_with_config_file(tmp_path: Path, capsys) -> None:
    cfg_path = tmp_path / "cache.json"
    cfg_path.write_text(json.dumps({"capacity": 10, "log_level": "WARNING"}))

    assert main(["--config", str(cfg_path)]) == 0

    out = capsys.readouterr().out
    # Large enough that nothing is evicted
    assert "Evicted" not in out
    assert "Key 'A'" not in out
    assert "Retrieving item with key 'B': 2" in out
    # Nothing was evicted, so A is still retrievable
    assert "Trying to retrieve evicted item with key 'A'...\n1\n" in out
    assert "Item with key 'A' not found!" not in out


def test_main_without_flags_uses_demo_capacity(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("INMEMORY_CACHE_CAPACITY", raising=False)

    assert main([]) == 0

    out = capsys.readouterr().out
    assert "Evicted: Key = A, Value = 1" in out
    assert "Item with key 'A' not found!" in out


def test_main_uses_environment_capacity_when_set(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("INMEMORY_CACHE_CAPACITY", "10")

    assert main([]) == 0
    assert "Evicted" not in capsys.readouterr().out


def test_main_with_capacity_one_completes(
    capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("INMEMORY_CACHE_CAPACITY", raising=False)

    assert main(["--capacity", "1"]) == 0

    out = capsys.readouterr().out
    assert "Retrieving item with key 'B': <missing>" in out
    assert "Evicted: Key = C, Value = 3" in out
    assert "Key 'D': 4" in out


def test_invalid_environment_ignored_when_flags_are_given(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("INMEMORY_CACHE_CAPACITY", "0")
    cfg_path = tmp_path / "cache.json"
    cfg_path.write_text(json.dumps({"capacity": 3}))

    assert main(["--capacity", "3"]) == 0
    assert main(["--config", str(cfg_path)]) == 0
    assert capsys.readouterr().out.count("Evicted: Key = A, Value = 1") == 2


def test_capacity_flag_overrides_config_file(tmp_path: Path, capsys) -> None:
    cfg_path = tmp_path / "cache.json"
    cfg_path.write_text(json.dumps({"capacity": 10}))

    assert main(["--config", str(cfg_path), "--capacity", "3"]) == 0
    assert "Evicted: Key = A, Value = 1" in capsys.readouterr().out


def test_invalid_capacity_exits_with_usage_error(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--capacity", "0"])

    assert exc_info.value.code == 2
    assert "invalid cache configuration" in capsys.readouterr().err


def test_missing_config_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(tmp_path / "absent.json")])

    assert exc_info.value.code == 2
