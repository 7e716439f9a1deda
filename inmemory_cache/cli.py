"""Command-line demo of the LRU cache.

Builds a cache, subscribes a printer to evictions and walks through the
basic operations: fill, promote, evict, miss, remove.

Usage
-----
    python -m inmemory_cache.cli --capacity 3
    inmemory-cache-demo --config cache.json -v
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, List, Optional

from .config.models import CacheConfig, EnvSettings
from .core.cache import LRUCache
from .exceptions import KeyNotFoundError
from .observability import setup_logging

logger = logging.getLogger(__name__)

# Smallest capacity at which the walkthrough shows an eviction
DEMO_CAPACITY = 3


def _resolve_config(args: argparse.Namespace) -> CacheConfig:
    """Merge CLI flags, an optional JSON file and environment settings.

    ``--capacity`` wins over the file, which wins over the environment.
    Without any of them the demo runs at :data:`DEMO_CAPACITY`.
    """
    if args.config:
        cfg = CacheConfig.load(Path(args.config))
        if args.capacity is None:
            return cfg
        return CacheConfig.model_validate(
            {**cfg.model_dump(), "capacity": args.capacity}
        )
    if args.capacity is not None:
        return CacheConfig(capacity=args.capacity)

    # Only the environment is consulted when no higher source is given
    env = EnvSettings()
    capacity = env.capacity if "capacity" in env.model_fields_set else DEMO_CAPACITY
    return CacheConfig(capacity=capacity, log_level=env.log_level)


def run_demo(cache: LRUCache[str, int], echo: Callable[[str], None] = print) -> None:
    """Run the demo scenario against ``cache`` and report each step."""
    subscription = cache.subscribe(
        lambda key, value: echo(f"Evicted: Key = {key}, Value = {value}")
    )
    try:
        echo("Adding items to the cache...")
        for key, value in (("A", 1), ("B", 2), ("C", 3)):
            cache.add(key, value)
        echo("Cache filled.")

        echo(
            "Retrieving item with key 'B': "
            f"{cache.lookup('B').value_or('<missing>')}"
        )

        echo("Adding item with key 'D', value 4...")
        cache.add("D", 4)

        echo("Trying to retrieve evicted item with key 'A'...")
        try:
            echo(str(cache.get("A")))
        except KeyNotFoundError:
            echo("Item with key 'A' not found!")

        echo("Removing item with key 'C'...")
        if cache.try_remove("C"):
            echo("Item with key 'C' removed successfully.")
        else:
            echo("Item with key 'C' not found!")

        echo("Final state of the cache:")
        for key in ("B", "D"):
            lookup = cache.lookup(key)
            echo(f"Key '{key}': {lookup.value_or('<missing>')}")

        stats = cache.stats()
        logger.info(
            "demo.finished",
            extra={
                "size": stats.size,
                "hits": stats.hits,
                "misses": stats.misses,
                "evictions": stats.evictions,
            },
        )
    finally:
        subscription.unsubscribe()


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for the cache demo."""
    parser = argparse.ArgumentParser(description="In-memory LRU cache demo")
    parser.add_argument("--config", help="Path to JSON cache config")
    parser.add_argument(
        "--capacity",
        type=int,
        help=(
            "Cache capacity (overrides config file and environment; "
            f"default {DEMO_CAPACITY})"
        ),
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG, twice traces evictions)",
    )
    args = parser.parse_args(argv)

    try:
        cfg = _resolve_config(args)
    except (OSError, ValueError) as exc:
        parser.error(f"invalid cache configuration: {exc}")
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else cfg.log_level)
    setup_logging(effective_level, trace_evictions=args.verbose > 1)

    cache: LRUCache[str, int] = cfg.build_cache()
    run_demo(cache)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
