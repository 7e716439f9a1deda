"""Observability utilities: logging setup.

This module configures standard logging and, if available, integrates
`structlog` for structured logs. The dependency on `structlog` is optional to
keep the base runtime lightweight.
"""

from __future__ import annotations

import importlib
import logging

# Loggers emitting per-operation events (evictions, channel traffic)
_HOT_PATH_LOGGERS = (
    "inmemory_cache.core.cache",
    "inmemory_cache.core.events",
)


def setup_logging(level: str = "INFO", trace_evictions: bool = False) -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    trace_evictions: bool
        Force DEBUG on the cache hot-path loggers regardless of ``level``.

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - If `structlog` is installed, configures it with a filtering bound logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    if trace_evictions:
        for logger_name in _HOT_PATH_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.DEBUG)

    try:  # optional structlog
        structlog = importlib.import_module("structlog")
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        )
    except ModuleNotFoundError:  # pragma: no cover
        pass
