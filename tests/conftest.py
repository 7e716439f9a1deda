"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so ``import inmemory_cache``
resolves to the local sources regardless of the working directory pytest
chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def reset_shared_registry():
    """Clear the process-wide cache registry around each test.

    Shared caches are fixed at first configuration, so a leftover instance
    would make capacity assertions order-dependent.
    """
    from inmemory_cache.core.registry import reset_shared_caches

    reset_shared_caches()
    yield
    reset_shared_caches()


@pytest.fixture
def evictions():
    """List that records ``(key, value)`` pairs passed to an eviction handler."""
    return []
