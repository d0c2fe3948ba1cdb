"""Pytest configuration for test isolation.

The CLI reads ``DATABASE_URL`` and a few ``FINANCY_*`` variables, the
database client keeps one engine per process, and the package logger is
configured once per process. Any of these leaking between tests makes
results order-dependent, so an autouse fixture scrubs the environment and
resets both singletons around every test.
"""

# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make the workspace packages importable without an editable install.
_ROOT = Path(__file__).resolve().parents[1]
_PATHS = [_ROOT / "packages", _ROOT / "libs" / "db" / "src", _ROOT]
sys.path[:0] = [str(p) for p in _PATHS if str(p) not in sys.path]

from db.client import dispose_engine
from financy.logging_setup import reset_logging

_ENV_VARS = (
    "DATABASE_URL",
    "FINANCY_LOG_LEVEL",
    "FINANCY_PAGE_SIZE",
    "FINANCY_ALLOW_ZERO_AMOUNT",
)


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear env overrides and reset the shared engine and logger per test."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    dispose_engine()
    reset_logging()
    yield
    dispose_engine()
    reset_logging()
