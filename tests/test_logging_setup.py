from __future__ import annotations

import io
import logging

import pytest

from financy.logging_setup import configure_logging, get_logger


def _pkg_logger() -> logging.Logger:
    return logging.getLogger("financy")


def test_library_default_is_silent():
    get_logger("financy.aggregate")
    handlers = _pkg_logger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.NullHandler)


def test_configure_logging_once():
    stream = io.StringIO()
    configure_logging("debug", stream=stream, fmt="%(name)s %(message)s")
    configure_logging("error")  # no-op after the first call

    get_logger("financy.pipeline").debug("pipeline:run total=%d", 3)
    assert stream.getvalue() == "financy.pipeline pipeline:run total=3\n"
    handlers = _pkg_logger().handlers
    assert len(handlers) == 1
    assert not isinstance(handlers[0], logging.NullHandler)
    assert _pkg_logger().propagate is False


@pytest.mark.parametrize(
    "env, expected",
    [("ERROR", logging.ERROR), ("10", logging.DEBUG), ("chatty", logging.INFO)],
)
def test_level_from_environment(monkeypatch: pytest.MonkeyPatch, env: str, expected: int):
    monkeypatch.setenv("FINANCY_LOG_LEVEL", env)
    configure_logging(stream=io.StringIO())
    assert _pkg_logger().level == expected


def test_default_level_is_warning():
    configure_logging(stream=io.StringIO())
    assert _pkg_logger().level == logging.WARNING
