"""Shared fixtures for libgtp's test suite."""

from __future__ import annotations

import logging

import pytest

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    """Capture libgtp debug logs, shown for failing tests."""
    caplog.set_level(logging.DEBUG, logger="libgtp")
