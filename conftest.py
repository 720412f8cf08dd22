"""Conftest.py (root-level).

We keep this in root pytest fixtures in pytest's doctest plugin to be available, as well
as avoiding conftest.py from being included in the wheel, in addition to pytest_plugin
for pytester only being available via the root directory.

See "pytest_plugins in non-top-level conftest files" in
https://docs.pytest.org/en/stable/deprecations.html
"""

from __future__ import annotations

import typing as t

import pytest
from _pytest.doctest import DoctestItem

from libgtp import exc
from libgtp.command import Command, cmd
from libgtp.engine import Engine
from libgtp.entity import EntityBuilder, EntityParser
from libgtp.response import ResponseParser

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> None:
    """Configure doctest fixtures for pytest-doctest."""
    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["exc"] = exc
        doctest_namespace["Command"] = Command
        doctest_namespace["cmd"] = cmd
        doctest_namespace["Engine"] = Engine
        doctest_namespace["EntityBuilder"] = EntityBuilder
        doctest_namespace["EntityParser"] = EntityParser
        doctest_namespace["ResponseParser"] = ResponseParser
        doctest_namespace["fake_engine_argv"] = request.getfixturevalue(
            "fake_engine_argv",
        )
        doctest_namespace["engine_factory"] = request.getfixturevalue(
            "engine_factory",
        )
        doctest_namespace["engine"] = request.getfixturevalue("engine")
        doctest_namespace["request"] = request
