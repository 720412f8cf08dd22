"""libgtp pytest plugin."""

from __future__ import annotations

import logging
import sys
import typing as t

import pytest

from libgtp.engine import Engine

if t.TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

#: Module run by :func:`fake_engine_argv`
FAKE_ENGINE_MODULE = "libgtp.test.fake_engine"


@pytest.fixture(scope="session")
def fake_engine_argv() -> tuple[str, list[str]]:
    """Return ``(path, args)`` launching the bundled fake GTP engine.

    Unpacks straight into :class:`libgtp.Engine`:

    >>> Engine(*fake_engine_argv)
    Engine(path=..., args=['-m', 'libgtp.test.fake_engine'], started=False)
    """
    return sys.executable, ["-m", FAKE_ENGINE_MODULE]


@pytest.fixture
def engine_factory(
    request: pytest.FixtureRequest,
    fake_engine_argv: tuple[str, list[str]],
) -> Callable[..., Engine]:
    """Return a factory of started fake engines, shut down after the test.

    Extra arguments are passed to the fake engine.

    Examples
    --------
    >>> e1 = engine_factory()
    >>> e2 = engine_factory("--boardsize", "9")
    >>> e1.handle.pid != e2.handle.pid
    True
    """
    created: list[Engine] = []
    path, args = fake_engine_argv

    def factory(*extra_args: str) -> Engine:
        engine = Engine(path, [*args, *extra_args])
        engine.start()
        created.append(engine)
        return engine

    def fin() -> None:
        for engine in created:
            logger.debug("Shutting down test engine %r", engine)
            engine.shutdown()

    request.addfinalizer(fin)

    return factory


@pytest.fixture
def engine(engine_factory: Callable[..., Engine]) -> Engine:
    """Return a started :class:`libgtp.Engine` driving the fake GTP engine.

    >>> from libgtp import Engine, cmd

    >>> def test_example(engine: Engine) -> None:
    ...     assert engine.is_started
    ...     resp = engine.run(cmd("name"))
    ...     assert not resp.is_error
    ...     assert resp.text == "Fake Engine"

    .. ::
        >>> locals().keys()
        dict_keys(...)

        >>> source = ''.join([e.source for e in request._pyfuncitem.dtest.examples][:2])
        >>> pytester = request.getfixturevalue('pytester')

        >>> pytester.makepyfile(**{'whatever.py': source})
        PosixPath(...)

        >>> result = pytester.runpytest('whatever.py', '--disable-warnings')
        ===...

        >>> result.assert_outcomes(passed=1)
    """
    return engine_factory()
