"""Controller for a GTP engine running as a child process.

libgtp.engine
~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import time
import typing as t

from libgtp import exc
from libgtp._internal.detached_command import DetachedCommand
from libgtp.constants import RESPONSE_TIMEOUT_SECONDS, WAIT_POLL_DIV
from libgtp.response import ResponseParser

if t.TYPE_CHECKING:
    import types
    from collections.abc import Sequence

    from libgtp.command import Command
    from libgtp.response import Response

logger = logging.getLogger(__name__)


class Engine:
    """Controller of a GTP engine process.

    Commands are stamped with sequential IDs and written to the engine in the
    background. Responses are collected without blocking by
    :meth:`poll_response`, or with a bounded wait by :meth:`wait_response`.

    Parameters
    ----------
    path : str
        Path of the engine executable.
    args : list of str, optional
        Arguments passed to the engine.

    Examples
    --------
    >>> engine = Engine(*fake_engine_argv)
    >>> engine.start()
    >>> engine.send(Command("name"))
    1
    >>> resp = engine.wait_response(5)
    >>> resp
    Result(id=1, text='Fake Engine')
    >>> [e.value for e in resp.entities(lambda ep: ep.s().s())]
    ['Fake', 'Engine']
    >>> engine.shutdown()

    Or use as context manager:

    >>> with Engine(*fake_engine_argv) as engine:
    ...     engine.start()
    ...     engine.run(cmd("protocol_version")).text
    '2'
    """

    def __init__(self, path: str, args: Sequence[str] = ()) -> None:
        self.path = path
        self.args = list(args)
        self.handle: DetachedCommand | None = None
        self._last_id = 0
        self._parser = ResponseParser()
        self._stderr = ""

    def __repr__(self) -> str:
        return (
            f"Engine(path={self.path!r}, args={self.args!r}, "
            f"started={self.is_started})"
        )

    def __enter__(self) -> Engine:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.shutdown()

    # Lifecycle ---------------------------------------------------------
    @property
    def is_started(self) -> bool:
        """Return ``True`` if an engine process has been started."""
        return self.handle is not None

    @property
    def last_id(self) -> int:
        """ID assigned to the most recently sent command, ``0`` if none."""
        return self._last_id

    def start(self) -> None:
        """Start the engine process in the background.

        A running engine process is shut down first. Command IDs keep counting
        across restarts.

        Raises
        ------
        :exc:`exc.StartupFailed`
            If the engine process could not be spawned.
        """
        if self.handle is not None:
            logger.debug("Restarting engine %s", self.path)
            self.shutdown()

        self._parser.clear()
        self.handle = DetachedCommand.start(self.path, self.args)

    def shutdown(self) -> None:
        """Kill the engine process and join its I/O threads.

        Safe to call multiple times.
        """
        if self.handle is None:
            return
        handle, self.handle = self.handle, None
        handle.shutdown()

    # Commands ----------------------------------------------------------
    def send(self, command: Command) -> int:
        """Send ``command`` to the engine and return its assigned ID.

        Returns ``0`` without sending anything if the engine is not started.
        """
        if self.handle is None:
            logger.debug("Engine not started, not sending %r", command)
            return 0

        self._last_id += 1
        command.set_id(self._last_id)
        logger.debug("Sending to %s: %s", self.path, str(command).rstrip("\n"))
        self.handle.send(command.to_bytes())
        return self._last_id

    def poll_response(self) -> Response | None:
        """Collect engine output and return the next response, if any.

        Never blocks. Captured stderr text is appended to :attr:`stderr`.

        Returns
        -------
        :class:`Response`, optional
            ``None`` if no complete response has arrived yet; poll again.

        Raises
        ------
        :exc:`exc.NoHandle`
            If the engine is not started.
        :exc:`exc.Disconnected`
            If the engine process has exited and no buffered response remains.
        :exc:`exc.BadResponse`
            If the engine sent malformed output.
        """
        if self.handle is None:
            raise exc.NoHandle

        disconnected: exc.Disconnected | None = None
        try:
            self.handle.poll()
        except exc.Disconnected as e:
            disconnected = e

        if self.handle.stderr_available():
            text = self.handle.recv_stderr()
            for line in text.splitlines():
                logger.debug("Engine stderr: %s", line)
            self._stderr += text

        if self.handle.stdout_available():
            self._parser.feed(self.handle.recv_stdout())

        try:
            response = self._parser.get_response()
        except exc.BadResponse:
            logger.warning("Malformed response from %s", self.path)
            raise

        if response is None and disconnected is not None:
            raise disconnected
        return response

    def wait_response(self, timeout: float | None = None) -> Response:
        """Poll for a response for at most ``timeout`` seconds.

        Sleeps ``timeout / 4`` between polls. Errors other than "nothing yet"
        are raised right away.

        Parameters
        ----------
        timeout : float, optional
            Seconds to wait. Defaults to ``5``, which is configurable via
            :envvar:`LIBGTP_RESPONSE_TIMEOUT_SECONDS`.

        Raises
        ------
        :exc:`exc.ResponseTimeout`
            If no response arrived in time.
        """
        if timeout is None:
            timeout = RESPONSE_TIMEOUT_SECONDS
        interval = timeout / WAIT_POLL_DIV
        started = time.monotonic()

        while True:
            response = self.poll_response()
            if response is not None:
                return response
            if time.monotonic() - started > timeout:
                raise exc.ResponseTimeout(timeout)
            time.sleep(interval)

    def run(self, command: Command, timeout: float | None = None) -> Response:
        """Send ``command`` and wait for its response.

        Raises
        ------
        :exc:`exc.NoHandle`
            If the engine is not started.
        :exc:`exc.ResponseIdMismatch`
            If the engine echoes an ID other than the one assigned.
        :exc:`exc.ResponseTimeout`
            If no response arrived in time.
        """
        if self.handle is None:
            raise exc.NoHandle
        cmd_id = self.send(command)
        response = self.wait_response(timeout)
        if response.id is not None and response.id != cmd_id:
            raise exc.ResponseIdMismatch(cmd_id, response.id)
        return response

    # Stderr ------------------------------------------------------------
    @property
    def stderr(self) -> str:
        """Engine stderr text captured so far."""
        return self._stderr

    def clear_stderr(self) -> None:
        """Discard the captured stderr text."""
        self._stderr = ""
