"""Run a line based background process with non-blocking, pollable I/O.

Note
----
This is an internal API not covered by versioning policy.

The child's stdin, stdout and stderr are served by three daemon threads.
The owner only talks to them through two :class:`queue.Queue` instances, so
none of the methods here block on the child except :meth:`DetachedCommand.shutdown`
and :meth:`DetachedCommand.recv_blocking`.

Examples
--------
>>> import sys
>>> dc = DetachedCommand.start(sys.executable, ["-c", "print('hi')"])
>>> from libgtp.test.retry import retry_until
>>> def got_output():
...     try:
...         dc.poll()
...     except exc.Disconnected:
...         pass
...     return dc.stdout_available()
>>> retry_until(got_output)
True
>>> dc.recv_stdout()
'hi\\n'
>>> dc.shutdown()
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import queue
import subprocess
import threading
import typing as t

from libgtp import exc
from libgtp.constants import ENCODING

if t.TYPE_CHECKING:
    import types
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class OutputSource(enum.Enum):
    """Stream a captured line was read from."""

    STDOUT = enum.auto()
    STDERR = enum.auto()


@dataclasses.dataclass(frozen=True)
class CapturedOutput:
    """A line read from the child, tagged by the stream it came from."""

    source: OutputSource
    text: str


#: Posted by a reader thread when its stream has ended
_END_OF_STREAM = object()

#: Posted to the writer thread to close its queue
_CLOSE = object()


class DetachedCommand:
    """A child process with piped, thread-served stdin/stdout/stderr.

    Create instances with :meth:`start`. After :meth:`shutdown` the object is
    not reusable.
    """

    def __init__(
        self,
        process: subprocess.Popen[bytes],
        cmd: Sequence[str],
    ) -> None:
        assert process.stdin is not None
        assert process.stdout is not None
        assert process.stderr is not None

        self.process = process
        self.cmd = list(cmd)
        self._inbox: queue.Queue[t.Any] = queue.Queue()
        self._outbox: queue.Queue[t.Any] = queue.Queue()
        self._stdout_chunks: list[str] = []
        self._stderr_chunks: list[str] = []
        self._open_readers = 2
        self._shut_down = False

        self._writer = threading.Thread(
            target=self._write_stdin,
            args=(process.stdin,),
            name=f"libgtp-writer-{process.pid}",
            daemon=True,
        )
        self._reader = threading.Thread(
            target=self._read_stream,
            args=(process.stdout, OutputSource.STDOUT),
            name=f"libgtp-stdout-{process.pid}",
            daemon=True,
        )
        self._err_reader = threading.Thread(
            target=self._read_stream,
            args=(process.stderr, OutputSource.STDERR),
            name=f"libgtp-stderr-{process.pid}",
            daemon=True,
        )
        self._writer.start()
        self._reader.start()
        self._err_reader.start()

    @classmethod
    def start(cls, path: str, args: Sequence[str] = ()) -> DetachedCommand:
        """Spawn ``path`` with ``args`` and start serving its pipes.

        Raises
        ------
        :exc:`exc.StartupFailed`
            If the process could not be spawned.
        """
        cmd = [path, *args]
        logger.debug("Starting process: %s", subprocess.list2cmdline(cmd))
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.debug("Failed to start %s: %s", cmd, e)
            raise exc.StartupFailed(cmd, e) from e

        return cls(process, cmd)

    def __repr__(self) -> str:
        return f"DetachedCommand(cmd={self.cmd!r}, pid={self.pid})"

    def __enter__(self) -> DetachedCommand:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.shutdown()

    # Process state -----------------------------------------------------
    @property
    def pid(self) -> int:
        """Process ID of the child."""
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        """Exit status of the child, ``None`` while it runs."""
        return self.process.poll()

    def is_alive(self) -> bool:
        """Return ``True`` while the child process runs."""
        return self.returncode is None

    # Worker threads ----------------------------------------------------
    def _write_stdin(self, stdin: t.IO[bytes]) -> None:
        try:
            while True:
                buffer = self._outbox.get()
                if buffer is _CLOSE:
                    break
                try:
                    stdin.write(buffer)
                    stdin.flush()
                except OSError as e:
                    logger.warning("Writer for %s stopped: %s", self.cmd, e)
                    break
        finally:
            try:
                stdin.close()
            except OSError as e:
                logger.debug("Closing stdin of %s failed: %s", self.cmd, e)

    def _read_stream(self, stream: t.IO[bytes], source: OutputSource) -> None:
        try:
            for raw in iter(stream.readline, b""):
                line = raw.decode(ENCODING, errors="backslashreplace")
                self._inbox.put(CapturedOutput(source, line))
        except (OSError, ValueError) as e:
            logger.debug("Reader %s for %s stopped: %s", source.name, self.cmd, e)
        finally:
            stream.close()
            self._inbox.put(_END_OF_STREAM)

    # Owner API ---------------------------------------------------------
    def poll(self) -> None:
        """Move all lines read so far into the stdout/stderr buffers.

        Never blocks.

        Raises
        ------
        :exc:`exc.Disconnected`
            If both output streams of the child have ended and every line has
            been drained. Lines drained by this call stay available.
        """
        while True:
            try:
                message = self._inbox.get_nowait()
            except queue.Empty:
                break
            if message is _END_OF_STREAM:
                self._open_readers -= 1
            elif message.source is OutputSource.STDOUT:
                self._stdout_chunks.append(message.text)
            else:
                self._stderr_chunks.append(message.text)

        if self._open_readers <= 0:
            raise exc.Disconnected

    def recv_blocking(self, timeout: float | None = None) -> CapturedOutput | None:
        """Wait for the next captured line and return it.

        The line is not added to the stdout/stderr buffers. Returns ``None``
        if nothing arrived within ``timeout`` seconds.

        Raises
        ------
        :exc:`exc.Disconnected`
            If both output streams of the child have ended.
        """
        while self._open_readers > 0:
            try:
                message = self._inbox.get(timeout=timeout)
            except queue.Empty:
                return None
            if message is _END_OF_STREAM:
                self._open_readers -= 1
                continue
            return t.cast("CapturedOutput", message)
        raise exc.Disconnected

    def stdout_available(self) -> bool:
        """Return ``True`` if buffered stdout text is waiting."""
        return bool(self._stdout_chunks)

    def stderr_available(self) -> bool:
        """Return ``True`` if buffered stderr text is waiting."""
        return bool(self._stderr_chunks)

    def recv_stdout(self) -> str:
        """Return and clear the buffered stdout text."""
        text = "".join(self._stdout_chunks)
        self._stdout_chunks.clear()
        return text

    def recv_stderr(self) -> str:
        """Return and clear the buffered stderr text."""
        text = "".join(self._stderr_chunks)
        self._stderr_chunks.clear()
        return text

    def send(self, buffer: bytes) -> None:
        """Queue ``buffer`` for writing to the child's stdin.

        Delivery is not acknowledged. Once the writer has stopped, the buffer
        is dropped; a dead child shows up as :exc:`exc.Disconnected` from
        :meth:`poll`.
        """
        if self._shut_down or not self._writer.is_alive():
            logger.debug("Writer for %s is gone, dropping %r", self.cmd, buffer)
            return
        self._outbox.put(buffer)

    def send_str(self, text: str) -> None:
        """Encode ``text`` and queue it like :meth:`send`."""
        self.send(text.encode(ENCODING))

    def shutdown(self) -> None:
        """Stop the writer, kill the child and join all worker threads.

        Safe to call multiple times.
        """
        if self._shut_down:
            return
        self._shut_down = True

        self._outbox.put(_CLOSE)
        self.process.kill()
        self.process.wait()
        self._writer.join()
        self._reader.join()
        self._err_reader.join()
        logger.debug(
            "Process %s (pid %d) shut down with status %s",
            self.cmd,
            self.pid,
            self.process.returncode,
        )
