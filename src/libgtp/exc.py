"""Provide exceptions used by libgtp.

libgtp.exc
~~~~~~~~~~

This module implements exceptions used throughout libgtp for error handling
in the entity codec, the response framer, the engine process and the
controller.

Notes
-----
Exceptions in this module inherit from :exc:`LibGTPException` or specialized
base classes to form a hierarchy of GTP-related errors.

"Nothing available yet" is never an exception: :meth:`ResponseParser.get_response`
and :meth:`Engine.poll_response` return ``None`` for that case.
"""

from __future__ import annotations

import typing as t


class LibGTPException(Exception):
    """Base exception for all libgtp errors."""


class EntityError(LibGTPException):
    """Base exception for errors building or decoding entities."""


class InvalidEntity(EntityError, ValueError):
    """Raised if a value cannot be represented as a GTP entity."""

    def __init__(self, kind: str, value: t.Any, *args: object) -> None:
        super().__init__(f"Invalid {kind} entity: {value!r}")


class EmptyEntityBuilder(EntityError):
    """Raised if :meth:`EntityBuilder.build` is called with no value staged."""

    def __init__(self, *args: object) -> None:
        super().__init__("Did not set up any entity in EntityBuilder")


class BadEntityInput(EntityError):
    """Raised if a response body could not be decoded into entities."""

    def __init__(self, text: str | None = None, *args: object) -> None:
        self.text = text
        if text is not None:
            super().__init__(f"Bad entity input: {text!r}")
        else:
            super().__init__("Bad entity input")


class BadCommandName(LibGTPException, ValueError):
    """Raised if a command name is empty or contains whitespace."""

    def __init__(self, name: str, *args: object) -> None:
        super().__init__(f"Bad command name: {name!r}")


class ProtocolError(LibGTPException):
    """Base exception for malformed traffic from the engine."""


class BadResponse(ProtocolError):
    """Raised if the response buffer does not follow the GTP response grammar.

    The offending buffer is kept on :attr:`buffer`.
    """

    def __init__(self, buffer: str, *args: object) -> None:
        self.buffer = buffer
        super().__init__(f"Bad response: {buffer!r}")


class ResponseIdMismatch(ProtocolError):
    """Raised if the engine answers with a different ID than the one sent."""

    def __init__(self, expected: int, received: int | None, *args: object) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Response ID mismatch: expected {expected}, received {received}",
        )


class ProcessError(LibGTPException):
    """Base exception for errors running the engine process."""


class StartupFailed(ProcessError):
    """Raised if the engine process could not be spawned.

    The underlying :exc:`OSError` is kept on :attr:`os_error`.
    """

    def __init__(self, cmd: t.Sequence[str], os_error: OSError, *args: object) -> None:
        self.cmd = list(cmd)
        self.os_error = os_error
        super().__init__(f"Failed to start {self.cmd}: {os_error}")


class Disconnected(ProcessError):
    """Raised once every output stream of the engine process has closed.

    This is the cue that the engine process has exited.
    """

    def __init__(self, *args: object) -> None:
        super().__init__("Engine output streams are closed")


class NoHandle(LibGTPException):
    """Raised if the engine has not been started."""

    def __init__(self, *args: object) -> None:
        super().__init__("No engine process started")


class PollAgain(LibGTPException):
    """Raised if no response is available yet; poll again later."""


class ResponseTimeout(PollAgain, TimeoutError):
    """Raised if no response arrived within the timeout."""

    def __init__(self, timeout: float, *args: object) -> None:
        self.timeout = timeout
        super().__init__(f"No response within {timeout} seconds")


class WaitTimeout(LibGTPException):
    """Raised when a function times out waiting for a condition."""
