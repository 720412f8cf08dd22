"""GTP engine responses and the streaming response parser.

libgtp.response
~~~~~~~~~~~~~~~

A response starts with ``=`` (success) or any other character (failure,
``?`` in practice), optionally followed by the echoed numeric ID, a space and
the body. A blank line terminates the response.

Examples
--------
>>> rp = ResponseParser()
>>> rp.feed("= o")
>>> rp.feed("k\\n\\n")
>>> rp.feed("= A\\nB\\nC\\n\\n= white b3 b T19\\n\\n")

>>> rp.get_response().text
'ok'
>>> rp.get_response().text
'A\\nB\\nC'
>>> [str(e) for e in rp.get_response().entities(lambda ep: ep.color().vertex().mv())]
['w', 'B3', 'b T19']
>>> rp.get_response() is None
True
"""

from __future__ import annotations

import dataclasses
import logging
import re
import typing as t

from libgtp import exc
from libgtp.constants import U32_MAX
from libgtp.entity import EntityParser

if t.TYPE_CHECKING:
    from collections.abc import Callable

    from libgtp.entity import Entity

logger = logging.getLogger(__name__)

#: Characters stripped from the head of the buffer before a response
_LEADING_BLANKS = "\n "

#: Optional numeric ID right after the status character
_ID_RE = re.compile(r"[0-9]*")


@dataclasses.dataclass(frozen=True)
class Response:
    """A response from the GTP engine.

    Use :class:`Result` and :class:`Error` to tell success and failure apart.

    Attributes
    ----------
    id : int, optional
        ID echoed by the engine, ``None`` if the response carried none.
    text : str
        Response body, possibly spanning multiple lines, without the framing
        blank line.
    """

    id: int | None
    text: str

    is_error: t.ClassVar[bool] = False

    @property
    def id_or_zero(self) -> int:
        """Return the echoed ID, ``0`` if the response carried none."""
        return 0 if self.id is None else self.id

    def entities(self, fn: Callable[[EntityParser], t.Any]) -> list[Entity]:
        """Decode the body with the accessors chained in ``fn``.

        Raises
        ------
        :exc:`exc.BadEntityInput`
            If the body does not match the requested entities.

        Examples
        --------
        >>> Result(None, "10 w H6").entities(lambda ep: ep.i().mv())
        [Int(value=10), Move(color=<Color.W: 'w'>, vertex=Vertex(col=8, row=6))]

        A list of unknown length:

        >>> resp = Result(None, "A\\nB\\nC\\nD\\nE")
        >>> def strings(ep):
        ...     while not ep.is_eof():
        ...         ep.s()
        >>> [e.value for e in resp.entities(strings)]
        ['A', 'B', 'C', 'D', 'E']
        """
        ep = EntityParser(self.text)
        fn(ep)
        return ep.result()


@dataclasses.dataclass(frozen=True)
class Result(Response):
    """Successful response, ``= ...``."""


@dataclasses.dataclass(frozen=True)
class Error(Response):
    """Failure response, ``? ...``."""

    is_error: t.ClassVar[bool] = True


def _normalize(buffer: str) -> tuple[str, bool]:
    """Drop carriage returns, comments and leading blanks; tabs become spaces.

    Returns the normalized text and whether every comment was terminated.
    """
    text = buffer.replace("\r", "").replace("\t", " ").lstrip(_LEADING_BLANKS)

    complete = True
    chunks = []
    pos = 0
    while True:
        start = text.find("#", pos)
        if start == -1:
            break
        end = text.find("\n", start)
        if end == -1:
            complete = False
            break
        chunks.append(text[pos:start])
        pos = end + 1
    chunks.append(text[pos:])

    return "".join(chunks).lstrip(_LEADING_BLANKS), complete


class ResponseParser:
    r"""Extract framed :class:`Response` objects from a stream of text chunks.

    :meth:`feed` appends text, :meth:`get_response` returns the response at the
    head of the buffer, or ``None`` until it has fully arrived.

    Examples
    --------
    >>> rp = ResponseParser()
    >>> rp.feed("= ok\n\n")
    >>> rp.get_response()
    Result(id=None, text='ok')

    >>> rp.feed("#\n=10 ok\n\n")
    >>> rp.get_response()
    Result(id=10, text='ok')

    >>> rp.feed("? unknown command\n\n")
    >>> rp.get_response()
    Error(id=None, text='unknown command')

    >>> rp.feed("= ok\n")
    >>> rp.get_response() is None
    True
    """

    def __init__(self) -> None:
        self._buffer = ""

    def __repr__(self) -> str:
        return f"ResponseParser(pending={self._buffer!r})"

    @property
    def pending(self) -> str:
        """Text fed but not yet consumed by a response."""
        return self._buffer

    def feed(self, text: str) -> None:
        """Append response text from the engine."""
        self._buffer += text

    def clear(self) -> None:
        """Discard all buffered text."""
        self._buffer = ""

    def get_response(self) -> Response | None:
        """Consume and return the response at the head of the buffer.

        Returns
        -------
        :class:`Response`, optional
            ``None`` if no complete response is buffered yet; feed more text
            and call again.

        Raises
        ------
        :exc:`exc.BadResponse`
            If the buffered text is not a well formed response. The bad
            frame, up to and including its blank line, is dropped from the
            buffer and kept on :attr:`exc.BadResponse.buffer`.
        """
        text, complete = _normalize(self._buffer)
        self._buffer = text
        if not complete or not text:
            return None

        is_error = text[0] != "="

        id_end = _ID_RE.match(text, 1).end()  # type: ignore[union-attr]
        if id_end == len(text):
            return None
        if text[id_end] != " ":
            end = text.find("\n\n", id_end)
            bad = text if end == -1 else text[: end + 2]
            self._buffer = text[len(bad) :]
            raise exc.BadResponse(bad)
        id_digits = text[1:id_end]
        start = id_end + 1

        end = text.find("\n\n", start)
        if end == -1:
            return None

        self._buffer = text[end + 2 :]

        response_id = None
        if id_digits and int(id_digits) <= U32_MAX:
            response_id = int(id_digits)

        cls: type[Response] = Error if is_error else Result
        response = cls(response_id, text[start:end])
        logger.debug("Parsed response: %r", response)
        return response
