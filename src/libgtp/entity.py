"""Typed values of the Go Text Protocol.

libgtp.entity
~~~~~~~~~~~~~

An :class:`Entity` is a single typed value in a GTP argument list or response
body: integers, floats, strings, vertices, colors, moves, booleans and lists
of those.

:class:`EntityBuilder` encodes values for outgoing commands and
:class:`EntityParser` decodes tokens of a response body.

Examples
--------
>>> str(entity(lambda eb: eb.move_black((8, 8)).move_white((9, 9)).list()))
'b H8 w J9'

>>> EntityParser("white b3").mv().result()
[Move(color=<Color.W: 'w'>, vertex=Vertex(col=2, row=3))]
"""

from __future__ import annotations

import builtins
import dataclasses
import enum
import logging
import re
import typing as t

from libgtp import exc
from libgtp.constants import U32_MAX

if t.TYPE_CHECKING:
    import sys
    from collections.abc import Callable

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

logger = logging.getLogger(__name__)

#: Characters separating tokens in a response body
TOKEN_SEPARATORS = " \n"

_INT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_ROW_RE = re.compile(r"[+-]?[0-9]+")


def column_letter(col: int) -> str:
    """Return the board column letter for a 1-based column index.

    The letter ``I`` is skipped.

    Examples
    --------
    >>> column_letter(1)
    'A'
    >>> column_letter(8)
    'H'
    >>> column_letter(9)
    'J'
    >>> column_letter(19)
    'T'
    """
    if col < 1:
        raise exc.InvalidEntity("column", col)
    if col <= 8:
        return chr(ord("A") + col - 1)
    return chr(ord("A") + col)


def letter_column(letter: str) -> int:
    """Return the 1-based column index for a board column letter.

    Inverse of :func:`column_letter`, case-insensitive.

    Examples
    --------
    >>> letter_column("h")
    8
    >>> letter_column("J")
    9
    >>> letter_column("T")
    19
    """
    if len(letter) != 1 or not (letter.isascii() and letter.isalpha()):
        raise exc.InvalidEntity("column letter", letter)
    col = ord(letter.upper()) - ord("A") + 1
    if col > 8:
        col -= 1
    return col


class Entity:
    """Base class of every typed GTP value.

    Subclasses are immutable and compare structurally. ``str()`` renders the
    wire form of the value.
    """


class Color(Entity, enum.Enum):
    """Color of a stone or of a player."""

    W = "w"
    B = "b"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_bool(cls, white: bool) -> Color:
        """Return :attr:`W` for ``True`` and :attr:`B` for ``False``."""
        return cls.W if white else cls.B


@dataclasses.dataclass(frozen=True)
class Int(Entity):
    """Unsigned 32-bit integer."""

    value: int

    def __post_init__(self) -> None:
        if (
            isinstance(self.value, bool)
            or not isinstance(self.value, int)
            or not 0 <= self.value <= U32_MAX
        ):
            raise exc.InvalidEntity("int", self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclasses.dataclass(frozen=True)
class Float(Entity):
    """Floating point number, e.g. komi."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        text = repr(self.value)
        if text.endswith(".0"):
            text = text[:-2]
        return text


@dataclasses.dataclass(frozen=True)
class String(Entity):
    """Opaque token."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True)
class Vertex(Entity):
    """Board coordinate, 1-based.

    A non-positive column or row denotes a pass.

    Examples
    --------
    >>> str(Vertex(19, 19))
    'T19'
    >>> str(Vertex(0, 0))
    'pass'
    """

    col: int
    row: int

    @property
    def is_pass(self) -> bool:
        """Return ``True`` if this vertex is a pass."""
        return self.col <= 0 or self.row <= 0

    def __str__(self) -> str:
        if self.is_pass:
            return "pass"
        return f"{column_letter(self.col)}{self.row}"


#: Vertex used for passing
PASS = Vertex(0, 0)


@dataclasses.dataclass(frozen=True)
class Move(Entity):
    """A colored vertex, e.g. ``b T19`` or ``w pass``."""

    color: Color
    vertex: Vertex

    def __post_init__(self) -> None:
        if not isinstance(self.vertex, Vertex):
            col, row = self.vertex
            object.__setattr__(self, "vertex", Vertex(col, row))

    def __str__(self) -> str:
        return f"{self.color} {self.vertex}"


@dataclasses.dataclass(frozen=True)
class Boolean(Entity):
    """Boolean, rendered as ``true`` / ``false``."""

    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclasses.dataclass(frozen=True)
class List(Entity):
    """Ordered sequence of entities.

    Members are joined by a space. When every member is itself a list, members
    are joined by a newline, which renders two dimensional data line by line.

    Examples
    --------
    >>> str(List((Int(1), Int(2))))
    '1 2'
    >>> print(List((List((Int(1), Int(2))), List((Int(3), Int(4))))))
    1 2
    3 4
    """

    items: tuple[Entity, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __iter__(self) -> t.Iterator[Entity]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        if not self.items:
            return ""
        sep = "\n" if all(isinstance(e, List) for e in self.items) else " "
        return sep.join(str(e) for e in self.items)


def _as_vertex(vertex: Vertex | tuple[builtins.int, builtins.int]) -> Vertex:
    if isinstance(vertex, Vertex):
        return vertex
    col, row = vertex
    return Vertex(col, row)


def _as_color(color: Color | builtins.bool) -> Color:
    if isinstance(color, Color):
        return color
    return Color.from_bool(color)


class EntityBuilder:
    """Fluent helper for constructing an :class:`Entity`.

    Every typed method moves the previously staged value into an accumulated
    sequence and stages the new one. :meth:`list` wraps the accumulated
    sequence into a :class:`List`, which becomes the staged value; this allows
    nested lists. :meth:`build` returns the staged value.

    Examples
    --------
    >>> eb = EntityBuilder()
    >>> str(eb.vertex((19, 19)).build())
    'T19'

    >>> str(EntityBuilder().int(10).float(10.2).string("OK").list().build())
    '10 10.2 OK'

    >>> EntityBuilder().int(1).int(2).list().int(3).list().build()
    List(items=(List(items=(Int(value=1), Int(value=2))), Int(value=3)))
    """

    def __init__(self) -> None:
        self._items: list[Entity] = []
        self._current: Entity | None = None

    def _stage(self, value: Entity) -> Self:
        if self._current is not None:
            self._items.append(self._current)
        self._current = value
        return self

    def int(self, value: builtins.int) -> Self:
        """Stage an integer."""
        return self._stage(Int(value))

    def float(self, value: builtins.float) -> Self:
        """Stage a float."""
        return self._stage(Float(value))

    def string(self, value: str) -> Self:
        """Stage a string token."""
        return self._stage(String(value))

    def vertex(self, vertex: Vertex | tuple[builtins.int, builtins.int]) -> Self:
        """Stage a vertex given as :class:`Vertex` or ``(col, row)``."""
        return self._stage(_as_vertex(vertex))

    def pass_(self) -> Self:
        """Stage the pass vertex."""
        return self._stage(PASS)

    def color(self, color: Color | builtins.bool) -> Self:
        """Stage a color; ``True`` means white."""
        return self._stage(_as_color(color))

    def white(self) -> Self:
        """Stage :attr:`Color.W`."""
        return self._stage(Color.W)

    def black(self) -> Self:
        """Stage :attr:`Color.B`."""
        return self._stage(Color.B)

    def move(
        self,
        color: Color | builtins.bool,
        vertex: Vertex | tuple[builtins.int, builtins.int],
    ) -> Self:
        """Stage a move; ``True`` as color means white."""
        return self._stage(Move(_as_color(color), _as_vertex(vertex)))

    def move_white(self, vertex: Vertex | tuple[builtins.int, builtins.int]) -> Self:
        """Stage a white move."""
        return self.move(Color.W, vertex)

    def move_black(self, vertex: Vertex | tuple[builtins.int, builtins.int]) -> Self:
        """Stage a black move."""
        return self.move(Color.B, vertex)

    def bool(self, value: builtins.bool) -> Self:
        """Stage a boolean."""
        return self._stage(Boolean(value))

    def list(self) -> Self:
        """Wrap everything accumulated so far into one staged :class:`List`."""
        if self._current is not None:
            self._items.append(self._current)
        self._current = List(tuple(self._items))
        self._items = []
        return self

    def build(self) -> Entity:
        """Return the staged entity.

        Raises
        ------
        :exc:`exc.EmptyEntityBuilder`
            If no value has been staged.
        """
        if self._current is None:
            raise exc.EmptyEntityBuilder
        return self._current


def entity(fn: Callable[[EntityBuilder], t.Any]) -> Entity:
    """Build an entity by calling ``fn`` with a fresh :class:`EntityBuilder`.

    Examples
    --------
    >>> str(entity(lambda eb: eb.pass_()))
    'pass'
    >>> str(entity(lambda eb: eb.move(True, (8, 8))))
    'w H8'
    """
    eb = EntityBuilder()
    fn(eb)
    return eb.build()


class EntityParser:
    """Decode the tokens of a response body into entities.

    Each accessor consumes the next token (:meth:`mv` consumes two) and
    appends the decoded entity. A failing accessor sets a sticky error flag
    that makes :meth:`result` raise, no matter how many accessors follow.

    The parser is an iterator over its remaining raw tokens.

    Examples
    --------
    >>> EntityParser("10 10.2 ok WHite t19 false").i().f().s().mv().bool().result()
    [Int(value=10), Float(value=10.2), String(value='ok'), Move(color=<Color.W: 'w'>, vertex=Vertex(col=19, row=19)), Boolean(value=False)]

    Reading a list of unknown length:

    >>> ep = EntityParser("A\\nB\\nC\\n")
    >>> while not ep.is_eof():
    ...     _ = ep.s()
    >>> [str(e) for e in ep.result()]
    ['A', 'B', 'C']
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._entities: list[Entity] = []
        self._parse_error = False

    def __repr__(self) -> str:
        return (
            f"EntityParser(remaining={self._text[self._pos:]!r}, "
            f"entities={len(self._entities)}, parse_error={self._parse_error})"
        )

    def __iter__(self) -> EntityParser:
        return self

    def __next__(self) -> str:
        token = self.next_token()
        if not token:
            raise StopIteration
        return token

    def next_token(self) -> str:
        """Consume and return the next token, ``""`` at end of input."""
        text, pos, end = self._text, self._pos, len(self._text)
        while pos < end and text[pos] in TOKEN_SEPARATORS:
            pos += 1
        start = pos
        while pos < end and text[pos] not in TOKEN_SEPARATORS:
            pos += 1
        token = text[start:pos]
        # the separator following a token is consumed with it
        self._pos = pos + 1 if pos < end else pos
        return token

    def is_eof(self) -> builtins.bool:
        """Return ``True`` if no token remains."""
        return not self._text[self._pos :].strip(TOKEN_SEPARATORS)

    @property
    def had_parse_error(self) -> builtins.bool:
        """Return ``True`` if any accessor failed so far."""
        return self._parse_error

    def result(self) -> list[Entity]:
        """Return the decoded entities.

        Raises
        ------
        :exc:`exc.BadEntityInput`
            If any accessor failed.
        """
        if self._parse_error:
            raise exc.BadEntityInput(self._text)
        return list(self._entities)

    def _push(self, value: Entity | None) -> Self:
        if value is None:
            self._parse_error = True
        else:
            self._entities.append(value)
        return self

    def s(self) -> Self:
        """Decode a string token."""
        token = self.next_token()
        return self._push(String(token) if token else None)

    def i(self) -> Self:
        """Decode an unsigned 32-bit integer."""
        token = self.next_token()
        if _INT_RE.fullmatch(token) and int(token) <= U32_MAX:
            return self._push(Int(int(token)))
        return self._push(None)

    def f(self) -> Self:
        """Decode a float."""
        token = self.next_token()
        return self._push(Float(float(token)) if _FLOAT_RE.fullmatch(token) else None)

    def color(self) -> Self:
        """Decode ``w``, ``white``, ``b`` or ``black``."""
        return self._push(_decode_color(self.next_token()))

    def vertex(self) -> Self:
        """Decode a vertex or ``pass``."""
        return self._push(_decode_vertex(self.next_token()))

    def mv(self) -> Self:
        """Decode a move: a color token followed by a vertex token."""
        color = _decode_color(self.next_token())
        if color is None:
            return self._push(None)
        vertex = _decode_vertex(self.next_token())
        if vertex is None:
            return self._push(None)
        return self._push(Move(color, vertex))

    def bool(self) -> Self:
        """Decode ``true`` or ``false``."""
        token = self.next_token().lower()
        if token == "true":
            return self._push(Boolean(True))
        if token == "false":
            return self._push(Boolean(False))
        return self._push(None)


def _decode_color(token: str) -> Color | None:
    token = token.lower()
    if token in {"w", "white"}:
        return Color.W
    if token in {"b", "black"}:
        return Color.B
    return None


def _decode_vertex(token: str) -> Vertex | None:
    token = token.upper()
    if token == "PASS":
        return PASS
    if not 2 <= len(token) <= 3:
        return None
    letter, row = token[0], token[1:]
    if not (letter.isascii() and letter.isalpha()) or not _ROW_RE.fullmatch(row):
        return None
    return Vertex(letter_column(letter), int(row))
