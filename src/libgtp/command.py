"""GTP controller to engine commands.

libgtp.command
~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import typing as t

from libgtp import exc
from libgtp.constants import ENCODING, U32_MAX
from libgtp.entity import EntityBuilder

if t.TYPE_CHECKING:
    import sys
    from collections.abc import Callable

    from libgtp.entity import Entity

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

logger = logging.getLogger(__name__)


class Command:
    """A command to be sent to a GTP engine.

    Serializes as ``[id ]name[ args]\\n``. The ID is stamped by
    :meth:`libgtp.engine.Engine.send`; a command without an ID is valid.

    Examples
    --------
    >>> str(Command("list_commands"))
    'list_commands\\n'

    >>> str(Command("boardsize").args(lambda eb: eb.int(19)))
    'boardsize 19\\n'

    >>> c = Command("list_commands")
    >>> c.set_id(12)
    >>> str(c)
    '12 list_commands\\n'

    >>> str(Command("play").args(lambda eb: eb.move_black((4, 4))))
    'play b D4\\n'
    """

    def __init__(self, name: str) -> None:
        if not name or any(c.isspace() for c in name):
            raise exc.BadCommandName(name)
        self.name = name
        self.id: int | None = None
        self.payload: Entity | None = None

    @classmethod
    def new_with_args(
        cls,
        name: str,
        fn: Callable[[EntityBuilder], t.Any],
    ) -> Command:
        """Create a command with arguments built by ``fn``.

        Examples
        --------
        >>> str(Command.new_with_args("boardsize", lambda eb: eb.int(9)))
        'boardsize 9\\n'
        """
        return cls(name).args(fn)

    def set_id(self, id: int) -> None:
        """Stamp the numeric ID of the command."""
        if isinstance(id, bool) or not isinstance(id, int) or not 0 <= id <= U32_MAX:
            raise exc.InvalidEntity("command id", id)
        self.id = id

    def set_args(self, args: Entity) -> None:
        """Attach an entity as argument list."""
        self.payload = args

    def args(self, fn: Callable[[EntityBuilder], t.Any]) -> Self:
        """Build the argument entity with an :class:`EntityBuilder`.

        A multi-value argument list is wrapped with ``list()``:

        >>> str(Command("list_commands").args(
        ...     lambda eb: eb.int(10).float(10.20).string("OK").list()))
        'list_commands 10 10.2 OK\\n'
        """
        eb = EntityBuilder()
        fn(eb)
        self.set_args(eb.build())
        return self

    def __str__(self) -> str:
        out = ""
        if self.id is not None:
            out += f"{self.id} "
        out += self.name
        if self.payload is not None:
            out += f" {self.payload}"
        return out + "\n"

    def __repr__(self) -> str:
        return f"Command(name={self.name!r}, id={self.id!r}, payload={self.payload!r})"

    def to_bytes(self) -> bytes:
        """Return the serialized command, ready to be written to the engine."""
        return str(self).encode(ENCODING)


def cmd(name: str, fn: Callable[[EntityBuilder], t.Any] | None = None) -> Command:
    """Shorthand for creating a :class:`Command`, optionally with arguments.

    Examples
    --------
    >>> str(cmd("clear_board"))
    'clear_board\\n'
    >>> str(cmd("komi", lambda eb: eb.float(6.5)))
    'komi 6.5\\n'
    """
    if fn is None:
        return Command(name)
    return Command.new_with_args(name, fn)
