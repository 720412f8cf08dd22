"""libgtp, a typed, pythonic controller for Go Text Protocol (GTP) engines."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .command import Command, cmd
from .engine import Engine
from .entity import (
    PASS,
    Boolean,
    Color,
    Entity,
    EntityBuilder,
    EntityParser,
    Float,
    Int,
    List,
    Move,
    String,
    Vertex,
    entity,
)
from .response import Error, Response, ResponseParser, Result

__all__ = (
    "PASS",
    "Boolean",
    "Color",
    "Command",
    "Engine",
    "Entity",
    "EntityBuilder",
    "EntityParser",
    "Error",
    "Float",
    "Int",
    "List",
    "Move",
    "Response",
    "ResponseParser",
    "Result",
    "String",
    "Vertex",
    "__author__",
    "__copyright__",
    "__description__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
    "cmd",
    "entity",
)
