"""Tests for libgtp's EntityParser."""

from __future__ import annotations

import typing as t

import pytest

from libgtp import exc
from libgtp.entity import (
    PASS,
    Boolean,
    Color,
    EntityParser,
    Float,
    Int,
    Move,
    String,
    Vertex,
)

if t.TYPE_CHECKING:
    from collections.abc import Callable

    from libgtp.entity import Entity


class ParseFixture(t.NamedTuple):
    """Test fixture for successful decoding."""

    test_id: str
    text: str
    parse: Callable[[EntityParser], t.Any]
    expected: list[Entity]


PARSE_FIXTURES: list[ParseFixture] = [
    ParseFixture(
        test_id="mixed",
        text="10 10.2 ok WHite t19 false",
        parse=lambda ep: ep.i().f().s().mv().bool(),
        expected=[
            Int(10),
            Float(10.2),
            String("ok"),
            Move(Color.W, Vertex(19, 19)),
            Boolean(False),
        ],
    ),
    ParseFixture(
        test_id="int_and_move",
        text="10 w H6",
        parse=lambda ep: ep.i().mv(),
        expected=[Int(10), Move(Color.W, Vertex(8, 6))],
    ),
    ParseFixture(
        test_id="colors",
        text="w white B BLACK",
        parse=lambda ep: ep.color().color().color().color(),
        expected=[Color.W, Color.W, Color.B, Color.B],
    ),
    ParseFixture(
        test_id="vertices",
        text="a1 J9 pass PASS t19",
        parse=lambda ep: ep.vertex().vertex().vertex().vertex().vertex(),
        expected=[Vertex(1, 1), Vertex(9, 9), PASS, PASS, Vertex(19, 19)],
    ),
    ParseFixture(
        test_id="floats",
        text="6.5 -7 .5 1e3",
        parse=lambda ep: ep.f().f().f().f(),
        expected=[Float(6.5), Float(-7.0), Float(0.5), Float(1000.0)],
    ),
    ParseFixture(
        test_id="booleans",
        text="true FALSE",
        parse=lambda ep: ep.bool().bool(),
        expected=[Boolean(True), Boolean(False)],
    ),
    ParseFixture(
        test_id="multiline_body",
        text="A\nB\nC",
        parse=lambda ep: ep.s().s().s(),
        expected=[String("A"), String("B"), String("C")],
    ),
    ParseFixture(
        test_id="repeated_separators",
        text="  1   2\n\n3 ",
        parse=lambda ep: ep.i().i().i(),
        expected=[Int(1), Int(2), Int(3)],
    ),
    ParseFixture(
        test_id="int_max",
        text="4294967295",
        parse=lambda ep: ep.i(),
        expected=[Int(4294967295)],
    ),
    ParseFixture(
        test_id="pass_move",
        text="b pass",
        parse=lambda ep: ep.mv(),
        expected=[Move(Color.B, PASS)],
    ),
]


@pytest.mark.parametrize(
    list(ParseFixture._fields),
    PARSE_FIXTURES,
    ids=[test.test_id for test in PARSE_FIXTURES],
)
def test_entity_parser(
    test_id: str,
    text: str,
    parse: Callable[[EntityParser], t.Any],
    expected: list[Entity],
) -> None:
    """EntityParser decodes tokens in order."""
    ep = EntityParser(text)
    parse(ep)
    assert not ep.had_parse_error
    assert ep.result() == expected


class ParseErrorFixture(t.NamedTuple):
    """Test fixture for tokens which fail to decode."""

    test_id: str
    text: str
    parse: Callable[[EntityParser], t.Any]


PARSE_ERROR_FIXTURES: list[ParseErrorFixture] = [
    ParseErrorFixture(test_id="int_word", text="abc", parse=lambda ep: ep.i()),
    ParseErrorFixture(test_id="int_negative", text="-1", parse=lambda ep: ep.i()),
    ParseErrorFixture(
        test_id="int_overflow",
        text="4294967296",
        parse=lambda ep: ep.i(),
    ),
    ParseErrorFixture(test_id="float_word", text="komi", parse=lambda ep: ep.f()),
    ParseErrorFixture(test_id="float_nan", text="nan", parse=lambda ep: ep.f()),
    ParseErrorFixture(test_id="color", text="red", parse=lambda ep: ep.color()),
    ParseErrorFixture(test_id="vertex_long", text="A100", parse=lambda ep: ep.vertex()),
    ParseErrorFixture(test_id="vertex_digit", text="11", parse=lambda ep: ep.vertex()),
    ParseErrorFixture(test_id="vertex_row", text="Ax", parse=lambda ep: ep.vertex()),
    ParseErrorFixture(test_id="bool", text="yes", parse=lambda ep: ep.bool()),
    ParseErrorFixture(test_id="empty_string", text="", parse=lambda ep: ep.s()),
    ParseErrorFixture(test_id="move_bad_color", text="x A1", parse=lambda ep: ep.mv()),
    ParseErrorFixture(test_id="move_bad_vertex", text="w ZZ", parse=lambda ep: ep.mv()),
    ParseErrorFixture(test_id="move_truncated", text="w", parse=lambda ep: ep.mv()),
    ParseErrorFixture(
        test_id="too_few_tokens",
        text="1",
        parse=lambda ep: ep.i().i(),
    ),
]


@pytest.mark.parametrize(
    list(ParseErrorFixture._fields),
    PARSE_ERROR_FIXTURES,
    ids=[test.test_id for test in PARSE_ERROR_FIXTURES],
)
def test_entity_parser_error(
    test_id: str,
    text: str,
    parse: Callable[[EntityParser], t.Any],
) -> None:
    """A failing accessor makes result() raise."""
    ep = EntityParser(text)
    parse(ep)
    assert ep.had_parse_error
    with pytest.raises(exc.BadEntityInput):
        ep.result()


def test_entity_parser_error_is_sticky() -> None:
    """Later successful accessors don't clear an earlier failure."""
    ep = EntityParser("x 1 2")
    ep.i().i().i()
    assert ep.had_parse_error
    with pytest.raises(exc.BadEntityInput) as excinfo:
        ep.result()
    assert excinfo.value.text == "x 1 2"


def test_entity_parser_move_color_failure_keeps_vertex() -> None:
    """A move with a bad color leaves the following token in place."""
    ep = EntityParser("red A1")
    ep.mv()
    assert ep.had_parse_error
    assert ep.next_token() == "A1"


def test_entity_parser_is_eof() -> None:
    """is_eof() ignores trailing separators."""
    ep = EntityParser("A\nB\n \n")
    assert not ep.is_eof()
    ep.s()
    assert not ep.is_eof()
    ep.s()
    assert ep.is_eof()
    assert EntityParser("").is_eof()
    assert EntityParser(" \n ").is_eof()


def test_entity_parser_unknown_length_list() -> None:
    """Looping on is_eof() reads every token."""
    ep = EntityParser("A\nB\nC\nD\nE")
    while not ep.is_eof():
        ep.s()
    assert [str(e) for e in ep.result()] == ["A", "B", "C", "D", "E"]


def test_entity_parser_iterates_tokens() -> None:
    """The parser iterates over remaining raw tokens."""
    ep = EntityParser("= ignored 1 2\n3")
    ep.s().s()
    assert list(ep) == ["1", "2", "3"]
    assert ep.next_token() == ""
    assert ep.result() == [String("="), String("ignored")]


class RoundTripFixture(t.NamedTuple):
    """Test fixture for decoding the wire form of a scalar entity."""

    test_id: str
    value: Entity
    parse: Callable[[EntityParser], t.Any]


ROUND_TRIP_FIXTURES: list[RoundTripFixture] = [
    RoundTripFixture(test_id="int_zero", value=Int(0), parse=lambda ep: ep.i()),
    RoundTripFixture(
        test_id="int_max",
        value=Int(4294967295),
        parse=lambda ep: ep.i(),
    ),
    RoundTripFixture(test_id="float_komi", value=Float(6.5), parse=lambda ep: ep.f()),
    RoundTripFixture(test_id="float_tiny", value=Float(1e-7), parse=lambda ep: ep.f()),
    RoundTripFixture(test_id="float_huge", value=Float(1e20), parse=lambda ep: ep.f()),
    RoundTripFixture(
        test_id="float_negative",
        value=Float(-3),
        parse=lambda ep: ep.f(),
    ),
    RoundTripFixture(
        test_id="string",
        value=String("GnuGo"),
        parse=lambda ep: ep.s(),
    ),
    RoundTripFixture(
        test_id="vertex_h19",
        value=Vertex(8, 19),
        parse=lambda ep: ep.vertex(),
    ),
    RoundTripFixture(
        test_id="vertex_j19",
        value=Vertex(9, 19),
        parse=lambda ep: ep.vertex(),
    ),
    RoundTripFixture(
        test_id="vertex_t19",
        value=Vertex(19, 19),
        parse=lambda ep: ep.vertex(),
    ),
    RoundTripFixture(
        test_id="vertex_z25",
        value=Vertex(25, 25),
        parse=lambda ep: ep.vertex(),
    ),
    RoundTripFixture(test_id="vertex_pass", value=PASS, parse=lambda ep: ep.vertex()),
    RoundTripFixture(test_id="color_white", value=Color.W, parse=lambda ep: ep.color()),
    RoundTripFixture(test_id="color_black", value=Color.B, parse=lambda ep: ep.color()),
    RoundTripFixture(
        test_id="move",
        value=Move(Color.B, Vertex(4, 16)),
        parse=lambda ep: ep.mv(),
    ),
    RoundTripFixture(
        test_id="move_pass",
        value=Move(Color.W, PASS),
        parse=lambda ep: ep.mv(),
    ),
    RoundTripFixture(test_id="true", value=Boolean(True), parse=lambda ep: ep.bool()),
    RoundTripFixture(test_id="false", value=Boolean(False), parse=lambda ep: ep.bool()),
]


@pytest.mark.parametrize(
    list(RoundTripFixture._fields),
    ROUND_TRIP_FIXTURES,
    ids=[test.test_id for test in ROUND_TRIP_FIXTURES],
)
def test_entity_parser_decodes_wire_form(
    test_id: str,
    value: Entity,
    parse: Callable[[EntityParser], t.Any],
) -> None:
    """Decoding the rendered form of a scalar gives the scalar back."""
    ep = EntityParser(str(value))
    parse(ep)
    assert ep.result() == [value]
    assert ep.is_eof()
