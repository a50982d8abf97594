#!/usr/bin/env python3
"""
MUON ENGINE SUITE
-----------------
Drives the Decoder directly through its pull protocol, without the schema
adapter, so each decode request is explicit.

Author: MuON Decoder Team
Date: 2026-10-16
"""

import pytest

from muon.core import intparse
from muon.core.config import DecodeOptions
from muon.core.engine import Decoder, decode_str
from muon.core.errors import (
    EndOfInput,
    ExpectedBoolean,
    ExpectedChar,
    ExpectedEnum,
    ExpectedInteger,
    ExpectedMapping,
    FailedParse,
    MuonError,
    TrailingInput,
    UnexpectedIndent,
    UnexpectedNesting,
    UnimplementedShape,
)
from muon.parsing.cursor import DefinitionCursor
from muon.parsing.lexer import MuonLexer


def decoder_for(text):
    return Decoder(DefinitionCursor(MuonLexer().definitions(text)))


def read_text_list(de):
    return list(de.decode_seq().elements(lambda d: d.decode_text()))


def read_record(readers):
    """Builds a read callable decoding a mapping with one reader per key."""
    def read(de):
        access = de.decode_map()
        return {key: access.next_value(readers[key]) for key in _keys(access)}
    return read


def _keys(access):
    while access.has_next():
        yield access.next_key()


# --- Scalars ---

@pytest.mark.parametrize("text, expected", [("true", True), ("false", False)])
def test_boolean_literals(text, expected):
    assert decode_str(f"b: {text}\n", lambda de: de.decode_bool()) is expected


@pytest.mark.parametrize("text", ["True", "FALSE", "1", "0", "yes", "tru", "true false", ""])
def test_boolean_rejects_everything_else(text):
    with pytest.raises(ExpectedBoolean) as exc:
        decode_str(f"b: {text}\n", lambda de: de.decode_bool())
    assert exc.value.line_no == 1


@pytest.mark.parametrize("text, expected", [("x", "x"), ("é", "é"), ("7", "7")])
def test_char(text, expected):
    assert decode_str(f"c: {text}\n", lambda de: de.decode_char()) == expected


@pytest.mark.parametrize("text", ["", "xy", "ab c"])
def test_char_rejects_other_lengths(text):
    with pytest.raises(ExpectedChar):
        decode_str(f"c: {text}\n", lambda de: de.decode_char())


@pytest.mark.parametrize("kind", [
    intparse.I8, intparse.I16, intparse.I32, intparse.I64,
    intparse.U8, intparse.U16, intparse.U32, intparse.U64,
], ids=str)
def test_integer_boundaries(kind):
    ok = decode_str(f"n: {kind.maximum}\n", lambda de: de.decode_int(kind))
    assert ok == kind.maximum
    with pytest.raises(ExpectedInteger):
        decode_str(f"n: {kind.maximum + 1}\n", lambda de: de.decode_int(kind))


def test_narrow_signed_integer():
    assert decode_str("n: -128\n", lambda de: de.decode_int(intparse.I8)) == -128
    with pytest.raises(ExpectedInteger):
        decode_str("n: 128\n", lambda de: de.decode_int(intparse.I8))


def test_text_is_returned_unmodified():
    value = decode_str("quote: The  bare   necessities\n", lambda de: de.decode_text())
    assert value == "The  bare   necessities"


# --- Refused shapes ---

@pytest.mark.parametrize("request_name", ["decode_float", "decode_bytes", "decode_any", "decode_ignored_any"])
def test_unimplemented_shapes_fail_loudly(request_name):
    with pytest.raises(UnimplementedShape) as exc:
        decode_str("x: 1.5\n", lambda de: getattr(de, request_name)())
    assert isinstance(exc.value, NotImplementedError)


def test_enum_is_never_available():
    with pytest.raises(ExpectedEnum):
        decode_str("color: Red\n", lambda de: de.decode_enum("Color", ["Red", "Green"]))


# --- Records and scenarios ---

def test_scenario_a():
    """
    END-TO-END: boolean, unsigned and signed fields in one record.
    """
    read = read_record({
        "b": lambda d: d.decode_bool(),
        "uint": lambda d: d.decode_int(intparse.U32),
        "int": lambda d: d.decode_int(intparse.I32),
    })
    assert decode_str("b: false\nuint: 7\nint: -5\n", read) == {"b": False, "uint": 7, "int": -5}


def test_scenario_b():
    """
    END-TO-END: one-line sequences of booleans and of text.
    """
    read = read_record({
        "flags": lambda d: list(d.decode_seq().elements(lambda e: e.decode_bool())),
        "values": read_text_list,
    })
    result = decode_str("flags: false true true false\nvalues: Hello World\n", read)
    assert result == {"flags": [False, True, True, False], "values": ["Hello", "World"]}


def test_sequence_cardinality_and_order():
    assert decode_str("key: a b c\n", read_text_list) == ["a", "b", "c"]


def test_map_keys_keep_source_order():
    def read(de):
        return [key for key, _ in de.decode_map().entries(lambda d: d.decode_text())]
    assert decode_str("zeta: 1\nalpha: 2\nmid: 3\n", read) == ["zeta", "alpha", "mid"]


def test_mapping_cursor_step_by_step():
    de = decoder_for("x: 1\ny: true\n")
    access = de.decode_map()
    assert access.has_next()
    assert access.next_key() == "x"
    assert access.line_no == 1
    assert access.next_value(lambda d: d.decode_int(intparse.U8)) == 1
    assert access.next_key() == "y"
    assert access.next_value(lambda d: d.decode_bool()) is True
    assert not access.has_next()
    de.end()


def test_nested_record_ends_at_shallower_line():
    text = (
        "name: Jungle Book\n"
        "author:\n"
        "  first: Rudyard\n"
        "  last: Kipling\n"
        "year: 1894\n"
    )
    read = read_record({
        "name": lambda d: d.decode_text(),
        "author": read_record({"first": lambda d: d.decode_text(), "last": lambda d: d.decode_text()}),
        "year": lambda d: d.decode_int(intparse.U16),
    })
    assert decode_str(text, read) == {
        "name": "Jungle Book",
        "author": {"first": "Rudyard", "last": "Kipling"},
        "year": 1894,
    }


def test_repeated_key_extends_sequence():
    text = "character: Mowgli Baloo\ncharacter: Bagheera\nplace: India\n"
    read = read_record({"character": read_text_list, "place": lambda d: d.decode_text()})
    assert decode_str(text, read) == {"character": ["Mowgli", "Baloo", "Bagheera"], "place": "India"}


def test_sequence_of_blocks():
    text = (
        "animal:\n"
        "  name: Baloo\n"
        "animal:\n"
        "  name: Kaa\n"
        "keeper: Mowgli\n"
    )
    animal = read_record({"name": lambda d: d.decode_text()})
    read = read_record({
        "animal": lambda d: list(d.decode_seq().elements(animal)),
        "keeper": lambda d: d.decode_text(),
    })
    assert decode_str(text, read) == {
        "animal": [{"name": "Baloo"}, {"name": "Kaa"}],
        "keeper": "Mowgli",
    }


def test_empty_sequence_line():
    read = read_record({"tags": read_text_list, "name": lambda d: d.decode_text()})
    assert decode_str("tags:\nname: x\n", read) == {"tags": [], "name": "x"}


def test_nested_sequence_per_line():
    def read(de):
        rows = de.decode_seq()
        return list(rows.elements(lambda d: list(d.decode_seq().elements(lambda e: e.decode_int(intparse.I32)))))
    assert decode_str("row: 1 2 3\nrow: 4 5\n", read) == [[1, 2, 3], [4, 5]]


def test_nested_sequence_per_block():
    text = "grid:\n  a: 1 2\n  b: 3\ngrid:\n  c: 4\n"

    def read(de):
        inner = lambda d: list(d.decode_seq().elements(lambda e: e.decode_int(intparse.I32)))
        return list(de.decode_seq().elements(inner))
    assert decode_str(text, read) == [[1, 2, 3], [4]]


def test_unit_field_consumes_its_line():
    read = read_record({"marker": lambda d: d.decode_unit(), "n": lambda d: d.decode_int(intparse.I64)})
    assert decode_str("marker: anything\nn: 3\n", read) == {"marker": None, "n": 3}


def test_unit_elements_consume_tokens():
    read = lambda de: list(de.decode_seq().elements(lambda d: d.decode_unit()))
    assert decode_str("units: a b\n", read) == [None, None]


def test_option_is_eager():
    assert decode_str("n: 5\n", lambda de: de.decode_option(lambda d: d.decode_int(intparse.I8))) == 5


def test_newtype_is_transparent():
    assert decode_str("id: 9\n", lambda de: de.decode_newtype(lambda d: d.decode_int(intparse.U8))) == 9


# --- Structural failures ---

def test_malformed_line_reports_its_own_number():
    read = read_record({"a": lambda d: d.decode_text(), "c": lambda d: d.decode_text()})
    with pytest.raises(FailedParse) as exc:
        decode_str("a: 1\n\nthis line has no separator\nc: 3\n", read)
    assert exc.value.line_no == 3
    assert "line 3" in str(exc.value)


def test_end_of_input_when_value_expected():
    with pytest.raises(EndOfInput):
        decode_str("", lambda de: de.decode_bool())


def test_trailing_input():
    with pytest.raises(TrailingInput) as exc:
        decode_str("a: true\nb: false\n", lambda de: de.decode_bool())
    assert exc.value.line_no == 2
    options = DecodeOptions(allow_trailing=True)
    assert decode_str("a: true\nb: false\n", lambda de: de.decode_bool(), options) is True


def test_unclaimed_deeper_line():
    read = read_record({"a": lambda d: d.decode_text(), "b": lambda d: d.decode_text()})
    with pytest.raises(UnexpectedIndent) as exc:
        decode_str("a: 1\n  x: 2\nb: 3\n", read)
    assert exc.value.line_no == 2


def test_inline_value_where_block_expected():
    read = read_record({"author": read_record({})})
    with pytest.raises(ExpectedMapping) as exc:
        decode_str("author: Rudyard Kipling\n", read)
    assert exc.value.line_no == 1


def test_block_where_scalar_element_expected():
    read = read_record({"tags": read_text_list})
    with pytest.raises(UnexpectedNesting) as exc:
        decode_str("tags:\n  a: 1\n", read)
    assert exc.value.line_no == 1


def test_mapping_element_in_token_line():
    read = lambda de: list(de.decode_seq().elements(read_record({})))
    with pytest.raises(ExpectedMapping):
        decode_str("item: a b\n", read)


def test_errors_share_a_base():
    with pytest.raises(MuonError):
        decode_str("n: lots\n", lambda de: de.decode_int(intparse.U8))
