import pytest

from muon.core.errors import EndOfInput, FailedParse
from muon.core.models import LineError
from muon.parsing.cursor import DefinitionCursor
from muon.parsing.lexer import MuonLexer


def cursor_for(text):
    return DefinitionCursor(MuonLexer().definitions(text))


def test_peek_is_idempotent():
    cursor = cursor_for("a: 1\nb: 2\n")
    assert cursor.peek_key() == "a"
    assert cursor.peek_key() == "a"
    assert cursor.has_current()
    assert cursor.take_value() == "1"
    assert cursor.peek_key() == "b"


def test_peek_then_take_refer_to_same_definition():
    cursor = cursor_for("first: one\nsecond: two\n")
    peeked = cursor.peek()
    taken = cursor.take()
    assert peeked is taken
    assert cursor.last_line == 1


def test_lookahead_is_one_item():
    pulled = []

    def stream():
        for item in MuonLexer().definitions("a: 1\nb: 2\nc: 3\n"):
            pulled.append(item.key)
            yield item

    cursor = DefinitionCursor(stream())
    cursor.peek_key()
    cursor.peek_key()
    assert pulled == ["a"]
    cursor.take_value()
    assert pulled == ["a"]
    cursor.has_current()
    assert pulled == ["a", "b"]


def test_end_of_input():
    cursor = cursor_for("a: 1\n")
    cursor.take_value()
    assert not cursor.has_current()
    with pytest.raises(EndOfInput):
        cursor.peek_key()
    with pytest.raises(EndOfInput):
        cursor.take_value()


def test_invalid_definition_is_surfaced():
    """
    PROPAGATION TEST: an invalid line is raised from every entry point, never skipped.
    """
    cursor = cursor_for("a: 1\nno separator\nc: 3\n")
    cursor.take_value()
    for op in (cursor.has_current, cursor.peek_key, cursor.take_value):
        with pytest.raises(FailedParse) as exc:
            op()
        assert exc.value.error is LineError.MISSING_SEPARATOR
        assert exc.value.line_no == 2


def test_peek_depth():
    cursor = cursor_for("a:\n  b: 1\n")
    cursor.take()
    assert cursor.peek_depth() == 1
