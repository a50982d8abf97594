#!/usr/bin/env python3
"""
MUON ENGINE - Pull-Based Decoder
--------------------------------
The Decoder answers one decode request at a time (boolean, integer,
sequence, mapping ...) from the Definition stream. It never infers shape
from content: the caller says what it expects and the engine either
satisfies that request or raises a typed error.

Containers are scoped by indentation. A mapping owns the definitions at its
depth; a sequence field owns its own line plus every directly following
line that repeats its key at the same depth.

Author: MuON Decoder Team
Date: 2026-10-16
"""

import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Deque, Iterator, Optional, Sequence, Tuple, Union

from muon.core.config import DecodeOptions
from muon.core.errors import (
    EndOfInput,
    ExpectedBoolean,
    ExpectedChar,
    ExpectedEnum,
    ExpectedInteger,
    ExpectedMapping,
    TrailingInput,
    UnexpectedIndent,
    UnexpectedNesting,
    UnimplementedShape,
)
from muon.core.intparse import IntKind, parse_int
from muon.parsing.cursor import DefinitionCursor
from muon.parsing.lexer import MuonLexer
from muon.schema.reflect import reader_for

logger = logging.getLogger("muon.engine")

Read = Callable[["Decoder"], Any]


# --- Slots: where the next value request is answered from ---

class _RootSlot:
    """Start of a session; nothing has been claimed yet."""


@dataclass
class _FieldSlot:
    key: str
    depth: int


@dataclass
class _TokenSlot:
    tokens: Deque[str]
    line_no: int


@dataclass
class _BlockSlot:
    depth: int      # Depth of the element line; children sit one level deeper
    line_no: int


Slot = Union[_RootSlot, _FieldSlot, _TokenSlot, _BlockSlot]


class Decoder:
    """
    Implements the decode protocol over a DefinitionCursor.
    One Decoder serves exactly one decode session.
    """

    def __init__(self, cursor: DefinitionCursor):
        self.cursor = cursor
        self._slot: Slot = _RootSlot()

    @contextmanager
    def _enter(self, slot: Slot):
        saved = self._slot
        self._slot = slot
        try:
            yield
        finally:
            self._slot = saved

    def _next_text(self) -> Tuple[str, Optional[int]]:
        """Claims the text for one scalar and returns it with its line number."""
        slot = self._slot
        if isinstance(slot, _TokenSlot):
            if not slot.tokens:
                raise EndOfInput("sequence line exhausted", slot.line_no)
            return slot.tokens.popleft(), slot.line_no
        if isinstance(slot, _BlockSlot):
            raise UnexpectedNesting(line_no=slot.line_no)
        definition = self.cursor.take()
        return definition.value, definition.line_no

    # --- Scalars ---

    def decode_bool(self) -> bool:
        text, line_no = self._next_text()
        if text == "true":
            return True
        if text == "false":
            return False
        raise ExpectedBoolean(repr(text), line_no)

    def decode_char(self) -> str:
        text, line_no = self._next_text()
        if len(text) == 1:
            return text
        raise ExpectedChar(repr(text), line_no)

    def decode_int(self, kind: IntKind) -> int:
        text, line_no = self._next_text()
        value = parse_int(text, kind)
        if value is None:
            raise ExpectedInteger(f"{text!r} as {kind}", line_no)
        return value

    def decode_text(self) -> str:
        # Continuation lines are not joined; the value is returned as written
        text, _ = self._next_text()
        return text

    def decode_float(self):
        raise UnimplementedShape("float", self.cursor.last_line)

    def decode_bytes(self):
        raise UnimplementedShape("bytes", self.cursor.last_line)

    def decode_any(self):
        raise UnimplementedShape("self-describing value", self.cursor.last_line)

    def decode_ignored_any(self):
        return self.decode_any()

    def decode_unit(self) -> None:
        slot = self._slot
        if isinstance(slot, _TokenSlot):
            self._next_text()
        elif isinstance(slot, _BlockSlot):
            raise UnexpectedNesting(line_no=slot.line_no)
        return None

    def decode_option(self, read: Read) -> Any:
        # Presence is implied by the request; absent fields never reach here
        return read(self)

    def decode_newtype(self, read: Read) -> Any:
        return read(self)

    def decode_enum(self, name: str, variants: Sequence[str]):
        raise ExpectedEnum(name, self.cursor.last_line)

    def decode_identifier(self) -> str:
        return self.cursor.peek_key()

    # --- Containers ---

    def decode_seq(self) -> "SeqAccess":
        slot = self._slot
        if isinstance(slot, _TokenSlot):
            return _LineSeqAccess(self, slot)
        if isinstance(slot, _BlockSlot):
            return SeqAccess(self, None, slot.depth + 1)
        if isinstance(slot, _FieldSlot):
            return SeqAccess(self, slot.key, slot.depth)
        return SeqAccess(self, None, 0)

    def decode_tuple(self, length: int) -> "SeqAccess":
        return self.decode_seq()

    def decode_map(self) -> "MapAccess":
        slot = self._slot
        if isinstance(slot, _TokenSlot):
            raise ExpectedMapping(line_no=slot.line_no)
        if isinstance(slot, _BlockSlot):
            return MapAccess(self, slot.depth + 1)
        if isinstance(slot, _FieldSlot):
            definition = self.cursor.take()
            if definition.value:
                raise ExpectedMapping(repr(definition.value), definition.line_no)
            return MapAccess(self, slot.depth + 1)
        return MapAccess(self, 0)

    def decode_record(self, name: str, fields: Sequence[str]) -> "MapAccess":
        return self.decode_map()

    # --- Session ---

    def run(self, read: Read, allow_trailing: bool = False) -> Any:
        value = read(self)
        if not allow_trailing:
            self.end()
        return value

    def end(self):
        """Fails if any definition is left unconsumed."""
        if self.cursor.has_current():
            definition = self.cursor.peek()
            raise TrailingInput(f"key '{definition.key}'", definition.line_no)


class SeqAccess:
    """
    Sequence cursor. A line with a value contributes its whitespace separated
    tokens; a line with an empty value and deeper children contributes one
    block element.
    """

    def __init__(self, decoder: Decoder, key: Optional[str], depth: int):
        self._de = decoder
        self.key = key
        self.depth = depth
        self._tokens: Deque[str] = deque()
        self._line_no = 0
        self._block: Optional[_BlockSlot] = None

    def _matches(self, definition) -> bool:
        return definition.depth == self.depth and (self.key is None or definition.key == self.key)

    def has_next(self) -> bool:
        cursor = self._de.cursor
        while not self._tokens and self._block is None:
            if not cursor.has_current():
                return False
            definition = cursor.peek()
            if definition.depth > self.depth:
                raise UnexpectedIndent(f"key '{definition.key}'", definition.line_no)
            if not self._matches(definition):
                return False
            cursor.take()
            if definition.value:
                self._tokens.extend(definition.value.split())
                self._line_no = definition.line_no
            elif cursor.has_current() and cursor.peek_depth() > self.depth:
                self._block = _BlockSlot(self.depth, definition.line_no)
            # An empty line without children adds no elements
        return True

    def _element_slot(self) -> Slot:
        if self._tokens:
            return _TokenSlot(self._tokens, self._line_no)
        return self._block

    def next_element(self, read: Read) -> Any:
        if not self.has_next():
            raise EndOfInput("no more sequence elements", self._de.cursor.last_line)
        slot = self._element_slot()
        with self._de._enter(slot):
            value = read(self._de)
        if slot is self._block:
            self._block = None
        return value

    def elements(self, read: Read) -> Iterator[Any]:
        while self.has_next():
            yield self.next_element(read)


class _LineSeqAccess(SeqAccess):
    """Nested sequence over the remaining tokens of one line."""

    def __init__(self, decoder: Decoder, slot: _TokenSlot):
        super().__init__(decoder, None, -1)
        self._slot = slot

    def has_next(self) -> bool:
        return bool(self._slot.tokens)

    def _element_slot(self) -> Slot:
        return self._slot


class MapAccess:
    """
    Mapping cursor over every definition at one depth. A shallower definition
    ends the mapping; a deeper one that no value claimed is an error.
    """

    def __init__(self, decoder: Decoder, depth: int):
        self._de = decoder
        self.depth = depth
        self._current = None

    def has_next(self) -> bool:
        cursor = self._de.cursor
        if not cursor.has_current():
            return False
        definition = cursor.peek()
        if definition.depth > self.depth:
            raise UnexpectedIndent(f"key '{definition.key}'", definition.line_no)
        return definition.depth == self.depth

    @property
    def line_no(self) -> Optional[int]:
        """Line of the key most recently returned by next_key."""
        return self._current.line_no if self._current else None

    def next_key(self) -> str:
        key = self._de.decode_identifier()
        self._current = self._de.cursor.peek()
        return key

    def next_value(self, read: Read) -> Any:
        cursor = self._de.cursor
        definition = self._current or cursor.peek()
        with self._de._enter(_FieldSlot(definition.key, definition.depth)):
            value = read(self._de)
        # Unit values claim nothing; drop their line so the map moves on
        if cursor.has_current() and cursor.peek() is definition:
            cursor.take()
        self._current = None
        return value

    def entries(self, read: Read) -> Iterator[Tuple[str, Any]]:
        while self.has_next():
            key = self.next_key()
            yield key, self.next_value(read)


def decode_str(text: str, read: Read, options: Optional[DecodeOptions] = None) -> Any:
    """
    Runs a single decode session over `text`, driving the engine with `read`.
    """
    options = options or DecodeOptions()
    lexer = MuonLexer(comment_marker=options.comment_marker)
    decoder = Decoder(DefinitionCursor(lexer.definitions(text)))
    return decoder.run(read, allow_trailing=options.allow_trailing)


def from_str(text: str, schema: Any, options: Optional[DecodeOptions] = None) -> Any:
    """Decodes `text` into the type described by `schema` (a type hint)."""
    return decode_str(text, reader_for(schema), options)


def from_path(path: Union[str, Path], schema: Any, options: Optional[DecodeOptions] = None) -> Any:
    """Reads a MuON file (BOM-aware) and decodes it into `schema`."""
    file_path = Path(path)
    logger.debug(f"Decoding {file_path} as {getattr(schema, '__name__', schema)}")
    raw_text = file_path.read_text(encoding='utf-8-sig')
    return from_str(raw_text, schema, options)
