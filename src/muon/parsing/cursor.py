#!/usr/bin/env python3
"""
MUON DEFINITION CURSOR
----------------------
One-slot lookahead over the tokenizer stream. This is the only component
the decoding engine reads input from.

Author: MuON Decoder Team
Date: 2026-10-16
"""

from typing import Iterable, Iterator, Optional

from muon.core.errors import EndOfInput, FailedParse
from muon.core.models import Definition, DefinitionItem, InvalidDefinition

_EMPTY = object()


class DefinitionCursor:
    """
    Wraps the Definition stream. Peeking fills the single buffered slot;
    consuming empties it. Invalid definitions are raised, never skipped.
    """

    def __init__(self, items: Iterable[DefinitionItem]):
        self._items: Iterator[DefinitionItem] = iter(items)
        self._slot = _EMPTY
        self.last_line: Optional[int] = None  # Line of the last consumed definition

    def _fill(self) -> Optional[DefinitionItem]:
        if self._slot is _EMPTY:
            self._slot = next(self._items, None)
        return self._slot

    @staticmethod
    def _check(item: Optional[DefinitionItem]) -> Definition:
        if item is None:
            raise EndOfInput()
        if isinstance(item, InvalidDefinition):
            raise FailedParse(item.error, item.line_no)
        return item

    def has_current(self) -> bool:
        item = self._fill()
        if isinstance(item, InvalidDefinition):
            raise FailedParse(item.error, item.line_no)
        return item is not None

    def peek(self) -> Definition:
        return self._check(self._fill())

    def peek_key(self) -> str:
        return self.peek().key

    def peek_depth(self) -> int:
        return self.peek().depth

    def take(self) -> Definition:
        definition = self._check(self._fill())
        self._slot = _EMPTY
        self.last_line = definition.line_no
        return definition

    def take_value(self) -> str:
        return self.take().value
