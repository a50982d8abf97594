#!/usr/bin/env python3
"""
MUON CORE MODELS
----------------
Defines the fundamental data structures produced by the line tokenizer.
These models represent the lowest level of document abstraction.

Author: MuON Decoder Team
Date: 2026-10-16
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class LineError(Enum):
    """Reasons a logical line could not be split into a definition."""
    MISSING_SEPARATOR = "missing ':' separator"
    MISSING_KEY = "empty key"
    INDENT_MISMATCH = "indentation does not match any open level"


@dataclass(frozen=True)
class Definition:
    """
    The atomic unit of a MuON document.

    A Definition represents a single `key: value` line extracted from the
    raw text during tokenizing.
    """
    depth: int      # Nesting level, 0 at the left margin
    line_no: int    # The original line number in the source text
    key: str        # Never empty
    value: str = ""


@dataclass(frozen=True)
class InvalidDefinition:
    """A malformed line, kept in stream order so the decoder can report it."""
    error: LineError
    line_no: int
    text: str = ""

    def describe(self) -> str:
        return f"line {self.line_no}: {self.error.value}"


DefinitionItem = Union[Definition, InvalidDefinition]
