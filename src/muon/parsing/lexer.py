#!/usr/bin/env python3
"""
MUON LEXER - Line Tokenizer
---------------------------
Decomposes raw MuON text into a lazy stream of Definition models.
Tracks the open indentation runs so that depth is derived by comparing
leading whitespace between lines, never by counting columns.

Author: MuON Decoder Team
Date: 2026-10-16
"""

import logging
from typing import Iterator, List, Optional, Tuple

from muon.core.models import Definition, DefinitionItem, InvalidDefinition, LineError

logger = logging.getLogger("muon.lexer")


class MuonLexer:
    """
    Orchestrates the transition from raw text to Definitions.
    Each call to definitions() keeps its own indent stack, so streams are
    independent and can run side by side.
    """

    def __init__(self, comment_marker: str = "#"):
        self.comment_marker = comment_marker

    def _clean_artifacts(self, text: str) -> str:
        """
        Removes invisible UTF-8 BOM markers and standardizes line endings.
        """
        text = text.lstrip('\ufeff')
        return text.replace('\r\n', '\n').replace('\r', '\n')

    def _find_separator(self, text: str) -> int:
        """Index of the first ':' not escaped with a backslash, or -1."""
        escaped = False
        for i, char in enumerate(text):
            if escaped:
                escaped = False
                continue
            if char == '\\':
                escaped = True
                continue
            if char == ':':
                return i
        return -1

    def _measure_depth(self, run: str, indent_stack: List[str]) -> Optional[int]:
        """
        Maps a leading whitespace run onto the indent stack.
        Returns the resulting depth, or None when the run matches no open level.
        Does not modify the stack.
        """
        top = indent_stack[-1]
        if run == top:
            return len(indent_stack) - 1
        if run.startswith(top):
            return len(indent_stack)
        for depth in range(len(indent_stack) - 2, -1, -1):
            if indent_stack[depth] == run:
                return depth
        return None

    def _commit_depth(self, run: str, depth: int, indent_stack: List[str]):
        del indent_stack[depth + 1:]
        if depth == len(indent_stack):
            indent_stack.append(run)

    def split_line(self, content: str) -> Tuple[Optional[str], str]:
        """
        Splits stripped line content at the separator.
        Example: "name: Mowgli" -> ("name", "Mowgli")
        The key is None when the line has no separator.
        """
        idx = self._find_separator(content)
        if idx == -1:
            return None, content
        key = content[:idx].strip().replace('\\:', ':')
        return key, content[idx + 1:].strip()

    def tokenize_line(self, line: str, line_no: int, indent_stack: List[str]) -> Optional[DefinitionItem]:
        """
        Classifies one logical line against the stream's indent stack.
        Blank and comment lines give None.
        """
        content = line.strip()
        if not content or content.startswith(self.comment_marker):
            return None

        run = line[:len(line) - len(line.lstrip())]
        depth = self._measure_depth(run, indent_stack)
        if depth is None:
            return self._invalid(LineError.INDENT_MISMATCH, line_no, line)

        key, value = self.split_line(content)
        if key is None:
            return self._invalid(LineError.MISSING_SEPARATOR, line_no, line)
        if not key:
            return self._invalid(LineError.MISSING_KEY, line_no, line)

        self._commit_depth(run, depth, indent_stack)
        return Definition(depth=depth, line_no=line_no, key=key, value=value)

    def _invalid(self, error: LineError, line_no: int, line: str) -> InvalidDefinition:
        logger.debug(f"Malformed line {line_no} ({error.name}): {line!r}")
        return InvalidDefinition(error=error, line_no=line_no, text=line)

    def definitions(self, raw_text: str) -> Iterator[DefinitionItem]:
        """
        Lazily yields one Definition (valid or invalid) per logical line.
        This is the primary interface for the DefinitionCursor.
        """
        indent_stack: List[str] = [""]
        clean_text = self._clean_artifacts(raw_text)

        for i, line in enumerate(clean_text.split('\n'), 1):
            item = self.tokenize_line(line, i, indent_stack)
            if item is not None:
                yield item
