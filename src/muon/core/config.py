#!/usr/bin/env python3
"""
MUON DECODE OPTIONS
-------------------
Settings for a single decode session. The options object is created by the
caller (or the CLI) and handed to the lexer and engine unchanged.

Author: MuON Decoder Team
Date: 2026-10-16
"""

from dataclasses import dataclass


@dataclass
class DecodeOptions:
    """
    Tunables shared by the tokenizer and the decoding engine.
    """
    comment_marker: str = "#"      # Lines starting with this marker are skipped
    allow_trailing: bool = False   # Accept definitions left over after the top-level value
