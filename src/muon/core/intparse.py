#!/usr/bin/env python3
"""
MUON INTEGER PARSER
-------------------
Bounded-width text to integer conversion. Every target width is range
checked directly, so narrow signed types need no widening step.

Author: MuON Decoder Team
Date: 2026-10-16
"""

import re
from dataclasses import dataclass
from typing import Optional

# Group 1: sign, Group 2: radix prefix, Group 3: digits
INT_PATTERN = re.compile(r'([+-]?)(0[xXbBoO])?([0-9A-Fa-f]+)')

RADIX = {None: 10, 'x': 16, 'b': 2, 'o': 8}


@dataclass(frozen=True)
class IntKind:
    """Target width and signedness for an integer decode."""
    bits: int
    signed: bool

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def __str__(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"


I8 = IntKind(8, True)
I16 = IntKind(16, True)
I32 = IntKind(32, True)
I64 = IntKind(64, True)
U8 = IntKind(8, False)
U16 = IntKind(16, False)
U32 = IntKind(32, False)
U64 = IntKind(64, False)


def parse_int(text: str, kind: IntKind) -> Optional[int]:
    """
    Parses an integer literal for the given kind.
    Returns None on malformed text or when the value does not fit.
    """
    match = INT_PATTERN.fullmatch(text)
    if not match:
        return None
    sign, prefix, digits = match.groups()
    radix = RADIX[prefix[1].lower() if prefix else None]
    try:
        value = int(digits, radix)
    except ValueError:
        # Hex letters without a 0x prefix, or digits outside the radix
        return None
    if sign == '-':
        value = -value
    if value < kind.minimum or value > kind.maximum:
        return None
    return value
