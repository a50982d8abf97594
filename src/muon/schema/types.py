# src/muon/schema/types.py
"""
Width-tagged annotations for dataclass fields.

    @dataclass
    class Header:
        version: U8
        offset: I32
        mark: Char
"""

from typing import Annotated

from muon.core import intparse


class CharMarker:
    """Marks a `str` annotation as a single character."""

    def __repr__(self) -> str:
        return "CHAR"


CHAR = CharMarker()

Char = Annotated[str, CHAR]

I8 = Annotated[int, intparse.I8]
I16 = Annotated[int, intparse.I16]
I32 = Annotated[int, intparse.I32]
I64 = Annotated[int, intparse.I64]
U8 = Annotated[int, intparse.U8]
U16 = Annotated[int, intparse.U16]
U32 = Annotated[int, intparse.U32]
U64 = Annotated[int, intparse.U64]
