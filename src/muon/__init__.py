"""
MuON decoder: schema-driven decoding of the MuON notation into typed values.

    from dataclasses import dataclass
    from typing import List
    import muon

    @dataclass
    class Flags:
        flags: List[bool]

    muon.from_str("flags: true false\n", Flags)
"""

from muon.core.config import DecodeOptions
from muon.core.engine import Decoder, MapAccess, SeqAccess, decode_str, from_path, from_str
from muon.core.errors import MuonError, SchemaError

__version__ = "0.1.0"

__all__ = [
    "DecodeOptions",
    "Decoder",
    "MapAccess",
    "MuonError",
    "SchemaError",
    "SeqAccess",
    "decode_str",
    "from_path",
    "from_str",
]
