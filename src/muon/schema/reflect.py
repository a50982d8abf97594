#!/usr/bin/env python3
"""
MUON SCHEMA ADAPTER - Type Hints to Decode Requests
---------------------------------------------------
Walks a Python type hint and issues the matching decode request to the
engine at each step. The engine is only ever told what to expect; this
module is where that expectation comes from.

Supported: bool, str, int (64-bit signed), width-tagged ints and Char from
muon.schema.types, None, Optional[T], List[T], Tuple[...], Dict[str, T],
NewType wrappers and dataclasses. float, bytes, Any and Enum are handed to
the engine, which refuses them.

Author: MuON Decoder Team
Date: 2026-10-16
"""

import dataclasses
import enum
import types
from typing import Annotated, Any, Callable, Dict, List, Union, get_args, get_origin, get_type_hints

from muon.core import intparse
from muon.core.errors import DuplicateField, LengthMismatch, MissingField, SchemaError, UnknownField
from muon.schema.types import CHAR

NoneType = type(None)
UNION_TYPES = (Union, getattr(types, "UnionType", Union))


def _optional_inner(tp: Any):
    """Returns T for Optional[T], otherwise None."""
    if get_origin(tp) in UNION_TYPES:
        args = get_args(tp)
        inner = [a for a in args if a is not NoneType]
        if len(args) == 2 and len(inner) == 1:
            return inner[0]
    return None


def decode(de, tp: Any) -> Any:
    """Decodes one value of type `tp` from the decoder's current position."""
    origin = get_origin(tp)

    if origin is Annotated:
        base, *metadata = get_args(tp)
        for meta in metadata:
            if isinstance(meta, intparse.IntKind):
                return de.decode_int(meta)
            if meta is CHAR:
                return de.decode_char()
        return decode(de, base)

    if tp is Any:
        return de.decode_any()
    if tp is None or tp is NoneType:
        return de.decode_unit()
    if tp is bool:
        return de.decode_bool()
    if tp is int:
        return de.decode_int(intparse.I64)
    if tp is str:
        return de.decode_text()
    if tp is float:
        return de.decode_float()
    if tp in (bytes, bytearray):
        return de.decode_bytes()

    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return de.decode_newtype(lambda d: decode(d, supertype))

    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        return de.decode_enum(tp.__name__, [member.name for member in tp])

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _decode_record(de, tp)

    if origin in UNION_TYPES:
        inner = _optional_inner(tp)
        if inner is None:
            raise SchemaError(f"only Optional[T] unions can be decoded, got {tp!r}")
        return de.decode_option(lambda d: decode(d, inner))

    if origin is list:
        (item_tp,) = get_args(tp) or (Any,)
        return list(de.decode_seq().elements(lambda d: decode(d, item_tp)))

    if origin is tuple:
        return _decode_tuple(de, get_args(tp))

    if origin is dict:
        key_tp, value_tp = get_args(tp) or (str, Any)
        if key_tp is not str:
            raise SchemaError(f"mapping keys must be str, got {key_tp!r}")
        return _decode_dict(de, value_tp)

    raise SchemaError(f"cannot decode into {tp!r}")


def _decode_tuple(de, item_types) -> tuple:
    if len(item_types) == 2 and item_types[1] is Ellipsis:
        item_tp = item_types[0]
        return tuple(de.decode_seq().elements(lambda d: decode(d, item_tp)))

    access = de.decode_tuple(len(item_types))
    items = []
    for item_tp in item_types:
        if not access.has_next():
            raise LengthMismatch(f"expected {len(item_types)}, got {len(items)}", de.cursor.last_line)
        items.append(access.next_element(lambda d, t=item_tp: decode(d, t)))
    if access.has_next():
        raise LengthMismatch(f"expected {len(item_types)}, got more", de.cursor.last_line)
    return tuple(items)


def _decode_dict(de, value_tp) -> Dict[str, Any]:
    access = de.decode_map()
    result: Dict[str, Any] = {}
    while access.has_next():
        key = access.next_key()
        if key in result:
            raise DuplicateField(f"'{key}'", access.line_no)
        result[key] = access.next_value(lambda d: decode(d, value_tp))
    return result


def _decode_record(de, cls) -> Any:
    hints = get_type_hints(cls, include_extras=True)
    fields = {f.name: f for f in dataclasses.fields(cls) if f.init}
    access = de.decode_record(cls.__name__, list(fields))
    # Header line of a nested record; None for a top-level one until a line is read
    opened_at = de.cursor.last_line
    values: Dict[str, Any] = {}

    while access.has_next():
        key = access.next_key()
        if key not in fields:
            raise UnknownField(f"'{key}' for {cls.__name__}", access.line_no)
        if key in values:
            raise DuplicateField(f"'{key}' for {cls.__name__}", access.line_no)
        values[key] = access.next_value(lambda d, t=hints[key]: decode(d, t))

    missing: List[str] = []
    for name, field in fields.items():
        if name in values:
            continue
        if field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING:
            continue
        if _optional_inner(hints[name]) is not None:
            values[name] = None
            continue
        missing.append(name)
    if missing:
        line_no = opened_at if opened_at is not None else de.cursor.last_line
        raise MissingField(f"{', '.join(repr(m) for m in missing)} for {cls.__name__}", line_no)

    return cls(**values)


def reader_for(schema: Any) -> Callable[[Any], Any]:
    """Builds a read callable for the engine from a type hint."""
    return lambda de: decode(de, schema)
