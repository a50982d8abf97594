# src/muon/core/errors.py
from typing import Optional

from muon.core.models import LineError


class MuonError(Exception):
    """Base class for every decode failure. Carries the source line when known."""

    message = "decode error"

    def __init__(self, detail: Optional[str] = None, line_no: Optional[int] = None):
        self.detail = detail
        self.line_no = line_no
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message if not self.detail else f"{self.message}: {self.detail}"
        if self.line_no is not None:
            return f"line {self.line_no}: {text}"
        return text


class FailedParse(MuonError):
    """A malformed line reached the decoder."""

    message = "failed parse"

    def __init__(self, error: LineError, line_no: int):
        self.error = error
        super().__init__(error.value, line_no)


class EndOfInput(MuonError):
    message = "unexpected end of input"


class ExpectedBoolean(MuonError):
    message = "expected boolean"


class ExpectedChar(MuonError):
    message = "expected character"


class ExpectedInteger(MuonError):
    message = "expected integer"


class ExpectedEnum(MuonError):
    message = "expected enum, none available"


class ExpectedMapping(MuonError):
    message = "expected nested block, found inline value"


class UnexpectedNesting(MuonError):
    message = "expected a value, found a nested block"


class UnexpectedIndent(MuonError):
    message = "unexpected indentation"


class TrailingInput(MuonError):
    message = "trailing definitions after decoded value"


class UnimplementedShape(MuonError, NotImplementedError):
    message = "decoding this shape is not implemented"


# Schema adapter failures

class MissingField(MuonError):
    message = "missing field"


class UnknownField(MuonError):
    message = "unknown field"


class DuplicateField(MuonError):
    message = "duplicate field"


class LengthMismatch(MuonError):
    message = "wrong number of elements"


class SchemaError(TypeError):
    """Raised before decoding when a type hint cannot be described to the engine."""
