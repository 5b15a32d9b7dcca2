"""
Parse failures raised by the MD5 grammar parsers.

Every failure carries the byte offset at which it was detected. The
hierarchy separates structural problems (missing tag or delimiter),
truncated input, numeric conversion problems and semantic validation
problems so callers can report them differently.
"""

from typing import Tuple


class ParseError(ValueError):
    """Base class for all parse failures"""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (offset {offset})")
        self.message = message
        self.offset = offset

    def locate(self, data: bytes) -> Tuple[int, int]:
        """Return 1-based (line, column) of the failure within data."""
        line = data.count(b'\n', 0, self.offset) + 1
        column = self.offset - (data.rfind(b'\n', 0, self.offset) + 1) + 1
        return line, column

    def describe(self, data: bytes) -> str:
        line, column = self.locate(data)
        return f"line {line}, column {column}: {self.message}"


class StructuralError(ParseError):
    """A required literal, delimiter or token is missing or malformed"""


class IncompleteInputError(ParseError):
    """Input ended in the middle of a token or block"""


class NumericConversionError(ParseError):
    """Digits do not fit the target width, or a decimal is not finite"""


class SemanticValidationError(ParseError):
    """Syntactically valid input with an invalid meaning"""


class BiasRangeError(SemanticValidationError):
    """Weight bias outside [-1, 1]"""

    def __init__(self, bias: float, offset: int):
        super().__init__(f"weight bias {bias!r} outside [-1, 1]", offset)
        self.bias = bias


class CountMismatchError(SemanticValidationError):
    """Declared count differs from the number of parsed entries"""

    def __init__(self, field: str, declared: int, actual: int, offset: int):
        super().__init__(f"{field} declares {declared} but {actual} parsed", offset)
        self.field = field
        self.declared = declared
        self.actual = actual
