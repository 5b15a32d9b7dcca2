"""
Primitive token parsers and combinators for the MD5 text formats.

Every parser has the shape ``parser(data, pos) -> (value, new_pos)``:
it skips leading whitespace, consumes one token and returns the decoded
value together with the offset of the first unconsumed byte. On failure
it raises a ParseError subclass and consumes nothing, since the caller's
offset is never modified.
"""

import math
from typing import Any, Callable, List, Optional, Tuple

from .errors import (
    StructuralError,
    IncompleteInputError,
    NumericConversionError,
)

Parser = Callable[[bytes, int], Tuple[Any, int]]

WHITESPACE = b' \t\r\n'
DIGITS = b'0123456789'

_MINUS = ord('-')
_DOT = ord('.')
_QUOTE = ord('"')


def skip_ws(data: bytes, pos: int) -> int:
    """Return the offset of the first non-whitespace byte at or after pos."""
    end = len(data)
    while pos < end and data[pos] in WHITESPACE:
        pos += 1
    return pos


def at_end(data: bytes, pos: int) -> bool:
    """True when only whitespace remains."""
    return skip_ws(data, pos) >= len(data)


def expect_tag(data: bytes, pos: int, literal: bytes) -> int:
    """Match a literal keyword or delimiter, returning the offset after it."""
    start = skip_ws(data, pos)
    end = start + len(literal)
    if data[start:end] == literal:
        return end
    if end > len(data) and literal.startswith(data[start:]):
        raise IncompleteInputError(f"input ended while expecting {literal.decode()!r}", start)
    raise StructuralError(f"expected {literal.decode()!r}", start)


def _digit_run(data: bytes, pos: int) -> int:
    end = len(data)
    while pos < end and data[pos] in DIGITS:
        pos += 1
    return pos


def _signed_digits(data: bytes, pos: int, allow_sign: bool, what: str) -> Tuple[int, bool, int, int]:
    """Locate an optionally signed digit run; returns (start, negative, digits_start, digits_end)."""
    start = skip_ws(data, pos)
    cursor = start
    negative = allow_sign and cursor < len(data) and data[cursor] == _MINUS
    if negative:
        cursor += 1
    digits_end = _digit_run(data, cursor)
    if digits_end == cursor:
        if cursor >= len(data):
            raise IncompleteInputError(f"input ended while expecting {what}", start)
        raise StructuralError(f"expected {what}", start)
    return start, negative, cursor, digits_end


def parse_unsigned(data: bytes, pos: int, bits: int = 32) -> Tuple[int, int]:
    """Parse an unsigned base-10 integer that fits in `bits` bits."""
    start, _, digits_start, end = _signed_digits(data, pos, False, "unsigned integer")
    value = int(data[digits_start:end].decode('ascii'))
    if value >= 1 << bits:
        raise NumericConversionError(f"{value} does not fit in u{bits}", start)
    return value, end


def parse_signed(data: bytes, pos: int, bits: int = 32) -> Tuple[int, int]:
    """Parse an optionally negative base-10 integer that fits in `bits` bits."""
    start, negative, digits_start, end = _signed_digits(data, pos, True, "integer")
    value = int(data[digits_start:end].decode('ascii'))
    if negative:
        value = -value
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise NumericConversionError(f"{value} does not fit in i{bits}", start)
    return value, end


def parse_decimal(data: bytes, pos: int) -> Tuple[float, int]:
    """
    Parse a decimal literal: optional '-', digits, optional '.' and digits.

    No exponent notation. A '.' that is not followed by a digit is left
    unconsumed.
    """
    start, negative, digits_start, end = _signed_digits(data, pos, True, "decimal")
    text = data[digits_start:end]
    if end < len(data) and data[end] == _DOT:
        frac_end = _digit_run(data, end + 1)
        if frac_end > end + 1:
            text = text + b'.' + data[end + 1:frac_end]
            end = frac_end
    value = float(text.decode('ascii'))
    if not math.isfinite(value):
        raise NumericConversionError("decimal is out of floating-point range", start)
    return (-value if negative else value), end


def parse_quoted_string(data: bytes, pos: int) -> Tuple[str, int]:
    """Parse a double-quoted string. Content is taken verbatim, no escapes."""
    start = skip_ws(data, pos)
    if start >= len(data):
        raise IncompleteInputError("input ended while expecting '\"'", start)
    if data[start] != _QUOTE:
        raise StructuralError("expected '\"'", start)
    close = data.find(b'"', start + 1)
    if close < 0:
        raise IncompleteInputError("unterminated string", start)
    try:
        text = bytes(data[start + 1:close]).decode('utf-8')
    except UnicodeDecodeError as e:
        raise StructuralError("string is not valid UTF-8 text", start + 1) from e
    return text, close + 1


def parse_comment(data: bytes, pos: int) -> Tuple[bytes, int]:
    """Parse a '//' comment up to and including the next line feed."""
    body = expect_tag(data, pos, b'//')
    newline = data.find(b'\n', body)
    if newline < 0:
        raise IncompleteInputError("comment is not terminated by a line break", body)
    return bytes(data[body:newline]), newline + 1


def many(parser: Parser, data: bytes, pos: int, minimum: int = 0) -> Tuple[List[Any], int]:
    """
    Apply parser repeatedly and collect the results.

    Repetition ends when only whitespace remains or when the item fails
    structurally at its first significant byte. Once an item has matched
    its first token, any later failure propagates.
    """
    items = []
    while True:
        start = skip_ws(data, pos)
        if start >= len(data):
            if len(items) < minimum:
                raise IncompleteInputError("input ended while expecting another entry", start)
            break
        try:
            item, pos = parser(data, pos)
        except StructuralError as err:
            if err.offset != start or len(items) < minimum:
                raise
            break
        items.append(item)
    return items, pos


def optional(parser: Parser, data: bytes, pos: int) -> Tuple[Optional[Any], int]:
    """Apply parser, returning (None, pos) if it does not match at all."""
    start = skip_ws(data, pos)
    if start >= len(data):
        return None, pos
    try:
        return parser(data, pos)
    except StructuralError as err:
        if err.offset != start:
            raise
        return None, pos


def delimited(data: bytes, pos: int, open_tag: bytes, parser: Parser, close_tag: bytes) -> Tuple[Any, int]:
    """Parse `open_tag value close_tag` and return the value."""
    pos = expect_tag(data, pos, open_tag)
    value, pos = parser(data, pos)
    pos = expect_tag(data, pos, close_tag)
    return value, pos


def tagged(literal: bytes, parser: Parser, data: bytes, pos: int) -> Tuple[Any, int]:
    """Parse `literal value` and return the value."""
    pos = expect_tag(data, pos, literal)
    return parser(data, pos)
