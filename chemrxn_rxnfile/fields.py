# chemrxn_rxnfile/fields.py
"""Fixed-width field primitives for MDL connection-table lines.

Decoders never pad or guess: a field that runs past the end of the line or
does not hold the expected text raises :class:`FieldFormatError`. Encoders
never raise; values that do not fit collapse to a right-justified ``"0"``.
"""

from __future__ import annotations

import math
import re
from typing import Optional

COORDINATE_WIDTH = 10
DECIMAL_POINT_OFFSET = 5
INTEGER_DIGITS = 4
FRACTION_DIGITS = 4

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class FieldFormatError(ValueError):
    """Raised when a fixed-width field cannot be decoded."""

    pass


def _slice(line: str, start: int, width: int) -> str:
    end = start + width
    if start > len(line) or end > len(line):
        raise FieldFormatError(
            f"Field at columns {start + 1}-{end} runs past end of line "
            f"(length {len(line)})"
        )
    return line[start:end]


# ---------------------- decoding ---------------------- #


def decode_int(line: str, start: int, width: int) -> int:
    """Decode a right-justified integer field.

    Args:
        line: Source line without its newline.
        start: 0-based start column.
        width: Field width in characters.

    Returns:
        The parsed integer (may be negative).

    Raises:
        FieldFormatError: If the field is out of bounds or not a base-10
            integer after trimming.
    """
    text = _slice(line, start, width).strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        raise FieldFormatError(f"Error on parsing integer: {text!r}")
    return int(text)


def decode_coordinate(line: str, start: int) -> float:
    """Decode a 10-column ``xxxxx.xxxx`` coordinate field.

    Besides parsing, the character five columns into the field must be the
    decimal point.

    Raises:
        FieldFormatError: If the field is out of bounds, misaligned or not a
            number.
    """
    raw = _slice(line, start, COORDINATE_WIDTH)
    text = raw.strip()
    if raw[DECIMAL_POINT_OFFSET] != ".":
        raise FieldFormatError(f"Incorrect coordinate format: {text!r}")
    try:
        value = float(text)
    except ValueError:
        raise FieldFormatError(f"Error on parsing float: {text!r}") from None
    if not math.isfinite(value) or "_" in text:
        raise FieldFormatError(f"Error on parsing float: {text!r}")
    return value


def decode_string(line: str, start: int, width: int) -> str:
    """Return the trimmed text of a field.

    Raises:
        FieldFormatError: If the field is out of bounds.
    """
    return _slice(line, start, width).strip()


# ---------------------- encoding ---------------------- #


def encode_int(value: int, width: int) -> str:
    """Right-justify ``value`` in ``width`` columns.

    A value whose decimal form is wider than the field is written as ``"0"``.
    """
    text = str(int(value))
    if len(text) > width:
        text = "0"
    return text.rjust(width)


def format_decimal(value: Optional[float]) -> str:
    """Format ``value`` with 1-4 integer digits and exactly 4 fraction digits.

    Non-finite input formats as ``0.0``. Returns ``"0"`` when the integer part
    needs more than four digits.
    """
    if value is None or not math.isfinite(value):
        value = 0.0
    text = f"{value:.{FRACTION_DIGITS}f}"
    integer_part = text.lstrip("-").split(".", 1)[0]
    if len(integer_part) > INTEGER_DIGITS:
        return "0"
    return text


def encode_decimal(value: Optional[float], width: int = COORDINATE_WIDTH) -> str:
    """Right-justify a fixed-point decimal in ``width`` columns.

    Overflowing values degrade to ``"0"`` like :func:`encode_int`.
    """
    text = format_decimal(value)
    if len(text) > width:
        text = "0"
    return text.rjust(width)


def encode_string(value: str, width: int, pad_right: bool = True) -> str:
    """Pad ``value`` with spaces to ``width`` columns.

    A value longer than the field keeps only the characters from position
    ``width`` onwards, without padding.
    """
    if len(value) > width:
        return value[width:]
    if pad_right:
        return value.ljust(width)
    return value.rjust(width)
