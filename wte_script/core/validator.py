"""Row validation: raw source rows into typed ScriptCommand records.

WHY: Rows arrive as loosely typed lists. Before anything is encoded, each
row must have exactly six columns, a usable timer, and five text fields
that survive null termination. One bad row must stop the whole compile,
because a script missing a command is unsafe to hand to the engine.

HOW: parse_row() turns one row into a RowResult (command or error).
validate_rows() folds over the rows, stopping at the first failed result,
and rejects a source that produced no commands.

RULES:
- Rows are numbered from 1 in error messages
- Width check comes first: anything other than 6 columns is a RowShapeError
- Timer: integer literal, wrapped (never rejected) into signed 64-bit range
- Timer text: optional sign + decimal digits, or unsigned 0x / 0o / 0b
  literal; surrounding whitespace ignored; empty text means 0
- Text fields: strings verbatim; JSON scalars rendered as true / false /
  null / plain numbers; arrays and objects rejected
- A null byte inside a text field is rejected (InvalidFieldContentError)
- Zero rows → EmptyScriptError
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Sequence

from wte_script.config import ROW_WIDTH, TEXT_FIELD_NAMES
from wte_script.core.ir import RowResult, ScriptCommand
from wte_script.errors import (
    EmptyScriptError,
    InvalidFieldContentError,
    InvalidTimerError,
    RowShapeError,
    ScriptError,
)

logger = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"^[+-]?[0-9]+$")
_DECIMAL_CHUNK = 18

# Prefixed literals and their bases. Signs are not allowed with a prefix.
_PREFIXED_RE = {
    16: re.compile(r"^0[xX][0-9a-fA-F]+$"),
    8: re.compile(r"^0[oO][0-7]+$"),
    2: re.compile(r"^0[bB][01]+$"),
}


def to_int64(value: int) -> int:
    """Wrap an integer into the signed 64-bit range (two's complement)."""
    return ((value + 2 ** 63) % 2 ** 64) - 2 ** 63


def wrap_decimal(text: str) -> int:
    """Parse signed decimal text of any length, wrapped to signed 64 bits.

    Digits are folded in chunks modulo 2**64, so literals longer than the
    interpreter's int-from-string digit limit still convert.
    """
    negative = text.startswith("-")
    digits = text.lstrip("+-")
    value = 0
    for start in range(0, len(digits), _DECIMAL_CHUNK):
        chunk = digits[start:start + _DECIMAL_CHUNK]
        value = (value * 10 ** len(chunk) + int(chunk)) % 2 ** 64
    return to_int64(-value if negative else value)


def _parse_int_text(text: str) -> int | None:
    text = text.strip()
    if not text:
        return 0
    if _DECIMAL_RE.match(text):
        return wrap_decimal(text)
    for base, pattern in _PREFIXED_RE.items():
        if pattern.match(text):
            return int(text[2:], base)
    return None


def parse_timer(value: Any, row_index: int) -> int:
    """Convert a raw timer cell into a signed 64-bit integer.

    WHY: Timers above 2**63 - 1 have always wrapped rather than failed.
    Scripts relying on that keep compiling to the same bytes.

    Raises:
        InvalidTimerError: if the value is not an integer literal.
    """
    if isinstance(value, bool):
        raise InvalidTimerError(row_index, value)
    if isinstance(value, int):
        return to_int64(value)
    if isinstance(value, float) and value.is_integer():
        return to_int64(int(value))
    if isinstance(value, str):
        parsed = _parse_int_text(value)
        if parsed is not None:
            return to_int64(parsed)
    raise InvalidTimerError(row_index, value)


def field_text(value: Any, row_index: int, field: str) -> str:
    """Convert a raw text cell into the string that gets encoded.

    Raises:
        InvalidFieldContentError: for arrays, objects, or embedded null bytes.
    """
    if isinstance(value, str):
        text = value
    elif value is None:
        text = "null"
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, int):
        text = str(value)
    elif isinstance(value, float):
        text = str(int(value)) if value.is_integer() else repr(value)
    else:
        raise InvalidFieldContentError(
            row_index, field, "must be text, not {}".format(type(value).__name__)
        )

    if "\x00" in text:
        raise InvalidFieldContentError(row_index, field, "contains a null byte")
    return text


def parse_row(row_index: int, row: Sequence[Any]) -> RowResult:
    """Validate one raw row and build its ScriptCommand.

    Args:
        row_index: 1-based position of the row in the source.
        row: Raw field values: timer followed by the five text fields.

    Returns:
        A RowResult holding either the command or the first error found.
    """
    if len(row) != ROW_WIDTH:
        return RowResult(row_index, error=RowShapeError(row_index, ROW_WIDTH, len(row)))

    try:
        timer = parse_timer(row[0], row_index)
        texts = [
            field_text(value, row_index, name)
            for name, value in zip(TEXT_FIELD_NAMES, row[1:])
        ]
    except ScriptError as exc:
        return RowResult(row_index, error=exc)

    system, to, from_, command, argument = texts
    return RowResult(
        row_index,
        command=ScriptCommand(
            timer=timer,
            system=system,
            to=to,
            from_=from_,
            command=command,
            argument=argument,
        ),
    )


def validate_rows(rows: Iterable[Sequence[Any]]) -> List[ScriptCommand]:
    """Validate every row, in order, into ScriptCommand records.

    Raises:
        RowShapeError, InvalidTimerError, InvalidFieldContentError:
            for the first bad row; later rows are not examined.
        EmptyScriptError: if there were no rows.
    """
    commands: List[ScriptCommand] = []
    for row_index, row in enumerate(rows, start=1):
        result = parse_row(row_index, row)
        if not result.ok:
            logger.debug("Rejected row %d: %s", row_index, result.error)
            raise result.error
        commands.append(result.command)

    if not commands:
        raise EmptyScriptError()

    logger.debug("Validated %d commands", len(commands))
    return commands
