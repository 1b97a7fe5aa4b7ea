"""Exception types for every way a compile can fail.

WHY: Every failure is terminal for a run, but the CLI and tests still need
to tell them apart: a bad file extension, a malformed row, a declined
overwrite. Typed exceptions carry the details (row number, lengths, path)
as attributes instead of only in the message text.

HOW: All errors derive from ScriptError, so the CLI catches one type.
Row-level errors carry a 1-based row_index and format their message as
"Row N: ...".

RULES:
- No error is recovered from inside the pipeline
- Row indexes are 1-based, matching the row numbers a user sees
"""

from __future__ import annotations

from pathlib import Path


class ScriptError(Exception):
    """Base class for all compiler failures."""


class UnsupportedFormatError(ScriptError):
    """Raised when the source file extension is not csv or json."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__("File format '{}' not supported.".format(extension))


class ParseFailure(ScriptError):
    """Raised when the source file cannot be read or has the wrong top-level shape."""


class RowError(ScriptError):
    """Base for errors tied to one source row."""

    def __init__(self, row_index: int, message: str) -> None:
        self.row_index = row_index
        super().__init__("Row {}: {}".format(row_index, message))


class RowShapeError(RowError):
    """Raised when a row does not have exactly the expected number of columns.

    RULES:
    - expected_len is always the format's row width (6)
    - actual_len is the column count found in the source
    """

    def __init__(self, row_index: int, expected_len: int, actual_len: int) -> None:
        self.expected_len = expected_len
        self.actual_len = actual_len
        super().__init__(
            row_index,
            "incorrect length (expected {} fields, got {}).".format(expected_len, actual_len),
        )


class InvalidTimerError(RowError):
    """Raised when the timer column is not an integer literal."""

    def __init__(self, row_index: int, value: object) -> None:
        self.value = value
        super().__init__(row_index, "timer {!r} is not an integer.".format(value))


class InvalidFieldContentError(RowError):
    """Raised when a text field cannot be stored as a null-terminated string."""

    def __init__(self, row_index: int, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(row_index, "field '{}' {}.".format(field, reason))


class EmptyScriptError(ScriptError):
    """Raised when the source produced no commands."""

    def __init__(self) -> None:
        super().__init__("No data generated.")


class EncodingError(ScriptError):
    """Raised by the encoder when an internal invariant does not hold."""


class WriteFailure(ScriptError):
    """Raised when the OS refuses to write the output file."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__("Unable to write '{}': {}".format(path, reason))


class OverwriteDeclined(ScriptError):
    """Raised when the output file exists and overwriting was not confirmed."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__("Output file '{}' already exists.".format(path))
