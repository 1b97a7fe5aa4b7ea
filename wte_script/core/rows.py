"""Source file reading: CSV or JSON into an ordered list of raw rows.

WHY: Designers keep event scripts in whichever form their tools export:
a spreadsheet saved as CSV, or JSON produced by another script. The
validator should not care which; it receives the same list of rows.

HOW: detect_format() picks the reader from the file extension.
CSV goes through the standard csv reader with empty lines dropped.
JSON is loaded, its top-level shape is checked against a small JSON
Schema, and an object's values (or an array's items) become the rows.

RULES:
- Extension dispatch only: .csv or .json (case-insensitive)
- CSV files are read as UTF-8; a leading BOM is ignored
- CSV line endings are not translated, so quoted CRLF survives in a field
- Very long JSON integers are wrapped to 64 bits while loading
- CSV empty lines are skipped; every CSV field is a string
- JSON top level must be an array or an object whose members are arrays
- Row order is file order (object values in insertion order)
- Width is NOT checked here; that is the validator's job
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, List

import jsonschema

from wte_script.config import SUPPORTED_SOURCE_FORMATS
from wte_script.core.validator import wrap_decimal
from wte_script.errors import ParseFailure, UnsupportedFormatError

logger = logging.getLogger(__name__)

# Top-level shape of a JSON source. Member arrays may have any length so the
# validator can report the width of each bad row.
JSON_SOURCE_SCHEMA: dict[str, Any] = {
    "type": ["array", "object"],
    "items": {"type": "array"},
    "additionalProperties": {"type": "array"},
}

# JSON integers longer than this are wrapped to 64 bits while loading, below
# the interpreter's int-from-string digit limit.
_JSON_INT_DIGITS = 4000


def detect_format(path: str | Path) -> str:
    """Return the source format key ("csv" or "json") for a file path.

    Raises:
        UnsupportedFormatError: for any other extension.
    """
    extension = Path(path).suffix.lower().lstrip(".")
    if extension not in SUPPORTED_SOURCE_FORMATS:
        raise UnsupportedFormatError(extension)
    return extension


def _read_text(path: Path, newline: str | None = None) -> str:
    try:
        with path.open(encoding="utf-8-sig", newline=newline) as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise ParseFailure("File '{}' is not valid UTF-8: {}".format(path, exc)) from exc
    except OSError as exc:
        raise ParseFailure("Unable to read '{}': {}".format(path, exc.strerror or exc)) from exc


def parse_csv(text: str) -> List[List[str]]:
    """Split CSV text into rows, skipping empty lines."""
    try:
        return [row for row in csv.reader(io.StringIO(text, newline="")) if row]
    except csv.Error as exc:
        raise ParseFailure("Malformed CSV data: {}".format(exc)) from exc


def _json_int(text: str) -> int:
    if len(text) > _JSON_INT_DIGITS:
        return wrap_decimal(text)
    return int(text)


def parse_json(text: str) -> List[List[Any]]:
    """Load JSON text and flatten its top-level array or object into rows.

    WHY: Some tools export rows keyed by an id ({"intro": [...], ...}),
    others as a plain array. Both are accepted; object keys are ignored.

    Raises:
        ParseFailure: on invalid JSON or a top-level value of the wrong shape.
    """
    try:
        data = json.loads(text, parse_int=_json_int)
    except ValueError as exc:
        raise ParseFailure("Malformed JSON data: {}".format(exc)) from exc

    try:
        jsonschema.validate(instance=data, schema=JSON_SOURCE_SCHEMA)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "top level"
        raise ParseFailure(
            "Parsing game data failed at {}: {}".format(location, exc.message)
        ) from exc

    if isinstance(data, dict):
        return list(data.values())
    return list(data)


def read_rows(path: str | Path) -> List[List[Any]]:
    """Read a CSV or JSON source file into an ordered list of raw rows.

    Args:
        path: Path to a .csv or .json source file.

    Returns:
        Rows in file order, each a list of raw field values.

    Raises:
        UnsupportedFormatError: if the extension is not csv or json.
        ParseFailure: if the file cannot be read or parsed.
    """
    source = Path(path)
    source_format = detect_format(source)
    if source_format == "csv":
        rows = parse_csv(_read_text(source, newline=""))
    else:
        rows = parse_json(_read_text(source))

    logger.debug("Read %d rows from %s (%s)", len(rows), source, source_format)
    return rows
