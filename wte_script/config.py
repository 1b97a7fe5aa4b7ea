"""Format constants, .env loading, and the compiler configuration.

WHY: The script format has a handful of fixed values (magic header, row
width, field terminator) that the parser, validator, and encoder all need
to agree on. The version stamp written into every file is the one value a
user may want to change per project. Keeping both here makes them easy to
find and keeps them out of the pipeline logic.

HOW: python-dotenv loads the .env file on import. Format constants are
module-level values. load_config() builds an immutable CompilerConfig once
at process start; the CLI passes it explicitly into the pipeline.

RULES:
- MAGIC_HEADER is always exactly 4 bytes
- The version stamp is ASCII text with no null byte and is never empty
- WTE_SCRIPT_VERSION in the environment (or .env) overrides the package
  version as the stamp; an explicit argument overrides both
- Nothing in this module is mutated after import
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from wte_script import __version__

# Load .env from the project root (where the script is run from)
load_dotenv()

APP_NAME = "wte-script"
APP_TITLE = "WTEngine Script Utility"
APP_URL = os.getenv("WTE_SCRIPT_URL", "")
"""Project link shown under the title banner; omitted when unset."""

# ---------------------------------------------------------------------------
# Script file format
# ---------------------------------------------------------------------------

MAGIC_HEADER = b"WTES"
"""Fixed 4-byte sequence at the start of every compiled script."""

SCRIPT_EXTENSION = ".sdf"

COUNT_FIELD_SIZE = 4

LEGACY_COUNT_LIMIT = 255
"""Largest command count the single-byte count field holds without wrapping."""

FIELD_TERMINATOR = b"\x00"

TIMER_MIN = -(2 ** 63)
TIMER_MAX = 2 ** 63 - 1

# ---------------------------------------------------------------------------
# Source rows
# ---------------------------------------------------------------------------

SUPPORTED_SOURCE_FORMATS: set[str] = {"csv", "json"}
"""Accepted source file extensions (lowercase, without dot)."""

TEXT_FIELD_NAMES: tuple[str, ...] = ("system", "to", "from", "command", "argument")

ROW_WIDTH = 1 + len(TEXT_FIELD_NAMES)
"""Columns per source row: the timer followed by the five text fields."""

VERSION_ENV_VAR = "WTE_SCRIPT_VERSION"


@dataclass(frozen=True)
class CompilerConfig:
    """Settings shared by every stage of one compiler run.

    WHY: The encoder needs the version stamp and magic header; tests need to
    substitute them. Passing one immutable object avoids module globals that
    tests would have to patch.

    RULES:
    - version_stamp: ASCII text written verbatim after the magic header
    - magic: the 4-byte format identifier
    """

    version_stamp: str
    magic: bytes = MAGIC_HEADER

    @property
    def version_bytes(self) -> bytes:
        return self.version_stamp.encode("ascii")


def validate_version_stamp(stamp: str) -> str:
    """Check that a version stamp can be written into the file header.

    WHY: The stamp has no length prefix and no terminator, so a reader finds
    the count field only by knowing the exact stamp. Non-ASCII text would
    make the byte length differ from the character length.

    RULES:
    - Raises ValueError for empty, non-ASCII, or null-containing stamps
    - Returns the stamp unchanged when valid
    """
    if not stamp:
        raise ValueError("Version stamp must not be empty.")
    if not stamp.isascii():
        raise ValueError("Version stamp '{}' must be ASCII text.".format(stamp))
    if "\x00" in stamp:
        raise ValueError("Version stamp must not contain a null byte.")
    return stamp


def load_config(version_stamp: str | None = None) -> CompilerConfig:
    """Build the configuration for one compiler run.

    HOW: An explicit version_stamp wins, then WTE_SCRIPT_VERSION from the
    environment (populated by python-dotenv), then the package version.

    Raises:
        ValueError: if the chosen version stamp is not valid.
    """
    if version_stamp is None:
        version_stamp = os.getenv(VERSION_ENV_VAR, "").strip() or __version__
    return CompilerConfig(version_stamp=validate_version_stamp(version_stamp))
