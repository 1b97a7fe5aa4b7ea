"""Binary encoding of validated commands into the .sdf script format.

WHY: The engine's message dispatcher reads scripts as one flat byte
stream. This module is the single place that knows the byte layout, so
the layout can be read (and tested) in one file.

HOW: ScriptBuffer is an append-only byte buffer with one method per
primitive the format uses. encode_script() writes the header, the
version stamp, the count field, and then one record per command.

File layout (no padding, no length prefixes):

  magic header   4 bytes   MAGIC_HEADER
  version stamp  N bytes   ASCII, not terminated, not length-prefixed
  command count  4 bytes   low byte = count % 256, other 3 bytes zero
  records        ...       one per command, in source order

Record layout:

  timer          8 bytes   signed 64-bit little-endian
  system, to, from, command, argument
                 each UTF-8 text followed by one null byte

RULES:
- The count field keeps the single-byte layout of existing script files:
  more than 255 commands wrap the stored count (a warning is logged)
  while every record is still written
- Text fields must not contain a null byte (the terminator)
- The encoder never touches the filesystem
- EncodingError only signals a broken invariant; validated input never
  triggers it
"""

from __future__ import annotations

import logging
import struct
from typing import Sequence

from wte_script.config import (
    COUNT_FIELD_SIZE,
    FIELD_TERMINATOR,
    LEGACY_COUNT_LIMIT,
    CompilerConfig,
)
from wte_script.core.ir import ScriptCommand
from wte_script.errors import EncodingError

logger = logging.getLogger(__name__)


class ScriptBuffer:
    """Append-only byte buffer with the primitives of the script format."""

    def __init__(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def write_bytes(self, data: bytes) -> None:
        self._data += data

    def write_int64(self, value: int) -> None:
        """Append a signed 64-bit little-endian integer."""
        try:
            self._data += struct.pack("<q", value)
        except struct.error as exc:
            raise EncodingError("Timer {} does not fit in 64 bits.".format(value)) from exc

    def write_terminated_text(self, text: str) -> None:
        """Append UTF-8 text followed by the null terminator.

        RULES:
        - Raises EncodingError if the text already contains a null byte
        - Raises EncodingError if the text cannot be encoded as UTF-8
          (e.g. lone surrogates from a JSON escape)
        """
        if "\x00" in text:
            raise EncodingError("Text field {!r} contains a null byte.".format(text))
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodingError("Text field {!r} is not valid UTF-8: {}".format(text, exc)) from exc
        self._data += encoded
        self._data += FIELD_TERMINATOR

    def write_count(self, count: int) -> None:
        """Append the 4-byte command count field.

        Only the first byte carries the count; the remaining bytes are zero.
        """
        field = bytearray(COUNT_FIELD_SIZE)
        struct.pack_into("<B", field, 0, count % 256)
        self._data += field

    def getvalue(self) -> bytes:
        return bytes(self._data)


def encode_header(buffer: ScriptBuffer, config: CompilerConfig) -> None:
    """Write the magic header and the version stamp."""
    if len(config.magic) != 4:
        raise EncodingError("Magic header must be 4 bytes, got {}.".format(len(config.magic)))
    try:
        version = config.version_bytes
    except UnicodeEncodeError as exc:
        raise EncodingError("Version stamp must be ASCII: {}".format(exc)) from exc
    if not version or FIELD_TERMINATOR in version:
        raise EncodingError("Version stamp {!r} is not valid.".format(config.version_stamp))

    buffer.write_bytes(config.magic)
    buffer.write_bytes(version)


def encode_command(buffer: ScriptBuffer, command: ScriptCommand) -> None:
    """Write one command record: timer, then the five terminated text fields."""
    buffer.write_int64(command.timer)
    for text in command.fields():
        buffer.write_terminated_text(text)


def encode_script(commands: Sequence[ScriptCommand], config: CompilerConfig) -> bytes:
    """Serialize commands into a complete script file buffer.

    Args:
        commands: Validated commands in playback order.
        config: Supplies the magic header and version stamp.

    Returns:
        The full file contents.

    Raises:
        EncodingError: if an invariant of the format does not hold.
    """
    count = len(commands)
    if count > LEGACY_COUNT_LIMIT:
        logger.warning(
            "%d commands exceed the count field's limit of %d; "
            "the stored count wraps to %d (all records are still written)",
            count,
            LEGACY_COUNT_LIMIT,
            count % 256,
        )

    buffer = ScriptBuffer()
    encode_header(buffer, config)
    buffer.write_count(count)
    for command in commands:
        encode_command(buffer, command)

    logger.debug("Encoded %d commands into %d bytes", count, len(buffer))
    return buffer.getvalue()
