"""Shared test fixtures for the wte_script test suite.

WHY: Several test modules need the same sample rows, a fixed compiler
configuration, and a way to read compiled bytes back. The package ships
no decoder, so the one used to check round-trips lives here.

HOW: Pytest fixtures provide the sample rows (as lists, CSV text, and
JSON text), a CompilerConfig with a known version stamp, and a decoder
function that splits a script buffer into header parts and records.

RULES:
- The version stamp is fixed ("0.1.0") so expected bytes are stable
- The decoder reads exactly five null-terminated fields per record after
  the 8-byte timer, and reads records until the buffer ends (it does not
  trust the count field)
"""

import json
import struct
from typing import Any, List, NamedTuple

import pytest

from wte_script.config import CompilerConfig
from wte_script.core.ir import ScriptCommand

TEST_VERSION = "0.1.0"

SAMPLE_ROWS: List[List[Any]] = [
    ["0",    "audio",    "music",  "director", "play",   "theme.ogg"],
    ["120",  "spawner",  "enemy1", "director", "spawn",  "x=10;y=20"],
    ["120",  "spawner",  "enemy2", "director", "spawn",  "x=30;y=20"],
    ["60",   "hud",      "score",  "game",     "show",   ""],
    ["-5",   "renderer", "camera", "player",   "shake",  "Ärger, 2s"],
]


class DecodedScript(NamedTuple):
    magic: bytes
    version: bytes
    count_field: bytes
    records: List[ScriptCommand]


def decode_script(data: bytes, version: str = TEST_VERSION) -> DecodedScript:
    """Split a compiled script back into its parts."""
    version_bytes = version.encode("ascii")
    offset = 4 + len(version_bytes)
    magic = data[:4]
    stamp = data[4:offset]
    count_field = data[offset:offset + 4]
    offset += 4

    records: List[ScriptCommand] = []
    while offset < len(data):
        timer = struct.unpack_from("<q", data, offset)[0]
        offset += 8
        texts = []
        for _ in range(5):
            end = data.index(b"\x00", offset)
            texts.append(data[offset:end].decode("utf-8"))
            offset = end + 1
        records.append(ScriptCommand(timer, *texts))

    return DecodedScript(magic, stamp, count_field, records)


@pytest.fixture
def config():
    """Compiler configuration with a fixed version stamp."""
    return CompilerConfig(version_stamp=TEST_VERSION)


@pytest.fixture
def sample_rows():
    return [list(row) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_csv(tmp_path):
    """The sample rows written as a CSV source file."""
    path = tmp_path / "events.csv"
    lines = []
    for row in SAMPLE_ROWS:
        lines.append(",".join('"{}"'.format(v) if "," in v else v for v in row))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_json(tmp_path):
    """The sample rows written as a JSON array source file."""
    path = tmp_path / "events.json"
    path.write_text(json.dumps(SAMPLE_ROWS), encoding="utf-8")
    return path


@pytest.fixture
def decoder():
    return decode_script
