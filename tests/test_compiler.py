"""Integration tests for the compile pipeline.

WHY: Each stage is tested on its own; these tests check the guarantee
that only the pipeline as a whole can give: a failure at any stage leaves
no output file behind, and a success writes exactly one complete file.

HOW: compile_file() runs against CSV/JSON sources in tmp_path with a
fixed config. Output bytes are decoded with the conftest decoder.

RULES:
- After any failed compile, the output path must not exist
- Output path rules are tested through resolve_output_path()
"""

from pathlib import Path

import pytest

from wte_script.core.compiler import (
    compile_file,
    compile_rows,
    default_output_path,
    resolve_output_path,
)
from wte_script.errors import (
    EmptyScriptError,
    InvalidFieldContentError,
    OverwriteDeclined,
    RowShapeError,
    UnsupportedFormatError,
)


def _write_csv(path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestOutputPaths:
    def test_default_replaces_extension(self):
        assert default_output_path(Path("levels/intro.csv")) == Path("levels/intro.sdf")

    def test_default_strips_all_extensions(self):
        assert default_output_path("intro.events.json") == Path("intro.sdf")

    def test_default_keeps_leading_dot(self):
        assert default_output_path("levels/.hidden.csv") == Path("levels/.hidden.sdf")

    def test_explicit_without_extension_gets_sdf(self):
        assert resolve_output_path("intro.csv", "build/level1") == Path("build/level1.sdf")

    def test_explicit_with_extension_kept(self):
        assert resolve_output_path("intro.csv", "build/level1.bin") == Path("build/level1.bin")

    def test_missing_argument_uses_default(self):
        assert resolve_output_path("intro.csv", None) == Path("intro.sdf")


class TestCompileFile:
    def test_csv_source(self, sample_csv, sample_rows, config, decoder, tmp_path):
        out = tmp_path / "events.sdf"
        result = compile_file(sample_csv, out, config)

        assert result.command_count == len(sample_rows)
        assert result.row_count == len(sample_rows)
        assert result.size == out.stat().st_size

        decoded = decoder(out.read_bytes())
        assert [r.to for r in decoded.records] == [row[2] for row in sample_rows]

    def test_json_and_csv_compile_identically(self, sample_csv, sample_json, config, tmp_path):
        csv_out = compile_file(sample_csv, tmp_path / "a.sdf", config).output_path
        json_out = compile_file(sample_json, tmp_path / "b.sdf", config).output_path
        assert csv_out.read_bytes() == json_out.read_bytes()

    def test_status_messages(self, sample_csv, config, tmp_path):
        messages = []
        compile_file(sample_csv, tmp_path / "out.sdf", config, on_status=messages.append)
        assert messages[0].startswith("Parsing data file")
        assert "5 rows read." in messages

    @pytest.mark.parametrize("bad_row", ["1,s,t,f,c", "1,s,t,f,c,a,extra"])
    def test_bad_width_writes_nothing(self, tmp_path, config, bad_row):
        source = _write_csv(tmp_path / "bad.csv", ["0,s,t,f,c,a", bad_row, "2,s,t,f,c,a"])
        out = tmp_path / "bad.sdf"

        with pytest.raises(RowShapeError) as exc_info:
            compile_file(source, out, config)

        assert exc_info.value.row_index == 2
        assert not out.exists()

    def test_empty_source_writes_nothing(self, tmp_path, config):
        source = tmp_path / "empty.csv"
        source.write_text("\n\n", encoding="utf-8")
        out = tmp_path / "empty.sdf"

        with pytest.raises(EmptyScriptError):
            compile_file(source, out, config)
        assert not out.exists()

    def test_null_byte_writes_nothing(self, tmp_path, config):
        source = tmp_path / "nul.json"
        source.write_text('[[0, "s", "t", "f", "c", "a\\u0000b"]]', encoding="utf-8")
        out = tmp_path / "nul.sdf"

        with pytest.raises(InvalidFieldContentError):
            compile_file(source, out, config)
        assert not out.exists()

    def test_unsupported_format(self, tmp_path, config):
        source = tmp_path / "events.txt"
        source.write_text("0,s,t,f,c,a\n", encoding="utf-8")
        with pytest.raises(UnsupportedFormatError):
            compile_file(source, tmp_path / "events.sdf", config)

    def test_wrapped_timer_literal(self, tmp_path, config, decoder):
        source = _write_csv(tmp_path / "big.csv", ["9223372036854775808,s,t,f,c,a"])
        out = tmp_path / "big.sdf"
        compile_file(source, out, config)
        assert decoder(out.read_bytes()).records[0].timer == -(2 ** 63)

    def test_declined_rerun_leaves_file_unchanged(self, sample_csv, config, tmp_path):
        out = tmp_path / "events.sdf"
        compile_file(sample_csv, out, config)
        first = out.read_bytes()

        _write_csv(sample_csv, ["99,changed,t,f,c,a"])
        with pytest.raises(OverwriteDeclined):
            compile_file(sample_csv, out, config, confirm=lambda message: False)

        assert out.read_bytes() == first

    def test_confirmed_rerun_replaces_file(self, sample_csv, config, tmp_path, decoder):
        out = tmp_path / "events.sdf"
        compile_file(sample_csv, out, config)

        _write_csv(sample_csv, ["99,changed,t,f,c,a"])
        compile_file(sample_csv, out, config, confirm=lambda message: True)

        records = decoder(out.read_bytes()).records
        assert len(records) == 1
        assert records[0].system == "changed"


class TestCompileRows:
    def test_returns_commands_and_bytes(self, sample_rows, config):
        commands, data = compile_rows(sample_rows, config)
        assert len(commands) == 5
        assert data.startswith(b"WTES0.1.0\x05\x00\x00\x00")
