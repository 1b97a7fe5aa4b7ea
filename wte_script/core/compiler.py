"""The compile pipeline: source file → rows → commands → bytes → file.

WHY: The CLI (and any other caller) needs one function that runs the four
stages in order and guarantees that nothing is written unless every
earlier stage succeeded.

HOW: compile_file() calls read_rows, validate_rows, encode_script, and
write_script strictly in sequence. Each stage raises on failure, so a
failed run stops before the writer is reached. Progress lines go to an
optional on_status callback, the same way the API client reports status.

RULES:
- No branching back: a failure at any stage ends the run
- The output buffer is built in memory in full before the writer runs
- Output path defaults to the input stem (all extensions stripped) + .sdf
- An output path without an extension gets .sdf appended
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from wte_script.config import SCRIPT_EXTENSION, CompilerConfig
from wte_script.core.encoder import encode_script
from wte_script.core.ir import ScriptCommand
from wte_script.core.rows import read_rows
from wte_script.core.validator import validate_rows
from wte_script.core.writer import ConfirmFn, write_script

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Summary of a successful compile, used for status reporting."""

    source_path: Path
    output_path: Path
    row_count: int
    command_count: int
    size: int


def default_output_path(in_path: str | Path) -> Path:
    """Derive the script path from a source path.

    "levels/intro.events.csv" → "levels/intro.sdf"; a leading dot is part
    of the name, so ".hidden.csv" → ".hidden.sdf".
    """
    source = Path(in_path)
    name = Path(source.name)
    while name.suffix:
        name = Path(name.stem)
    return source.parent / (name.name + SCRIPT_EXTENSION)


def resolve_output_path(in_path: str | Path, out_arg: Optional[str | Path] = None) -> Path:
    """Resolve the output path from the optional CLI argument."""
    if out_arg is None or str(out_arg) == "":
        return default_output_path(in_path)
    out_path = Path(out_arg)
    if not out_path.suffix:
        out_path = out_path.with_name(out_path.name + SCRIPT_EXTENSION)
    return out_path


def compile_rows(
    rows: Sequence[Sequence[Any]],
    config: CompilerConfig,
) -> Tuple[List[ScriptCommand], bytes]:
    """Validate and encode rows without touching the filesystem."""
    commands = validate_rows(rows)
    return commands, encode_script(commands, config)


def compile_file(
    in_path: str | Path,
    out_path: str | Path,
    config: CompilerConfig,
    confirm: ConfirmFn | None = None,
    on_status: Callable[[str], None] | None = None,
) -> CompileResult:
    """Compile a CSV/JSON source file into a script file.

    Args:
        in_path: Source .csv or .json file.
        out_path: Destination script path (already resolved).
        config: Version stamp and magic header for the file header.
        confirm: Overwrite confirmation, asked only if out_path exists.
        on_status: Optional callback for progress messages.

    Returns:
        CompileResult with counts and the written size.

    Raises:
        ScriptError: any parse, validation, encoding, or write failure.
    """
    source = Path(in_path)
    target = Path(out_path)

    def _report(msg: str) -> None:
        if on_status:
            on_status(msg)

    _report("Parsing data file '{}'...".format(source))
    rows = read_rows(source)
    _report("{} rows read.".format(len(rows)))

    _report("Generating script file '{}'...".format(target))
    commands, data = compile_rows(rows, config)

    size = write_script(data, target, confirm=confirm)
    logger.info("Compiled %s → %s (%d commands, %d bytes)", source, target, len(commands), size)

    return CompileResult(
        source_path=source,
        output_path=target,
        row_count=len(rows),
        command_count=len(commands),
        size=size,
    )
