"""Command-line interface for the WTEngine script compiler.

WHY: Designers compile scripts from the terminal or from build scripts.
The CLI wires the pipeline (source reading, row validation, encoding
and the guarded file write) behind a single command.

HOW: Uses argparse for the input/output paths and flags. Builds the
CompilerConfig once, prints the title banner, then runs compile_file()
with an interactive overwrite prompt (rich Confirm) injected as the
confirmation capability. Status messages go to stderr.

RULES:
- Positional: in_file (required), out_file (optional)
- out_file defaults to the input stem + .sdf; .sdf is appended when the
  given out_file has no extension
- The overwrite prompt is only shown when out_file already exists;
  --yes skips it; an interrupted prompt counts as "no"
- Exit 0 on success, 1 on any compile or configuration error, 130 on Ctrl-C
- Status and error output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from wte_script import __version__
from wte_script.config import APP_NAME, APP_TITLE, APP_URL, CompilerConfig, load_config
from wte_script.core.compiler import compile_file, resolve_output_path
from wte_script.errors import ScriptError

logger = logging.getLogger(__name__)

_console = Console(stderr=True)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _error(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr, flush=True)


def _script_title(config: CompilerConfig) -> None:
    """Show the tool title, name, and version stamp, then the project link."""
    _console.print(
        "[cyan]{}[/cyan] - [dim cyan]{}[/dim cyan] - [dim cyan]ver {}[/dim cyan]".format(
            APP_TITLE, APP_NAME, config.version_stamp
        )
    )
    if APP_URL:
        _console.print("[dim yellow]{}[/dim yellow]".format(escape(APP_URL)))
    _console.print()


def _confirm_overwrite(message: str) -> bool:
    """Ask on the terminal whether an existing script may be replaced.

    RULES:
    - Default answer is yes (Enter confirms)
    - EOF on stdin or Ctrl-C at the prompt means "do not overwrite"
    """
    try:
        return Confirm.ask("[yellow]{}[/yellow]".format(escape(message)), default=True, console=_console)
    except (EOFError, KeyboardInterrupt):
        _status("")
        return False


def _always_overwrite(message: str) -> bool:
    logger.debug("Overwrite confirmed by --yes: %s", message)
    return True


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="wte-mkscript",
        description="Compile a CSV or JSON event table into a WTEngine "
                    "binary script file (.sdf).",
    )

    parser.add_argument(
        "in_file",
        help="Path to the .csv or .json source file.",
    )

    parser.add_argument(
        "out_file",
        nargs="?",
        default=None,
        help="Output script path (default: input name with the .sdf extension).",
    )

    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Overwrite an existing output file without asking.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def run(args: argparse.Namespace) -> int:
    """Run one compile from parsed arguments and return the exit status."""
    try:
        config = load_config()
    except ValueError as e:
        _error(str(e))
        return 1

    _script_title(config)

    in_path = Path(args.in_file)
    if not in_path.is_file():
        _error("Input file '{}' does not exist.".format(in_path))
        return 1

    out_path = resolve_output_path(in_path, args.out_file)
    confirm = _always_overwrite if args.yes else _confirm_overwrite

    try:
        result = compile_file(in_path, out_path, config, confirm=confirm, on_status=_status)
    except ScriptError as e:
        _error(str(e))
        return 1

    _status("")
    _status("Wrote data file '{}'".format(result.output_path))
    _status("{} total commands.".format(result.command_count))
    _status("Size: {} bytes.".format(result.size))
    _status("")
    _console.print("[dim cyan]Script conversion done![/dim cyan]")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        code = run(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
