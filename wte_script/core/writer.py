"""Persisting a compiled script buffer to disk.

WHY: Writing is the only destructive step of a compile. An existing
script may be hand-tuned or shipped with a build, so replacing it must be
confirmed. The confirmation is a capability passed in by the caller, so
the compiler runs headless in tests and scripts.

HOW: write_script() asks the injected confirm() callable before touching
an existing file, then writes the whole buffer in one call.

RULES:
- Existing file + no confirm callable → OverwriteDeclined
- Existing file + confirm() returns False → OverwriteDeclined, file untouched
- The buffer is written in a single write_bytes() call, never appended
- Any OSError becomes WriteFailure
- No fsync or temp-file rename: a crash mid-write can leave a short file
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from wte_script.errors import OverwriteDeclined, WriteFailure

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


def write_script(
    data: bytes,
    path: str | Path,
    confirm: ConfirmFn | None = None,
) -> int:
    """Write a compiled script to disk.

    Args:
        data: The complete script file contents.
        path: Destination file path.
        confirm: Asked with a message when path already exists; must
                 return True to allow overwriting.

    Returns:
        Number of bytes written.

    Raises:
        OverwriteDeclined: if the file exists and overwriting was not allowed.
        WriteFailure: if the OS rejects the write.
    """
    out_path = Path(path)

    if out_path.exists():
        message = "Output file '{}' exists, overwrite?".format(out_path)
        if confirm is None or not confirm(message):
            raise OverwriteDeclined(out_path)
        logger.info("Overwriting existing script %s", out_path)

    try:
        out_path.write_bytes(data)
    except OSError as exc:
        raise WriteFailure(out_path, exc.strerror or str(exc)) from exc

    logger.debug("Wrote %d bytes to %s", len(data), out_path)
    return len(data)
