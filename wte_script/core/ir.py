"""Typed records passed between the validator and the encoder.

WHY: Source rows are loosely typed. CSV gives strings, JSON gives any
scalar. The encoder should only ever see clean, typed values, and the
validator needs a way to report the outcome of each row without raising
midway through a loop.

HOW: Two dataclasses:
  ScriptCommand: one validated command record, ready to encode
  RowResult: the outcome of validating one row: a command or an error

RULES:
- ScriptCommand is immutable; nothing changes it after validation
- timer is already wrapped into the signed 64-bit range
- Text fields are in on-disk order: system, to, from, command, argument
- A RowResult holds exactly one of command / error
"""

from __future__ import annotations

from dataclasses import dataclass

from wte_script.errors import ScriptError


@dataclass(frozen=True)
class ScriptCommand:
    """A single engine message scheduled by the script.

    RULES:
    - timer: tick at which the command fires, signed 64-bit
    - system: target subsystem name
    - to / from_: destination and source entity identifiers
      (``from_`` because ``from`` is a Python keyword)
    - command: command verb
    - argument: free-form payload
    """

    timer: int
    system: str
    to: str
    from_: str
    command: str
    argument: str

    def fields(self) -> tuple[str, str, str, str, str]:
        """The five text fields in on-disk order."""
        return (self.system, self.to, self.from_, self.command, self.argument)


@dataclass
class RowResult:
    """Outcome of validating one source row.

    WHY: Validation is a fold over rows that must stop at the first bad
    one. Returning a result per row keeps parse_row free of control flow
    and lets the fold decide when to stop.
    """

    row_index: int
    command: ScriptCommand | None = None
    error: ScriptError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
