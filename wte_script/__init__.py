"""WTEngine Script Compiler: tabular event data to binary script files.

WHY: Game designers author timed engine messages in spreadsheets (CSV) or
JSON. The engine's message dispatcher only reads the compact binary script
format (.sdf). This package turns the human-editable rows into that format.

HOW: Four-stage pipeline: read rows (CSV/JSON), validate rows into typed
ScriptCommand records, encode the records into one byte buffer, write the
buffer to disk behind an overwrite confirmation. Each stage is
independently testable.

RULES:
- Either every row compiles and one complete file is written, or nothing is
- Row order in the source is the record order in the output
- The byte layout is fixed by wte_script.core.encoder
"""

__version__ = "0.1.0"
