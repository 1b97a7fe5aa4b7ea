"""Compiler stages: row reading, validation, encoding, and writing.

WHY: The core package holds the stable heart of the tool: the typed
records and the byte layout of the script format. The CLI is a thin
layer over these modules.

HOW: rows.py reads source files, validator.py builds ScriptCommand
records, encoder.py produces the file bytes, writer.py persists them,
and compiler.py runs the four in sequence.

RULES:
- ir.py dataclasses are the contract between validator and encoder
- Only writer.py touches the output file
"""
