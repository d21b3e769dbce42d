"""Markdown table parsing, editing, and rendering for topic files.

Submodules:
  patterns  -- compiled regex patterns and escaping constants
  schema    -- Table / TableRow Pydantic models, mutation and rendering
  parser    -- ParseState enum and the find_next_table state machine
"""
