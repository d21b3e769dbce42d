"""Compiled regex patterns and constants for markdown table parsing.

Compiled once at import and shared by parser.py and the topic editor.
"""

import re

# ─── Table Patterns ───────────────────────────────────────────────────────────

# A table row is any line holding a pipe-delimited run, e.g. "| A | B |"
TABLE_ROW_RE = re.compile(r"\|.*\|")

# One cell: a pipe followed by everything up to the next pipe
TABLE_CELL_RE = re.compile(r"\|[^|]*")

# Two consecutive spaces inside a cell value
TWO_SPACES_RE = re.compile(r"  ")


# ─── Escaping ─────────────────────────────────────────────────────────────────

ESCAPED_PIPE = "\\|"

# Numeric character reference that replaces an escaped pipe before splitting
PIPE_CHARACTER_REFERENCE = "&#x007C;"

# Divider written under the heading row on render (alignment is not kept)
DIVIDER_CELL = "-"


# ─── Link Patterns ────────────────────────────────────────────────────────────

# "[link text](link url)", greedy on both parts
MARKDOWN_LINK_RE = re.compile(r"\[(?P<link_text>.*)\]\((?P<link_url>.*)\)")
