"""Line-oriented state machine that finds markdown tables in a topic's lines.

The parser walks the line buffer from a start offset and recognises at most
one table:

    NOTHING_FOUND -> HEADING_ROW_FOUND -> UNDERLINE_ROW_FOUND -> BODY_FOUND -> END_FOUND

A heading row that is not followed directly by an underline row abandons the
whole scan: callers get None and the parser does not look further down for a
later table.  Callers probe sections with this ("is there a table right after
this heading?"), so keep it that way.

Every row must have as many cells as the heading row, underline included.  A
mismatch raises TableShapeError for the whole table; rows are never skipped.
"""

import enum
import logging

from topic_tools.errors import TableShapeError
from topic_tools.tables.patterns import (
    ESCAPED_PIPE,
    PIPE_CHARACTER_REFERENCE,
    TABLE_CELL_RE,
    TABLE_ROW_RE,
    TWO_SPACES_RE,
)
from topic_tools.tables.schema import Table, TableRow

logger = logging.getLogger(__name__)


class ParseState(enum.Enum):
    """Where the parser is while recognising a table."""

    NOTHING_FOUND = enum.auto()
    HEADING_ROW_FOUND = enum.auto()
    UNDERLINE_ROW_FOUND = enum.auto()
    BODY_FOUND = enum.auto()
    END_FOUND = enum.auto()


# ─── Row / Cell Helpers ──────────────────────────────────────────────────────


def line_to_table_row(line: str) -> str | None:
    """Return the pipe-delimited run of a line, or None if the line is not a table row."""
    match = TABLE_ROW_RE.search(line.strip())
    return match.group(0) if match else None


def row_to_cells(source: str, row: str) -> list[str]:
    """Split a table row into normalised cell values.

    Escaped pipes become "&#x007C;" first so they are not taken as separators.
    Cells holding two consecutive spaces are kept as they are, with a warning.
    """
    row = row.replace(ESCAPED_PIPE, PIPE_CHARACTER_REFERENCE)

    # The last match is the closing pipe, not a cell
    cell_matches = TABLE_CELL_RE.findall(row)[:-1]

    cells: list[str] = []
    for raw_cell in cell_matches:
        cell = raw_cell[1:].strip()
        if TWO_SPACES_RE.search(cell):
            logger.warning("Two spaces found in table cell in %s: %r", source, cell)
        cells.append(cell)
    return cells


def _confirm_cell_count(source: str, table: Table, row: str) -> list[str]:
    """Return the row's cells, raising TableShapeError if their count differs from the headings."""
    cells = row_to_cells(source, row)
    expected = len(table.column_headings)
    if len(cells) != expected:
        logger.error("Row found with unexpected number of cells in %s: %s", source, row)
        raise TableShapeError(source, row, expected, len(cells))
    return cells


# ─── State Machine ───────────────────────────────────────────────────────────


def find_next_table(lines: list[str], start: int = 0, source: str = "<lines>") -> Table | None:
    """Find the first markdown table at or after zero-based line index ``start``.

    Returns None when no heading+underline pair is found.  ``source`` names the
    document in warnings and errors.
    """
    table: Table | None = None
    state = ParseState.NOTHING_FOUND

    for ix in range(start, len(lines)):
        line_number = ix + 1
        row = line_to_table_row(lines[ix])

        if state is ParseState.NOTHING_FOUND:
            if row is not None:
                table = Table(column_headings=row_to_cells(source, row), first_line_number=line_number)
                state = ParseState.HEADING_ROW_FOUND

        elif state is ParseState.HEADING_ROW_FOUND:
            if row is None:
                logger.debug("No underline row after heading at line %d of %s", line_number - 1, source)
                return None
            _confirm_cell_count(source, table, row)
            state = ParseState.UNDERLINE_ROW_FOUND

        else:
            # UNDERLINE_ROW_FOUND or BODY_FOUND: body rows until the first non-row line
            if row is None:
                table.last_line_number = line_number - 1
                state = ParseState.END_FOUND
                break
            table.rows.append(TableRow(cells=_confirm_cell_count(source, table, row)))
            state = ParseState.BODY_FOUND

    if state is ParseState.HEADING_ROW_FOUND:
        logger.debug("Heading row at end of %s has no underline row", source)
        return None

    if table is not None and state is not ParseState.END_FOUND:
        # Buffer ran out while still inside the table
        table.last_line_number = len(lines)

    if table is not None:
        logger.debug(
            "Found table in %s at lines %d-%d (%d columns, %d rows)",
            source,
            table.first_line_number,
            table.last_line_number,
            len(table.column_headings),
            table.row_count,
        )
    return table
