"""Pydantic models for markdown tables found in topic files.

A Table is produced by parser.find_next_table from a heading row and an
underline row, then grows one TableRow per body line.  Once parsed it can be
edited in place (rows removed, repeated columns dropped) and rendered back to
markdown for the topic editor to splice into the document.

Rendering is lossy in two ways: column alignment is never recovered (every
divider cell is "-"), and escaped pipes stay as "&#x007C;" references.
"""

from pydantic import BaseModel, model_validator

from topic_tools.tables.patterns import DIVIDER_CELL


class TableRow(BaseModel):
    """One row of a markdown table, index-aligned to its table's headings."""

    cells: list[str]


class Table(BaseModel):
    """A markdown table: column headings, body rows and source line span.

    Line numbers are 1-based and inclusive; both stay -1 until the parser
    knows them.  Tables built by slice_horizontally never get line numbers.
    """

    column_headings: list[str]
    rows: list[TableRow] = []
    first_line_number: int = -1
    last_line_number: int = -1

    @model_validator(mode="after")
    def validate_row_widths(self) -> "Table":
        """Ensure every row has exactly len(column_headings) cells."""
        n_cols = len(self.column_headings)
        for i, row in enumerate(self.rows):
            if len(row.cells) != n_cols:
                raise ValueError(f"Row {i} has {len(row.cells)} cells, expected {n_cols} (matching column_headings)")
        return self

    @property
    def row_count(self) -> int:
        return len(self.rows)

    # ─── Mutation ─────────────────────────────────────────────────────────────

    def remove_row(self, row_number_one_based: int) -> None:
        """Delete a body row by its 1-based position.  Raises IndexError when out of range."""
        if row_number_one_based < 1:
            raise IndexError(f"Row number {row_number_one_based} is out of range (rows are numbered from 1)")
        del self.rows[row_number_one_based - 1]

    def remove_redundant_columns(self, *column_headings: str) -> None:
        """Drop every repeat of the named columns, keeping each first occurrence.

        Matching is on the exact heading text.  Names that occur once, or not
        at all, leave the table unchanged.
        """
        first_seen: dict[str, bool] = {heading: False for heading in column_headings}

        indices_to_delete: list[int] = []
        for ix, heading in enumerate(self.column_headings):
            if heading not in first_seen:
                continue
            if first_seen[heading]:
                indices_to_delete.append(ix)
            else:
                first_seen[heading] = True

        # Back to front so earlier indices stay valid
        for ix in reversed(indices_to_delete):
            del self.column_headings[ix]
            for row in self.rows:
                del row.cells[ix]

    def slice_horizontally(
        self, column_headings: list[str], first_column_index: int = 0
    ) -> tuple[list["Table"], list[list[str]]]:
        """Pivot each body row into its own two-column table.

        For every row, each original heading from first_column_index onward is
        paired with that row's cell to form one row of a new table headed by
        column_headings.  Cells before first_column_index are returned
        separately, one list per row.
        """
        table_per_row: list[Table] = []
        skipped_cells_per_row: list[list[str]] = []

        for row in self.rows:
            skipped_cells: list[str] = []
            pairs: list[TableRow] = []
            for column_index, heading in enumerate(self.column_headings):
                if column_index < first_column_index:
                    skipped_cells.append(row.cells[column_index])
                else:
                    pairs.append(TableRow(cells=[heading, row.cells[column_index]]))

            table_per_row.append(Table(column_headings=list(column_headings), rows=pairs))
            skipped_cells_per_row.append(skipped_cells)

        return table_per_row, skipped_cells_per_row

    # ─── Rendering ────────────────────────────────────────────────────────────

    def render_lines(self) -> list[str]:
        """Render the table as markdown lines (heading, divider, body rows)."""
        lines: list[str] = [_render_row(self.column_headings)]
        lines.append(_render_row([DIVIDER_CELL] * len(self.column_headings)))
        for row in self.rows:
            lines.append(_render_row(row.cells))
        return lines

    def render_as_markdown(self) -> str:
        """Render the table as a markdown block ready to splice into a topic."""
        return "\n".join(self.render_lines())


def _render_row(cells: list[str]) -> str:
    """Join cells into one pipe-delimited row with a single space of padding."""
    if not cells:
        return "|"
    return "| " + " | ".join(cells) + " |"
