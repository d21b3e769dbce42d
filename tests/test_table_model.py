"""Unit tests for the Table / TableRow models.

Covers width validation, row removal, redundant-column removal, horizontal
slicing, and markdown rendering (including a parse/render round trip).
"""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest
from pydantic import ValidationError

from topic_tools.tables.parser import find_next_table
from topic_tools.tables.schema import Table, TableRow


def make_table(headings: list[str], rows: list[list[str]]) -> Table:
    """Build a Table from plain lists."""
    return Table(column_headings=headings, rows=[TableRow(cells=cells) for cells in rows])


# ===========================================================================
# Table validation tests
# ===========================================================================


class TestTableValidation:

    def test_valid_table(self):
        table = make_table(["A", "B"], [["1", "2"]])
        assert table.row_count == 1

    def test_row_too_wide(self):
        with pytest.raises(ValidationError):
            make_table(["A", "B"], [["1", "2", "3"]])

    def test_row_too_narrow(self):
        with pytest.raises(ValidationError):
            make_table(["A", "B"], [["1"]])

    def test_line_numbers_default_unknown(self):
        table = make_table(["A"], [])
        assert table.first_line_number == -1
        assert table.last_line_number == -1


# ===========================================================================
# remove_row tests
# ===========================================================================


class TestRemoveRow:

    def test_remove_first(self):
        table = make_table(["A"], [["1"], ["2"], ["3"]])
        table.remove_row(1)
        assert [row.cells for row in table.rows] == [["2"], ["3"]]

    def test_remove_last(self):
        table = make_table(["A"], [["1"], ["2"], ["3"]])
        table.remove_row(3)
        assert [row.cells for row in table.rows] == [["1"], ["2"]]

    def test_out_of_range(self):
        table = make_table(["A"], [["1"]])
        with pytest.raises(IndexError):
            table.remove_row(2)

    def test_zero_is_out_of_range(self):
        table = make_table(["A"], [["1"], ["2"]])
        with pytest.raises(IndexError):
            table.remove_row(0)
        assert table.row_count == 2


# ===========================================================================
# remove_redundant_columns tests
# ===========================================================================


class TestRemoveRedundantColumns:

    def test_no_repeats_is_noop(self):
        table = make_table(["A", "B", "C"], [["1", "2", "3"]])
        table.remove_redundant_columns("A", "B")
        assert table.column_headings == ["A", "B", "C"]
        assert table.rows[0].cells == ["1", "2", "3"]

    def test_absent_name_is_noop(self):
        table = make_table(["A", "A"], [["1", "2"]])
        table.remove_redundant_columns("Z")
        assert table.column_headings == ["A", "A"]

    def test_keeps_first_occurrence(self):
        table = make_table(["Name", "Desc", "Name", "Name"], [["n1", "d", "n2", "n3"], ["m1", "e", "m2", "m3"]])
        table.remove_redundant_columns("Name")
        assert table.column_headings == ["Name", "Desc"]
        assert [row.cells for row in table.rows] == [["n1", "d"], ["m1", "e"]]

    def test_several_names(self):
        table = make_table(["A", "B", "A", "B", "C"], [["a1", "b1", "a2", "b2", "c"]])
        table.remove_redundant_columns("A", "B")
        assert table.column_headings == ["A", "B", "C"]
        assert table.rows[0].cells == ["a1", "b1", "c"]

    def test_only_named_columns_removed(self):
        table = make_table(["A", "B", "A", "B"], [["1", "2", "3", "4"]])
        table.remove_redundant_columns("B")
        assert table.column_headings == ["A", "B", "A"]
        assert table.rows[0].cells == ["1", "2", "3"]

    def test_exact_match_only(self):
        table = make_table(["Name", "name"], [["1", "2"]])
        table.remove_redundant_columns("Name")
        assert table.column_headings == ["Name", "name"]


# ===========================================================================
# slice_horizontally tests
# ===========================================================================


class TestSliceHorizontally:

    def test_one_table_per_row(self):
        table = make_table(["Field", "Type", "Size"], [["a", "int", "4"], ["b", "char", "1"]])
        tables, skipped = table.slice_horizontally(["Property", "Value"])
        assert len(tables) == 2
        assert len(skipped) == 2
        assert all(t.column_headings == ["Property", "Value"] for t in tables)
        assert [row.cells for row in tables[0].rows] == [["Field", "a"], ["Type", "int"], ["Size", "4"]]
        assert skipped == [[], []]

    def test_first_column_skipped(self):
        table = make_table(["Field", "Type", "Size"], [["a", "int", "4"], ["b", "char", "1"]])
        tables, skipped = table.slice_horizontally(["Property", "Value"], 1)
        assert skipped == [["a"], ["b"]]
        assert [row.cells for row in tables[1].rows] == [["Type", "char"], ["Size", "1"]]

    def test_skipped_plus_paired_cells_rebuild_row(self):
        table = make_table(["A", "B", "C", "D"], [["1", "2", "3", "4"], ["5", "6", "7", "8"]])
        tables, skipped = table.slice_horizontally(["Heading", "Cell"], 2)
        for i, row in enumerate(table.rows):
            paired = [pair.cells[1] for pair in tables[i].rows]
            assert skipped[i] + paired == row.cells

    def test_sliced_tables_are_two_columns(self):
        table = make_table(["A", "B"], [["1", "2"]])
        tables, _ = table.slice_horizontally(["K", "V"], 1)
        assert len(tables[0].column_headings) == 2
        assert tables[0].row_count == 1
        assert tables[0].rows[0].cells == ["B", "2"]

    def test_no_rows(self):
        tables, skipped = make_table(["A"], []).slice_horizontally(["K", "V"])
        assert tables == []
        assert skipped == []

    def test_original_unchanged(self):
        table = make_table(["A", "B"], [["1", "2"]])
        table.slice_horizontally(["K", "V"])
        assert table.column_headings == ["A", "B"]
        assert table.rows[0].cells == ["1", "2"]


# ===========================================================================
# render_as_markdown tests
# ===========================================================================


class TestRenderAsMarkdown:

    def test_basic_render(self):
        table = make_table(["A", "B"], [["1", "2"], ["3", "4"]])
        assert table.render_as_markdown() == "| A | B |\n| - | - |\n| 1 | 2 |\n| 3 | 4 |"

    def test_render_without_rows(self):
        assert make_table(["A"], []).render_as_markdown() == "| A |\n| - |"

    def test_empty_cell(self):
        table = make_table(["A", "B"], [["", "x"]])
        assert table.render_lines()[2] == "|  | x |"

    def test_alignment_not_recovered(self):
        table = find_next_table(["| A | B |", "|:---|---:|", "| 1 | 2 |"])
        assert table.render_lines()[1] == "| - | - |"

    def test_escaped_pipe_not_restored(self):
        table = find_next_table(["| A |", "| - |", r"| a \| b |"])
        assert table.render_lines()[2] == "| a &#x007C; b |"

    def test_round_trip(self):
        lines = ["Intro", "|Name|Description|", "|:--|:--|", "|Foo|Does foo.|", "|Bar||", "", "Outro"]
        table = find_next_table(lines)
        reparsed = find_next_table(table.render_as_markdown().split("\n"))
        assert reparsed.column_headings == table.column_headings
        assert [row.cells for row in reparsed.rows] == [row.cells for row in table.rows]
