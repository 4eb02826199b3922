"""Tests for table classification and pipe-table rendering."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import pytest

from markextract.dom import parse_html
from markextract.rules.tables import (
    format_cell,
    has_data_table_structure,
    has_explicit_layout_markup,
    is_layout_table,
    looks_like_header_row,
    own_rows,
    render_table,
)


def _table(html):
    return parse_html(html).root.find("table")


DATA_TABLE = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"


@pytest.mark.unit
class TestTableClassification:
    """Test layout versus data table heuristics."""

    def test_presentation_role(self):
        """Test that role=presentation marks a layout table."""
        table = _table('<table role="presentation"><tr><th>A</th></tr><tr><td>1</td></tr></table>')
        assert has_explicit_layout_markup(table)
        assert is_layout_table(table)

    def test_zero_padding_and_spacing(self):
        """Test that zero cellpadding and cellspacing mark a layout table."""
        table = _table('<table cellpadding="0" cellspacing="0"><tr><td>x</td></tr></table>')
        assert has_explicit_layout_markup(table)

    def test_zero_padding_alone_is_not_explicit(self):
        """Test that both attributes are required."""
        assert not has_explicit_layout_markup(_table('<table cellpadding="0"><tr><td>x</td></tr></table>'))

    def test_data_table(self):
        """Test that a header cell plus several rows makes a data table."""
        table = _table(DATA_TABLE)
        assert has_data_table_structure(table)
        assert not is_layout_table(table)

    def test_table_without_header_cells_is_layout(self):
        """Test that tables without th cells count as layout."""
        table = _table("<table><tr><td>a</td></tr><tr><td>b</td></tr></table>")
        assert not has_explicit_layout_markup(table)
        assert is_layout_table(table)

    def test_single_row_table_is_layout(self):
        """Test that a single header row is not enough for a data table."""
        assert is_layout_table(_table("<table><tr><th>A</th></tr></table>"))


@pytest.mark.unit
class TestRenderTable:
    """Test pipe table output."""

    def test_header_row_from_th(self):
        """Test a table with a th header row."""
        assert render_table(_table(DATA_TABLE)) == "\n| A | B |\n| --- | --- |\n| 1 | 2 |\n\n"

    def test_inferred_header_row(self):
        """Test header inference from short capitalized first-row cells."""
        html = "<table><tr><td>Name</td><td>Age</td></tr><tr><td>ann</td><td>3</td></tr></table>"
        assert render_table(_table(html)) == "\n| Name | Age |\n| --- | --- |\n| ann | 3 |\n\n"

    def test_no_header_row(self):
        """Test that lowercase first rows get no separator."""
        html = "<table><tr><td>name</td><td>age</td></tr><tr><td>x</td><td>y</td></tr></table>"
        assert render_table(_table(html)) == "\n| name | age |\n| x | y |\n\n"

    def test_pipes_escaped_and_empty_cells(self):
        """Test cell escaping and placeholder for empty cells."""
        html = "<table><tr><th>A</th><th>B</th></tr><tr><td>a|b</td><td></td></tr></table>"
        assert "| a\\|b |   |" in render_table(_table(html))

    def test_rows_without_cells_skipped(self):
        """Test that empty rows are not emitted."""
        html = "<table><tr></tr><tr><th>A</th></tr><tr><td>1</td></tr></table>"
        assert render_table(_table(html)) == "\n| A |\n| --- |\n| 1 |\n\n"

    def test_sections_in_order(self):
        """Test that thead and tbody rows are rendered in document order."""
        html = "<table><thead><tr><th>H</th></tr></thead><tbody><tr><td>v</td></tr></tbody></table>"
        assert render_table(_table(html)) == "\n| H |\n| --- |\n| v |\n\n"

    def test_empty_table(self):
        """Test that a table without cells renders nothing."""
        assert render_table(_table("<table></table>")) == ""

    def test_nested_table_rows_not_repeated(self):
        """Test that rows of a table inside a cell stay inside that cell."""
        html = (
            "<table><tr><th>A</th></tr><tr><td>"
            "<table><tr><td>N</td></tr><tr><td>n</td></tr></table>"
            "</td></tr></table>"
        )
        table = _table(html)
        assert len(own_rows(table)) == 2
        assert render_table(table) == "\n| A |\n| --- |\n| Nn |\n\n"


@pytest.mark.unit
class TestCells:
    """Test cell formatting and header heuristics."""

    def test_inline_formatting_kept(self):
        """Test strong, emphasis and code inside cells."""
        cell = parse_html("<table><tr><td><b>bold</b> and <i>it</i> <code>x</code></td></tr></table>").root.find("td")
        assert format_cell(cell) == "**bold** and *it* `x`"

    def test_newlines_flattened(self):
        """Test that line breaks inside a cell become spaces."""
        cell = parse_html("<table><tr><td>a\nb</td></tr></table>").root.find("td")
        assert format_cell(cell) == "a b"

    @pytest.mark.parametrize(
        "cells,expected",
        [
            (["Name", "Age"], True),
            (["Name", "age"], False),
            (["Name", ""], False),
            (["A" * 50], False),
            (["A" * 49], True),
        ],
    )
    def test_looks_like_header_row(self, cells, expected):
        """Test the uppercase, non-empty, short cell heuristic."""
        assert looks_like_header_row(cells) is expected
