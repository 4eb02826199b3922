#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/tables.py
"""Table classification and pipe-table rendering.

HTML tables serve two purposes in the wild: tabular data, and visual layout
(mail templates in particular nest content in presentation tables). Layout
tables are flattened to their content; data tables become GitHub-style pipe
tables.

Examples
--------
    >>> from markextract.dom import parse_html
    >>> doc = parse_html("<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>")
    >>> print(render_table(doc.root.find("table")).strip())
    | A | B |
    | --- | --- |
    | 1 | 2 |

"""

from __future__ import annotations

import re

from markextract.constants import EMPTY_TABLE_CELL, HEADER_CELL_MAX_LENGTH, TABLE_SEPARATOR_CELL
from markextract.dom import Node
from markextract.utils.escape import escape_table_cell

_UPPERCASE_START = re.compile(r"[A-Z]")

_CELL_FORMATS = {
    "strong": "**{}**",
    "b": "**{}**",
    "em": "*{}*",
    "i": "*{}*",
    "code": "`{}`",
}


def has_explicit_layout_markup(table: Node) -> bool:
    """Return True for ``role="presentation"`` or zero cellpadding and cellspacing."""
    if table.get_attribute("role") == "presentation":
        return True
    return table.get_attribute("cellpadding") == "0" and table.get_attribute("cellspacing") == "0"


def has_data_table_structure(table: Node) -> bool:
    """Return True when the table has at least one ``th`` and more than one row."""
    return table.find("th") is not None and len(table.find_all("tr")) > 1


def is_layout_table(table: Node) -> bool:
    """Decide whether ``table`` is used for layout rather than data.

    A table is treated as layout when it carries explicit presentation
    markup or lacks data shape (no ``th`` cell, or a single row). This is a
    best-effort heuristic.
    """
    return has_explicit_layout_markup(table) or not has_data_table_structure(table)


def _cell_text(cell: Node) -> str:
    parts: list[str] = []
    for child in cell.children:
        if child.is_text:
            parts.append(child.data)
        elif child.is_element:
            template = _CELL_FORMATS.get(child.tag)
            parts.append(template.format(child.text_content) if template else child.text_content)
    return "".join(parts)


def format_cell(cell: Node) -> str:
    """Render one ``td``/``th`` as single-line pipe table cell text."""
    content = escape_table_cell(_cell_text(cell)).strip()
    return content or EMPTY_TABLE_CELL


def looks_like_header_row(cells: list[str]) -> bool:
    """Header inference for rows without ``th``: short cells starting uppercase."""
    for cell in cells:
        text = cell.strip()
        if not text or len(text) >= HEADER_CELL_MAX_LENGTH or not _UPPERCASE_START.match(text):
            return False
    return True


def own_rows(table: Node) -> list[Node]:
    """Return the ``tr`` elements of ``table``, excluding rows of nested tables."""
    rows = []
    for row in table.find_all("tr"):
        owner = next((ancestor for ancestor in row.ancestors() if ancestor.tag == "table"), None)
        if owner is not None and owner.index == table.index:
            rows.append(row)
    return rows


def render_table(table: Node) -> str:
    """Render ``table`` as a Markdown pipe table.

    Rows are taken in document order, excluding rows of nested tables;
    rows without ``td``/``th`` cells are skipped. A separator row follows
    the first emitted row when that row contains a ``th`` cell or passes
    ``looks_like_header_row``.

    Parameters
    ----------
    table : Node
        ``table`` element

    Returns
    -------
    str
        Pipe table surrounded by newlines, or an empty string when the table
        has no cells

    """
    lines: list[str] = []
    for row in own_rows(table):
        cells = [child for child in row.element_children if child.tag in ("td", "th")]
        if not cells:
            continue

        contents = [format_cell(cell) for cell in cells]
        lines.append(f"| {' | '.join(contents)} |")

        if len(lines) == 1 and (any(cell.tag == "th" for cell in cells) or looks_like_header_row(contents)):
            lines.append(f"| {' | '.join(TABLE_SEPARATOR_CELL for _ in contents)} |")

    if not lines:
        return ""
    return "\n" + "\n".join(lines) + "\n\n"
