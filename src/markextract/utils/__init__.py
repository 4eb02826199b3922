#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Text, entity and Markdown escaping helpers."""

from markextract.utils.escape import (
    decode_entities,
    encode_entities,
    escape_markdown,
    escape_table_cell,
    unescape_markdown,
)
from markextract.utils.text import (
    collapse_blank_lines,
    collapse_whitespace,
    fix_markdown_formatting,
    normalize_whitespace,
    remove_excessive_spacing,
)

__all__ = [
    "collapse_blank_lines",
    "collapse_whitespace",
    "decode_entities",
    "encode_entities",
    "escape_markdown",
    "escape_table_cell",
    "fix_markdown_formatting",
    "normalize_whitespace",
    "remove_excessive_spacing",
    "unescape_markdown",
]
