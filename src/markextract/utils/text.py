#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/utils/text.py
"""Text normalization utilities for generated Markdown.

Functions
---------
collapse_whitespace : Collapse every whitespace run to a single space
collapse_blank_lines : Reduce runs of blank lines to a single blank line
fix_markdown_formatting : Normalize headings and trailing whitespace
normalize_whitespace : Normalize line endings and blank lines of plain text
remove_excessive_spacing : Squeeze spaces and strip line indentation

Examples
--------
    >>> collapse_blank_lines("a\\n\\n\\n\\nb")
    'a\\n\\nb'
    >>> fix_markdown_formatting("##Title\\nText")
    '## Title\\n\\nText'

"""

from __future__ import annotations

import re

_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINE_RUN = re.compile(r"\n(?:[ \t]*\n){2,}")
_HEADING_LINE = re.compile(r"^(#{1,6})(?!#)[ \t]*(\S.*)$")
_FENCE_LINE = re.compile(r"^(`{3,}|~{3,})")
_TRAILING_LINE_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)


def collapse_whitespace(text: str) -> str:
    """Collapse all whitespace runs (newlines included) to one space and trim."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of two or more blank (or whitespace-only) lines to exactly one blank line."""
    return _BLANK_LINE_RUN.sub("\n\n", text)


def fix_markdown_formatting(markdown: str) -> str:
    """Normalize heading syntax and trailing whitespace.

    - ATX heading markers get exactly one following space (``##Title`` ->
      ``## Title``).
    - Headings are separated from neighbouring content by a blank line.
    - Trailing spaces and tabs are removed from every line.

    Lines inside fenced code blocks are left untouched apart from trailing
    whitespace removal.

    Parameters
    ----------
    markdown : str
        Markdown to normalize

    Returns
    -------
    str
        Normalized Markdown

    """
    markdown = _TRAILING_LINE_WHITESPACE.sub("", markdown)

    output: list[str] = []
    in_fence: str | None = None
    pending_blank = False

    for line in markdown.split("\n"):
        fence_match = _FENCE_LINE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if in_fence is None:
                in_fence = marker[0]
            elif marker[0] == in_fence:
                in_fence = None

        heading_match = None if in_fence is not None or fence_match else _HEADING_LINE.match(line)

        if pending_blank and line:
            output.append("")
        pending_blank = False

        if heading_match:
            if output and output[-1]:
                output.append("")
            output.append(f"{heading_match.group(1)} {heading_match.group(2)}")
            pending_blank = True
        else:
            output.append(line)

    return "\n".join(output)


def normalize_whitespace(text: str) -> str:
    """Normalize plain text whitespace.

    Converts CRLF/CR line endings to LF, squeezes runs of spaces and tabs to
    a single space, reduces whitespace-only line runs to one blank line and
    trims the result.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n", "\n\n", text)
    return text.strip()


def remove_excessive_spacing(text: str) -> str:
    """Squeeze repeated spaces, drop line indentation and limit blank lines."""
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = re.sub(r"\n[ \t]*", "\n", text)
    return collapse_blank_lines(text)
