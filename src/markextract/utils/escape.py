#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/utils/escape.py
r"""HTML entity and Markdown escaping utilities.

Two small codecs live here:

- ``decode_entities`` / ``encode_entities`` translate HTML character
  references to and from Unicode text. Decoding uses a fixed table of named
  entities plus decimal and hexadecimal references; encoding is the minimal
  inverse for ``& < > " '``.
- ``escape_markdown`` / ``unescape_markdown`` protect plain text runs from
  being reinterpreted as Markdown syntax.

Examples
--------
    >>> decode_entities("Fish &amp; Chips &#8212; &hellip;")
    'Fish & Chips — ...'
    >>> escape_markdown("1. not a list")
    '1\\. not a list'
    >>> unescape_markdown(escape_markdown("a_b"))
    'a_b'

"""

from __future__ import annotations

import html
import re

from markextract.constants import (
    MARKDOWN_UNESCAPABLE_CHARS,
    MAX_UNICODE_CODEPOINT,
    NAMED_ENTITIES,
    SURROGATE_RANGE,
)

_ENTITY_PATTERN = re.compile(r"&(?:#(\d+)|#[xX]([0-9a-fA-F]+)|([A-Za-z][A-Za-z0-9]*));")

_UNESCAPE_PATTERN = re.compile("\\\\([" + re.escape(MARKDOWN_UNESCAPABLE_CHARS) + "])")

# Line-leading characters that would otherwise start a block construct
_LINE_START_PATTERNS = (
    (re.compile(r"^#", re.MULTILINE), r"\\#"),
    (re.compile(r"^>", re.MULTILINE), r"\\>"),
    (re.compile(r"^\+", re.MULTILINE), r"\\+"),
    (re.compile(r"^-", re.MULTILINE), r"\\-"),
    (re.compile(r"^\*", re.MULTILINE), r"\\*"),
    (re.compile(r"^(\d+)\.", re.MULTILINE), r"\1\\."),
)


def _codepoint_to_char(codepoint: int) -> str | None:
    if codepoint <= 0 or codepoint > MAX_UNICODE_CODEPOINT or codepoint in SURROGATE_RANGE:
        return None
    return chr(codepoint)


def _replace_entity(match: re.Match[str]) -> str:
    decimal, hexadecimal, name = match.groups()
    if name is not None:
        return NAMED_ENTITIES.get(name, match.group(0))

    try:
        codepoint = int(decimal) if decimal is not None else int(hexadecimal, 16)
    except ValueError:
        return match.group(0)

    char = _codepoint_to_char(codepoint)
    return char if char is not None else match.group(0)


def decode_entities(text: str) -> str:
    """Decode HTML character references in ``text``.

    Named entities come from a fixed table (``NAMED_ENTITIES``); decimal
    (``&#NN;``) and hexadecimal (``&#xHH;``) references are decoded when they
    name a Unicode scalar value. Unknown names and out-of-range or malformed
    references are left unchanged.

    The text is scanned once, so the output of one replacement is never
    decoded again (``&amp;lt;`` becomes ``&lt;``, not ``<``).

    Parameters
    ----------
    text : str
        Text containing HTML entities

    Returns
    -------
    str
        Text with entities decoded

    """
    if not text or "&" not in text:
        return text
    return _ENTITY_PATTERN.sub(_replace_entity, text)


def encode_entities(text: str) -> str:
    """Encode ``& < > " '`` as HTML entities.

    This is the minimal inverse of ``decode_entities`` used for safety
    contexts; it does not re-encode characters from the named entity table.

    Parameters
    ----------
    text : str
        Plain text

    Returns
    -------
    str
        Text safe for inclusion in HTML

    """
    if not text:
        return text
    return html.escape(text, quote=True)


def escape_markdown(text: str) -> str:
    r"""Escape Markdown-significant characters in a plain text run.

    Backslashes are always escaped. ``*``, ``_`` and backticks are escaped
    only when the text does not already contain the doubled form of that
    marker (``**``, ``__``, ``````), so text that already looks intentionally
    formatted is left alone. Finally, characters that would start a block
    construct at the beginning of a line (``#``, ``>``, ``+``, ``-``, ``*``
    and ordered-list markers such as ``1.``) are escaped.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        Escaped text

    Notes
    -----
    The doubled-marker check looks at the whole run, so one ``**`` anywhere
    disables escaping of every single ``*`` in the same run.

    """
    if not text:
        return text

    escaped = text.replace("\\", "\\\\")
    for marker in ("*", "_", "`"):
        if marker * 2 not in escaped:
            escaped = escaped.replace(marker, "\\" + marker)

    for pattern, replacement in _LINE_START_PATTERNS:
        escaped = pattern.sub(replacement, escaped)
    return escaped


def unescape_markdown(text: str) -> str:
    """Remove backslash escapes in front of Markdown punctuation.

    Parameters
    ----------
    text : str
        Escaped Markdown text

    Returns
    -------
    str
        Text with escapes removed

    """
    if not text:
        return text
    return _UNESCAPE_PATTERN.sub(r"\1", text)


def escape_table_cell(text: str) -> str:
    """Make ``text`` safe for a single-line pipe table cell."""
    return text.replace("|", "\\|").replace("\n", " ")
