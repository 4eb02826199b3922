#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/render.py
"""Markdown fragments shared by the base and email rule tables."""

from __future__ import annotations

import re

from markextract.constants import INDENTED_CODE_PREFIX
from markextract.dom import Node
from markextract.utils.escape import unescape_markdown
from markextract.utils.text import collapse_blank_lines

_LANGUAGE_CLASS = re.compile(r"language-(\w+)")


def markdown_title(title: str) -> str:
    """Quote a link or image title, escaping embedded double quotes."""
    escaped = title.replace('"', '\\"')
    return f' "{escaped}"'


def render_link(href: str, content: str, title: str | None, inlined: bool) -> str:
    """Render a link.

    ``mailto:`` links whose text equals the address become autolinks
    (``<x@y.com>``); everything else becomes ``[text](href "title")`` when
    ``inlined``, or the bare text otherwise.
    """
    text = content.strip()
    if href.startswith("mailto:"):
        email = href[len("mailto:") :].split("?")[0]
        if unescape_markdown(text) == email:
            return f"<{email}>"
    if not inlined:
        return text
    if title:
        return f"[{text}]({href}{markdown_title(title)})"
    return f"[{text}]({href})"


def code_language(pre: Node) -> str:
    """Return the ``language-xxx`` class suffix of the first ``code`` inside ``pre``."""
    code = pre.find("code")
    if code is None:
        return ""
    match = _LANGUAGE_CLASS.search(code.get_attribute("class") or "")
    return match.group(1) if match else ""


def render_code_block(content: str, language: str, fence: str, indented: bool) -> str:
    if indented:
        return "\n" + "\n".join(INDENTED_CODE_PREFIX + line for line in content.split("\n")) + "\n\n"
    return f"\n{fence}{language}\n{content}\n{fence}\n\n"


def quote_lines(content: str, prefix: str = "> ") -> str:
    """Prefix every line with ``prefix``; blank lines become the bare marker.

    Runs of blank lines are collapsed first. Nested quotes arrive already
    prefixed by their own rule, so each quoting level adds one marker.
    """
    marker = prefix.strip()
    lines = collapse_blank_lines(content).split("\n")
    return "\n".join(prefix + line if line.strip() else marker for line in lines)
