#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/email.py
"""Rules for HTML email bodies.

Consulted before ``BaseRules`` for documents classified as email content.
The table is self-contained: ``blockquote``, ``pre`` and ``a`` are defined
here as well rather than delegating to the base table.

div
    Signature blocks are kept under a horizontal rule (or dropped when
    ``handle_email_signatures`` is off), quoted replies are rendered as
    blockquotes (or dropped when ``preserve_email_quotes`` is off), Outlook
    wrappers pass their content through.
table
    Layout tables are flattened; data tables follow ``table_handling``.
span, font
    Inline CSS (bold, italic, underline, highlight colors) becomes Markdown
    emphasis when ``convert_inline_styles`` is on.
"""

from __future__ import annotations

import logging

from markextract.dom import Node
from markextract.email_utils import (
    clean_email_signature,
    is_important_color,
    is_outlook_element,
    is_quoted_element,
    is_signature_element,
)
from markextract.rules.registry import RuleTable
from markextract.rules.render import code_language, quote_lines, render_code_block, render_link
from markextract.rules.tables import is_layout_table, render_table

logger = logging.getLogger(__name__)

_BOLD_DECLARATIONS = ("font-weight:bold", "font-weight:700")
_ITALIC_DECLARATIONS = ("font-style:italic",)
_UNDERLINE_DECLARATIONS = ("text-decoration:underline",)


def _declarations(style: str) -> str:
    return style.replace(" ", "").lower()


class EmailRules(RuleTable):
    """Rule table for mail-client HTML."""

    def _register_rules(self) -> None:
        self.register(self._division, "div")
        self.register(self._table, "table")
        self.register(self._span, "span")
        self.register(self._font, "font")
        self.register(self._link, "a")
        self.register(self._blockquote, "blockquote")
        self.register(self._pre, "pre")

    def _division(self, element: Node, content: str) -> str:
        if is_signature_element(element):
            logger.debug("Signature block found in %r", element)
            if not self.options.handle_email_signatures:
                return ""
            signature = clean_email_signature(content)
            return f"\n\n---\n{signature}\n" if signature else ""

        if is_quoted_element(element):
            content = content.strip()
            if not self.options.preserve_email_quotes or not content:
                return ""
            return f"\n\n{quote_lines(content)}\n\n"

        if is_outlook_element(element):
            return content

        content = content.strip()
        return f"{content}\n" if content else ""

    def _table(self, element: Node, content: str) -> str:
        if is_layout_table(element):
            content = content.strip()
            return f"\n{content}\n\n" if content else ""
        if self.options.table_handling == "remove":
            return ""
        return render_table(element)

    def _span(self, element: Node, content: str) -> str:
        if not self.options.convert_inline_styles or not content.strip():
            return content
        style = _declarations(element.get_attribute("style") or "")
        text = content.strip()
        if any(declaration in style for declaration in _BOLD_DECLARATIONS):
            return f"{self.options.strong_delimiter}{text}{self.options.strong_delimiter}"
        if any(declaration in style for declaration in _ITALIC_DECLARATIONS):
            return f"{self.options.em_delimiter}{text}{self.options.em_delimiter}"
        if any(declaration in style for declaration in _UNDERLINE_DECLARATIONS):
            return f"<u>{text}</u>"
        if "color:" in style and is_important_color(style):
            return f"<mark>{text}</mark>"
        return content

    def _font(self, element: Node, content: str) -> str:
        if not self.options.convert_inline_styles or not content.strip():
            return content
        color = element.get_attribute("color")
        style = element.get_attribute("style") or ""
        if (color and is_important_color(color)) or ("color" in style and is_important_color(style)):
            return f"<mark>{content.strip()}</mark>"
        return content

    def _link(self, element: Node, content: str) -> str:
        href = element.get_attribute("href")
        if not href:
            return content
        if not content.strip():
            return ""
        if href.startswith("tel:"):
            return content.strip()
        return render_link(href, content, element.get_attribute("title"), self.options.link_style == "inlined")

    def _blockquote(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return f"\n{quote_lines(content)}\n\n"

    def _pre(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return render_code_block(
            content, code_language(element), self.options.fence, self.options.code_block_style == "indented"
        )
