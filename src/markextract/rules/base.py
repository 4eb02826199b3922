#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/base.py
"""Rules for general HTML elements.

Every handler receives the element and its already-rendered child Markdown
and returns the element's Markdown. Inline wrappers (bold, italic, strike
and the HTML passthrough tags) drop elements whose content is empty after
trimming instead of emitting bare delimiters.
"""

from __future__ import annotations

from markextract.dom import Node
from markextract.rules.registry import RuleTable
from markextract.rules.render import code_language, markdown_title, quote_lines, render_code_block, render_link
from markextract.rules.tables import has_explicit_layout_markup, render_table

_HTML_WRAPPER_TAGS = ("ins", "u", "small", "sub", "sup", "mark")


class BaseRules(RuleTable):
    """Rule table for general (non-email) HTML."""

    def _register_rules(self) -> None:
        for level in range(1, 7):
            self.register(self._heading, f"h{level}")
        self.register(self._paragraph, "p")
        self.register(lambda element, content: "\n", "br")
        self.register(lambda element, content: "\n---\n\n", "hr")
        self.register(self._strong, "strong", "b")
        self.register(self._emphasis, "em", "i")
        self.register(self._strikethrough, "del", "s", "strike")
        self.register(self._html_wrapper, *_HTML_WRAPPER_TAGS)
        self.register(self._code, "code")
        self.register(self._keyboard, "kbd")
        self.register(self._pre, "pre")
        self.register(self._link, "a")
        self.register(self._image, "img")
        self.register(self._list, "ul", "ol")
        self.register(self._list_item, "li")
        self.register(self._blockquote, "blockquote")
        self.register(self._table, "table")
        self.register(lambda element, content: content, "tr", "span")
        self.register(self._cell, "td", "th")
        self.register(self._division, "div")
        self.register(self._definition_list, "dl")
        self.register(self._definition_term, "dt")
        self.register(self._definition_description, "dd")

    # -- block elements ------------------------------------------------------

    def _heading(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        level = int(element.tag[1])
        return f"\n{'#' * level} {content}\n\n"

    def _paragraph(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"\n{content}\n\n" if content else ""

    def _division(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"{content}\n" if content else ""

    def _pre(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return render_code_block(
            content, code_language(element), self.options.fence, self.options.code_block_style == "indented"
        )

    def _list(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"\n\n{content}\n\n" if content else ""

    def _list_item(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        parent = element.parent
        if parent is not None and parent.tag == "ol":
            marker = f"{parent.element_children.index(element) + 1}. "
        else:
            marker = f"{self.options.bullet_list_marker} "

        # Continuation lines (nested lists, later paragraphs) align under the item text
        first, *rest = content.split("\n")
        indent = " " * len(marker)
        lines = [marker + first] + [indent + line if line.strip() else "" for line in rest]
        return "\n".join(lines) + "\n"

    def _blockquote(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return f"\n{quote_lines(content)}\n\n"

    def _table(self, element: Node, content: str) -> str:
        if has_explicit_layout_markup(element):
            content = content.strip()
            return f"\n{content}\n\n" if content else ""
        if self.options.table_handling == "remove":
            return ""
        return render_table(element)

    def _cell(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"{content}\n" if content else ""

    def _definition_list(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"\n{content}\n\n" if content else ""

    def _definition_term(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return f"{self.options.strong_delimiter}{content}{self.options.strong_delimiter}\n"

    def _definition_description(self, element: Node, content: str) -> str:
        content = content.strip()
        return f": {content}\n\n" if content else ""

    # -- inline elements -----------------------------------------------------

    def _strong(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return f"{self.options.strong_delimiter}{content}{self.options.strong_delimiter}"

    def _emphasis(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return f"{self.options.em_delimiter}{content}{self.options.em_delimiter}"

    def _strikethrough(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"~~{content}~~" if content else ""

    def _html_wrapper(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        return f"<{element.tag}>{content}</{element.tag}>"

    def _code(self, element: Node, content: str) -> str:
        content = content.strip()
        if not content:
            return ""
        if element.has_ancestor("pre"):
            return content
        if "`" in content:
            return f"``{content}``"
        return f"`{content}`"

    def _keyboard(self, element: Node, content: str) -> str:
        content = content.strip()
        return f"`{content}`" if content else ""

    def _link(self, element: Node, content: str) -> str:
        href = element.get_attribute("href")
        if not href:
            return content
        if not content.strip():
            return ""
        return render_link(href, content, element.get_attribute("title"), self.options.link_style == "inlined")

    def _image(self, element: Node, content: str) -> str:
        src = element.get_attribute("src") or ""
        if not src:
            return ""
        alt = element.get_attribute("alt") or ""
        title = element.get_attribute("title")
        if title:
            return f"![{alt}]({src}{markdown_title(title)})"
        return f"![{alt}]({src})"
