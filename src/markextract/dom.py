#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/dom.py
"""Navigable document tree used by the converter.

``parse_html`` turns an HTML string into a ``Document``: a flat arena of
``Node`` objects (element, text and comment nodes) addressed by integer
index. Parent links are stored as indices and resolved through the owning
document, so the tree is owned top-down and contains no reference cycles
between nodes.

Parsing is delegated to BeautifulSoup with a configurable tree builder.
Selector lookups (``query_selector`` and friends) run through BeautifulSoup's
CSS selector support against the parsed soup and are mapped back to arena
nodes.

When the configured parser is not installed, or parsing raises, a degraded
document is returned instead: a synthetic ``body`` element holding the whole
input as one whitespace-collapsed text node, with every selector query
returning no results. Conversion then still succeeds, producing plain text.

Examples
--------
    >>> doc = parse_html("<p class='lead'>Hello <b>world</b></p>")
    >>> doc.query_selector('[class*="lead"]').text_content
    'Hello world'

"""

from __future__ import annotations

import logging
import re
from enum import IntEnum
from typing import Any, Iterator

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from bs4.exceptions import FeatureNotFound

from markextract.constants import DEFAULT_HTML_PARSER
from markextract.utils.text import collapse_whitespace

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<[^>]+>")


class NodeType(IntEnum):
    """Node kinds, numbered like their DOM counterparts."""

    ELEMENT = 1
    TEXT = 3
    COMMENT = 8
    DOCUMENT = 9


class Node:
    """A node of a parsed ``Document``.

    Nodes are created by ``Document`` only. Element nodes carry a lower-cased
    tag name and a string-to-string attribute map (multi-valued attributes
    such as ``class`` are joined with spaces); text and comment nodes carry
    their character data in ``data``.
    """

    def __init__(
        self,
        document: Document,
        index: int,
        node_type: NodeType,
        tag: str = "",
        attrs: dict[str, str] | None = None,
        data: str = "",
        parent_index: int | None = None,
        position: int = 0,
    ):
        self._document = document
        self.index = index
        self.node_type = node_type
        self.tag = tag
        self.attrs = attrs or {}
        self.data = data
        self.parent_index = parent_index
        self.position = position
        self.child_indices: list[int] = []
        self._text_content: str | None = None

    def __repr__(self) -> str:
        if self.node_type == NodeType.ELEMENT:
            return f"<Node #{self.index} <{self.tag}>>"
        return f"<Node #{self.index} {self.node_type.name.lower()} {self.data[:20]!r}>"

    @property
    def document(self) -> Document:
        return self._document

    @property
    def is_element(self) -> bool:
        return self.node_type == NodeType.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.node_type == NodeType.TEXT

    @property
    def is_comment(self) -> bool:
        return self.node_type == NodeType.COMMENT

    @property
    def parent(self) -> Node | None:
        if self.parent_index is None:
            return None
        return self._document.nodes[self.parent_index]

    @property
    def children(self) -> list[Node]:
        nodes = self._document.nodes
        return [nodes[i] for i in self.child_indices]

    @property
    def element_children(self) -> list[Node]:
        return [child for child in self.children if child.is_element]

    @property
    def previous_sibling(self) -> Node | None:
        parent = self.parent
        if parent is None or self.position == 0:
            return None
        return self._document.nodes[parent.child_indices[self.position - 1]]

    @property
    def next_sibling(self) -> Node | None:
        parent = self.parent
        if parent is None or self.position + 1 >= len(parent.child_indices):
            return None
        return self._document.nodes[parent.child_indices[self.position + 1]]

    @property
    def text_content(self) -> str:
        """Concatenated text of this node and all descendant text nodes.

        Computed on first access and cached; documents are never mutated
        after construction.
        """
        if self._text_content is None:
            if self.is_text:
                self._text_content = self.data
            elif self.is_comment:
                self._text_content = ""
            else:
                self._text_content = "".join(node.data for node in self.descendants() if node.is_text)
        return self._text_content

    def get_attribute(self, name: str) -> str | None:
        return self.attrs.get(name.lower())

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attrs

    def ancestors(self) -> Iterator[Node]:
        """Yield ancestors from the parent up to the document root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def has_ancestor(self, *tags: str) -> bool:
        return any(ancestor.tag in tags for ancestor in self.ancestors())

    def count_ancestors(self, tag: str) -> int:
        return sum(1 for ancestor in self.ancestors() if ancestor.tag == tag)

    def descendants(self) -> Iterator[Node]:
        """Yield all descendants in document order (pre-order)."""
        nodes = self._document.nodes
        stack = list(reversed(self.child_indices))
        while stack:
            node = nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.child_indices))

    def find_all(self, *tags: str) -> list[Node]:
        """Return descendant elements with one of the given tag names, in document order."""
        wanted = {tag.lower() for tag in tags}
        return [node for node in self.descendants() if node.is_element and node.tag in wanted]

    def find(self, *tags: str) -> Node | None:
        wanted = {tag.lower() for tag in tags}
        for node in self.descendants():
            if node.is_element and node.tag in wanted:
                return node
        return None

    def query_selector_all(self, selector: str) -> list[Node]:
        """Return descendant elements matching a CSS selector."""
        return self._document.select(selector, scope=self)

    def query_selector(self, selector: str) -> Node | None:
        matches = self._document.select(selector, scope=self, limit=1)
        return matches[0] if matches else None


class Document:
    """A parsed HTML document stored as an arena of ``Node`` objects.

    Parameters
    ----------
    soup : BeautifulSoup or None
        Parsed soup backing selector queries. ``None`` for degraded
        documents.

    Attributes
    ----------
    nodes : list of Node
        All nodes; ``nodes[0]`` is the document root.
    degraded : bool
        True when the document is the plain-text fallback.

    """

    def __init__(self, soup: BeautifulSoup | None = None):
        self.nodes: list[Node] = []
        self.degraded = soup is None
        self._soup = soup
        self._tags: dict[int, int] = {}
        self._sources: dict[int, Any] = {}

    @classmethod
    def from_soup(cls, soup: BeautifulSoup) -> Document:
        """Build a document from a BeautifulSoup tree."""
        document = cls(soup)
        root = document._add(NodeType.DOCUMENT, tag="#document", source=soup)

        stack: list[tuple[Tag, int]] = [(soup, root.index)]
        while stack:
            tag, parent_index = stack.pop()
            for child in tag.children:
                if isinstance(child, Tag):
                    attrs = {
                        str(name).lower(): " ".join(value) if isinstance(value, (list, tuple)) else str(value)
                        for name, value in child.attrs.items()
                    }
                    node = document._add(
                        NodeType.ELEMENT, tag=child.name.lower(), attrs=attrs, parent_index=parent_index, source=child
                    )
                    stack.append((child, node.index))
                elif isinstance(child, Comment):
                    document._add(NodeType.COMMENT, data=str(child), parent_index=parent_index)
                elif isinstance(child, (Doctype, Declaration, ProcessingInstruction)):
                    continue
                elif isinstance(child, NavigableString):
                    document._add(NodeType.TEXT, data=str(child), parent_index=parent_index)
        return document

    @classmethod
    def degraded_from(cls, html: str) -> Document:
        """Build the plain-text fallback document for ``html``."""
        document = cls(None)
        root = document._add(NodeType.DOCUMENT, tag="#document")
        html_node = document._add(NodeType.ELEMENT, tag="html", parent_index=root.index)
        body = document._add(NodeType.ELEMENT, tag="body", parent_index=html_node.index)
        text = collapse_whitespace(_TAG_PATTERN.sub(" ", html))
        if text:
            document._add(NodeType.TEXT, data=text, parent_index=body.index)
        return document

    def _add(
        self,
        node_type: NodeType,
        tag: str = "",
        attrs: dict[str, str] | None = None,
        data: str = "",
        parent_index: int | None = None,
        source: Any = None,
    ) -> Node:
        position = 0
        if parent_index is not None:
            position = len(self.nodes[parent_index].child_indices)
        node = Node(self, len(self.nodes), node_type, tag, attrs, data, parent_index, position)
        self.nodes.append(node)
        if parent_index is not None:
            self.nodes[parent_index].child_indices.append(node.index)
        if source is not None:
            self._tags[id(source)] = node.index
            # Holding the soup objects keeps their ids unique
            self._sources[node.index] = source
        return node

    @property
    def root(self) -> Node:
        return self.nodes[0]

    @property
    def body(self) -> Node | None:
        return self.root.find("body")

    @property
    def title(self) -> Node | None:
        return self.root.find("title")

    def select(self, selector: str, scope: Node | None = None, limit: int | None = None) -> list[Node]:
        """Run a CSS selector and map the matches back to arena nodes.

        Degraded documents have no element structure to query and always
        return an empty list.
        """
        if self._soup is None:
            return []
        scope = scope or self.root
        source = self._sources.get(scope.index)
        if source is None:
            return []
        matches = source.select(selector, limit=limit or 0)
        return [self.nodes[self._tags[id(tag)]] for tag in matches if id(tag) in self._tags]

    def query_selector(self, selector: str) -> Node | None:
        matches = self.select(selector, limit=1)
        return matches[0] if matches else None

    def query_selector_all(self, selector: str) -> list[Node]:
        return self.select(selector)

    def find_all(self, *tags: str) -> list[Node]:
        return self.root.find_all(*tags)


def parse_html(html: str, parser: str = DEFAULT_HTML_PARSER) -> Document:
    """Parse ``html`` into a ``Document``.

    Never raises: if the requested BeautifulSoup tree builder is not
    installed, or parsing fails, a degraded plain-text document is returned
    and a warning is logged.

    Parameters
    ----------
    html : str
        HTML markup; need not be well-formed
    parser : str, default "html.parser"
        BeautifulSoup tree builder name

    Returns
    -------
    Document
        Parsed (or degraded) document

    """
    try:
        soup = BeautifulSoup(html, parser)
        return Document.from_soup(soup)
    except FeatureNotFound as e:
        logger.warning("HTML parser %r is not available, falling back to plain text extraction: %s", parser, e)
    except Exception as e:
        logger.warning("HTML parsing failed, falling back to plain text extraction: %s", e)
    return Document.degraded_from(html)
