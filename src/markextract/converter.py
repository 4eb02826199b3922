#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/converter.py
"""Depth-first node-to-Markdown conversion.

``TreeConverter`` walks a parsed ``Document`` with an explicit stack, so
nesting depth is not limited by the interpreter recursion limit. Children are
rendered before their parent so every rule receives the element together
with its finished child Markdown. Rules are resolved per tag in precedence
order: custom rules, then email rules (only in email mode), then base rules;
tags without any rule pass their child content through unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from markextract.constants import BLOCK_ELEMENTS, INLINE_ELEMENTS
from markextract.dom import Node, NodeType
from markextract.options import ConversionOptions
from markextract.rules import BaseRules, CustomRules, EmailRules, Rule
from markextract.utils.escape import escape_markdown

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")

# Document-level containers trim surrounding text like block elements do
_CONTAINER_TAGS = frozenset({"#document", "html", "body"})


@dataclass
class ConversionState:
    """Mutable state of one top-level ``TreeConverter.convert`` call.

    Attributes
    ----------
    email_mode : bool
        Whether email rules participate in dispatch
    visited : set of int
        Indices of nodes already rendered; a node is never rendered twice

    """

    email_mode: bool = False
    visited: set[int] = field(default_factory=set)


@dataclass
class _Frame:
    """An element whose children are being rendered."""

    element: Node
    children: list[Node]
    position: int = 0
    previous: Node | None = None
    parts: list[str] = field(default_factory=list)


def _is_block(node: Node | None) -> bool:
    return node is not None and node.is_element and node.tag in BLOCK_ELEMENTS


def _is_inline(node: Node) -> bool:
    return node.is_element and node.tag in INLINE_ELEMENTS


class TreeConverter:
    """Convert document nodes to Markdown using the rule tables.

    A converter instance owns its rule tables and a tag-to-rule cache that
    is cleared at the start of every top-level ``convert`` call, so rules
    added to ``custom_rules`` between calls take effect immediately.

    Parameters
    ----------
    options : ConversionOptions
        Conversion options shared with the rule tables

    """

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()
        self.custom_rules = CustomRules(self.options)
        self.email_rules = EmailRules(self.options)
        self.base_rules = BaseRules(self.options)
        self.state = ConversionState()
        self._rule_cache: dict[tuple[str, bool], Rule | None] = {}

    def convert(self, node: Node, email_mode: bool = False) -> str:
        """Render ``node`` and its subtree to Markdown.

        Parameters
        ----------
        node : Node
            Subtree root, usually the document body
        email_mode : bool, default False
            Consult the email rule table

        Returns
        -------
        str
            Unnormalized Markdown

        """
        self.state = ConversionState(email_mode=email_mode)
        self._rule_cache.clear()
        return self._convert_node(node)

    def reset(self) -> None:
        """Forget the visited nodes of the previous conversion."""
        self.state = ConversionState()

    def cleanup(self) -> None:
        """Reset per-call state and drop cached rule lookups."""
        self.reset()
        self._rule_cache.clear()

    def _convert_node(self, node: Node) -> str:
        if node.index in self.state.visited:
            return ""

        root = self._enter(node)
        if isinstance(root, str):
            return root
        stack = [root]
        while True:
            frame = stack[-1]
            if frame.position < len(frame.children):
                child = frame.children[frame.position]
                frame.position += 1
                if child.index in self.state.visited:
                    frame.previous = child
                    continue
                entered = self._enter(child)
                if isinstance(entered, _Frame):
                    stack.append(entered)
                else:
                    self._append(frame, child, entered)
                continue

            stack.pop()
            converted = self._finish(frame)
            if not stack:
                return converted
            self._append(stack[-1], frame.element, converted)

    def _enter(self, node: Node) -> str | _Frame:
        """Mark ``node`` visited; return leaf output, or a frame when its children must be rendered."""
        self.state.visited.add(node.index)
        if node.node_type == NodeType.TEXT:
            return self._convert_text(node)
        if node.node_type in (NodeType.ELEMENT, NodeType.DOCUMENT):
            if node.tag in self.options.ignore_elements:
                return ""
            return _Frame(node, node.children)
        return ""

    def _append(self, frame: _Frame, child: Node, converted: str) -> None:
        if converted:
            if (
                frame.parts
                and not self.options.preserve_whitespace
                and frame.previous is not None
                and _is_inline(frame.previous)
                and _is_inline(child)
            ):
                frame.parts.append(" ")
            frame.parts.append(converted)
        frame.previous = child

    def _finish(self, frame: _Frame) -> str:
        element = frame.element
        content = "".join(frame.parts)
        if element.node_type == NodeType.DOCUMENT:
            return content
        rule = self._resolve_rule(element.tag)
        if rule is None:
            return content
        try:
            return rule.apply(element, content)
        except Exception as e:
            logger.warning("Rule for <%s> failed, passing child content through: %s", element.tag, e)
            return content

    def _convert_text(self, node: Node) -> str:
        text = node.data
        if self.options.preserve_whitespace:
            return text

        text = _WHITESPACE_RUN.sub(" ", text)
        parent = node.parent
        if parent is not None and (parent.tag in BLOCK_ELEMENTS or parent.tag in _CONTAINER_TAGS):
            previous, following = node.previous_sibling, node.next_sibling
            if previous is None or _is_block(previous):
                text = text.lstrip()
            if following is None or _is_block(following):
                text = text.rstrip()
        if not text:
            return ""
        return escape_markdown(text)

    def _resolve_rule(self, tag: str) -> Rule | None:
        key = (tag, self.state.email_mode)
        if key in self._rule_cache:
            return self._rule_cache[key]

        rule = self.custom_rules.get_rule(tag)
        if rule is None and self.state.email_mode:
            rule = self.email_rules.get_rule(tag)
        if rule is None:
            rule = self.base_rules.get_rule(tag)
        self._rule_cache[key] = rule
        return rule
