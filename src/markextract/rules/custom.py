#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/custom.py
"""Caller-supplied rule overrides.

Custom rules are keyed by the leading tag name of their selector
(``"div.note"`` registers for ``div``); the selector ``"*"`` registers a
global rule consulted for every tag. When several rules apply to one tag the
highest priority wins, ties going to the rule declared first.

Template replacements substitute ``${content}`` (rendered child Markdown),
``${text}`` (the element's text content) and ``${attr}`` (any attribute
value, empty when absent).

Examples
--------
    >>> from markextract.options import ConversionOptions, CustomRule
    >>> rules = CustomRules(ConversionOptions(custom_rules=(CustomRule("aside", "> ${content}"),)))
    >>> rules.get_rule("aside") is not None
    True

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from markextract.options import CustomRule
from markextract.rules.registry import Rule, RuleTable

if TYPE_CHECKING:
    from markextract.dom import Node
    from markextract.options import ConversionOptions

_SELECTOR_TAG = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)")
_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")

GLOBAL_SELECTOR = "*"


def parse_selector(selector: str) -> str:
    """Return the lower-cased tag name a selector targets."""
    selector = selector.strip()
    match = _SELECTOR_TAG.match(selector)
    return match.group(1).lower() if match else selector.lower()


class CustomRules(RuleTable):
    """Rule table built from ``ConversionOptions.custom_rules``.

    Unlike the built-in tables, rules can be added and removed after
    construction.
    """

    def __init__(self, options: ConversionOptions):
        self.tag_rules: dict[str, list[Rule]] = {}
        self.global_rules: list[Rule] = []
        super().__init__(options)

    def _register_rules(self) -> None:
        for rule in self.options.custom_rules:
            self.add_rule(rule)

    def _compile(self, rule: CustomRule) -> Rule:
        replacement = rule.replacement
        if isinstance(replacement, str):
            template = replacement

            def apply(element: Node, content: str) -> str:
                return self._expand_template(template, element, content)

        else:

            def apply(element: Node, content: str) -> str:
                return replacement(content, element, self.options)

        return Rule(apply, rule.priority)

    @staticmethod
    def _expand_template(template: str, element: Node, content: str) -> str:
        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name == "content":
                return content
            if name == "text":
                return element.text_content
            return element.get_attribute(name) or ""

        return _PLACEHOLDER.sub(substitute, template)

    def add_rule(self, rule: CustomRule) -> None:
        compiled = self._compile(rule)
        if rule.selector.strip() == GLOBAL_SELECTOR:
            self.global_rules.append(compiled)
        else:
            self.tag_rules.setdefault(parse_selector(rule.selector), []).append(compiled)

    def remove_rule(self, selector: str) -> None:
        """Remove every rule registered for ``selector``'s tag (or all global rules for ``*``)."""
        if selector.strip() == GLOBAL_SELECTOR:
            self.global_rules.clear()
        else:
            self.tag_rules.pop(parse_selector(selector), None)

    def clear_rules(self) -> None:
        self.tag_rules.clear()
        self.global_rules.clear()

    def get_rule(self, tag: str) -> Rule | None:
        candidates = self.tag_rules.get(tag, []) + self.global_rules
        if not candidates:
            return None
        # max() keeps the first of equal priorities
        return max(candidates, key=lambda rule: rule.priority)

    def __contains__(self, tag: str) -> bool:
        return bool(self.global_rules) or tag in self.tag_rules

    def __len__(self) -> int:
        return len(self.global_rules) + sum(len(rules) for rules in self.tag_rules.values())
