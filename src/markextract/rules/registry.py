#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/registry.py
"""Rule type and the tag-keyed rule table base class.

``RuleTable.get_rule`` returns ``None`` for tags a table does not register;
the converter then falls through to the next table and finally passes the
child content through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from markextract.dom import Node
    from markextract.options import ConversionOptions

RuleFunc = Callable[["Node", str], str]


@dataclass(frozen=True)
class Rule:
    """A tag transform and its precedence among rules for the same tag."""

    apply: RuleFunc
    priority: int = 0


class RuleTable:
    """Base class for tag-name keyed rule tables.

    Subclasses register their handlers in ``_register_rules``.

    Parameters
    ----------
    options : ConversionOptions
        Options read by the rule handlers

    """

    def __init__(self, options: ConversionOptions):
        self.options = options
        self.rules: dict[str, Rule] = {}
        self._register_rules()

    def _register_rules(self) -> None:
        raise NotImplementedError

    def register(self, func: RuleFunc, *tags: str, priority: int = 0) -> None:
        """Register ``func`` as the rule for each of ``tags``."""
        rule = Rule(func, priority)
        for tag in tags:
            self.rules[tag] = rule

    def get_rule(self, tag: str) -> Rule | None:
        return self.rules.get(tag)

    def __contains__(self, tag: str) -> bool:
        return tag in self.rules
