#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/rules/__init__.py
"""Tag rule tables used by the tree converter.

A rule turns one element plus its already-rendered child Markdown into the
element's Markdown. Rules are grouped into tables keyed by tag name:

- ``CustomRules`` holds caller-supplied overrides (highest precedence).
- ``EmailRules`` covers mail-client markup; consulted only for documents
  classified as email content.
- ``BaseRules`` covers general HTML.
"""

from markextract.rules.base import BaseRules
from markextract.rules.custom import CustomRules
from markextract.rules.email import EmailRules
from markextract.rules.registry import Rule, RuleFunc, RuleTable

__all__ = ["BaseRules", "CustomRules", "EmailRules", "Rule", "RuleFunc", "RuleTable"]
