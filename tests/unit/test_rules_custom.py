"""Tests for caller-supplied custom rules."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import pytest

from markextract.converter import TreeConverter
from markextract.dom import parse_html
from markextract.options import ConversionOptions, CustomRule
from markextract.rules import CustomRules
from markextract.rules.custom import parse_selector


def _render(html, *rules):
    converter = TreeConverter(ConversionOptions(custom_rules=rules))
    return converter.convert(parse_html(html).root).strip()


@pytest.mark.unit
class TestTemplates:
    """Test template placeholder substitution."""

    def test_content_placeholder(self):
        """Test that ${content} receives the rendered children."""
        assert _render("<aside>Hi <b>there</b></aside>", CustomRule("aside", "> ${content}")) == "> Hi **there**"

    def test_text_placeholder(self):
        """Test that ${text} receives raw text content."""
        assert _render("<aside>a_b <b>c</b></aside>", CustomRule("aside", "[${text}]")) == "[a_b c]"

    def test_attribute_placeholder(self):
        """Test attribute substitution, empty when missing."""
        rule = CustomRule("abbr", "${content} (${title})${missing}")
        assert _render('<p><abbr title="HyperText">HTML</abbr></p>', rule) == "HTML (HyperText)"

    def test_single_pass_substitution(self):
        """Test that substituted values are not expanded again."""
        rule = CustomRule("span", "${title}")
        assert _render('<span title="${content}">y</span>', rule) == "${content}"

    def test_callable_replacement(self):
        """Test callables receive content, element and options."""
        seen = {}

        def replacement(content, element, options):
            seen["tag"] = element.tag
            seen["options"] = options
            return content.upper()

        assert _render("<aside>quiet</aside>", CustomRule("aside", replacement)) == "QUIET"
        assert seen["tag"] == "aside"
        assert isinstance(seen["options"], ConversionOptions)


@pytest.mark.unit
class TestPrecedence:
    """Test rule selection among several custom rules."""

    def test_custom_overrides_builtin(self):
        """Test that custom rules win over base rules."""
        assert _render("<p>hi</p>", CustomRule("p", "P:${content}")) == "P:hi"

    def test_highest_priority_wins(self):
        """Test priority ordering."""
        rules = (CustomRule("div", "low", priority=1), CustomRule("div", "high", priority=5))
        assert _render("<div>x</div>", *rules) == "high"

    def test_first_declared_wins_ties(self):
        """Test tie breaking by declaration order."""
        rules = (CustomRule("div", "first"), CustomRule("div", "second"))
        assert _render("<div>x</div>", *rules) == "first"

    def test_global_rule(self):
        """Test that * applies to every tag and competes on priority."""
        rules = (CustomRule("b", "B"), CustomRule("*", "[${content}]", priority=10))
        assert _render("<b>x</b>", *rules) == "[x]"

    def test_selector_uses_leading_tag(self):
        """Test that class and id parts of selectors are ignored."""
        assert parse_selector("div.note") == "div"
        assert parse_selector("  SPAN#x ") == "span"
        assert _render("<div>x</div>", CustomRule("div.note", "note")) == "note"


@pytest.mark.unit
class TestRuleManagement:
    """Test adding, removing and clearing rules."""

    def test_add_remove_clear(self):
        """Test rule table mutation."""
        rules = CustomRules(ConversionOptions())
        assert len(rules) == 0
        assert rules.get_rule("div") is None

        rules.add_rule(CustomRule("div", "a"))
        rules.add_rule(CustomRule("div", "b"))
        rules.add_rule(CustomRule("*", "c"))
        assert len(rules) == 3
        assert "div" in rules

        rules.remove_rule("div")
        assert len(rules) == 1
        assert rules.get_rule("div") is not None

        rules.clear_rules()
        assert len(rules) == 0
        assert "div" not in rules

    def test_empty_selector_rejected(self):
        """Test CustomRule validation."""
        with pytest.raises(ValueError):
            CustomRule("  ", "x")
