#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/options.py
"""Configuration options for HTML to Markdown conversion.

``ConversionOptions`` is an immutable dataclass consumed by the rule tables,
the tree converter and the pipeline. Every field has a default, so an empty
``ConversionOptions()`` is a valid configuration. Use ``create_updated`` to
derive a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any, Callable, Union

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from markextract.constants import (
    CODE_BLOCK_STYLES,
    DEFAULT_BULLET_LIST_MARKER,
    DEFAULT_CODE_BLOCK_STYLE,
    DEFAULT_EM_DELIMITER,
    DEFAULT_FENCE,
    DEFAULT_HTML_PARSER,
    DEFAULT_LINK_STYLE,
    DEFAULT_STRONG_DELIMITER,
    DEFAULT_TABLE_HANDLING,
    LINK_STYLES,
    TABLE_HANDLING_MODES,
    CodeBlockStyle,
    HtmlParser,
    LinkStyle,
    TableHandling,
)

if TYPE_CHECKING:
    from markextract.dom import Node

ReplacementFunc = Callable[[str, "Node", "ConversionOptions"], str]


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class CustomRule:
    """A caller-supplied override for one tag (or ``*`` for every tag).

    Parameters
    ----------
    selector : str
        Tag selector. Only the leading tag name is significant
        (``"div.note"`` targets ``div``); ``"*"`` applies to all tags.
    replacement : str or callable
        Either a template string or a callable
        ``(content, element, options) -> str``. Templates substitute
        ``${content}`` with the rendered child Markdown, ``${text}`` with the
        element's text content and ``${name}`` with the value of attribute
        ``name`` (empty when absent).
    priority : int, default 0
        Higher priorities win when several custom rules match one tag.

    """

    selector: str
    replacement: Union[str, ReplacementFunc]
    priority: int = 0

    def __post_init__(self) -> None:
        """Validate the selector."""
        if not self.selector or not self.selector.strip():
            raise ValueError("CustomRule.selector must be a non-empty string")


@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    """Options controlling HTML to Markdown conversion.

    Parameters
    ----------
    preserve_whitespace : bool, default False
        Skip whitespace collapsing and Markdown escaping of text.
    trim_whitespace : bool, default True
        Trim leading/trailing whitespace from the final Markdown.
    bullet_list_marker : str, default "-"
        Marker for unordered list items.
    code_block_style : {"fenced", "indented"}, default "fenced"
        How ``<pre>`` blocks are rendered.
    fence : str, default "```"
        Fence string for fenced code blocks.
    em_delimiter, strong_delimiter : str
        Delimiters for emphasis and strong emphasis.
    link_style : {"inlined", "text"}, default "inlined"
        ``inlined`` renders ``[text](url)``; ``text`` keeps only the link text.
    table_handling : {"convert", "remove", "preserve"}, default "convert"
        What to do with data tables.
    handle_email_signatures : bool, default True
        Keep detected signature blocks (under a horizontal rule) instead of
        dropping them.
    preserve_email_quotes : bool, default True
        Keep quoted reply blocks (as blockquotes) instead of dropping them.
    convert_inline_styles : bool, default True
        Map inline CSS on ``span``/``font`` to Markdown emphasis.
    handle_outlook_specific : bool, default True
        Run the Outlook markup cleanup pass before parsing.
    preserve_email_headers : bool, default True
        Extract From/To/Subject/Date headers into the metadata.
    ignore_elements : tuple of str
        Tag names dropped entirely, children included.
    custom_rules : tuple of CustomRule
        Caller-supplied rule overrides, consulted before built-in rules.
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder. An unavailable parser degrades the
        conversion to plain-text extraction.

    """

    preserve_whitespace: bool = field(
        default=False, metadata={"help": "Keep whitespace as-is and skip Markdown escaping of text"}
    )
    trim_whitespace: bool = field(default=True, metadata={"help": "Trim outer whitespace of the result"})
    bullet_list_marker: str = field(
        default=DEFAULT_BULLET_LIST_MARKER, metadata={"help": "Marker for unordered list items"}
    )
    code_block_style: CodeBlockStyle = field(
        default=DEFAULT_CODE_BLOCK_STYLE,
        metadata={"help": "Render <pre> blocks fenced or indented", "choices": list(CODE_BLOCK_STYLES)},
    )
    fence: str = field(default=DEFAULT_FENCE, metadata={"help": "Fence string for fenced code blocks"})
    em_delimiter: str = field(default=DEFAULT_EM_DELIMITER, metadata={"help": "Emphasis delimiter"})
    strong_delimiter: str = field(default=DEFAULT_STRONG_DELIMITER, metadata={"help": "Strong emphasis delimiter"})
    link_style: LinkStyle = field(
        default=DEFAULT_LINK_STYLE,
        metadata={"help": "Render links inline or as bare text", "choices": list(LINK_STYLES)},
    )
    table_handling: TableHandling = field(
        default=DEFAULT_TABLE_HANDLING,
        metadata={"help": "Data table handling", "choices": list(TABLE_HANDLING_MODES)},
    )
    handle_email_signatures: bool = field(default=True, metadata={"help": "Keep email signature blocks"})
    preserve_email_quotes: bool = field(default=True, metadata={"help": "Keep quoted reply blocks"})
    convert_inline_styles: bool = field(default=True, metadata={"help": "Convert inline CSS to Markdown emphasis"})
    handle_outlook_specific: bool = field(default=True, metadata={"help": "Clean up Outlook-specific markup"})
    preserve_email_headers: bool = field(default=True, metadata={"help": "Extract email headers into metadata"})
    ignore_elements: tuple[str, ...] = field(default=(), metadata={"help": "Tag names to drop entirely"})
    custom_rules: tuple[CustomRule, ...] = field(default=(), metadata={"help": "Caller-supplied rule overrides"})
    html_parser: HtmlParser = field(default=DEFAULT_HTML_PARSER, metadata={"help": "BeautifulSoup parser name"})

    def __post_init__(self) -> None:
        """Validate enumerated fields and normalize sequences.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.code_block_style not in CODE_BLOCK_STYLES:
            raise ValueError(f"code_block_style must be one of {CODE_BLOCK_STYLES}, got {self.code_block_style!r}")
        if self.link_style not in LINK_STYLES:
            raise ValueError(f"link_style must be one of {LINK_STYLES}, got {self.link_style!r}")
        if self.table_handling not in TABLE_HANDLING_MODES:
            raise ValueError(f"table_handling must be one of {TABLE_HANDLING_MODES}, got {self.table_handling!r}")
        if not self.fence:
            raise ValueError("fence must be a non-empty string")
        if not self.bullet_list_marker:
            raise ValueError("bullet_list_marker must be a non-empty string")

        # Lists are accepted for convenience but stored as tuples to keep the options hashable
        object.__setattr__(self, "ignore_elements", tuple(tag.lower() for tag in self.ignore_elements))
        object.__setattr__(self, "custom_rules", tuple(self.custom_rules))

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the names of all option fields."""
        return frozenset(f.name for f in fields(cls))
