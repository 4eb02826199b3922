#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the markextract library.

This module centralizes the fixed tables, keyword lists and default values
used across the HTML-to-Markdown pipeline. Several of these lists drive
best-effort heuristics (email detection, signature and quote detection,
table header inference); callers rely on their exact contents, so they are
kept here as data instead of being spread through the rule code.

Constants are organized by category:
1. Type Definitions - Literal types for options
2. Markdown Formatting Defaults
3. Entity Tables
4. Element Classification
5. Email Heuristics
6. Table Heuristics
7. Batch and Memory Limits
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

CodeBlockStyle = Literal["fenced", "indented"]
LinkStyle = Literal["inlined", "text"]
TableHandling = Literal["convert", "remove", "preserve"]
HtmlParser = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# Markdown Formatting Defaults
# =============================================================================

DEFAULT_BULLET_LIST_MARKER = "-"
DEFAULT_CODE_BLOCK_STYLE: CodeBlockStyle = "fenced"
DEFAULT_FENCE = "```"
DEFAULT_EM_DELIMITER = "*"
DEFAULT_STRONG_DELIMITER = "**"
DEFAULT_LINK_STYLE: LinkStyle = "inlined"
DEFAULT_TABLE_HANDLING: TableHandling = "convert"
DEFAULT_HTML_PARSER: HtmlParser = "html.parser"

CODE_BLOCK_STYLES = ("fenced", "indented")
LINK_STYLES = ("inlined", "text")
TABLE_HANDLING_MODES = ("convert", "remove", "preserve")

INDENTED_CODE_PREFIX = "    "

# =============================================================================
# Entity Tables
# =============================================================================

# Named entities decoded by decode_entities. Anything not listed here is left
# untouched; numeric references are handled separately.
NAMED_ENTITIES: dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
    "hellip": "...",
    "mdash": "—",
    "ndash": "–",
    "rsquo": "'",
    "lsquo": "'",
    "rdquo": '"',
    "ldquo": '"',
    "copy": "©",
    "reg": "®",
    "trade": "™",
    "sect": "§",
    "para": "¶",
    "dagger": "†",
    "Dagger": "‡",
    "bull": "•",
    "prime": "′",
    "Prime": "″",
    "oline": "‾",
    "frasl": "⁄",
    "weierp": "℘",
    "image": "ℑ",
    "real": "ℜ",
    "alefsym": "ℵ",
}

MAX_UNICODE_CODEPOINT = 0x10FFFF
SURROGATE_RANGE = range(0xD800, 0xE000)

# Punctuation that unescape_markdown strips a leading backslash from
MARKDOWN_UNESCAPABLE_CHARS = "\\`*_{}[]()#+-.!|~>"

# =============================================================================
# Element Classification
# =============================================================================

BLOCK_ELEMENTS = frozenset(
    {
        "div", "p", "h1", "h2", "h3", "h4", "h5", "h6",
        "blockquote", "pre", "ul", "ol", "li", "table",
        "tr", "td", "th", "thead", "tbody", "tfoot",
        "section", "article", "header", "footer", "main",
        "aside", "nav", "form", "fieldset", "hr",
    }
)  # fmt: skip

INLINE_ELEMENTS = frozenset(
    {
        "span", "a", "strong", "b", "em", "i", "u", "s",
        "strike", "del", "ins", "mark", "small", "sub",
        "sup", "code", "kbd", "samp", "var", "abbr",
        "acronym", "cite", "dfn", "time", "img",
    }
)  # fmt: skip

# =============================================================================
# Email Heuristics
# =============================================================================

EMAIL_INDICATOR_SELECTORS = (
    '[id*="gmail"]',
    '[class*="gmail"]',
    '[id*="outlook"]',
    '[class*="outlook"]',
    '[class*="mso"]',
    '[class*="yahoo"]',
    '[id*="yahoo"]',
    '[class*="signature"]',
    '[class*="quoted"]',
    'blockquote[type="cite"]',
    '[class*="email"]',
    '[id*="email"]',
)

EMAIL_PHRASES = (
    "from:",
    "to:",
    "subject:",
    "sent from",
    "best regards",
    "sincerely",
    "kind regards",
    "thanks",
    "forwarded message",
    "original message",
    "reply to",
    "cc:",
    "bcc:",
)

EMAIL_HEADER_SELECTORS = (
    '[id*="header"]',
    '[class*="header"]',
    '[class*="from"]',
    '[class*="to"]',
    '[class*="subject"]',
    '[class*="date"]',
    '[class*="sender"]',
)

EMAIL_META_SELECTOR = 'meta[name*="email"], meta[property*="email"]'

SIGNATURE_SELECTORS = (
    '[class*="signature"]',
    '[id*="signature"]',
    '[class*="sig"]',
    '[id*="sig"]',
    '[class*="footer"]',
    '[id*="footer"]',
)

SIGNATURE_PATTERNS = (
    r"(?i)best regards,?\s*\n",
    r"(?i)sincerely,?\s*\n",
    r"(?i)kind regards,?\s*\n",
    r"(?i)sent from my \w+",
    r"--\s*\n",
)

QUOTED_SELECTORS = (
    "blockquote",
    '[class*="quoted"]',
    '[class*="gmail_quote"]',
    '[class*="yahoo_quoted"]',
    '[dir="ltr"]',
    '[class*="quote"]',
    '[id*="quote"]',
)

QUOTED_PATTERNS = (
    r"(?m)^>\s",
    r"(?m)wrote:$",
)

# Checked in order; the first client with a matching selector wins
CLIENT_DETECTION_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("gmail", ('[class*="gmail"]', '[id*="gmail"]')),
    ("outlook", ('[class*="outlook"]', '[class*="mso"]', ".WordSection")),
    ("yahoo", ('[class*="yahoo"]', '[id*="yahoo"]')),
    ("apple", ('[class*="apple"]', '[id*="applemail"]')),
    ("thunderbird", ('[class*="thunderbird"]', '[class*="moz"]')),
)

GENERATOR_CLIENTS = ("outlook", "apple", "thunderbird")

# Signature markers, matched as substrings of a div's class, id and text
SIGNATURE_MARKERS = (
    "signature",
    "sig",
    "email-signature",
    "footer",
    "sent from",
    "regards",
    "best regards",
    "sincerely",
)

QUOTED_CLASS_MARKERS = ("quoted", "gmail_quote", "yahoo_quoted")

OUTLOOK_CLASS_MARKERS = ("WordSection", "MsoNormal")

HEADER_FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "from": ("from", "sender"),
    "subject": ("subject",),
    "date": ("date", "sent"),
    "to": ("to", "recipient"),
    "cc": ("cc",),
    "bcc": ("bcc",),
}

# Labels that terminate a plain-text header value
HEADER_TEXT_LABELS = ("from", "to", "cc", "bcc", "subject", "date", "sent")

QUOTE_ATTRIBUTION_PATTERNS = (
    r"(?i)On .+?, .+ wrote:",
    r"(?i)From: .+",
    r"(?i).+ wrote:",
    r"(?i)Sent from .+",
)

IMPORTANT_COLORS = ("red", "#ff0000", "#dc3545", "#d9534f")

INLINE_IMAGE_PREFIXES = ("cid:", "data:", "blob:")
INLINE_IMAGE_MARKERS = ("image001", "image002")

# =============================================================================
# Table Heuristics
# =============================================================================

HEADER_CELL_MAX_LENGTH = 50
TABLE_SEPARATOR_CELL = "---"
EMPTY_TABLE_CELL = " "

# =============================================================================
# Batch and Memory Limits
# =============================================================================

MAX_BATCH_SIZE = 100

LARGE_DATA_IMAGE_MIN_LENGTH = 1000
LARGE_STYLE_MIN_LENGTH = 5000
LARGE_SCRIPT_MIN_LENGTH = 1000
LONG_ATTRIBUTE_MIN_LENGTH = 1000

LARGE_IMAGE_PLACEHOLDER = "[Large embedded image removed]"
LONG_ATTRIBUTE_PLACEHOLDER = "[Long attribute truncated]"

# =============================================================================
# Configuration Discovery
# =============================================================================

CONFIG_FILENAMES = (".markextract.toml", ".markextract.yaml", ".markextract.yml", ".markextract.json")
ENV_PREFIX = "MARKEXTRACT_"
