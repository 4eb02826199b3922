"""markextract - HTML and HTML email to Markdown conversion with metadata extraction.

markextract turns an HTML document, either general web HTML or the HTML body
of an email, into clean Markdown plus structural metadata: the document title,
images, links and, for email bodies, the From/To/Subject/Date headers.

Conversion is a rule-driven tree transform. Each tag is rendered
by the highest-precedence matching rule (caller-supplied custom rules, then
email rules for documents detected as email content, then general rules);
unknown tags pass their content through.

Key Features
------------
- Layout table detection (flattened) versus data tables (pipe tables)
- Mail client awareness: Outlook markup cleanup, Gmail/Yahoo quote wrappers,
  signature blocks, inline-style emphasis
- Email header extraction from markup or plain-text ``From:`` lines
- Graceful degradation to plain-text extraction when parsing fails
- Chunked batch conversion with per-item error reporting

Examples
--------
Basic usage:

    >>> from markextract import html_to_markdown
    >>> result = html_to_markdown("<h1>Hi</h1><p>Hello <b>world</b></p>")
    >>> result.markdown
    '# Hi\\n\\nHello **world**\\n'

Email bodies, given the HTML of a message in ``html``:

    from markextract import email_to_markdown
    result = email_to_markdown(html, handle_email_signatures=False)
    headers = result.metadata.email_headers

Custom rules:

    >>> from markextract import ConversionOptions, CustomRule
    >>> options = ConversionOptions(custom_rules=(CustomRule("aside", "> ${content}"),))

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "1.0.0"

from markextract.api import (
    HTMLToMarkdownExtractor,
    email_to_markdown,
    html_to_markdown,
    remove_memory_intensive_elements,
)
from markextract.config import load_options
from markextract.exceptions import ConfigurationError, ConversionError, MarkextractError, ValidationError
from markextract.options import ConversionOptions, CustomRule
from markextract.pipeline import MarkdownPipeline
from markextract.results import (
    ClientType,
    ConversionMetadata,
    ConversionResult,
    EmailContext,
    EmailHeaders,
    ImageInfo,
    LinkInfo,
)

__all__ = [
    "__version__",
    "ClientType",
    "ConfigurationError",
    "ConversionError",
    "ConversionMetadata",
    "ConversionOptions",
    "ConversionResult",
    "CustomRule",
    "EmailContext",
    "EmailHeaders",
    "HTMLToMarkdownExtractor",
    "ImageInfo",
    "LinkInfo",
    "MarkdownPipeline",
    "MarkextractError",
    "ValidationError",
    "email_to_markdown",
    "html_to_markdown",
    "load_options",
    "remove_memory_intensive_elements",
]
