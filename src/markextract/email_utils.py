#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/email_utils.py
"""Heuristics for HTML produced by mail clients.

This module answers the questions the converter asks about email bodies:

- Is this document an email at all, and which client produced it?
  (``detect_email_context``)
- Which header fields (From, To, Subject, Date ...) does it show?
  (``extract_email_headers``)
- Is a given element a signature block, a quoted reply or an Outlook
  wrapper? (``is_signature_element``, ``is_quoted_element``,
  ``is_outlook_element``)

All classifiers are keyword and class-name heuristics. Their selector and
phrase lists live in ``markextract.constants`` and are intentionally kept
exactly as they are: callers depend on the precise classification, false
positives included.

``process_outlook_html`` is a pure text rewrite run before parsing to strip
Office markup that would otherwise leak into the Markdown.
"""

from __future__ import annotations

import logging
import re

from markextract.constants import (
    CLIENT_DETECTION_RULES,
    EMAIL_HEADER_SELECTORS,
    EMAIL_INDICATOR_SELECTORS,
    EMAIL_META_SELECTOR,
    EMAIL_PHRASES,
    GENERATOR_CLIENTS,
    HEADER_FIELD_SYNONYMS,
    HEADER_TEXT_LABELS,
    IMPORTANT_COLORS,
    INLINE_IMAGE_MARKERS,
    INLINE_IMAGE_PREFIXES,
    OUTLOOK_CLASS_MARKERS,
    QUOTE_ATTRIBUTION_PATTERNS,
    QUOTED_CLASS_MARKERS,
    QUOTED_PATTERNS,
    QUOTED_SELECTORS,
    SIGNATURE_MARKERS,
    SIGNATURE_PATTERNS,
    SIGNATURE_SELECTORS,
)
from markextract.dom import Document, Node
from markextract.results import ClientType, EmailContext, EmailHeaders

logger = logging.getLogger(__name__)

_OUTLOOK_CLEANUPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"<\?xml[^>]*>", re.IGNORECASE), ""),
    (re.compile(r'\s*xmlns:[^=\s>]*="[^"]*"', re.IGNORECASE), ""),
    (re.compile(r"<o:p\b[^>]*>", re.IGNORECASE), "<p>"),
    (re.compile(r"</o:p>", re.IGNORECASE), "</p>"),
    (re.compile(r"<!--\[if[^>]*>[\s\S]*?<!\[endif\]-->", re.IGNORECASE), ""),
    (re.compile(r"\bmso-[^;:\"'>]+:[^;\"'>]+;?", re.IGNORECASE), ""),
    (re.compile(r"(?<![\w-])-webkit-[^;:\"'>]+:[^;\"'>]+;?", re.IGNORECASE), ""),
    (re.compile(r'<div[^>]*class="?WordSection\d*"?[^>]*>', re.IGNORECASE), "<div>"),
    (re.compile(r'<p[^>]*class="?MsoNormal"?[^>]*>', re.IGNORECASE), "<p>"),
    (re.compile(r"<span[^>]*mso[^>]*>\s*</span>", re.IGNORECASE), ""),
)

_SIGNATURE_PATTERNS = tuple(re.compile(pattern) for pattern in SIGNATURE_PATTERNS)
_QUOTED_PATTERNS = tuple(re.compile(pattern) for pattern in QUOTED_PATTERNS)
_ATTRIBUTION_PATTERNS = tuple(re.compile(pattern) for pattern in QUOTE_ATTRIBUTION_PATTERNS)

_LABEL_ALTERNATION = "|".join(HEADER_TEXT_LABELS)
_TEXT_HEADER_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        label,
        re.compile(rf"\b{label}:\s*(.+?)(?=\s*\b(?:{_LABEL_ALTERNATION}):|\n|$)", re.IGNORECASE),
    )
    for label in ("from", "to", "subject", "date", "sent")
)

_NAMED_ADDRESS = re.compile(r"^(.+?)\s*<([^>]+)>$")
_BARE_ADDRESS = re.compile(r"^([^@]+@[^@]+)$")


def _body_text(document: Document) -> str:
    body = document.body or document.root
    return body.text_content


def _matches_any(document: Document, selectors: tuple[str, ...] | list[str]) -> bool:
    return any(document.query_selector(selector) is not None for selector in selectors)


# =============================================================================
# Document classification
# =============================================================================


def detect_email_context(document: Document) -> EmailContext:
    """Classify ``document`` as email content and gather email traits.

    A document is email content when any of the email indicator selectors
    matches (client-specific class/id names, signature or quote markers,
    ``blockquote[type="cite"]``) or when its body text contains one of the
    common email phrases (``from:``, ``sent from``, ``best regards`` ...).

    Parameters
    ----------
    document : Document
        Parsed document

    Returns
    -------
    EmailContext
        Classification snapshot for the document

    """
    is_email = _matches_any(document, EMAIL_INDICATOR_SELECTORS) or detect_email_by_content(document)
    context = EmailContext(
        is_email_content=is_email,
        has_email_headers=has_email_headers(document),
        has_signature=has_signature(document),
        has_quoted_content=has_quoted_content(document),
        client_type=detect_client_type(document),
    )
    logger.debug("Detected email context: %s", context)
    return context


def detect_email_by_content(document: Document) -> bool:
    """Return True when the body text contains a typical email phrase."""
    text = _body_text(document).lower()
    return any(phrase in text for phrase in EMAIL_PHRASES)


def has_email_headers(document: Document) -> bool:
    if _matches_any(document, EMAIL_HEADER_SELECTORS):
        return True
    return bool(document.query_selector_all(EMAIL_META_SELECTOR))


def has_signature(document: Document) -> bool:
    if _matches_any(document, SIGNATURE_SELECTORS):
        return True
    text = _body_text(document)
    return any(pattern.search(text) for pattern in _SIGNATURE_PATTERNS)


def has_quoted_content(document: Document) -> bool:
    if _matches_any(document, QUOTED_SELECTORS):
        return True
    text = _body_text(document)
    return any(pattern.search(text) for pattern in _QUOTED_PATTERNS)


def detect_client_type(document: Document) -> ClientType:
    """Identify the mail client family.

    Clients are checked in fixed priority order (Gmail, Outlook, Yahoo,
    Apple Mail, Thunderbird); the first one with a matching selector wins.
    Otherwise a ``<meta name="generator">`` tag is inspected.
    """
    for client, selectors in CLIENT_DETECTION_RULES:
        if _matches_any(document, selectors):
            return ClientType(client)

    meta = document.query_selector('meta[name="generator"]')
    generator = (meta.get_attribute("content") or "").lower() if meta is not None else ""
    for client in GENERATOR_CLIENTS:
        if client in generator:
            return ClientType(client)
    return ClientType.OTHER


# =============================================================================
# Header extraction
# =============================================================================


def parse_email_list(value: str) -> list[str]:
    """Split an address list on ``,``/``;`` keeping only entries with an ``@``.

    Examples
    --------
        >>> parse_email_list("Ann <ann@example.com>; bob@example.com, nobody")
        ['Ann ann@example.com', 'bob@example.com']

    """
    addresses = (re.sub(r"[<>]", "", part.strip()) for part in re.split(r"[,;]", value))
    return [address for address in addresses if "@" in address]


def _extract_header_value(document: Document, field_names: tuple[str, ...]) -> str | None:
    for name in field_names:
        element = document.query_selector(f'[class*="{name}"]')
        if element is not None and element.text_content.strip():
            return element.text_content.strip()

        element = document.query_selector(f'[id*="{name}"]')
        if element is not None and element.text_content.strip():
            return element.text_content.strip()

        element = document.query_selector(f"[data-{name}]")
        if element is not None:
            value = (element.get_attribute(f"data-{name}") or "").strip()
            if value:
                return value
    return None


def _extract_headers_from_text(document: Document, headers: EmailHeaders) -> None:
    text = _body_text(document)
    for label, pattern in _TEXT_HEADER_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        value = match.group(1).strip()
        if not value:
            continue
        if label == "from" and headers.from_ is None:
            headers.from_ = value
        elif label == "to" and not headers.to:
            headers.to = parse_email_list(value)
        elif label == "subject" and headers.subject is None:
            headers.subject = value
        elif label in ("date", "sent") and headers.date is None:
            headers.date = value


def extract_email_headers(document: Document) -> EmailHeaders:
    """Extract From/To/Cc/Bcc/Subject/Date from an email body.

    Header values are first looked up structurally: an element whose class
    or id contains the field name (or a synonym such as ``sender`` or
    ``recipient``), or a ``data-<field>`` attribute. When neither ``from``
    nor ``subject`` is found that way, ``field: value`` patterns in the body
    text are used instead.

    Parameters
    ----------
    document : Document
        Parsed document

    Returns
    -------
    EmailHeaders
        Extracted headers; missing fields stay ``None`` / empty

    """
    headers = EmailHeaders(
        from_=_extract_header_value(document, HEADER_FIELD_SYNONYMS["from"]),
        subject=_extract_header_value(document, HEADER_FIELD_SYNONYMS["subject"]),
        date=_extract_header_value(document, HEADER_FIELD_SYNONYMS["date"]),
    )
    for field_name in ("to", "cc", "bcc"):
        value = _extract_header_value(document, HEADER_FIELD_SYNONYMS[field_name])
        if value:
            setattr(headers, field_name, parse_email_list(value))

    if headers.from_ is None and headers.subject is None:
        _extract_headers_from_text(document, headers)
    return headers


def parse_email_address(value: str) -> dict[str, str]:
    """Split ``"Name <address>"`` into its parts.

    Examples
    --------
        >>> parse_email_address("Ann Lee <ann@example.com>")
        {'name': 'Ann Lee', 'email': 'ann@example.com'}
        >>> parse_email_address("ann@example.com")
        {'email': 'ann@example.com'}

    """
    value = value.strip()
    match = _NAMED_ADDRESS.match(value)
    if match:
        return {"name": match.group(1).strip().strip('"'), "email": match.group(2).strip()}
    match = _BARE_ADDRESS.match(value)
    if match:
        return {"email": match.group(1).strip()}
    return {"email": value}


# =============================================================================
# Markup cleanup and element predicates
# =============================================================================


def process_outlook_html(html: str) -> str:
    """Strip Office-specific markup from ``html``.

    Removes XML prologues, ``xmlns`` declarations, conditional comment
    blocks (``<!--[if ...]>...<![endif]-->``), ``mso-*`` and ``-webkit-*``
    style declarations and empty ``mso`` spans; rewrites ``<o:p>`` wrappers
    to ``<p>`` and ``WordSection``/``MsoNormal`` containers to plain
    ``<div>``/``<p>`` tags.
    """
    for pattern, replacement in _OUTLOOK_CLEANUPS:
        html = pattern.sub(replacement, html)
    return html


def is_inline_image(image: Node) -> bool:
    """Return True for embedded or content-id images (``cid:``, ``data:``, ``blob:``, ``image001``...)."""
    src = image.get_attribute("src") or ""
    if src.startswith(INLINE_IMAGE_PREFIXES):
        return True
    return any(marker in src for marker in INLINE_IMAGE_MARKERS)


def is_signature_element(element: Node) -> bool:
    """Return True when ``element`` looks like an email signature block.

    Any signature marker ("signature", "regards", "sent from", ...) found in
    the class, id or text content qualifies, including text of nested
    elements.
    """
    classes = (element.get_attribute("class") or "").lower()
    element_id = (element.get_attribute("id") or "").lower()
    text = element.text_content.lower()
    return any(marker in classes or marker in element_id or marker in text for marker in SIGNATURE_MARKERS)


def is_quoted_element(element: Node) -> bool:
    classes = element.get_attribute("class") or ""
    style = element.get_attribute("style") or ""
    return (
        any(marker in classes for marker in QUOTED_CLASS_MARKERS)
        or "border-left" in style
        or element.get_attribute("dir") == "ltr"
    )


def is_outlook_element(element: Node) -> bool:
    classes = element.get_attribute("class") or ""
    style = element.get_attribute("style") or ""
    return any(marker in classes for marker in OUTLOOK_CLASS_MARKERS) or "mso-" in style


def is_important_color(style: str) -> bool:
    """Return True when a CSS declaration mentions one of the highlight reds."""
    style = style.lower()
    return any(color in style for color in IMPORTANT_COLORS)


def extract_quoted_content(element: Node) -> tuple[str, str | None]:
    """Return the text of a quoted block and its attribution line, if any.

    The attribution is the first match of "On <date>, <name> wrote:",
    "From: ...", "... wrote:" or "Sent from ...".
    """
    content = element.text_content.strip()
    for pattern in _ATTRIBUTION_PATTERNS:
        match = pattern.search(content)
        if match:
            return content, match.group(0)
    return content, None


def clean_email_signature(signature: str) -> str:
    """Drop ``--`` and underscore rule lines from a signature and tidy blank lines."""
    cleaned = re.sub(r"(?m)^--[ \t]*$", "", signature)
    cleaned = re.sub(r"(?m)^_+$", "", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()
