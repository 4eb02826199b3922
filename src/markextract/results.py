#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/results.py
"""Result and context types produced by the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ClientType(str, Enum):
    """Mail client family that produced an HTML email body."""

    GMAIL = "gmail"
    OUTLOOK = "outlook"
    YAHOO = "yahoo"
    APPLE = "apple"
    THUNDERBIRD = "thunderbird"
    OTHER = "other"


@dataclass(frozen=True)
class EmailContext:
    """Email classification of a parsed document.

    Computed once per document and read-only afterwards. Only
    ``is_email_content`` affects rendering (it enables the email rule table);
    the other flags are informational.
    """

    is_email_content: bool = False
    has_email_headers: bool = False
    has_signature: bool = False
    has_quoted_content: bool = False
    client_type: ClientType = ClientType.OTHER


@dataclass
class EmailHeaders:
    """Header fields found in an email body.

    ``from_`` carries the ``From`` header (``from`` is a Python keyword).
    """

    from_: str | None = None
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    subject: str | None = None
    date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the headers as a dict, omitting fields that were not found."""
        data: dict[str, Any] = {}
        if self.from_ is not None:
            data["from"] = self.from_
        if self.to:
            data["to"] = list(self.to)
        if self.cc:
            data["cc"] = list(self.cc)
        if self.bcc:
            data["bcc"] = list(self.bcc)
        if self.subject is not None:
            data["subject"] = self.subject
        if self.date is not None:
            data["date"] = self.date
        return data


@dataclass(frozen=True)
class ImageInfo:
    """An ``<img>`` element found in the document."""

    src: str
    alt: str = ""
    title: str = ""
    is_inline: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "alt": self.alt, "title": self.title, "isInline": self.is_inline}


@dataclass(frozen=True)
class LinkInfo:
    """An ``<a href>`` element found in the document."""

    href: str
    text: str = ""
    title: str = ""
    is_email: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"href": self.href, "text": self.text, "title": self.title, "isEmail": self.is_email}


@dataclass
class ConversionMetadata:
    """Structural metadata extracted alongside the Markdown.

    Attributes
    ----------
    title : str or None
        Text of the ``<title>`` element, if any
    email_headers : EmailHeaders or None
        Present only for documents with detected email headers when
        header preservation is enabled
    images : list of ImageInfo
        Every image in document order
    links : list of LinkInfo
        Every link with a non-empty ``href`` in document order
    errors : list of str
        Error messages; only populated for failed items in batch mode

    """

    title: str | None = None
    email_headers: EmailHeaders | None = None
    images: list[ImageInfo] = field(default_factory=list)
    links: list[LinkInfo] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "images": [image.to_dict() for image in self.images],
            "links": [link.to_dict() for link in self.links],
        }
        if self.title is not None:
            data["title"] = self.title
        if self.email_headers is not None:
            data["emailHeaders"] = self.email_headers.to_dict()
        if self.errors:
            data["errors"] = list(self.errors)
        return data


@dataclass
class ConversionResult:
    """Markdown output and metadata of a single conversion."""

    markdown: str
    metadata: ConversionMetadata = field(default_factory=ConversionMetadata)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation using camelCase keys."""
        return {"markdown": self.markdown, "metadata": self.metadata.to_dict()}
