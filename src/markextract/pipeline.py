#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/pipeline.py
"""End-to-end conversion of one HTML document.

``MarkdownPipeline.convert`` runs these stages in order:

1. preprocess: strip ``<script>``/``<style>`` blocks, run the Outlook
   cleanup (when enabled), decode entities and collapse whitespace (unless
   preserving it)
2. parse: build a ``Document`` (degrading to plain text if parsing fails)
3. detect: classify the document as email content or not
4. metadata: title, email headers, images and links
5. convert: render the body (or the whole document without a body)
6. postprocess: collapse blank-line runs, trim, normalize headings

Any exception raised by a stage is re-raised as ``ConversionError``.
Per-call converter state is cleared afterwards whether or not the
conversion succeeded.
"""

from __future__ import annotations

import logging
import re

from markextract.converter import TreeConverter
from markextract.dom import Document, parse_html
from markextract.email_utils import detect_email_context, extract_email_headers, is_inline_image, process_outlook_html
from markextract.exceptions import ConversionError
from markextract.options import ConversionOptions
from markextract.results import ConversionMetadata, ConversionResult, EmailContext, ImageInfo, LinkInfo
from markextract.utils.escape import decode_entities
from markextract.utils.text import collapse_blank_lines, collapse_whitespace, fix_markdown_formatting

logger = logging.getLogger(__name__)

_SCRIPT_STYLE_BLOCK = re.compile(r"<(script|style)[^>]*>[\s\S]*?</\1>", re.IGNORECASE)


class MarkdownPipeline:
    """Convert HTML documents to Markdown with one set of options.

    A pipeline may be reused for any number of documents; each ``convert``
    call parses its own tree and starts from fresh converter state.

    Parameters
    ----------
    options : ConversionOptions, optional
        Conversion options; defaults apply when omitted

    Examples
    --------
        >>> MarkdownPipeline().convert("<h1>Hi</h1><p>Hello <b>world</b></p>").markdown
        '# Hi\\n\\nHello **world**\\n'

    """

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()
        self.converter = TreeConverter(self.options)
        self.email_context = EmailContext()

    def convert(self, html: str) -> ConversionResult:
        """Convert one HTML document.

        Parameters
        ----------
        html : str
            HTML markup, well-formed or not

        Returns
        -------
        ConversionResult
            Markdown and extracted metadata

        Raises
        ------
        ConversionError
            If any stage fails

        """
        stage = "preprocess"
        try:
            cleaned = self.preprocess(html)

            stage = "parse"
            document = parse_html(cleaned, self.options.html_parser)

            stage = "detect"
            self.email_context = detect_email_context(document)

            stage = "metadata"
            metadata = self.extract_metadata(document)

            stage = "convert"
            root = document.body or document.root
            markdown = self.converter.convert(root, self.email_context.is_email_content)

            stage = "postprocess"
            return ConversionResult(markdown=self.postprocess(markdown), metadata=metadata)
        except Exception as e:
            logger.debug("Conversion failed during %s stage", stage, exc_info=True)
            raise ConversionError(
                f"HTML to Markdown conversion failed: {e}", conversion_stage=stage, original_error=e
            ) from e
        finally:
            self.cleanup()

    def preprocess(self, html: str) -> str:
        processed = _SCRIPT_STYLE_BLOCK.sub("", html)
        if self.options.handle_outlook_specific:
            processed = process_outlook_html(processed)
        processed = decode_entities(processed)
        if not self.options.preserve_whitespace:
            processed = collapse_whitespace(processed)
        return processed

    def extract_metadata(self, document: Document) -> ConversionMetadata:
        """Collect title, email headers, images and links from ``document``."""
        metadata = ConversionMetadata()

        title = document.title
        if title is not None:
            metadata.title = title.text_content.strip()

        if self.options.preserve_email_headers and self.email_context.has_email_headers:
            metadata.email_headers = extract_email_headers(document)

        for image in document.find_all("img"):
            metadata.images.append(
                ImageInfo(
                    src=image.get_attribute("src") or "",
                    alt=image.get_attribute("alt") or "",
                    title=image.get_attribute("title") or "",
                    is_inline=is_inline_image(image),
                )
            )

        for link in document.find_all("a"):
            href = link.get_attribute("href") or ""
            if not href:
                continue
            metadata.links.append(
                LinkInfo(
                    href=href,
                    text=link.text_content.strip(),
                    title=link.get_attribute("title") or "",
                    is_email=href.startswith("mailto:"),
                )
            )
        return metadata

    def postprocess(self, markdown: str) -> str:
        """Normalize rendered Markdown.

        Blank-line runs are collapsed to a single blank line. With
        ``trim_whitespace`` the result is trimmed and, when non-empty, ends
        with exactly one newline. Headings are then normalized by
        ``fix_markdown_formatting``.
        """
        processed = collapse_blank_lines(markdown)
        if self.options.trim_whitespace:
            processed = processed.strip()
            if processed:
                processed += "\n"
        return fix_markdown_formatting(processed)

    def cleanup(self) -> None:
        self.converter.cleanup()
        self.email_context = EmailContext()
