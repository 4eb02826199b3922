#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/api.py
"""Public conversion entry points.

``html_to_markdown`` and ``email_to_markdown`` convert a single document;
``HTMLToMarkdownExtractor`` adds input validation, per-call option
overrides and chunked batch conversion on top of ``MarkdownPipeline``.

Options may be passed as a ``ConversionOptions`` instance, as a mapping of
option names (snake_case or camelCase), or as keyword arguments:

    >>> html_to_markdown("<p>Hi</p>", bullet_list_marker="*").markdown
    'Hi\\n'

"""

from __future__ import annotations

import asyncio
import gc
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Union

from markextract.config import options_from_mapping
from markextract.constants import (
    LARGE_DATA_IMAGE_MIN_LENGTH,
    LARGE_IMAGE_PLACEHOLDER,
    LARGE_SCRIPT_MIN_LENGTH,
    LARGE_STYLE_MIN_LENGTH,
    LONG_ATTRIBUTE_MIN_LENGTH,
    LONG_ATTRIBUTE_PLACEHOLDER,
    MAX_BATCH_SIZE,
)
from markextract.exceptions import MarkextractError, ValidationError
from markextract.options import ConversionOptions
from markextract.pipeline import MarkdownPipeline
from markextract.results import ConversionMetadata, ConversionResult

logger = logging.getLogger(__name__)

OptionsArg = Union[ConversionOptions, Mapping[str, Any], None]

EMAIL_OPTION_DEFAULTS: dict[str, Any] = {
    "preserve_email_headers": True,
    "handle_email_signatures": True,
    "convert_inline_styles": True,
    "preserve_email_quotes": True,
    "handle_outlook_specific": True,
    "table_handling": "convert",
    "link_style": "inlined",
    "trim_whitespace": True,
}

_LARGE_DATA_IMAGE = re.compile(
    rf'<img[^>]*src="data:image/[^"]{{{LARGE_DATA_IMAGE_MIN_LENGTH},}}"[^>]*>', re.IGNORECASE
)
_LARGE_STYLE = re.compile(rf"<style[^>]*>[\s\S]{{{LARGE_STYLE_MIN_LENGTH},}}?</style>", re.IGNORECASE)
_LARGE_SCRIPT = re.compile(rf"<script[^>]*>[\s\S]{{{LARGE_SCRIPT_MIN_LENGTH},}}?</script>", re.IGNORECASE)
_LONG_ATTRIBUTE = re.compile(rf'(\w+)="[^"]{{{LONG_ATTRIBUTE_MIN_LENGTH},}}"')


def _resolve_options(
    options: OptionsArg, overrides: Mapping[str, Any], base: ConversionOptions | None = None
) -> ConversionOptions:
    if isinstance(options, ConversionOptions):
        resolved = options
    elif options is None:
        resolved = base or ConversionOptions()
    elif isinstance(options, Mapping):
        resolved = options_from_mapping(options, base)
    else:
        raise ValidationError(
            f"options must be ConversionOptions or a mapping, got {type(options).__name__}",
            parameter_name="options",
            parameter_value=options,
        )
    if overrides:
        resolved = options_from_mapping(overrides, resolved)
    return resolved


def _validate_html(html: Any) -> None:
    if not isinstance(html, str) or not html:
        raise ValidationError(
            "Invalid HTML input: must be a non-empty string", parameter_name="html", parameter_value=html
        )


def remove_memory_intensive_elements(html: str) -> str:
    """Drop or shorten the largest payloads commonly embedded in email HTML.

    - ``<img>`` tags with a ``data:image/...`` source of 1000+ characters
      are replaced by a ``[Large embedded image removed]`` placeholder
    - ``<style>`` blocks of 5000+ characters and ``<script>`` blocks of
      1000+ characters are removed
    - double-quoted attribute values of 1000+ characters are replaced by
      ``[Long attribute truncated]``

    Parameters
    ----------
    html : str
        Raw HTML

    Returns
    -------
    str
        HTML with oversized payloads removed

    """
    html = _LARGE_DATA_IMAGE.sub(LARGE_IMAGE_PLACEHOLDER, html)
    html = _LARGE_STYLE.sub("", html)
    html = _LARGE_SCRIPT.sub("", html)
    return _LONG_ATTRIBUTE.sub(rf'\1="{LONG_ATTRIBUTE_PLACEHOLDER}"', html)


class HTMLToMarkdownExtractor:
    """Validated, reusable HTML to Markdown converter.

    Parameters
    ----------
    options : ConversionOptions or mapping, optional
        Conversion options
    **kwargs
        Individual option overrides applied on top of ``options``

    Raises
    ------
    ValidationError
        If the options are invalid

    Examples
    --------
        >>> extractor = HTMLToMarkdownExtractor(table_handling="remove")
        >>> extractor.convert("<p>Contact <a href='mailto:a@b.io'>a@b.io</a></p>").markdown
        'Contact <a@b.io>\\n'

    """

    MAX_BATCH_SIZE = MAX_BATCH_SIZE

    def __init__(self, options: OptionsArg = None, **kwargs: Any):
        self.options = _resolve_options(options, kwargs)
        self.pipeline = MarkdownPipeline(self.options)

    def __enter__(self) -> HTMLToMarkdownExtractor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    def convert(self, html: str) -> ConversionResult:
        """Convert one HTML document.

        Raises
        ------
        ValidationError
            If ``html`` is empty or not a string
        ConversionError
            If the pipeline fails

        """
        _validate_html(html)
        return self.pipeline.convert(html)

    def convert_with_options(self, html: str, options: OptionsArg = None, **kwargs: Any) -> ConversionResult:
        """Convert one document with one-off options, leaving this extractor's options unchanged."""
        _validate_html(html)
        return MarkdownPipeline(_resolve_options(options, kwargs, self.options)).convert(html)

    def _convert_item(self, html: str) -> ConversionResult:
        try:
            return self.convert(html)
        except MarkextractError as e:
            logger.warning("Batch item failed: %s", e)
            return ConversionResult(markdown="", metadata=ConversionMetadata(errors=[str(e)]))

    def _chunks(self, htmls: Iterable[str]) -> Iterator[list[str]]:
        chunk: list[str] = []
        for html in htmls:
            chunk.append(html)
            if len(chunk) >= self.MAX_BATCH_SIZE:
                yield chunk
                chunk = []
        if chunk:
            yield chunk

    def iter_batch(self, htmls: Iterable[str]) -> Iterator[ConversionResult]:
        """Convert documents lazily, one chunk of ``MAX_BATCH_SIZE`` at a time.

        Failed items yield a result with empty Markdown and the error message
        in ``metadata.errors``; the batch continues.
        """
        for number, chunk in enumerate(self._chunks(htmls), start=1):
            logger.debug("Converting batch chunk %d (%d documents)", number, len(chunk))
            yield from (self._convert_item(html) for html in chunk)
            gc.collect()

    async def convert_batch(self, htmls: Iterable[str]) -> list[ConversionResult]:
        """Convert many documents, yielding to the event loop between chunks.

        Results are returned in input order. Failed items produce a result
        with empty Markdown and the error message in ``metadata.errors``.
        """
        results: list[ConversionResult] = []
        for number, chunk in enumerate(self._chunks(htmls), start=1):
            logger.debug("Converting batch chunk %d (%d documents)", number, len(chunk))
            results.extend(self._convert_item(html) for html in chunk)
            gc.collect()
            await asyncio.sleep(0)
        return results

    def dispose(self) -> None:
        """Release cached converter state."""
        self.pipeline.cleanup()


def html_to_markdown(html: str, options: OptionsArg = None, **kwargs: Any) -> ConversionResult:
    """Convert an HTML document to Markdown.

    Parameters
    ----------
    html : str
        HTML markup
    options : ConversionOptions or mapping, optional
        Conversion options
    **kwargs
        Individual option overrides

    Returns
    -------
    ConversionResult
        Markdown and metadata

    Raises
    ------
    ValidationError
        If the input or options are invalid
    ConversionError
        If the conversion fails

    """
    return HTMLToMarkdownExtractor(options, **kwargs).convert(html)


def email_to_markdown(html: str, options: OptionsArg = None, **kwargs: Any) -> ConversionResult:
    """Convert an HTML email body to Markdown.

    Oversized embedded payloads are removed first (see
    ``remove_memory_intensive_elements``). All email handling options are
    enabled unless ``options``/``kwargs`` say otherwise; a full
    ``ConversionOptions`` instance is used as given.
    """
    _validate_html(html)
    resolved = _resolve_options(options, kwargs, ConversionOptions(**EMAIL_OPTION_DEFAULTS))
    return HTMLToMarkdownExtractor(resolved).convert(remove_memory_intensive_elements(html))
