#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/cli.py
"""Command-line interface for markextract.

Examples
--------
Convert a file to stdout:
    $ markextract page.html

Convert an email body read from stdin, writing the JSON result:
    $ cat message.html | markextract - --email --metadata

Write to a file, dropping data tables:
    $ markextract page.html --table-handling remove --out page.md

Use environment variables for defaults:
    $ export MARKEXTRACT_LINK_STYLE=text
    $ markextract page.html
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from markextract.api import email_to_markdown, html_to_markdown
from markextract.config import load_options
from markextract.constants import CODE_BLOCK_STYLES, LINK_STYLES, TABLE_HANDLING_MODES
from markextract.exceptions import MarkextractError
from markextract.logging_utils import configure_logging

logger = logging.getLogger(__name__)

# CLI flag destination -> ConversionOptions field
_OPTION_ARGUMENTS = {
    "bullet_marker": "bullet_list_marker",
    "code_block_style": "code_block_style",
    "table_handling": "table_handling",
    "link_style": "link_style",
    "preserve_whitespace": "preserve_whitespace",
}


def _get_version() -> str:
    """Get the installed version of markextract."""
    try:
        from importlib.metadata import version

        return version("markextract")
    except Exception:
        return "unknown"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="markextract",
        description="Convert HTML documents and HTML email bodies to Markdown.",
    )
    parser.add_argument("input", nargs="?", default="-", help="HTML file to convert, or '-' for stdin (default)")
    parser.add_argument("--out", "-o", help="Write output to this file instead of stdout")
    parser.add_argument("--email", action="store_true", help="Treat the input as an email body")
    parser.add_argument(
        "--metadata", action="store_true", help="Print the full result (markdown and metadata) as JSON"
    )
    parser.add_argument(
        "--rich", action="store_true", help="Render the Markdown in the terminal (requires the 'rich' extra)"
    )
    parser.add_argument("--version", action="version", version=f"markextract {_get_version()}")

    config_group = parser.add_argument_group("configuration")
    config_group.add_argument("--config", help="Configuration file (.toml, .yaml, .json or pyproject.toml)")
    config_group.add_argument("--no-config", action="store_true", help="Do not search for a configuration file")

    options_group = parser.add_argument_group("conversion options")
    options_group.add_argument("--bullet-marker", help="Marker for unordered list items")
    options_group.add_argument("--code-block-style", choices=CODE_BLOCK_STYLES, help="How <pre> blocks are rendered")
    options_group.add_argument("--table-handling", choices=TABLE_HANDLING_MODES, help="What to do with data tables")
    options_group.add_argument("--link-style", choices=LINK_STYLES, help="Render links inline or as bare text")
    options_group.add_argument(
        "--preserve-whitespace",
        action="store_true",
        default=None,
        help="Keep whitespace as-is and skip Markdown escaping",
    )

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: WARNING)",
    )
    logging_group.add_argument("--log-file", help="Also append log output to this file")
    logging_group.add_argument("--trace", action="store_true", help="Verbose log format with timestamps")
    return parser


def _option_overrides(parsed_args: argparse.Namespace) -> dict[str, Any]:
    overrides = {}
    for dest, field_name in _OPTION_ARGUMENTS.items():
        value = getattr(parsed_args, dest)
        if value is not None:
            overrides[field_name] = value
    return overrides


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def check_rich_available() -> bool:
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def should_use_rich_output(parsed_args: argparse.Namespace) -> bool:
    """Rich rendering applies to bare Markdown written to an interactive terminal."""
    if not parsed_args.rich or parsed_args.out or parsed_args.metadata:
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(callable(isatty) and isatty())


def print_rich_markdown(markdown: str) -> None:
    from rich.console import Console
    from rich.markdown import Markdown

    Console().print(Markdown(markdown))


def main(args: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, parsed_args.log_file, parsed_args.trace)

    if parsed_args.rich and not check_rich_available():
        print("Error: Rich library not installed. Install with: pip install markextract[rich]", file=sys.stderr)
        return 1

    try:
        html = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    try:
        options = load_options(
            config_path=parsed_args.config,
            discover=not parsed_args.no_config,
            **_option_overrides(parsed_args),
        )
        convert = email_to_markdown if parsed_args.email else html_to_markdown
        result = convert(html, options)
    except MarkextractError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed_args.metadata:
        output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        output = result.markdown

    if parsed_args.out:
        try:
            output_path = Path(parsed_args.out)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        logger.info("Converted %s -> %s", parsed_args.input, output_path)
    elif should_use_rich_output(parsed_args):
        print_rich_markdown(output)
    else:
        sys.stdout.write(output)
    return 0
