"""Test utilities for the markextract test suite.

This module provides sample email bodies and helpers for validating
Markdown output.
"""

import re

GMAIL_REPLY_HTML = (
    '<div class="gmail_default">'
    "<div>Hi Bob,</div>"
    "<div>Sounds good, see you <b>Friday</b>.</div>"
    "</div>"
    '<div class="gmail_signature">Best regards,<br>Ann</div>'
    '<div class="gmail_quote">'
    '<div class="gmail_attr">On Mon, Jan 6, 2025 at 9:00 AM Bob Smith wrote:</div>'
    '<blockquote class="gmail_quote" style="margin:0 0 0 .8ex;border-left:1px #ccc solid;padding-left:1ex">'
    "Lunch on Friday?"
    "</blockquote>"
    "</div>"
)

GMAIL_REPLY_MARKDOWN = (
    "Hi Bob,\n"
    "Sounds good, see you **Friday**.\n"
    "\n"
    "---\n"
    "Best regards,\n"
    "Ann\n"
    "\n"
    "> On Mon, Jan 6, 2025 at 9:00 AM Bob Smith wrote:\n"
    ">\n"
    "> > Lunch on Friday?\n"
)

OUTLOOK_EMAIL_HTML = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns:o="urn:schemas-microsoft-com:office:office" xmlns:w="urn:schemas-microsoft-com:office:word">
<head>
<meta name="Generator" content="Microsoft Word 15 (filtered medium)">
<!--[if gte mso 9]><xml><o:OfficeDocumentSettings><o:AllowPNG/></o:OfficeDocumentSettings></xml><![endif]-->
<title>Quarterly numbers</title>
</head>
<body lang="EN-US">
<div class="WordSection1">
<p class="MsoNormal"><span style="mso-fareast-font-family:Calibri;font-weight:bold">Quarterly numbers</span><o:p></o:p></p>
<p class="MsoNormal">Revenue is <span style="color:red">down</span> this quarter.<o:p></o:p></p>
<p class="MsoNormal">Thanks,<o:p></o:p></p>
<p class="MsoNormal">Ann<o:p></o:p></p>
</div>
</body>
</html>
"""

OUTLOOK_EMAIL_MARKDOWN = "**Quarterly numbers**\n\nRevenue is <mark>down</mark> this quarter.\n\nThanks,\n\nAnn\n"

_ATX_HEADING = re.compile(r"^#{1,6}\S")


def assert_markdown_valid(markdown: str) -> None:
    """Check the normalization guarantees of converted Markdown.

    - no run of more than one blank line
    - no trailing whitespace on any line
    - ATX headings have a space after the hashes
    - non-empty output ends with exactly one newline

    Raises
    ------
    AssertionError
        If any guarantee is violated

    """
    assert "\n\n\n" not in markdown, f"Blank line run in {markdown!r}"
    in_fence = False
    for line in markdown.split("\n"):
        if line.startswith("```"):
            in_fence = not in_fence
        assert line == line.rstrip(), f"Trailing whitespace on {line!r}"
        if not in_fence:
            assert not _ATX_HEADING.match(line), f"Heading without space: {line!r}"
    if markdown:
        assert markdown.endswith("\n") and not markdown.endswith("\n\n"), f"Bad line ending in {markdown!r}"
