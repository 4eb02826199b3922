"""Integration tests for the full HTML to Markdown pipeline."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import pytest
from hypothesis import given
from hypothesis import strategies as st
from utils import GMAIL_REPLY_MARKDOWN, OUTLOOK_EMAIL_MARKDOWN, assert_markdown_valid

from markextract import ConversionError, ConversionOptions, MarkdownPipeline, html_to_markdown
from markextract.results import ClientType


def _markdown(html, **options):
    return MarkdownPipeline(ConversionOptions(**options)).convert(html).markdown


@pytest.mark.integration
class TestGeneralHtml:
    """Test conversion of ordinary web HTML."""

    def test_heading_and_paragraph(self):
        """Test the basic document shape."""
        assert _markdown("<h1>Hi</h1><p>Hello <b>world</b></p>") == "# Hi\n\nHello **world**\n"

    def test_data_table_exact(self):
        """Test exact pipe table output."""
        html = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"
        assert _markdown(html) == "| A | B |\n| --- | --- |\n| 1 | 2 |\n"

    def test_layout_table_flattened(self):
        """Test that presentation tables lose their table syntax."""
        markdown = _markdown('<table role="presentation"><tr><td><div>Hello</div></td></tr></table>')
        assert markdown == "Hello\n"
        assert "|" not in markdown

    def test_blank_line_runs_collapsed(self):
        """Test that blank-line runs never exceed one blank line."""
        markdown = _markdown("<p>a</p><br><br><br><br><p>b</p>")
        assert markdown == "a\n\nb\n"

    def test_nested_blockquotes(self):
        """Test nested quote depth prefixes."""
        html = "<blockquote>outer<blockquote>inner</blockquote></blockquote>"
        assert _markdown(html) == "> outer\n> > inner\n"

    def test_lists(self):
        """Test ordered, unordered and nested lists with source whitespace."""
        html = """
        <ul>
            <li>Parent
                <ul><li>Child</li></ul>
            </li>
            <li>Sibling</li>
        </ul>
        <ol><li>a</li><li>b</li></ol>
        """
        assert _markdown(html) == "- Parent\n\n  - Child\n- Sibling\n\n1. a\n2. b\n"

    def test_code_block(self):
        """Test fenced code with a language."""
        html = '<pre><code class="language-python">print(1)</code></pre>'
        assert _markdown(html) == "```python\nprint(1)\n```\n"

    def test_definition_list(self):
        """Test definition lists."""
        assert _markdown("<dl><dt>Term</dt><dd>Def</dd></dl>") == "**Term**\n: Def\n"

    def test_code_in_blockquote(self):
        """Test that every line of quoted code carries the quote marker."""
        html = "<blockquote><pre>&gt; make</pre></blockquote>"
        assert _markdown(html, preserve_whitespace=True) == "> ```\n> > make\n> ```\n"

    def test_code_text_escaped(self):
        """Test that inline code text is escaped like surrounding text."""
        assert html_to_markdown("<p><code>a_b</code></p>").markdown == "`a\\_b`\n"

    def test_deeply_nested_markup(self):
        """Test that nesting far beyond the recursion limit still converts."""
        html = "<div>" * 1000 + "deep" + "</div>" * 1000
        assert _markdown(html) == "deep\n"

    def test_scripts_and_styles_removed(self):
        """Test that script and style blocks never reach the output."""
        html = "<style>p { color: red }</style><p>a</p><script>alert('x')</script>"
        assert _markdown(html) == "a\n"

    def test_entities_decoded(self):
        """Test entity decoding before parsing."""
        assert _markdown("<p>Fish &amp; Chips &mdash; 100&#37;</p>") == "Fish & Chips — 100%\n"

    def test_text_escaped(self):
        """Test that literal Markdown characters in text are escaped."""
        assert _markdown("<p>2 * 3 = 6</p><p>1. not a list</p>") == "2 \\* 3 = 6\n\n1\\. not a list\n"

    def test_ignore_elements(self):
        """Test dropping navigation chrome."""
        html = "<nav><a href='/'>Home</a></nav><main><h2>Title</h2><p>Body</p></main><footer>(c)</footer>"
        assert _markdown(html, ignore_elements=("nav", "footer")) == "## Title\n\nBody\n"

    def test_untrimmed_output(self):
        """Test trim_whitespace=False keeps surrounding newlines."""
        assert _markdown("<p>a</p>", trim_whitespace=False) == "\na\n\n"

    def test_empty_output(self):
        """Test that documents without content produce an empty string."""
        assert _markdown("<div><span> </span></div>") == ""

    def test_malformed_html(self):
        """Test that unclosed tags still convert."""
        assert _markdown("<p>Hello <b>world") == "Hello **world**\n"

    def test_degraded_parser(self):
        """Test plain-text fallback when the parser is unavailable."""
        assert _markdown("<p>Hello <b>x</b></p>", html_parser="nonexistent-parser") == "Hello x\n"

    @given(st.text(max_size=200))
    def test_arbitrary_text_never_crashes(self, text):
        """Property: any input converts to normalized Markdown."""
        markdown = html_to_markdown(text or " ").markdown
        assert "\n\n\n" not in markdown
        assert markdown == "" or markdown.endswith("\n")


@pytest.mark.integration
class TestMetadata:
    """Test metadata extraction."""

    def test_title_images_links(self):
        """Test title, image and link collection."""
        html = (
            "<html><head><title> Doc </title></head><body>"
            '<img src="cid:image001.png" alt="logo">'
            '<img src="https://example.com/a.png">'
            '<a href="https://example.com" title="T">E</a>'
            '<a href="">skip</a>'
            '<a href="mailto:a@b.io">a@b.io</a>'
            "</body></html>"
        )
        metadata = html_to_markdown(html).metadata
        assert metadata.title == "Doc"
        assert [(image.src, image.alt, image.is_inline) for image in metadata.images] == [
            ("cid:image001.png", "logo", True),
            ("https://example.com/a.png", "", False),
        ]
        assert [(link.href, link.text, link.title, link.is_email) for link in metadata.links] == [
            ("https://example.com", "E", "T", False),
            ("mailto:a@b.io", "a@b.io", "", True),
        ]

    def test_no_title(self):
        """Test that a missing title stays None."""
        assert html_to_markdown("<p>x</p>").metadata.title is None

    def test_email_headers(self):
        """Test header extraction when header markup is present."""
        html = '<div class="from">Ann</div><div class="subject">Hi</div><p>Body</p>'
        headers = html_to_markdown(html).metadata.email_headers
        assert headers.from_ == "Ann"
        assert headers.subject == "Hi"

    def test_email_headers_disabled(self):
        """Test preserve_email_headers=False."""
        html = '<div class="from">Ann</div><p>Body</p>'
        assert html_to_markdown(html, preserve_email_headers=False).metadata.email_headers is None

    def test_no_headers_without_header_markup(self):
        """Test that plain documents carry no header object."""
        assert html_to_markdown("<p>Body</p>").metadata.email_headers is None

    def test_to_dict(self):
        """Test camelCase serialization of results."""
        data = html_to_markdown('<p><img src="data:image/png;base64,AA" alt="x"></p>').to_dict()
        assert data["markdown"] == "![x](data:image/png;base64,AA)\n"
        assert data["metadata"]["images"] == [
            {"src": "data:image/png;base64,AA", "alt": "x", "title": "", "isInline": True}
        ]
        assert "emailHeaders" not in data["metadata"]
        assert "errors" not in data["metadata"]


@pytest.mark.integration
class TestEmailDocuments:
    """Test documents detected as email content."""

    def test_gmail_reply(self, gmail_reply_html):
        """Test a Gmail reply end to end."""
        pipeline = MarkdownPipeline()
        markdown = pipeline.convert(gmail_reply_html).markdown
        assert markdown == GMAIL_REPLY_MARKDOWN
        assert_markdown_valid(markdown)

    def test_gmail_reply_without_quotes_or_signature(self, gmail_reply_html):
        """Test dropping quotes and signatures."""
        markdown = _markdown(gmail_reply_html, preserve_email_quotes=False, handle_email_signatures=False)
        assert markdown == "Hi Bob,\nSounds good, see you **Friday**.\n"

    def test_outlook_email(self, outlook_email_html):
        """Test an Outlook message end to end."""
        result = html_to_markdown(outlook_email_html)
        assert result.markdown == OUTLOOK_EMAIL_MARKDOWN
        assert result.metadata.title == "Quarterly numbers"
        assert_markdown_valid(result.markdown)

    def test_signature_handling(self):
        """Test signature output with handling on and off."""
        html = '<div class="signature">Best regards, A</div>'
        assert _markdown(html) == "---\nBest regards, A\n"
        assert _markdown(html, handle_email_signatures=False) == ""

    def test_inline_styles(self):
        """Test styled spans in an email body."""
        html = '<div class="email-body"><span style="font-weight: bold">Due</span> <span style="color: red">today</span></div>'
        assert _markdown(html) == "**Due** <mark>today</mark>\n"
        assert _markdown(html, convert_inline_styles=False) == "Due today\n"

    def test_mailto_autolink(self):
        """Test mailto autolinks and descriptive mailto links."""
        assert _markdown('<a href="mailto:x@y.com">x@y.com</a>') == "<x@y.com>\n"
        assert _markdown('<a href="mailto:x@y.com">Contact</a>') == "[Contact](mailto:x@y.com)\n"

    def test_email_context_reset_after_convert(self, gmail_reply_html):
        """Test that per-call state is cleared after conversion."""
        pipeline = MarkdownPipeline()
        pipeline.convert(gmail_reply_html)
        assert pipeline.email_context.client_type == ClientType.OTHER
        assert not pipeline.email_context.is_email_content
        assert pipeline.converter.state.visited == set()


@pytest.mark.integration
class TestPipelineErrors:
    """Test error wrapping."""

    def test_stage_failure_wrapped(self, monkeypatch):
        """Test that stage exceptions become ConversionError."""

        def explode(document):
            raise RuntimeError("boom")

        monkeypatch.setattr("markextract.pipeline.detect_email_context", explode)
        pipeline = MarkdownPipeline()
        with pytest.raises(ConversionError) as exc_info:
            pipeline.convert("<p>x</p>")

        error = exc_info.value
        assert str(error) == "HTML to Markdown conversion failed: boom"
        assert error.conversion_stage == "detect"
        assert isinstance(error.original_error, RuntimeError)
        assert pipeline.converter.state.visited == set()
