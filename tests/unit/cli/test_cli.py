"""Unit tests for the markextract command-line interface."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import io
import json

import pytest

from markextract.cli import create_parser, main


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text("<h1>Hi</h1><p>Hello <b>world</b></p>", encoding="utf-8")
    return path


@pytest.mark.unit
@pytest.mark.cli
class TestArgumentParsing:
    """Test argument parser construction."""

    def test_defaults(self):
        """Test default argument values."""
        args = create_parser().parse_args([])
        assert args.input == "-"
        assert args.log_level == "WARNING"
        assert args.preserve_whitespace is None
        assert not args.email

    def test_log_level_case_insensitive(self):
        """Test that log levels are upper-cased before validation."""
        assert create_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"

    def test_invalid_choice(self):
        """Test that invalid option choices exit with usage error."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--table-handling", "drop"])


@pytest.mark.unit
@pytest.mark.cli
class TestMain:
    """Test end-to-end CLI runs."""

    def test_convert_file_to_stdout(self, html_file, capsys):
        """Test basic file conversion."""
        assert main([str(html_file), "--no-config"]) == 0
        assert capsys.readouterr().out == "# Hi\n\nHello **world**\n"

    def test_convert_stdin(self, monkeypatch, capsys):
        """Test reading HTML from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("<ul><li>a</li><li>b</li></ul>"))
        assert main(["-", "--no-config", "--bullet-marker", "*"]) == 0
        assert capsys.readouterr().out == "* a\n* b\n"

    def test_metadata_json(self, tmp_path, capsys):
        """Test JSON output with metadata."""
        path = tmp_path / "doc.html"
        path.write_text(
            '<html><head><title>Doc</title></head><body><a href="https://example.com">E</a></body></html>',
            encoding="utf-8",
        )
        assert main([str(path), "--no-config", "--metadata"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["markdown"] == "[E](https://example.com)\n"
        assert data["metadata"]["title"] == "Doc"
        assert data["metadata"]["links"] == [
            {"href": "https://example.com", "text": "E", "title": "", "isEmail": False}
        ]

    def test_output_file(self, html_file, tmp_path):
        """Test writing to --out, creating parent directories."""
        out = tmp_path / "out" / "page.md"
        assert main([str(html_file), "--no-config", "--out", str(out)]) == 0
        assert out.read_text(encoding="utf-8") == "# Hi\n\nHello **world**\n"

    def test_option_flags(self, tmp_path, capsys):
        """Test conversion option flags."""
        path = tmp_path / "links.html"
        path.write_text('<p><a href="https://example.com">E</a></p>', encoding="utf-8")
        assert main([str(path), "--no-config", "--link-style", "text"]) == 0
        assert capsys.readouterr().out == "E\n"

    def test_email_mode(self, tmp_path, capsys):
        """Test --email enables signature handling."""
        path = tmp_path / "mail.html"
        path.write_text('<p>Hi</p><div class="signature">Ann</div>', encoding="utf-8")
        assert main([str(path), "--no-config", "--email"]) == 0
        assert capsys.readouterr().out == "Hi\n\n---\nAnn\n"

    def test_config_file(self, tmp_path, capsys):
        """Test options loaded from an explicit config file."""
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"bulletListMarker": "+"}), encoding="utf-8")
        path = tmp_path / "list.html"
        path.write_text("<ul><li>a</li></ul>", encoding="utf-8")
        assert main([str(path), "--config", str(config)]) == 0
        assert capsys.readouterr().out == "+ a\n"

    def test_missing_input(self, tmp_path, capsys):
        """Test a nonexistent input file."""
        assert main([str(tmp_path / "missing.html"), "--no-config"]) == 1
        assert "Error reading input" in capsys.readouterr().err

    def test_bad_config(self, html_file, tmp_path, capsys):
        """Test that configuration errors are reported on stderr."""
        config = tmp_path / "bad.json"
        config.write_text("{not json", encoding="utf-8")
        assert main([str(html_file), "--config", str(config)]) == 1
        assert capsys.readouterr().err.startswith("Error: ")

    def test_empty_input(self, monkeypatch, capsys):
        """Test that empty input is a validation error."""
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        assert main(["--no-config"]) == 1
        assert "Invalid HTML input" in capsys.readouterr().err


@pytest.mark.unit
@pytest.mark.cli
class TestRichOutput:
    """Test the --rich terminal rendering switch."""

    def test_plain_output_when_not_a_tty(self, html_file, capsys):
        """Test that --rich falls back to plain Markdown off a terminal."""
        pytest.importorskip("rich")
        assert main([str(html_file), "--no-config", "--rich"]) == 0
        assert capsys.readouterr().out == "# Hi\n\nHello **world**\n"

    def test_rich_used_on_tty(self, html_file, monkeypatch):
        """Test that --rich renders through rich on an interactive terminal."""
        pytest.importorskip("rich")
        rendered = []
        monkeypatch.setattr("sys.stdout.isatty", lambda: True, raising=False)
        monkeypatch.setattr("markextract.cli.print_rich_markdown", rendered.append)
        assert main([str(html_file), "--no-config", "--rich"]) == 0
        assert rendered == ["# Hi\n\nHello **world**\n"]

    def test_rich_skipped_for_metadata(self, html_file, monkeypatch, capsys):
        """Test that JSON output is never rendered through rich."""
        pytest.importorskip("rich")
        monkeypatch.setattr("sys.stdout.isatty", lambda: True, raising=False)
        assert main([str(html_file), "--no-config", "--rich", "--metadata"]) == 0
        assert json.loads(capsys.readouterr().out)["markdown"] == "# Hi\n\nHello **world**\n"

    def test_missing_rich(self, html_file, monkeypatch, capsys):
        """Test the error when rich is not installed."""
        monkeypatch.setattr("markextract.cli.check_rich_available", lambda: False)
        assert main([str(html_file), "--no-config", "--rich"]) == 1
        assert "pip install markextract[rich]" in capsys.readouterr().err
