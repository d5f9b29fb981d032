from __future__ import annotations

import logging
import os
import textwrap
from pathlib import Path

import pytest

import markdown_html.cli as cli_module
from markdown_html.cli import cli
from markdown_html.filesystem import MAX_FILE_SIZE_ENV_VAR


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_html(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "doc.md",
        """
        # Title

        Hello *world*.
        """,
    )

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == "<h1>Title</h1>\n\n<p>Hello <em>world</em>.</p>\n"
    assert target.read_text(encoding="utf-8").startswith("# Title")


def test_cli_writes_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "Some **bold** text.\n")
    destination = tmp_path / "doc.html"

    result = cli_runner.invoke(cli, ["-o", str(destination), str(target)])

    assert result.exit_code == 0
    assert result.output == ""
    assert destination.read_text(encoding="utf-8") == "<p>Some <strong>bold</strong> text.</p>\n"


def test_cli_html_flag_emits_void_elements(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "rule.md", "---\n")

    result = cli_runner.invoke(cli, ["--html", str(target)])

    assert result.exit_code == 0
    assert result.output == "<hr>\n"


def test_cli_no_markup_escapes_html(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "raw.md", "<div>\nx\n</div>\n")

    result = cli_runner.invoke(cli, ["--no-markup", str(target)])

    assert result.exit_code == 0
    assert result.output == "<p>&lt;div>\nx\n&lt;/div></p>\n"


def test_cli_no_entities_escapes_ampersands(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "amp.md", "&copy;\n")

    result = cli_runner.invoke(cli, ["--no-entities", str(target)])

    assert result.exit_code == 0
    assert result.output == "<p>&amp;copy;</p>\n"


def test_cli_tab_width_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "code.md"
    target.write_text("  code\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["--tab-width", "2", str(target)])

    assert result.exit_code == 0
    assert result.output == "<pre><code>code\n</code></pre>\n"


def test_cli_rejects_invalid_tab_width(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "text\n")

    result = cli_runner.invoke(cli, ["--tab-width", "0", str(target)])

    assert result.exit_code != 0
    assert "tab_width" in result.output


def test_cli_rejects_non_markdown_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.html", "<p>Already HTML</p>\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a Markdown file" in result.output


def test_cli_rejects_missing_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [str(tmp_path / "missing.md")])

    assert result.exit_code != 0


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_cli_rejects_symlinked_input(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "real.md", "text\n")
    link = tmp_path / "link.md"
    link.symlink_to(target)

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code != 0
    assert "Symlinks are not supported" in result.output


def test_cli_rejects_oversized_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "10")
    target = _write(tmp_path, "big.md", "x" * 100 + "\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "exceeds the maximum allowed size" in result.output


def test_cli_rejects_invalid_size_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "lots")
    target = _write(tmp_path, "doc.md", "text\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}" in result.output


def test_cli_rejects_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "binary.md"
    target.write_bytes(b"caf\xe9\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Invalid UTF-8 sequence" in result.output


def test_cli_reads_config_from_pyproject(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-html]
        self_closing_tags = false

        [tool.markdown-html.predefined_urls]
        home = "https://example.com/"
        """,
    )
    target = _write(tmp_path, "configured.md", "Go [home].  \nBye\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == (
        '<p>Go <a href="https://example.com/">home</a>.<br>\nBye</p>\n'
    )


def test_cli_flags_override_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-html]
        tab_width = 8
        """,
    )
    target = tmp_path / "override.md"
    target.write_text("    code\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["--tab-width", "4", str(target)])

    assert result.exit_code == 0
    assert result.output == "<pre><code>code\n</code></pre>\n"


def test_cli_reports_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-html]
        unknown = 1
        """,
    )
    target = _write(tmp_path, "doc.md", "text\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Invalid" in result.output


def test_cli_verbose_configures_logging(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    calls = []
    monkeypatch.setattr(cli_module.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    target = _write(tmp_path, "doc.md", "text\n")

    result = cli_runner.invoke(cli, ["-v", str(target)])

    assert result.exit_code == 0
    assert calls == [{"level": logging.DEBUG, "format": cli_module.LOG_FORMAT}]


def test_cli_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_cli_public_api():
    assert cli_module.__all__ == ["cli"]
