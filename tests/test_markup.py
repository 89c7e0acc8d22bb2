"""Tests for Markdown rendering and code highlighting."""

from __future__ import annotations

from patternlibrary.markup import MarkdownRenderer, highlight_code, is_markdown


def test_markdown_renderer_converts_common_syntax() -> None:
    renderer = MarkdownRenderer()

    html = renderer.render("# Link\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")

    assert "<h1" in html and "Link</h1>" in html
    assert "<table>" in html


def test_markdown_renderer_resets_between_documents() -> None:
    renderer = MarkdownRenderer()

    renderer.render("Footnote[^1]\n\n[^1]: first")
    second = renderer.render("No notes here")

    assert "footnote" not in second
    assert renderer.render("") == ""


def test_highlight_code_uses_named_lexer() -> None:
    html = highlight_code("html", '<a href="#">x</a>')

    assert 'class="highlight"' in html
    assert "&lt;" in html


def test_highlight_code_falls_back_to_plain_text() -> None:
    html = highlight_code("no-such-language", "plain words")

    assert "plain words" in html


def test_is_markdown_checks_suffix() -> None:
    assert is_markdown("readme.md")
    assert is_markdown("info.MARKDOWN")
    assert not is_markdown("index.html")
