"""Tests for metadata header parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from patternlibrary.errors import SourceError
from patternlibrary.sources import parse_source, parse_text


def test_parse_text_splits_header_and_body() -> None:
    parsed = parse_text("---\npattern:\n  name: atom/link\ntitle: Link\n---\n<a>link</a>\n")

    assert parsed.attributes == {"pattern": {"name": "atom/link"}, "title": "Link"}
    assert parsed.body.strip() == "<a>link</a>"


def test_parse_text_without_header_yields_empty_attributes() -> None:
    parsed = parse_text("<p>plain</p>")

    assert parsed.attributes == {}
    assert parsed.body.strip() == "<p>plain</p>"


def test_parse_text_rejects_invalid_header() -> None:
    with pytest.raises(SourceError, match="broken.html"):
        parse_text("---\ntitle: [unclosed\n---\nbody\n", origin="broken.html")


def test_parse_source_reads_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "readme.md"
    path.write_text("---\ndescription: Hello\n---\n# Title\n", encoding="utf-8")

    parsed = parse_source(path)

    assert parsed.attributes["description"] == "Hello"
    assert parsed.path == str(path)
    assert parsed.body.strip() == "# Title"


def test_parse_source_reports_missing_files(tmp_path: Path) -> None:
    with pytest.raises(SourceError, match="Unable to read"):
        parse_source(tmp_path / "missing.md")
