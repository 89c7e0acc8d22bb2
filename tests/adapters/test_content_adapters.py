"""Tests for the sourcecode, example, specs and changelog adapters."""

from __future__ import annotations

import pytest

from patternlibrary.adapters import ChangelogAdapter, ExampleAdapter, SourcecodeAdapter, SpecsAdapter
from patternlibrary.adapters.sourcecode import code_result
from patternlibrary.registry import Registry

_BUTTON = """\
---
pattern:
  name: atoms/button
---
<button class="{{ modifier | default('primary') }}">{{ label }}</button>
"""


@pytest.fixture
def registry(library_builder) -> Registry:
    library_builder.write({"src/partials/atoms/button/index.html": _BUTTON})
    return Registry(library_builder.config(), adapters=[])


@pytest.fixture
def button(library_builder) -> str:
    return str(library_builder.path("src/partials/atoms/button/index.html"))


def test_code_result_offers_three_renderings() -> None:
    result = code_result("html", "<b>x</b>")

    assert result["raw"] == "<b>x</b>"
    assert result["escaped"] == "&lt;b&gt;x&lt;/b&gt;"
    assert 'class="language-html"' in result["highlight"]
    assert "data-patternlibrary-copycode" in result["highlight"]


def test_sourcecode_strips_metadata_header(registry: Registry, button: str) -> None:
    adapter = SourcecodeAdapter()

    result = adapter.parse(button, adapter.config, registry)

    assert "pattern:" not in result["raw"]
    assert result["raw"].strip().startswith("<button")


def test_sourcecode_uses_configured_language(registry: Registry, button: str) -> None:
    result = SourcecodeAdapter().parse(button, {"language": "jinja"}, registry)

    assert 'class="language-jinja"' in result["highlight"]


def test_example_renders_the_pattern(library_builder, registry: Registry, button: str) -> None:
    library_builder.write(
        {
            "src/partials/atoms/button/example.html": "---\nlabel: Save\n---\n" + _BUTTON.split("---\n", 2)[2],
        }
    )

    result = ExampleAdapter().parse(str(library_builder.path("src/partials/atoms/button/example.html")), {}, registry)

    assert result["raw"].strip() == '<button class="primary">Save</button>'


def test_specs_derives_pattern_type(registry: Registry, button: str) -> None:
    result = SpecsAdapter().parse(button, {}, registry)

    assert result["pattern"] == {"name": "atoms/button", "type": "atom"}


def test_changelog_renders_markdown(library_builder, registry: Registry) -> None:
    library_builder.write({"CHANGELOG.md": "## 2.0.0\n\n- Breaking change\n"})

    html = ChangelogAdapter().parse(str(library_builder.path("CHANGELOG.md")), {}, registry)

    assert "<h2" in html and "Breaking change" in html


@pytest.mark.parametrize("adapter_cls", [SourcecodeAdapter, ExampleAdapter, SpecsAdapter, ChangelogAdapter])
def test_missing_files_return_false(adapter_cls, registry: Registry, tmp_path) -> None:
    assert adapter_cls().parse(str(tmp_path / "missing.html"), {}, registry) is False
