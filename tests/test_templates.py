"""Tests for layout/page composition and template helpers."""

from __future__ import annotations

import pytest

from patternlibrary.errors import TemplateError
from patternlibrary.models import Pattern, PatternInfo
from patternlibrary.registry import Registry
from patternlibrary.templates import PartialTable


@pytest.fixture
def registry(library_builder) -> Registry:
    return Registry(library_builder.config(), adapters=[])


def test_partial_table_bumps_versions_on_reregistration() -> None:
    table = PartialTable()
    table.register("body", "one")
    first = table.version("body")
    table.register("body", "two")

    assert table.lookup("body") == ("two", table.version("body"))
    assert table.version("body") > first
    assert table.version("missing") == -1
    assert "body" in table and len(table) == 1


def test_empty_layout_renders_page_only(registry: Registry) -> None:
    compositor = registry.compositor
    compositor.set_layout("none")
    compositor.set_page("<p>{{ greeting }}</p>", literal=True)

    assert compositor.render({"greeting": "hi"}) == "<p>hi</p>"
    assert compositor.layout_name == ""


def test_project_layout_wraps_body(library_builder, registry: Registry) -> None:
    library_builder.write({"src/layouts/wrap.html": '<main>{% include "body" %}</main>\n'})
    compositor = registry.compositor
    compositor.set_layout("wrap")
    compositor.set_page("<p>{{ greeting }}</p>", literal=True)

    assert compositor.render({"greeting": "hi"}).strip() == "<main><p>hi</p></main>"
    assert compositor.layout_file == library_builder.path("src/layouts/wrap.html")


def test_body_partial_is_recompiled_for_each_page(registry: Registry) -> None:
    compositor = registry.compositor
    compositor.set_layout("ajax")

    compositor.set_page("first", literal=True)
    first = compositor.render({})
    compositor.set_page("second", literal=True)
    second = compositor.render({})

    assert first.strip() == "first"
    assert second.strip() == "second"


def test_missing_layout_names_both_directories(registry: Registry) -> None:
    with pytest.raises(TemplateError) as excinfo:
        registry.compositor.set_layout("nope")

    message = str(excinfo.value)
    assert "nope" in message
    assert str(registry.config.layouts) in message


def test_page_lookup_prefers_project_override(library_builder, registry: Registry) -> None:
    compositor = registry.compositor
    compositor.set_page("dashboard.html")
    assert compositor.page_file == registry.config.gui.pages / "dashboard.html"

    library_builder.write({"src/pages/pl/dashboard.html": "Custom dashboard\n"})
    compositor.set_page("dashboard.html")
    assert compositor.page_file == library_builder.path("src/pages/pl/dashboard.html")


def test_page_identifiers_ignore_working_directory(
    library_builder, registry: Registry, tmp_path, monkeypatch
) -> None:
    library_builder.write({"src/pages/pl/dashboard.html": "Project dashboard\n"})
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    (elsewhere / "dashboard.html").write_text("Stray dashboard\n", encoding="utf-8")
    (elsewhere / "patterns").mkdir()
    (elsewhere / "patterns" / "index.html").write_text("Stray list\n", encoding="utf-8")
    monkeypatch.chdir(elsewhere)

    compositor = registry.compositor
    compositor.set_page("dashboard.html")
    assert compositor.page_file == library_builder.path("src/pages/pl/dashboard.html")

    compositor.set_page("patterns/index.html")
    assert compositor.page_file == registry.config.gui.pages / "patterns" / "index.html"


def test_missing_page_raises(registry: Registry) -> None:
    with pytest.raises(TemplateError, match="missing.html"):
        registry.compositor.set_page("missing.html")


def test_markdown_pages_render_before_compiling(library_builder, registry: Registry) -> None:
    library_builder.write({"notes.md": "---\ntitle: Notes\n---\n# {{ title }}\n"})
    compositor = registry.compositor
    compositor.set_layout("none")
    compositor.set_page(library_builder.path("notes.md"))

    html = compositor.render({"title": "Notes"})

    assert compositor.page_attributes == {"title": "Notes"}
    assert "<h1" in html and "Notes</h1>" in html


def test_syntax_errors_raise_template_error(registry: Registry) -> None:
    with pytest.raises(TemplateError, match="Failed to compile"):
        registry.compositor.set_page("{% if %}", literal=True)


def test_link_helpers_use_roots_when_present(registry: Registry) -> None:
    compositor = registry.compositor

    assert compositor.render_string("{{ patternlink('atom/link') }}", {"patternsroot": "../"}) == "../atoms/link/"
    assert compositor.render_string("{{ patternlink('atom/link') }}", {}) == "/pl/patterns/atoms/link/"
    assert compositor.render_string("{{ categorylink('basics') }}", {"categoriesroot": "./"}) == "./basics/"
    assert compositor.render_string("{{ categorylink('basics') }}", {}) == "/pl/categories/basics/"


def test_pattern_helper_renders_registered_pattern(registry: Registry) -> None:
    registry.put_pattern(
        Pattern(
            name="atom/bold",
            pattern=PatternInfo(name="atom/bold", type="atom"),
            body="<b>{{ label }}</b>",
        )
    )

    html = registry.compositor.render_string("{{ pattern('atom/bold', label='Hi') }}", {})

    assert html == "<b>Hi</b>"


def test_pattern_helper_rejects_unknown_names(registry: Registry) -> None:
    with pytest.raises(TemplateError, match="atom/ghost"):
        registry.compositor.render_string("{{ pattern('atom/ghost') }}", {})


def test_registered_partials_can_be_included(registry: Registry) -> None:
    registry.partials.register("atom/link", '<a href="#">{{ label }}</a>\n')

    html = registry.compositor.render_string('{% include "atom/link" %}', {"label": "Go"})

    assert html.strip() == '<a href="#">Go</a>'


def test_markdown_filter(registry: Registry) -> None:
    html = registry.compositor.render_string("{{ text | markdown }}", {"text": "**bold**"})

    assert "<strong>bold</strong>" in html


def test_plain_pages_are_not_markdown_rendered(registry: Registry) -> None:
    compositor = registry.compositor
    compositor.set_layout("")
    compositor.set_page("# Title", literal=True)

    assert compositor.render({}) == "# Title"
