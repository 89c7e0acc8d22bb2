"""Tests for the core data models."""

from __future__ import annotations

from patternlibrary.models import Category, Pattern, PatternInfo


def test_pattern_to_dict_overlays_results_and_fixed_fields() -> None:
    pattern = Pattern(
        name="atom/link",
        pattern=PatternInfo(name="atom/link", type="atom", categories=["basics"], extra={"status": "beta"}),
        attributes={"description": "Link", "docs": "shadowed"},
        body="<a></a>",
        docs="<p>Docs</p>",
        results={"changelog": "<h2>1.0</h2>", "description": "from adapter"},
        layout="ajax",
    )

    data = pattern.to_dict()

    assert data["description"] == "from adapter"
    assert data["docs"] == "<p>Docs</p>"
    assert data["changelog"] == "<h2>1.0</h2>"
    assert data["pattern"] == {"name": "atom/link", "type": "atom", "categories": ["basics"], "status": "beta"}
    assert data["layout"] == "ajax"


def test_pattern_to_dict_is_a_copy() -> None:
    pattern = Pattern(name="atom/link", pattern=PatternInfo(name="atom/link", type="atom"), results={"specs": {"a": 1}})

    pattern.to_dict()["specs"]["a"] = 2

    assert pattern.results["specs"] == {"a": 1}
    assert "layout" not in pattern.to_dict()


def test_category_counts_its_patterns() -> None:
    link = Pattern(name="atom/link", pattern=PatternInfo(name="atom/link", type="atom", categories=["basics"]))
    category = Category(slug="basics", patterns={"atom/link": link})

    data = category.to_dict()

    assert category.name == "basics"
    assert data["patterns_count"] == 1
    assert list(data["patterns"]) == ["atom/link"]
