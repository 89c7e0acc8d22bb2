"""Tests for the shared build registry."""

from __future__ import annotations

import pytest

from patternlibrary.adapters import FunctionAdapter, SpecsAdapter
from patternlibrary.errors import AdapterRegistrationError, SourceError
from patternlibrary.models import Pattern, PatternInfo
from patternlibrary.registry import Registry


def _pattern(name: str, type_: str, categories=None) -> Pattern:
    return Pattern(name=name, pattern=PatternInfo(name=name, type=type_, categories=list(categories or [])))


@pytest.fixture
def registry(library_builder) -> Registry:
    registry = Registry(library_builder.config(), adapters=[])
    registry.put_pattern(_pattern("atom/link", "atom", ["basics", "texts"]))
    registry.put_pattern(_pattern("molecule/card", "molecule", ["basics"]))
    registry.put_pattern(_pattern("organism/header", "organism"))
    return registry


def test_statistics_count_patterns_by_type(registry: Registry) -> None:
    assert registry.statistics() == {
        "patterns_count": 3,
        "categories_count": 2,
        "atoms_count": 1,
        "molecules_count": 1,
        "organisms_count": 1,
        "templates_count": 0,
        "pages_count": 0,
    }


def test_statistics_follow_configured_pattern_dirs(library_builder) -> None:
    registry = Registry(library_builder.config(pattern={"dirs": {"tokens": "tokens/"}}), adapters=[])
    registry.put_pattern(_pattern("tokens/colors", "tokens"))
    registry.put_pattern(_pattern("atom/link", "atom"))

    stats = registry.statistics()

    assert stats["tokens_count"] == 1
    assert stats["atoms_count"] == 1


def test_list_patterns_filters_by_type_or_category(registry: Registry) -> None:
    assert sorted(registry.list_patterns()) == ["atom/link", "molecule/card", "organism/header"]
    assert sorted(registry.list_patterns("basics")) == ["atom/link", "molecule/card"]
    assert list(registry.list_patterns("organism")) == ["organism/header"]


def test_extract_categories_updates_registry(registry: Registry) -> None:
    categories = registry.extract_categories()

    assert [category.slug for category in categories] == ["basics", "texts"]
    assert registry.categories is categories
    assert [category.slug for category in registry.list_categories()] == ["basics", "texts"]


def test_reset_keeps_configuration_and_adapters(registry: Registry) -> None:
    registry.register_adapter("specs")
    config = registry.config
    registry.extract_categories()

    registry.reset()

    assert registry.patterns == {}
    assert registry.categories == []
    assert registry.config is config
    assert isinstance(registry.adapters["specs"], SpecsAdapter)


def test_merge_pattern_applies_atomically(registry: Registry) -> None:
    def _apply(existing):
        existing.docs = "<p>docs</p>"
        return existing

    merged = registry.merge_pattern("atom/link", _apply)

    assert merged.docs == "<p>docs</p>"
    assert registry.get_pattern("atom/link").docs == "<p>docs</p>"
    assert registry.get_pattern("atom/missing") is None


def test_register_adapter_wraps_callables(registry: Registry) -> None:
    def figma(value, config, registry):
        return {"file": value}

    adapter = registry.register_adapter("figma", figma)

    assert isinstance(adapter, FunctionAdapter)
    assert adapter.name == "figma"
    assert registry.adapters["figma"] is adapter


def test_register_adapter_rejects_reserved_and_unknown_names(registry: Registry) -> None:
    with pytest.raises(AdapterRegistrationError, match="reserved"):
        registry.register_adapter("docs", lambda value, config, registry: None)
    with pytest.raises(AdapterRegistrationError, match="Unknown"):
        registry.register_adapter("nope")


def test_register_adapter_applies_configured_options(library_builder) -> None:
    registry = Registry(library_builder.config(adapters={"sourcecode": {"language": "jinja"}}), adapters=[])

    adapter = registry.register_adapter("sourcecode")

    assert adapter.config["language"] == "jinja"


def test_load_data_reads_json_and_yaml(library_builder, registry: Registry) -> None:
    library_builder.write(
        {
            "src/data/site.yml": "title: Demo\n",
            "src/data/nav.json": '{"items": ["home"]}\n',
            "src/data/notes.txt": "ignored\n",
        }
    )

    data = registry.load_data()

    assert data["site"] == {"title": "Demo"}
    assert data["nav"] == {"items": ["home"]}
    assert "notes" not in data


def test_load_data_rejects_malformed_files(library_builder, registry: Registry) -> None:
    library_builder.write({"src/data/broken.json": "{not json\n"})

    with pytest.raises(SourceError, match="broken.json"):
        registry.load_data()


def test_render_data_exposes_registry_and_overlay(registry: Registry) -> None:
    registry.data["site"] = {"title": "Demo"}
    registry.extract_categories()

    data = registry.render_data({"page": "index", "site": "override"})

    assert data["page"] == "index"
    assert data["site"] == "override"
    assert data["stats"]["patterns_count"] == 3
    assert sorted(data["patternlist"]) == ["atom/link", "molecule/card", "organism/header"]
    assert [category["slug"] for category in data["categorylist"]] == ["basics", "texts"]
    assert data["options"]["basepath"] == "pl/"


def test_snapshot_is_serialisable(registry: Registry) -> None:
    registry.register_adapter("specs")
    registry.extract_categories()

    snapshot = registry.snapshot()

    assert set(snapshot) == {"options", "data", "patterns", "categories", "adapters", "stats"}
    assert snapshot["adapters"] == ["specs"]
    assert snapshot["patterns"]["atom/link"]["pattern"]["categories"] == ["basics", "texts"]
    assert snapshot["categories"][0]["patterns_count"] == 2
