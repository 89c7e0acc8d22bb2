"""Tests for the page builders."""

from __future__ import annotations

import asyncio

from tests._fixtures.library_builder import LINK_PATTERN


def test_roots_are_relative_to_the_target(library_builder) -> None:
    library = library_builder.library()
    config = library.config

    roots = library.builder.roots(config.patterns_dest / "atoms" / "link" / "index.html")

    assert roots == {
        "root": "../../../../",
        "baseroot": "../../../",
        "patternsroot": "../../",
        "categoriesroot": "../../../categories/",
    }


def test_doc_files_match_readme_glob(library_builder) -> None:
    library_builder.write(LINK_PATTERN)
    library_builder.write({"src/partials/molecules/card/info.markdown": "Card docs\n"})
    library = library_builder.library()

    names = [path.relative_to(library.config.partials).as_posix() for path in library.builder.doc_files()]

    assert names == ["atoms/link/readme.md", "molecules/card/info.markdown"]


def test_build_doc_honours_configured_target(library_builder) -> None:
    library_builder.write(LINK_PATTERN)
    library = library_builder.library(pattern={"target": "docs.html"})
    library.scan()

    pattern = asyncio.run(library.builder.build_doc(library_builder.path("src/partials/atoms/link/readme.md")))

    assert pattern.name == "atom/link"
    assert library_builder.path("dist/pl/patterns/atoms/link/docs.html").is_file()
    assert library_builder.path("dist/pl/patternlibrary.json").is_file()


def test_build_pages_accepts_explicit_sources_and_target(library_builder, tmp_path) -> None:
    library_builder.write({"extra/contact.html": "---\nlayout: none\n---\n<p>{{ page }} at {{ root }}</p>\n"})
    library = library_builder.library()
    target = tmp_path / "site"

    written = library.builder.build_pages([library_builder.path("extra/contact.html")], target)

    assert written == [target / "contact.html"]
    assert (target / "contact.html").read_text(encoding="utf-8").strip() == "<p>contact at ../project/dist/</p>"


def test_type_and_category_lists_group_patterns(library_builder) -> None:
    library_builder.write(LINK_PATTERN)
    library_builder.write(
        {
            "src/partials/molecules/card.html": """
                ---
                pattern:
                  name: molecule/card
                  categories: basics
                ---
                <div class="card"></div>
                """,
        }
    )
    library = library_builder.library()
    library.scan()

    types = library.builder.build_type_lists()
    categories = library.builder.build_category_lists()

    assert [path.parent.name for path in types] == ["atoms", "molecules"]
    assert [path.parent.name for path in categories] == ["basics", "texts"]
    basics = library_builder.read("dist/pl/categories/basics/index.html")
    assert "atom/link" in basics and "molecule/card" in basics
    molecules = library_builder.read("dist/pl/patterns/molecules/index.html")
    assert "molecule/card" in molecules and "atom/link" not in molecules
