"""Page and documentation builders.

Each builder sets the layout and page slots, gathers page data, computes
relative root prefixes for the target depth, renders, writes the file and
refreshes the registry snapshots.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .categories import patterns_of_type, pattern_types, to_plural
from .logging import get_logger
from .models import Pattern
from .orchestrator import AdapterOrchestrator
from .resolver import glob_files, relative_root_url
from .sources import parse_source

_logger = get_logger("builders")

CATEGORY_PAGE = "categories/category.html"
TYPE_PAGE = "patterns/type.html"
FREE_PAGE_GLOB = "**/*.{md,markdown,html,hbs,j2}"
DEFAULT_PAGE_LAYOUT = "default"


class PageBuilder:
    """Drives the compositor and adapter orchestrator to emit every page."""

    def __init__(self, registry, writer) -> None:
        self.registry = registry
        self.writer = writer
        self.config = registry.config
        self.compositor = registry.compositor
        self.orchestrator = AdapterOrchestrator(registry)

    # -- library GUI ---------------------------------------------------------

    def build_gui(self) -> List[Path]:
        """Dashboard, category and pattern indexes plus their list pages."""
        written = [
            self.build_dashboard(),
            self.build_category_index(),
            self.build_pattern_index(),
        ]
        written.extend(self.build_category_lists())
        written.extend(self.build_type_lists())
        return written

    def build_dashboard(self) -> Path:
        target = self.config.base_dest / "index.html"
        return self._build_gui_page(self.config.gui.dashboard, target, {"page": "dashboard"})

    def build_category_index(self) -> Path:
        target = self.config.categories_dest / "index.html"
        return self._build_gui_page(self.config.gui.categorylist, target, {"page": "categories"})

    def build_pattern_index(self) -> Path:
        target = self.config.patterns_dest / "index.html"
        return self._build_gui_page(self.config.gui.patternlist, target, {"page": "patterns"})

    def build_category_lists(self) -> List[Path]:
        written: List[Path] = []
        for category in self.registry.categories:
            target = self.config.categories_dest / category.slug / "index.html"
            data = {
                "page": category.slug,
                "category": category.to_dict(),
                "patternlist": _as_dicts(category.patterns),
            }
            written.append(self._build_gui_page(CATEGORY_PAGE, target, data))
        return written

    def build_type_lists(self) -> List[Path]:
        written: List[Path] = []
        patterns = self.registry.list_patterns()
        for type_name in pattern_types(patterns.values()):
            plural = to_plural(type_name)
            target = self.config.patterns_dest / plural / "index.html"
            data = {
                "page": plural,
                "type": type_name,
                "type_plural": plural,
                "patternlist": _as_dicts(patterns_of_type(patterns, type_name)),
            }
            written.append(self._build_gui_page(TYPE_PAGE, target, data))
        return written

    # -- pattern docs --------------------------------------------------------

    def doc_files(self) -> List[Path]:
        pattern = f"{self.config.pattern.searchpath}/{self.config.pattern.readme}"
        return glob_files(self.config.partials, pattern)

    async def build_docs(self) -> List[Pattern]:
        """Process and render every documentation file, one file at a time."""
        patterns: List[Pattern] = []
        for doc_file in self.doc_files():
            patterns.append(await self.build_doc(doc_file))
        return patterns

    async def build_doc(self, doc_file: Path | str) -> Pattern:
        started = time.perf_counter()
        pattern = await self.orchestrator.process(doc_file)

        doc_path = Path(doc_file)
        relative_dir = Path(os.path.relpath(doc_path.parent, self.config.partials))
        target = self.config.patterns_dest / relative_dir / self.config.pattern.target

        self.compositor.set_layout(pattern.layout or self.config.gui.layout)
        self.compositor.set_page(self.config.gui.docpage)
        data = pattern.to_dict()
        data.update({"page": target.stem, "layout": self.compositor.layout_name})
        data.update(self.roots(target))
        self._write(target, self.compositor.render(self.registry.render_data(data)))
        self.writer.update()

        elapsed = time.perf_counter() - started
        _logger.info(
            "processed %s in %.3fs with %s",
            pattern.name,
            elapsed,
            ", ".join(sorted(pattern.adapter_data)) or "no adapters",
        )
        return pattern

    # -- free pages ----------------------------------------------------------

    def build_pages(
        self,
        source: Path | str | Iterable[Path | str] | None = None,
        target: Path | str | None = None,
    ) -> List[Path]:
        """Render free-form pages below ``root`` (or ``source``) into ``dest``."""
        base, files = self._page_sources(source)
        target_dir = Path(target) if target is not None else self.config.dest
        written: List[Path] = []

        for file in files:
            parsed = parse_source(file)
            self.compositor.set_layout(str(parsed.attributes.get("layout") or DEFAULT_PAGE_LAYOUT))
            self.compositor.set_page(file)

            try:
                relative = file.relative_to(base)
            except ValueError:
                relative = Path(file.name)
            output = (target_dir / relative).with_suffix(".html")

            data: Dict[str, Any] = dict(parsed.attributes)
            data.update({"page": output.stem, "layout": self.compositor.layout_name})
            data.update(self.roots(output))
            self._write(output, self.compositor.render(self.registry.render_data(data)))
            written.append(output)
            _logger.debug("Rendered page %s -> %s", file, output)

        if written:
            self.writer.update()
        return written

    def _page_sources(self, source: Path | str | Iterable[Path | str] | None) -> tuple[Path, List[Path]]:
        if source is None or isinstance(source, (str, Path)):
            base = Path(source) if source is not None else self.config.root
            if base.is_file():
                return base.parent, [base]
            excluded = (self.config.root / self.config.basepath).resolve()
            files = [
                path
                for path in glob_files(base, FREE_PAGE_GLOB)
                if not path.resolve().is_relative_to(excluded)
            ]
            return base, files
        return self.config.root, [Path(item) for item in source]

    # -- helpers -------------------------------------------------------------

    def roots(self, target: Path) -> Dict[str, str]:
        """Relative prefixes from ``target`` to the output tree's anchors."""
        return {
            "root": relative_root_url(target, self.config.dest),
            "baseroot": relative_root_url(target, self.config.base_dest),
            "patternsroot": relative_root_url(target, self.config.patterns_dest),
            "categoriesroot": relative_root_url(target, self.config.categories_dest),
        }

    def _build_gui_page(self, identifier: str, target: Path, extra: Mapping[str, Any]) -> Path:
        self.compositor.set_layout(self.config.gui.layout)
        self.compositor.set_page(identifier)
        data = dict(extra)
        data["layout"] = self.compositor.layout_name
        data.update(self.roots(target))
        self._write(target, self.compositor.render(self.registry.render_data(data)))
        self.writer.update()
        _logger.debug("Rendered %s -> %s", identifier, target)
        return target

    @staticmethod
    def _write(target: Path, content: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def _as_dicts(patterns: Mapping[str, Pattern]) -> Dict[str, Dict[str, Any]]:
    return {name: pattern.to_dict() for name, pattern in patterns.items()}


__all__ = ["PageBuilder"]
