"""End-to-end build pipeline."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .adapters import Adapter
from .builders import PageBuilder
from .config import LibraryConfig, build_config, load_config
from .logging import get_logger, set_verbosity
from .models import Pattern
from .persistence import SnapshotWriter
from .registry import Registry
from .scanner import PatternScanner
from .search import SearchIndexBuilder


@dataclass
class BuildResult:
    """Summary of one pipeline run."""

    patterns: List[Pattern] = field(default_factory=list)
    pages: List[Path] = field(default_factory=list)
    snapshots: dict[str, Path] = field(default_factory=dict)
    elapsed: float = 0.0


class PatternLibrary:
    """Coordinates data loading, scanning, category extraction and page building."""

    def __init__(
        self,
        options: Mapping[str, Any] | LibraryConfig | None = None,
        *,
        base_dir: Path | None = None,
        adapters: Optional[Iterable[Adapter]] = None,
        search_builder: SearchIndexBuilder | None = None,
    ) -> None:
        if isinstance(options, LibraryConfig):
            self.config = options
        else:
            self.config = build_config(options, base_dir=base_dir)
        self.registry = Registry(self.config, adapters=adapters)
        self.scanner = PatternScanner(self.registry)
        self.writer = SnapshotWriter(self.registry, search_builder)
        self.builder = PageBuilder(self.registry, self.writer)
        self.logger = get_logger("pipeline")
        if self.config.verbose:
            set_verbosity(True)

    @classmethod
    def from_file(cls, config_path: Path, overrides: Mapping[str, Any] | None = None) -> "PatternLibrary":
        return cls(load_config(config_path, overrides))

    def register_adapter(self, name: str, adapter: Any = None) -> Adapter:
        return self.registry.register_adapter(name, adapter)

    def scan(self) -> None:
        """Scan bundled GUI partials, then the project's pattern partials."""
        config = self.config
        self.scanner.scan(config.gui.partials, f"{config.pattern.searchpath}/*.*", register_as_patterns=False)
        self.scanner.scan(config.partials, f"{config.pattern.searchpath}/{config.pattern.source}")
        self.registry.extract_categories()
        self.logger.debug(
            "Registered %d pattern(s) and %d category(ies)",
            len(self.registry.patterns),
            len(self.registry.categories),
        )

    async def run_async(self, *, incremental: bool = False) -> BuildResult:
        started = time.perf_counter()
        self.logger.info("Building pattern library into %s", self.config.base_dest)
        if not incremental:
            self.registry.reset()
        self.config.base_dest.mkdir(parents=True, exist_ok=True)

        self.registry.load_data()
        self.registry.load_helpers()
        self.scan()

        pages = self.builder.build_gui()
        patterns = await self.builder.build_docs()
        # Doc files can add patterns without a scanned partial.
        self.registry.extract_categories()
        pages.extend(self.builder.build_pages())
        snapshots = self.writer.update()

        result = BuildResult(
            patterns=patterns,
            pages=pages,
            snapshots=snapshots,
            elapsed=time.perf_counter() - started,
        )
        self.logger.info(
            "Built %d pattern doc(s) and %d page(s) in %.2fs",
            len(patterns),
            len(pages),
            result.elapsed,
        )
        return result

    def run(self, *, incremental: bool = False) -> BuildResult:
        return asyncio.run(self.run_async(incremental=incremental))


__all__ = ["BuildResult", "PatternLibrary"]
