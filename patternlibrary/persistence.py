"""Registry snapshots written beside the generated library pages."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict

from .logging import get_logger
from .search import SearchIndexBuilder

_logger = get_logger("persistence")

REGISTRY_FILE = "patternlibrary.json"
PATTERNS_FILE = "patterns.json"
CATEGORIES_FILE = "categories.json"
SEARCH_FILE = "search.json"


class SnapshotWriter:
    """Serialises the registry, its patterns and its categories, then the search index."""

    def __init__(self, registry, search_builder: SearchIndexBuilder | None = None) -> None:
        self.registry = registry
        self.search_builder = search_builder or SearchIndexBuilder()

    @property
    def directory(self) -> Path:
        return self.registry.config.base_dest

    def update(self) -> Dict[str, Path]:
        directory = self.directory
        directory.mkdir(parents=True, exist_ok=True)

        snapshot = self.registry.snapshot()
        snapshot["updated_at"] = datetime.now(UTC).isoformat().replace("+00:00", "Z")

        written = {
            "registry": _write_json(directory / REGISTRY_FILE, snapshot),
            "patterns": _write_json(directory / PATTERNS_FILE, snapshot["patterns"]),
            "categories": _write_json(directory / CATEGORIES_FILE, snapshot["categories"]),
        }
        written["search"] = self.search_builder.build(self.registry, directory / SEARCH_FILE)
        _logger.debug("Updated registry snapshots in %s", directory)
        return written


def _write_json(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str), encoding="utf-8")
    return path


def read_snapshot(directory: Path, name: str) -> Any:
    """Load a previously written snapshot file; ``None`` when absent."""
    path = directory / name
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


__all__ = [
    "CATEGORIES_FILE",
    "PATTERNS_FILE",
    "REGISTRY_FILE",
    "SEARCH_FILE",
    "SnapshotWriter",
    "read_snapshot",
]
