"""Process-wide build state shared by every pipeline stage."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import yaml

from .adapters import Adapter, coerce_adapter, discover_adapters, load_builtin
from .categories import extract_categories, filter_patterns, to_singular
from .config import LibraryConfig
from .errors import SourceError
from .helpers import load_helpers
from .logging import get_logger
from .markup import MarkdownRenderer
from .models import Category, Pattern
from .templates import PartialTable, TemplateCompositor

_logger = get_logger("registry")

_DATA_SUFFIXES = (".json", ".yml", ".yaml")


class Registry:
    """Owns configuration, patterns, categories, partials, templates and adapters.

    Configuration and adapters survive :meth:`reset`; patterns and categories
    do not. Writes to the pattern map, category list and partial table are
    serialised so doc files may be processed concurrently.
    """

    def __init__(
        self,
        config: LibraryConfig,
        *,
        adapters: Optional[Iterable[Adapter]] = None,
    ) -> None:
        self.config = config
        self.patterns: Dict[str, Pattern] = {}
        self.categories: List[Category] = []
        self.data: Dict[str, Any] = {}
        self.partials = PartialTable()
        self.markdown = MarkdownRenderer()
        self.compositor = TemplateCompositor(
            config, self.partials, self.markdown, pattern_lookup=self.get_pattern
        )
        self.adapters: Dict[str, Adapter] = {}
        self._lock = threading.RLock()

        initial = adapters if adapters is not None else discover_adapters(overrides=config.adapters)
        for adapter in initial:
            self.adapters[adapter.name] = adapter

    # -- lifecycle -----------------------------------------------------------

    def reset(self) -> None:
        """Forget patterns and categories; keep configuration and adapters."""
        with self._lock:
            self.patterns.clear()
            self.categories = []

    def register_adapter(self, name: str, adapter: Any = None) -> Adapter:
        """Register a built-in adapter by name or a custom adapter object."""
        instance = load_builtin(name) if adapter is None else coerce_adapter(name, adapter)
        overrides = self.config.adapter_options(name)
        if overrides:
            instance.config.update(overrides)
        with self._lock:
            self.adapters[name] = instance
        _logger.debug("Registered adapter '%s'", name)
        return instance

    def load_data(self, directory: Path | None = None) -> Dict[str, Any]:
        """Load JSON/YAML data files as template variables keyed by basename."""
        root = Path(directory) if directory is not None else self.config.data
        if not root.is_dir():
            return self.data
        for path in sorted(root.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in _DATA_SUFFIXES:
                continue
            self.data[path.stem] = _read_data_file(path)
            _logger.debug("Loaded data file %s", path)
        return self.data

    def load_helpers(self, directory: Path | None = None) -> List[str]:
        """Register the project helper modules with the template environment."""
        root = Path(directory) if directory is not None else self.config.helpers
        helpers = load_helpers(root)
        self.compositor.register_helpers(helpers)
        return sorted(helpers)

    # -- patterns ------------------------------------------------------------

    def put_pattern(self, pattern: Pattern) -> None:
        with self._lock:
            self.patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        with self._lock:
            return self.patterns.get(name)

    def merge_pattern(self, name: str, apply: Callable[[Optional[Pattern]], Pattern]) -> Pattern:
        """Atomically replace ``name`` with ``apply(existing)``."""
        with self._lock:
            pattern = apply(self.patterns.get(name))
            self.patterns[name] = pattern
            return pattern

    def extract_categories(self) -> List[Category]:
        with self._lock:
            categories = extract_categories(self.patterns)
            self.categories = categories
            return categories

    def list_patterns(self, type_or_category: Optional[str] = None) -> Dict[str, Pattern]:
        with self._lock:
            return filter_patterns(self.patterns, type_or_category)

    def list_categories(self) -> List[Category]:
        with self._lock:
            return extract_categories(self.patterns)

    def statistics(self) -> Dict[str, int]:
        with self._lock:
            stats = {
                "patterns_count": len(self.patterns),
                "categories_count": len(extract_categories(self.patterns)),
            }
            for plural in self.config.pattern.dirs:
                type_name = to_singular(plural)
                stats[f"{plural}_count"] = sum(
                    1 for pattern in self.patterns.values() if pattern.type == type_name
                )
            return stats

    # -- template data -------------------------------------------------------

    def render_data(self, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Variables available to every template, overlaid with ``extra``."""
        with self._lock:
            patterns = {name: pattern.to_dict() for name, pattern in self.patterns.items()}
            categories = [category.to_dict() for category in self.categories]
            data: Dict[str, Any] = dict(self.data)
            data.update(
                {
                    "options": self.config.to_dict(),
                    "patterns": patterns,
                    "categories": categories,
                    "patternlist": patterns,
                    "categorylist": [category.to_dict() for category in extract_categories(self.patterns)],
                    "stats": self.statistics(),
                }
            )
        if extra:
            data.update(extra)
        return data

    def snapshot(self) -> Dict[str, Any]:
        """Full serialisable view of the registry."""
        with self._lock:
            return {
                "options": self.config.to_dict(),
                "data": dict(self.data),
                "patterns": {name: pattern.to_dict() for name, pattern in self.patterns.items()},
                "categories": [category.to_dict() for category in self.categories],
                "adapters": sorted(self.adapters),
                "stats": self.statistics(),
            }


def _read_data_file(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text) if text.strip() else None
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SourceError(f"Failed to parse data file {path}: {exc}") from exc


__all__ = ["Registry"]
