"""Scan partial directories into patterns and template partials."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from .categories import normalize_categories, type_from_name
from .logging import get_logger
from .models import Pattern, PatternInfo
from .resolver import glob_files
from .sources import parse_source

_logger = get_logger("scanner")


class PatternScanner:
    """Registers pattern partials (with metadata) and plain partials.

    Safe to call repeatedly with different roots; a later registration of a
    partial or pattern name replaces the earlier one.
    """

    def __init__(self, registry) -> None:
        self.registry = registry

    def scan(self, directory: Path | str, search_glob: str, register_as_patterns: bool = True) -> List[Pattern]:
        root = Path(directory)
        found: List[Pattern] = []
        files = glob_files(root, search_glob)
        _logger.debug("Scanning %d file(s) below %s matching %s", len(files), root, search_glob)

        for path in files:
            parsed = parse_source(path)
            basename = path.stem
            meta = parsed.attributes.get("pattern")
            name = meta.get("name") if isinstance(meta, dict) else None

            if register_as_patterns and name:
                pattern = self._build_pattern(str(name), meta, parsed.attributes, parsed.body, path)
                self.registry.put_pattern(pattern)
                self.registry.partials.register(basename, parsed.body + "\n")
                self.registry.partials.register(pattern.name, parsed.body + "\n")
                found.append(pattern)
            else:
                self.registry.partials.register(basename, parsed.body + "\n")

        return found

    @staticmethod
    def _build_pattern(
        name: str,
        meta: Dict[str, Any],
        attributes: Dict[str, Any],
        body: str,
        path: Path,
    ) -> Pattern:
        pattern_type = meta.get("type") or type_from_name(name) or ""
        extra = {key: value for key, value in meta.items() if key not in ("name", "type", "categories")}
        info = PatternInfo(
            name=name,
            type=str(pattern_type),
            categories=normalize_categories(meta.get("categories")),
            extra=extra,
        )
        return Pattern(
            name=name,
            pattern=info,
            attributes={key: value for key, value in attributes.items() if key != "pattern"},
            body=body,
            filepath=str(path),
        )


__all__ = ["PatternScanner"]
