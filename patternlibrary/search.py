"""Flat search document built from the registry."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List

from .categories import pluralize_name
from .logging import get_logger
from .models import SearchRecord

_logger = get_logger("search")

_TAG_RE = re.compile(r"<[^>]+>")


class SearchIndexBuilder:
    """Emits one record per pattern plus every adapter-contributed record."""

    def records(self, registry) -> List[SearchRecord]:
        config = registry.config
        records: List[SearchRecord] = []
        for name, pattern in sorted(registry.list_patterns().items()):
            link = f"{config.basepath}{config.patternspath}{pluralize_name(name)}/"
            description = pattern.attributes.get("description") or _summary(pattern.docs)
            records.append(
                SearchRecord(
                    name=name,
                    type=pattern.type or "pattern",
                    description=str(description),
                    link=link,
                )
            )
            for key in pattern.adapter_data:
                adapter = registry.adapters.get(key)
                if adapter is None:
                    continue
                records.extend(adapter.search(pattern.results.get(key), link))
        return records

    def build(self, registry, target: Path | str) -> Path:
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload: List[Dict[str, Any]] = [record.to_dict() for record in self.records(registry)]
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        _logger.debug("Wrote %d search record(s) to %s", len(payload), path)
        return path


def _summary(html: str) -> str:
    text = _TAG_RE.sub("", html or "").strip()
    first = text.split("\n\n", 1)[0]
    return " ".join(first.split())


__all__ = ["SearchIndexBuilder"]
