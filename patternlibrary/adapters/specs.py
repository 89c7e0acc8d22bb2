"""Specs adapter: exposes a pattern file's metadata header."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..categories import type_from_name
from ..sources import parse_text
from .base import Adapter, read_existing


class SpecsAdapter(Adapter):
    name = "specs"

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        text = read_existing(value)
        if text is None:
            return False
        attributes: Dict[str, Any] = parse_text(text, origin=value).attributes
        pattern = attributes.get("pattern")
        if isinstance(pattern, dict) and pattern.get("name") and not pattern.get("type"):
            derived = type_from_name(pattern["name"])
            if derived:
                pattern["type"] = derived
        return attributes
