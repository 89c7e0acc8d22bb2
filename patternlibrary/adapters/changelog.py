"""Changelog adapter: renders a pattern's changelog Markdown."""

from __future__ import annotations

from typing import Any, Mapping

from ..sources import parse_text
from .base import Adapter, read_existing


class ChangelogAdapter(Adapter):
    name = "changelog"

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        text = read_existing(value)
        if text is None:
            return False
        body = parse_text(text, origin=value).body
        return registry.markdown.render(body)
