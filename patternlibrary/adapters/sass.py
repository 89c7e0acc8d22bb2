"""Sass adapter: collects SassDoc-style ``///`` comment blocks.

Each block documents the declaration that follows it:

    /// Primary link colour.
    /// @type Color
    $link-color: #1779ba !default;

Results are grouped by declaration type (``variable``, ``mixin``,
``function``, ``placeholder``).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from markupsafe import escape

from ..models import SearchRecord
from ..resolver import related_files
from .base import Adapter

_DECLARATIONS = (
    ("variable", re.compile(r"^\$(?P<name>[\w-]+)\s*:\s*(?P<value>[^;]*);?")),
    ("mixin", re.compile(r"^@mixin\s+(?P<name>[\w-]+)")),
    ("function", re.compile(r"^@function\s+(?P<name>[\w-]+)")),
    ("placeholder", re.compile(r"^%(?P<name>[\w-]+)")),
)
_ANNOTATION_RE = re.compile(r"^@(?P<key>[\w-]+)\s*(?P<value>.*)$")
_SLUG_RE = re.compile(r"[^\w]+")


def parse_sassdoc(text: str, *, file: str = "") -> List[Dict[str, Any]]:
    """Return one item per documented declaration in ``text``."""
    items: List[Dict[str, Any]] = []
    block: List[str] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line.startswith("///"):
            block.append(line[3:].strip())
            continue
        if not block:
            continue
        if not line:
            continue
        context = _declaration(line, number)
        if context is not None:
            items.append(_item(block, context, file))
        block = []
    return items


def _declaration(line: str, number: int) -> Optional[Dict[str, Any]]:
    for kind, pattern in _DECLARATIONS:
        match = pattern.match(line)
        if match:
            context: Dict[str, Any] = {"type": kind, "name": match.group("name"), "line": number}
            if kind == "variable":
                context["value"] = match.group("value").strip()
            return context
    return None


def _item(block: List[str], context: Dict[str, Any], file: str) -> Dict[str, Any]:
    description: List[str] = []
    annotations: Dict[str, List[str]] = {}
    for line in block:
        match = _ANNOTATION_RE.match(line)
        if match:
            annotations.setdefault(match.group("key"), []).append(match.group("value").strip())
        else:
            description.append(line)
    return {
        "description": "\n".join(description).strip(),
        "context": context,
        "annotations": annotations,
        "file": file,
    }


class SassAdapter(Adapter):
    name = "sass"

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        files = related_files(value)
        if not files:
            return False
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for file in files:
            text = Path(file).read_text(encoding="utf-8")
            for item in parse_sassdoc(text, file=file):
                grouped.setdefault(item["context"]["type"], []).append(item)
        return grouped or False

    def search(self, result: Any, link: str) -> List[SearchRecord]:
        if not isinstance(result, dict):
            return []
        records: List[SearchRecord] = []
        items = [*result.get("variable", []), *result.get("mixin", []), *result.get("function", [])]
        for item in items:
            name = item["context"]["name"]
            kind = item["context"]["type"]
            description = str(escape(item["description"].replace("\n", " ").replace("`", "")))
            if kind == "variable":
                name, anchor = f"${name}", "sass-variables"
            else:
                anchor = _SLUG_RE.sub("-", name.lower())
                name = f"{name}()"
            records.append(
                SearchRecord(name=name, type=f"sass {kind}", description=description, link=f"{link}#{anchor}")
            )
        return records
