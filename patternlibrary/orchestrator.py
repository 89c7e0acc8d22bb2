"""Run every adapter referenced by a pattern documentation file."""

from __future__ import annotations

import asyncio
import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .categories import normalize_categories, singularize_path, type_from_name
from .errors import AdapterError
from .logging import get_logger
from .models import CONVENTIONAL_KEYS, Pattern, PatternInfo
from .resolver import related_files, resolve_path
from .sources import parse_source

_logger = get_logger("orchestrator")

_DOC_FIELDS = frozenset((*CONVENTIONAL_KEYS, "layout", "pattern"))


@dataclass
class DocFile:
    """A parsed documentation file with its conventional keys seeded."""

    path: Path
    name: str
    values: Dict[str, Any]
    attributes: Dict[str, Any]
    docs: str
    layout: Optional[str] = None
    adapters: List[str] = field(default_factory=list)
    pattern_meta: Dict[str, Any] = field(default_factory=dict)


class AdapterOrchestrator:
    """Fans out one task per referenced adapter, then merges the results."""

    def __init__(self, registry) -> None:
        self.registry = registry

    def prepare(self, doc_file: Path | str) -> DocFile:
        """Parse a doc file and seed the conventional keys relative to ``partials``."""
        path = Path(doc_file)
        parsed = parse_source(path)
        partials = self.registry.config.partials
        rel = os.path.relpath(path.parent, partials)

        values: Dict[str, Any] = {}
        attributes: Dict[str, Any] = {}
        for key, value in parsed.attributes.items():
            if key in _DOC_FIELDS:
                values[key] = value
            else:
                attributes[key] = value

        values["source"] = _join(rel, values.get("source") or "index.html")
        for key in ("sourcecode", "example", "specs"):
            values[key] = values.get(key) or values["source"]
        values["changelog"] = values.get("changelog") or _join(rel, "changelog.md")
        values["tests"] = values.get("tests") or _join(rel, "test.js")
        values["gitinfo"] = values.get("gitinfo") or _join(rel, "")

        name = singularize_path(os.path.dirname(values["source"])) or path.parent.name
        docs = self.registry.markdown.render(parsed.body)
        layout = values.pop("layout", None)
        pattern_meta = values.pop("pattern", None)

        adapters = [key for key in self.registry.adapters if values.get(key) or attributes.get(key)]
        for key in adapters:
            if key not in values:
                values[key] = attributes.pop(key)

        return DocFile(
            path=path,
            name=name,
            values=values,
            attributes=attributes,
            docs=docs,
            layout=str(layout) if layout else None,
            adapters=adapters,
            pattern_meta=pattern_meta if isinstance(pattern_meta, dict) else {},
        )

    async def process(self, doc_file: Path | str) -> Pattern:
        """Run all referenced adapters concurrently and merge them onto the Pattern.

        Any adapter failure cancels the remaining adapters and raises
        :class:`AdapterError`; the pattern map is left untouched.
        """
        doc = self.prepare(doc_file)
        doc_dir = doc.path.parent
        partials = self.registry.config.partials

        adapter_data: Dict[str, Any] = {}
        adapter_files: Dict[str, str] = {}
        for key in doc.adapters:
            adapter_data[key] = copy.deepcopy(doc.values[key])
            adapter_files[key] = resolve_path(str(doc.values[key]), doc_dir, partials)

        results: Dict[str, Any] = {}
        related: Dict[str, List[str]] = {}
        try:
            async with asyncio.TaskGroup() as group:
                for key in doc.adapters:
                    group.create_task(self._run_adapter(key, adapter_files[key], doc, results))
                    group.create_task(self._gather_files(key, adapter_files[key], related))
        except ExceptionGroup as failures:
            raise _first_failure(failures, doc) from None

        files: List[str] = []
        for key in doc.adapters:
            for item in related.get(key, []):
                if item not in files:
                    files.append(item)

        merged_results: Dict[str, Any] = {key: doc.values[key] for key in CONVENTIONAL_KEYS}
        for key in doc.adapters:
            merged_results[key] = results[key]

        def _apply(existing: Optional[Pattern]) -> Pattern:
            pattern = existing or _new_pattern(doc)
            pattern.attributes.update(doc.attributes)
            pattern.docs = doc.docs
            pattern.file_name = str(doc.path)
            pattern.layout = doc.layout
            pattern.related_files = files
            pattern.adapter_data = adapter_data
            pattern.adapter_files = adapter_files
            pattern.results = merged_results
            return pattern

        pattern = self.registry.merge_pattern(doc.name, _apply)
        _logger.debug("Merged documentation for %s from %s", doc.name, doc.path)
        return pattern

    async def _run_adapter(self, key: str, value: str, doc: DocFile, results: Dict[str, Any]) -> None:
        adapter = self.registry.adapters[key]
        config = dict(adapter.config)
        config.update(self.registry.config.adapter_options(key))
        try:
            result = await adapter.run(value, config, self.registry)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise AdapterError(key, str(doc.path), str(exc) or type(exc).__name__) from exc
        if result is False:
            _logger.info("Adapter '%s' found nothing at %s for %s", key, value, doc.name)
        results[key] = result

    @staticmethod
    async def _gather_files(key: str, value: str, related: Dict[str, List[str]]) -> None:
        related[key] = await asyncio.to_thread(related_files, value)


def _join(rel: str, value: str) -> str:
    joined = os.path.normpath(os.path.join(rel, str(value))).replace(os.sep, "/")
    if str(value) == "" or str(value).endswith("/"):
        joined += "/"
    return joined


def _new_pattern(doc: DocFile) -> Pattern:
    meta = doc.pattern_meta
    info = PatternInfo(
        name=doc.name,
        type=str(meta.get("type") or type_from_name(doc.name) or ""),
        categories=normalize_categories(meta.get("categories")),
    )
    return Pattern(name=doc.name, pattern=info)


def _first_failure(failures: BaseExceptionGroup, doc: DocFile) -> Exception:
    for exc in failures.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            return _first_failure(exc, doc)
        if isinstance(exc, AdapterError):
            return exc
    first = failures.exceptions[0]
    return AdapterError("related_files", str(doc.path), str(first))


__all__ = ["AdapterOrchestrator", "DocFile"]
