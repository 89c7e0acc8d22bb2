"""Adapter plugin implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Any, Callable, Iterable, List, Mapping, Sequence, Set

from ..errors import AdapterRegistrationError
from .base import Adapter, FunctionAdapter
from .changelog import ChangelogAdapter
from .example import ExampleAdapter
from .gitinfo import GitinfoAdapter
from .sass import SassAdapter
from .sourcecode import SourcecodeAdapter
from .specs import SpecsAdapter
from .testresults import TestsAdapter

_ENTRY_POINT_GROUP = "patternlibrary.adapters"

_BUILTIN_FACTORIES: dict[str, Callable[[], Adapter]] = {
    "sass": SassAdapter,
    "specs": SpecsAdapter,
    "example": ExampleAdapter,
    "changelog": ChangelogAdapter,
    "gitinfo": GitinfoAdapter,
    "tests": TestsAdapter,
    "sourcecode": SourcecodeAdapter,
}

RESERVED_NAMES = frozenset(
    {
        "docs",
        "fileName",
        "file_name",
        "relatedFiles",
        "related_files",
        "layout",
        "pattern",
        "body",
        "filepath",
    }
)


def builtin_names() -> List[str]:
    return list(_BUILTIN_FACTORIES)


def load_builtin(name: str) -> Adapter:
    """Instantiate a built-in adapter by name."""
    factory = _BUILTIN_FACTORIES.get(name)
    if factory is None:
        raise AdapterRegistrationError(f"Unknown built-in adapter '{name}'")
    return factory()


def coerce_adapter(name: str, obj: Any) -> Adapter:
    """Turn an adapter instance, subclass or plain callable into an :class:`Adapter`."""
    if name in RESERVED_NAMES:
        raise AdapterRegistrationError(f"Adapter name '{name}' is reserved")
    if isinstance(obj, Adapter):
        adapter = obj
    elif isinstance(obj, type) and issubclass(obj, Adapter):
        adapter = obj()
    elif callable(obj):
        adapter = FunctionAdapter(name, obj)
    else:
        raise AdapterRegistrationError(
            f"Adapter '{name}' must be an Adapter instance, subclass or callable"
        )
    if adapter.name != name:
        adapter.name = name
    return adapter


def discover_adapters(
    enabled: Sequence[str] | None = None,
    overrides: Mapping[str, Mapping[str, Any]] | None = None,
) -> List[Adapter]:
    """Return instantiated adapters, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = set(enabled)

    adapters: List[Adapter] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Any]) -> None:
        if enabled_set is not None and name not in enabled_set:
            return
        if name in seen:
            return
        adapter = coerce_adapter(name, factory())
        if overrides and name in overrides:
            adapter.config.update(overrides[name])
        adapters.append(adapter)
        seen.add(name)
        if enabled_set is not None:
            enabled_set.discard(name)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken third-party plugin
            raise AdapterRegistrationError(f"Failed to load adapter entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> object:
            return obj

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise AdapterRegistrationError(f"Unknown adapters requested: {missing}")

    return adapters


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "Adapter",
    "ChangelogAdapter",
    "ExampleAdapter",
    "FunctionAdapter",
    "GitinfoAdapter",
    "RESERVED_NAMES",
    "SassAdapter",
    "SourcecodeAdapter",
    "SpecsAdapter",
    "TestsAdapter",
    "builtin_names",
    "coerce_adapter",
    "discover_adapters",
    "load_builtin",
]
