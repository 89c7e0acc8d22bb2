"""Base classes for documentation adapters."""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

from ..models import SearchRecord

if TYPE_CHECKING:  # pragma: no cover
    from ..registry import Registry


class Adapter(ABC):
    """Contract for adapters turning a resolved file reference into doc data.

    ``parse`` returns the structured result, or ``False`` when the referenced
    file does not exist. Raising aborts processing of the documentation file.
    """

    name: str = ""
    defaults: Mapping[str, Any] = {"verbose": False}

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        self.config: Dict[str, Any] = dict(self.defaults)
        if config:
            self.config.update(config)

    @abstractmethod
    def parse(self, value: str, config: Mapping[str, Any], registry: "Registry") -> Any:
        """Produce the adapter result for ``value``."""

    def search(self, result: Any, link: str) -> List[SearchRecord]:
        """Search records contributed by a previous ``parse`` result."""
        return []

    async def run(self, value: str, config: Mapping[str, Any], registry: "Registry") -> Any:
        return await asyncio.to_thread(self.parse, value, config, registry)


class FunctionAdapter(Adapter):
    """Wraps a plain ``(value, config, registry) -> result`` callable."""

    def __init__(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        search: Optional[Callable[[Any, str], List[SearchRecord]]] = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(config if config is not None else getattr(func, "config", None))
        self.name = name
        self._func = func
        self._search = search or getattr(func, "search", None)

    def parse(self, value: str, config: Mapping[str, Any], registry: "Registry") -> Any:
        return self._func(value, config, registry)

    def search(self, result: Any, link: str) -> List[SearchRecord]:
        if self._search is None:
            return []
        return list(self._search(result, link))

    async def run(self, value: str, config: Mapping[str, Any], registry: "Registry") -> Any:
        if inspect.iscoroutinefunction(self._func):
            return await self._func(value, config, registry)
        return await super().run(value, config, registry)


def read_existing(value: str) -> Optional[str]:
    """Return the text of ``value`` when it names an existing file."""
    path = Path(value)
    if not value or not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


__all__ = ["Adapter", "FunctionAdapter", "read_existing"]
