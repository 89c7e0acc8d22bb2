"""Core data models shared across patternlibrary components."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Keys seeded on every documentation file, each backed by a like-named adapter.
CONVENTIONAL_KEYS = (
    "source",
    "sourcecode",
    "example",
    "specs",
    "changelog",
    "tests",
    "gitinfo",
)


@dataclass
class PatternInfo:
    """The ``pattern`` block of a pattern partial's metadata header."""

    name: str
    type: str
    categories: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extra)
        data.update(
            {
                "name": self.name,
                "type": self.type,
                "categories": list(self.categories),
            }
        )
        return data


@dataclass
class Pattern:
    """One documented unit in the registry, keyed by its hierarchical name."""

    name: str
    pattern: PatternInfo
    attributes: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    filepath: Optional[str] = None
    docs: str = ""
    file_name: Optional[str] = None
    layout: Optional[str] = None
    related_files: List[str] = field(default_factory=list)
    adapter_data: Dict[str, Any] = field(default_factory=dict)
    adapter_files: Dict[str, str] = field(default_factory=dict)
    results: Dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.pattern.type

    @property
    def categories(self) -> List[str]:
        return self.pattern.categories

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = copy.deepcopy(self.attributes)
        data.update(copy.deepcopy(self.results))
        data.update(
            {
                "pattern": self.pattern.to_dict(),
                "body": self.body,
                "filepath": self.filepath,
                "docs": self.docs,
                "file_name": self.file_name,
                "related_files": list(self.related_files),
                "adapter_data": copy.deepcopy(self.adapter_data),
                "adapter_files": dict(self.adapter_files),
            }
        )
        if self.layout is not None:
            data["layout"] = self.layout
        return data


@dataclass
class Category:
    """Derived grouping of patterns sharing a category slug."""

    slug: str
    patterns: Dict[str, Pattern] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.slug

    @property
    def patterns_count(self) -> int:
        return len(self.patterns)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "patterns": {name: pattern.to_dict() for name, pattern in self.patterns.items()},
            "patterns_count": self.patterns_count,
        }


@dataclass
class SearchRecord:
    """Flat entry of the search document."""

    name: str
    type: str
    description: str
    link: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "link": self.link,
        }


@dataclass
class SourceFile:
    """A content file split into its metadata header and body text."""

    attributes: Dict[str, Any]
    body: str
    path: Optional[str] = None


__all__ = [
    "CONVENTIONAL_KEYS",
    "Category",
    "Pattern",
    "PatternInfo",
    "SearchRecord",
    "SourceFile",
]
