"""Pattern type classification and category extraction."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from .models import Category, Pattern

_PLURAL_TO_SINGULAR: Dict[str, str] = {
    "atoms": "atom",
    "molecules": "molecule",
    "organisms": "organism",
    "components": "component",
    "templates": "template",
    "pages": "page",
}
_SINGULAR_TO_PLURAL: Dict[str, str] = {value: key for key, value in _PLURAL_TO_SINGULAR.items()}


def to_singular(token: str) -> str:
    """Canonical singular form of a type token; unknown tokens pass through."""
    value = str(token)
    return _PLURAL_TO_SINGULAR.get(value, value)


def to_plural(token: str) -> str:
    """Canonical plural form of a type token; unknown tokens pass through."""
    value = str(token)
    return _SINGULAR_TO_PLURAL.get(value, value)


def singularize_path(path: str) -> str:
    """Singularize every type segment of a slash-separated name (``atoms/link`` -> ``atom/link``)."""
    parts = str(path).replace("\\", "/").split("/")
    return "/".join(to_singular(part) for part in parts if part not in ("", "."))


def pluralize_name(name: str) -> str:
    """Pattern name with its leading type segment in plural form."""
    head, _, rest = str(name).partition("/")
    plural = to_plural(head)
    return f"{plural}/{rest}" if rest else plural


def type_from_name(name: str) -> Optional[str]:
    """Derive a pattern type from a hierarchical name, ``None`` for single segments."""
    parts = str(name).split("/")
    if len(parts) > 1 and parts[0]:
        return to_singular(parts[0])
    return None


def normalize_categories(value: object) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if item is not None and item != ""]
    return [str(value)]


def filter_patterns(
    patterns: Mapping[str, Pattern], type_or_category: Optional[str] = None
) -> Dict[str, Pattern]:
    """Patterns whose name contains the token or whose categories include it."""
    if not type_or_category:
        return dict(patterns)
    token = str(type_or_category)
    return {
        name: pattern
        for name, pattern in patterns.items()
        if token in name or token in pattern.categories
    }


def patterns_in_category(patterns: Mapping[str, Pattern], slug: str) -> Dict[str, Pattern]:
    return {name: pattern for name, pattern in patterns.items() if slug in pattern.categories}


def patterns_of_type(patterns: Mapping[str, Pattern], type_name: str) -> Dict[str, Pattern]:
    singular = to_singular(type_name)
    return {name: pattern for name, pattern in patterns.items() if pattern.type == singular}


def extract_categories(patterns: Mapping[str, Pattern]) -> List[Category]:
    """Build one Category per distinct slug, sorted by slug.

    Pure with respect to ``patterns``: each call rebuilds every Category.
    """
    slugs: List[str] = []
    for pattern in patterns.values():
        for slug in normalize_categories(pattern.categories):
            if slug not in slugs:
                slugs.append(slug)

    categories = [
        Category(slug=slug, patterns=patterns_in_category(patterns, slug)) for slug in slugs
    ]
    return sorted(categories, key=lambda category: category.slug)


def pattern_types(patterns: Iterable[Pattern]) -> List[str]:
    """Distinct pattern types in first-seen order."""
    seen: List[str] = []
    for pattern in patterns:
        if pattern.type and pattern.type not in seen:
            seen.append(pattern.type)
    return seen


__all__ = [
    "extract_categories",
    "filter_patterns",
    "normalize_categories",
    "pattern_types",
    "patterns_in_category",
    "patterns_of_type",
    "pluralize_name",
    "singularize_path",
    "to_plural",
    "to_singular",
    "type_from_name",
]
