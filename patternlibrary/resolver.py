"""Path resolution helpers: adapter file lookup, globbing and link prefixes."""

from __future__ import annotations

import glob as globlib
import os
import re
from pathlib import Path
from typing import Iterable, List

from .logging import get_logger

_logger = get_logger("resolver")

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def resolve_path(declared: str, pattern_dir: Path | str, partials_root: Path | str) -> str:
    """Find the real file behind a declared adapter value.

    Lookup order, first existing wins:

    1. ``pattern_dir/declared``
    2. ``pattern_dir/*/declared`` (one-level wildcard subdirectory)
    3. ``partials_root/declared`` (shared assets)
    4. ``declared`` as given

    A glob value (``*.scss``, ``{a,b}.js``) is never matched literally. It is
    anchored to the first of tiers 1-3 whose expansion finds a file and
    returned as a pattern, so :func:`related_files` and adapters expand it
    later. An unmatched glob stays as declared.

    When nothing matches the declared value is returned unchanged; the adapter
    reports the missing file itself.
    """
    value = str(declared)
    if not value:
        return value

    base = Path(pattern_dir)
    if is_glob(value):
        for anchored in (base / value, base / "*" / value, Path(partials_root) / value):
            if related_files(str(anchored)):
                return str(anchored)
        _logger.debug("No file matches glob '%s' (looked in %s and %s)", value, base, partials_root)
        return value

    candidate = base / value
    if candidate.exists():
        return str(candidate)

    nested = sorted(globlib.glob(str(base / "*" / value)))
    if nested:
        return nested[0]

    shared = Path(partials_root) / value
    if shared.exists():
        return str(shared)

    if Path(value).exists():
        return value

    _logger.debug("No file found for '%s' (looked in %s and %s)", value, base, partials_root)
    return value


def is_glob(value: str) -> bool:
    return any(char in value for char in "*?[{")


def expand_braces(pattern: str) -> List[str]:
    """Expand shell-style ``{a,b}`` alternatives into separate glob patterns."""
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        for item in expand_braces(f"{head}{option}{tail}"):
            if item not in expanded:
                expanded.append(item)
    return expanded


def glob_files(directory: Path | str, pattern: str) -> List[Path]:
    """Recursively glob ``pattern`` (brace alternatives allowed) below ``directory``."""
    root = Path(directory)
    if not root.is_dir():
        return []
    found: List[Path] = []
    seen = set()
    for variant in expand_braces(pattern):
        for match in sorted(root.glob(variant)):
            if match.is_file() and match not in seen:
                seen.add(match)
                found.append(match)
    return found


def related_files(resolved: str | Iterable[str]) -> List[str]:
    """Return every existing file matched by the resolved adapter path(s)."""
    patterns = [resolved] if isinstance(resolved, str) else list(resolved)
    files: List[str] = []
    for pattern in patterns:
        for variant in expand_braces(pattern):
            for match in sorted(globlib.glob(variant, recursive=True)):
                if os.path.isfile(match) and match not in files:
                    files.append(match)
    return files


def relative_root_url(page: Path | str, root: Path | str) -> str:
    """Relative URL prefix from the directory containing ``page`` to ``root``.

    Always ends with ``/``; a page directly inside ``root`` yields ``./``.
    """
    page_dir = os.path.dirname(os.path.abspath(str(page)))
    relative = os.path.relpath(os.path.abspath(str(root)), page_dir)
    if not relative:
        relative = "."
    return relative.replace(os.sep, "/") + "/"


__all__ = [
    "expand_braces",
    "glob_files",
    "is_glob",
    "related_files",
    "relative_root_url",
    "resolve_path",
]
