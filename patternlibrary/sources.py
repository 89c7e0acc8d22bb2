"""Split content files into a YAML metadata header and a body."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import frontmatter
import yaml

from .errors import SourceError
from .models import SourceFile


def parse_text(text: str, *, origin: str | None = None) -> SourceFile:
    """Parse front matter from ``text``; files without a header get ``{}``."""
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as exc:
        label = origin or "<string>"
        raise SourceError(f"Invalid front matter in {label}: {exc}") from exc

    attributes: Dict[str, Any] = dict(post.metadata or {})
    return SourceFile(attributes=attributes, body=post.content, path=origin)


def parse_source(path: Path | str) -> SourceFile:
    """Read and parse a content file from disk."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceError(f"Unable to read {file_path}: {exc}") from exc
    return parse_text(text, origin=str(file_path))


__all__ = ["parse_source", "parse_text"]
