"""Markdown rendering and syntax highlighting."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import markdown
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename
from pygments.util import ClassNotFound

from .errors import MarkdownError

MARKDOWN_SUFFIXES = (".md", ".markdown")

_DEFAULT_EXTENSIONS: List[str] = [
    "tables",
    "fenced_code",
    "toc",
    "attr_list",
    "abbr",
    "def_list",
    "footnotes",
    "codehilite",
]

_EXTENSION_CONFIGS: Dict[str, Dict[str, Any]] = {
    "codehilite": {
        "css_class": "highlight",
        "guess_lang": False,
    }
}


def is_markdown(path: Path | str) -> bool:
    return Path(str(path)).suffix.lower() in MARKDOWN_SUFFIXES


class MarkdownRenderer:
    """Thread-safe wrapper around a reusable ``markdown.Markdown`` instance."""

    def __init__(self, extensions: Optional[List[str]] = None) -> None:
        self._md = markdown.Markdown(
            extensions=list(extensions or _DEFAULT_EXTENSIONS),
            extension_configs=_EXTENSION_CONFIGS,
        )
        self._lock = threading.Lock()

    def render(self, text: str) -> str:
        """Convert Markdown ``text`` to HTML."""
        with self._lock:
            self._md.reset()
            try:
                return self._md.convert(text or "")
            except Exception as exc:
                raise MarkdownError(f"Markdown error: {exc}") from exc


_FORMATTER = HtmlFormatter(cssclass="highlight")


def highlight_code(language: Optional[str], code: str, *, filename: Optional[str] = None) -> str:
    """Render ``code`` as highlighted HTML, falling back to plain text."""
    lexer = _lexer_for(language, filename)
    return highlight(code, lexer, _FORMATTER)


def _lexer_for(language: Optional[str], filename: Optional[str]):
    if language:
        try:
            return get_lexer_by_name(language)
        except ClassNotFound:
            pass
    if filename:
        try:
            return get_lexer_for_filename(filename)
        except ClassNotFound:
            pass
    return TextLexer()


__all__ = ["MARKDOWN_SUFFIXES", "MarkdownRenderer", "highlight_code", "is_markdown"]
