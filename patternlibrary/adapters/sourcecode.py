"""Sourcecode adapter: highlighted template source of a pattern."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from markupsafe import escape

from ..markup import highlight_code
from ..sources import parse_text
from .base import Adapter, read_existing

CODE_TEMPLATE = (
    '<div class="docs-code" data-patternlibrary-copycode>\n'
    '<div class="language-{language}">{code}</div>\n'
    "</div>\n"
)


def code_result(language: str, source: str, *, filename: str | None = None) -> Dict[str, str]:
    highlighted = highlight_code(language, source, filename=filename)
    return {
        "highlight": CODE_TEMPLATE.format(language=language, code=highlighted),
        "escaped": str(escape(source)),
        "raw": source,
    }


class SourcecodeAdapter(Adapter):
    name = "sourcecode"
    defaults = {"verbose": False, "language": "html"}

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        text = read_existing(value)
        if text is None:
            return False
        body = parse_text(text, origin=value).body
        return code_result(str(config.get("language") or "html"), body)
