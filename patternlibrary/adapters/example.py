"""Example adapter: renders a pattern and shows the resulting markup."""

from __future__ import annotations

from typing import Any, Mapping

from ..sources import parse_text
from .base import Adapter, read_existing
from .sourcecode import code_result


class ExampleAdapter(Adapter):
    name = "example"

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        text = read_existing(value)
        if text is None:
            return False
        parsed = parse_text(text, origin=value)
        attributes = {key: value for key, value in parsed.attributes.items() if key != "pattern"}
        data = registry.render_data(attributes)
        rendered = registry.compositor.render_string(parsed.body, data, origin=value)
        return code_result("html", rendered)
