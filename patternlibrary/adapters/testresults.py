"""Tests adapter: lists the test cases declared in a pattern's test file."""

from __future__ import annotations

import re
from typing import Any, List, Mapping

from .base import Adapter, read_existing

_CASE_PATTERNS = (
    re.compile(r"""\b(?:it|test)\s*\(\s*(['"`])(?P<name>.+?)\1"""),
    re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>test_\w+)\s*\(", re.MULTILINE),
)
_SUITE_PATTERN = re.compile(r"""\bdescribe\s*\(\s*(['"`])(?P<name>.+?)\1""")


class TestsAdapter(Adapter):
    name = "tests"
    __test__ = False

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        text = read_existing(value)
        if text is None:
            return False
        cases: List[str] = []
        for pattern in _CASE_PATTERNS:
            for match in pattern.finditer(text):
                cases.append(match.group("name"))
        suites = [match.group("name") for match in _SUITE_PATTERN.finditer(text)]
        return {"file": value, "suites": suites, "cases": cases, "count": len(cases)}
