"""Gitinfo adapter: revision history of a pattern's files."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..logging import get_logger
from .base import Adapter

_logger = get_logger("adapters.gitinfo")

_FIELDS = ("date", "timestamp", "author", "email", "message", "commit", "hash", "body")
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(("%cd", "%ct", "%an", "%ae", "%s", "%h", "%H", "%b")) + _RECORD_SEP


class GitinfoAdapter(Adapter):
    name = "gitinfo"
    defaults = {"verbose": False, "timeout": 30, "date": "short"}

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        runner: Callable[..., str] | None = None,
    ) -> None:
        super().__init__(config)
        self._runner = runner or self._default_runner

    def parse(self, value: str, config: Mapping[str, Any], registry) -> Any:
        path = Path(value) if value else None
        if path is None or not path.exists():
            return False
        cwd = path if path.is_dir() else path.parent
        timeout = float(config.get("timeout") or 30)

        if not self._inside_work_tree(cwd, timeout):
            _logger.info("Skipping git history for %s: not inside a git work tree", value)
            return False

        output = self._run(
            [
                "git",
                "log",
                f"--date={config.get('date') or 'short'}",
                f"--pretty=format:{_LOG_FORMAT}",
                "--",
                path.name if path.is_file() else ".",
            ],
            cwd=cwd,
            timeout=timeout,
        )
        entries = parse_log(output)
        return {
            "log": {
                "data": group_by_date(entries),
                "list": registry.markdown.render(compact_log(entries)),
                "full": registry.markdown.render(full_log(entries)),
            }
        }

    def _inside_work_tree(self, cwd: Path, timeout: float) -> bool:
        try:
            output = self._run(["git", "rev-parse", "--is-inside-work-tree"], cwd=cwd, timeout=timeout)
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False
        return output.strip() == "true"

    def _run(self, args: Iterable[str], *, cwd: Path, timeout: float) -> str:
        return self._runner(args, cwd=cwd, timeout=timeout)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path, timeout: float) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
        return completed.stdout


def parse_log(output: str) -> List[Dict[str, str]]:
    entries: List[Dict[str, str]] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        values = record.split(_FIELD_SEP)
        values += [""] * (len(_FIELDS) - len(values))
        entries.append({key: value.strip() for key, value in zip(_FIELDS, values)})
    return entries


def group_by_date(entries: List[Dict[str, str]]) -> Dict[str, List[Dict[str, str]]]:
    grouped: Dict[str, List[Dict[str, str]]] = {}
    for entry in entries:
        grouped.setdefault(entry["date"], []).append(entry)
    return grouped


def compact_log(entries: List[Dict[str, str]]) -> str:
    lines: List[str] = []
    for entry in entries:
        lines.append(f"### {entry['date']}\n")
        lines.append(
            f"- {entry['message']} ({entry['commit']}, by [{entry['author']}](mailto:{entry['email']}), "
            f"<{entry['email']}>)\n"
        )
    return "\n".join(lines)


def full_log(entries: List[Dict[str, str]]) -> str:
    lines: List[str] = []
    for entry in entries:
        lines.append(f"### {entry['date']}\n")
        lines.append(f"- Author: [{entry['author']}](mailto:{entry['email']}) (<{entry['email']}>)\n")
        lines.append(f"  Commit: {entry['hash']}\n")
        lines.append(f"  Message: {entry['message']}\n")
    return "\n".join(lines)
