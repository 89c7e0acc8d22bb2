"""Template helpers: the bundled ones and loading project helper modules.

Every ``*.py`` file below the ``helpers`` directory is imported; the names in
its ``__all__`` (or else every public function it defines) become Jinja
globals and filters under their own names.
"""

from __future__ import annotations

import importlib.util
import inspect
import sys
import uuid
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Optional

from jinja2 import pass_context

from .errors import TemplateError
from .logging import get_logger

_logger = get_logger("helpers")

UID_PREFIX = "uid-"

_LOREM_SHORT = (
    "Lorem ipsum dolor sit amet, consetetur sadipscing elitr, sed diam nonumy eirmod \n"
    "tempor invidunt ut labore et dolore magna aliquyam erat, sed diam voluptua."
)
_LOREM_NORMAL = (
    _LOREM_SHORT[:-1]
    + ". At \nvero eos et accusam et justo duo dolores et ea rebum. Stet clita kasd gubergren, \n"
    "no sea takimata sanctus est Lorem ipsum dolor sit amet."
)
_LOREM_LONG = (
    _LOREM_NORMAL
    + " Lorem ipsum dolor sit amet, \n"
    "consetetur sadipscing elitr, sed diam nonumy eirmod tempor invidunt ut labore et dolore \n"
    "magna aliquyam erat, sed diam voluptua. At vero eos et accusam et justo duo dolores et ea \n"
    "rebum. Stet clita kasd gubergren, no sea takimata sanctus est Lorem ipsum dolor sit amet. \n"
    "Lorem ipsum dolor sit amet, consetetur sadipscing elitr, sed diam nonumy eirmod tempor \n"
    "invidunt ut labore et dolore magna aliquyam erat, sed diam voluptua. At vero eos et accusam \n"
    "et justo duo dolores et ea rebum. Stet clita kasd gubergren, no sea takimata sanctus est \n"
    "Lorem ipsum dolor sit amet."
)
_LOREM_XLONG = (
    _LOREM_LONG
    + " Duis autem vel eum iriure dolor in hendrerit in vulputate velit \n"
    "esse molestie consequat, vel illum dolore eu feugiat nulla facilisis at vero eros et accumsan \n"
    "et iusto odio dignissim qui blandit praesent luptatum zzril delenit augue duis dolore te \n"
    "feugait nulla facilisi. Lorem ipsum dolor sit amet,"
)

SAMPLE_TEXTS: Dict[str, str] = {
    # product
    "product-name": "An Awesome Product Name",
    "product-id": "98765-432109",
    "product-ean": "987-65432-109-8",
    # contact
    "name": "Marianne Mustermann",
    "name-rev": "Mustermann, Marianne",
    "prename": "Marianne",
    "lastname": "Mustermann",
    "street": "Musterstraße",
    "housenumber": "12a",
    "streetnr": "Musterstraße 12a",
    "zipcode": "12345",
    "city": "Musterstadt",
    "zipcity": "12345 Musterstadt",
    "cityzip": "Musterstadt, 12345",
    "country": "Deutschland",
    "iso": "DE",
    "phone": "+49 1234 5678-9012",
    "email": "contact@example.com",
    "url": "https://www.example.com",
    "social": "@twitter_user",
    # date/time
    "time": "13:54h",
    "date": "12.06.2017",
    "date-long": "12. Juni 2017",
    # text
    "word": "Loremipsum",
    "word-dashed": "Lorem-ipsum",
    "words": "Lorem ipsum dolor sit amet",
    "short": _LOREM_SHORT,
    "normal": _LOREM_NORMAL,
    "long": _LOREM_LONG,
    "xlong": _LOREM_XLONG,
}


def texthelper(mode: Optional[str] = None) -> str:
    """Consistent sample content for pattern markup; unknown modes give ``short``."""
    return SAMPLE_TEXTS.get(str(mode or "short"), _LOREM_SHORT)


class UniqueIds:
    """``uid-xxx-yxxx`` generator; named ids repeat until :meth:`reset`."""

    def __init__(self) -> None:
        self._named: Dict[str, str] = {}

    def __call__(self, name: Optional[str] = None) -> str:
        if name and name in self._named:
            return self._named[name]
        digits = uuid.uuid4().hex
        variant = "89ab"[int(digits[3], 16) & 0x3]
        uid = f"{UID_PREFIX}{digits[:3]}-{variant}{digits[4:7]}"
        if name:
            self._named[name] = uid
        return uid

    def reset(self) -> None:
        self._named.clear()


def _page_matches(context: Any, names: tuple[str, ...]) -> bool:
    return str(context.get("page") or "") in {str(name) for name in names}


@pass_context
def ifpage(context: Any, *names: str) -> bool:
    """True when the page being rendered is one of ``names``."""
    return _page_matches(context, names)


@pass_context
def unlesspage(context: Any, *names: str) -> bool:
    return not _page_matches(context, names)


def load_helpers(directory: Path | None) -> Dict[str, Callable[..., Any]]:
    """Import the helper modules below ``directory`` and collect their callables."""
    if directory is None or not Path(directory).is_dir():
        return {}
    helpers: Dict[str, Callable[..., Any]] = {}
    for path in sorted(Path(directory).rglob("*.py")):
        if path.name.startswith("_"):
            continue
        module = _import_helper_module(path)
        found = _module_helpers(module)
        if not found:
            _logger.warning("Helper module %s exports no callables", path)
        for name, helper in found.items():
            if name in helpers:
                _logger.debug("Helper '%s' from %s replaces an earlier definition", name, path)
            helpers[name] = helper
    _logger.debug("Loaded %d project helper(s) from %s", len(helpers), directory)
    return helpers


def _import_helper_module(path: Path) -> ModuleType:
    module_name = f"patternlibrary_helpers.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, str(path))
    if spec is None or spec.loader is None:
        raise TemplateError(f"Unable to load helper module {path}")
    module = importlib.util.module_from_spec(spec)
    # Registered so dataclasses and pickling can resolve ``__module__``.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise TemplateError(f"Failed to load helper module {path}: {exc}") from exc
    return module


def _module_helpers(module: ModuleType) -> Dict[str, Callable[..., Any]]:
    exported = getattr(module, "__all__", None)
    if exported is not None:
        names = [str(name) for name in exported]
    else:
        names = [
            name
            for name, value in vars(module).items()
            if not name.startswith("_")
            and inspect.isfunction(value)
            and value.__module__ == module.__name__
        ]
    return {name: getattr(module, name) for name in names if callable(getattr(module, name, None))}


__all__ = [
    "SAMPLE_TEXTS",
    "UID_PREFIX",
    "UniqueIds",
    "ifpage",
    "load_helpers",
    "texthelper",
    "unlesspage",
]
