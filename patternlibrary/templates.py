"""Two-level template composition: a Layout wrapping the current Page.

Partials (pattern bodies, plain partials and the current page registered as
``body``) live in a :class:`PartialTable` that Jinja2 reads through
:class:`PartialLoader`. Re-registering a name bumps its version so Jinja's
template cache recompiles it on the next include.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import jinja2
from jinja2 import BaseLoader, Environment, Template, TemplateNotFound, pass_context

from .categories import pluralize_name
from .config import LibraryConfig
from .errors import MarkdownError, TemplateError
from .helpers import UniqueIds, ifpage, texthelper, unlesspage
from .logging import get_logger
from .markup import MarkdownRenderer, is_markdown
from .models import Pattern
from .sources import parse_text

_logger = get_logger("templates")

BODY_PARTIAL = "body"
EMPTY_LAYOUT = '{% include "body" %}'
LAYOUT_SUFFIXES = ("", ".html", ".j2", ".hbs")


class PartialTable:
    """Named template fragments; the last registration for a name wins."""

    def __init__(self) -> None:
        self._sources: Dict[str, str] = {}
        self._versions: Dict[str, int] = {}
        self._counter = 0
        self._lock = threading.Lock()

    def register(self, name: str, source: str) -> None:
        with self._lock:
            self._counter += 1
            self._sources[name] = source
            self._versions[name] = self._counter

    def lookup(self, name: str) -> Optional[Tuple[str, int]]:
        with self._lock:
            if name not in self._sources:
                return None
            return self._sources[name], self._versions[name]

    def version(self, name: str) -> int:
        with self._lock:
            return self._versions.get(name, -1)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._sources)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._sources

    def __len__(self) -> int:
        with self._lock:
            return len(self._sources)


class PartialLoader(BaseLoader):
    """Jinja2 loader serving templates from a :class:`PartialTable`."""

    def __init__(self, partials: PartialTable) -> None:
        self.partials = partials

    def get_source(
        self, environment: Environment, template: str
    ) -> Tuple[str, Optional[str], Callable[[], bool]]:
        found = self.partials.lookup(template)
        if found is None:
            raise TemplateNotFound(template)
        source, version = found

        def uptodate() -> bool:
            return self.partials.version(template) == version

        return source, None, uptodate

    def list_templates(self) -> List[str]:
        return self.partials.names()


class TemplateCompositor:
    """Owns the Layout and Page slots and renders one through the other."""

    def __init__(
        self,
        config: LibraryConfig,
        partials: PartialTable,
        markdown: MarkdownRenderer,
        *,
        pattern_lookup: Optional[Callable[[str], Optional[Pattern]]] = None,
    ) -> None:
        self.config = config
        self.partials = partials
        self.markdown = markdown
        self._pattern_lookup = pattern_lookup
        self._lock = threading.RLock()
        self.uniqueids = UniqueIds()

        self.environment = Environment(
            loader=PartialLoader(partials),
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._install_helpers()

        self.layout: Optional[Template] = None
        self.layout_name: Optional[str] = None
        self.layout_file: Optional[Path] = None
        self.page: Optional[Template] = None
        self.page_name: Optional[str] = None
        self.page_file: Optional[Path] = None
        self.page_source: Optional[str] = None
        self.page_attributes: Dict[str, Any] = {}

    # -- slots ---------------------------------------------------------------

    def set_layout(self, name: Optional[str]) -> Template:
        """Locate, read and compile a layout; empty or ``none`` yields a body-only shell."""
        with self._lock:
            if not name or str(name).lower() == "none":
                template = self._compile(EMPTY_LAYOUT, "<empty layout>")
                self.layout, self.layout_name, self.layout_file = template, "", None
                return template

            layout_file = self.find_layout(str(name))
            if layout_file is None:
                raise TemplateError(
                    f"Layout '{name}' not found in {self.config.layouts} or {self.config.gui.layouts}"
                )
            source = _read(layout_file)
            template = self._compile(parse_text(source, origin=str(layout_file)).body, str(layout_file))
            self.layout, self.layout_name, self.layout_file = template, str(name), layout_file
            return template

    def set_page(self, spec: str | Path, *, literal: bool = False) -> Template:
        """Compile the page slot from a literal source, a page identifier or a file path.

        Identifiers resolve against the project pages first and then the
        bundled pages. Markdown files are rendered to HTML before compiling.
        """
        with self._lock:
            if literal:
                source, attributes, page_file = str(spec), {}, None
                label = "<literal page>"
            else:
                page_file = self.find_page(spec)
                if page_file is None:
                    raise TemplateError(
                        f"Page '{spec}' not found in {self.config.root / self.config.basepath} "
                        f"or {self.config.gui.pages}"
                    )
                parsed = parse_text(_read(page_file), origin=str(page_file))
                source, attributes = parsed.body, parsed.attributes
                label = str(page_file)
                if is_markdown(page_file):
                    try:
                        source = self.markdown.render(source)
                    except MarkdownError as exc:
                        raise MarkdownError(f"{exc} ({page_file})") from exc

            template = self._compile(source, label)
            self.page = template
            self.page_name = label if page_file is None else str(spec)
            self.page_file = page_file
            self.page_source = source
            self.page_attributes = attributes
            return template

    def find_layout(self, name: str) -> Optional[Path]:
        for directory in (self.config.layouts, self.config.gui.layouts):
            for suffix in LAYOUT_SUFFIXES:
                candidate = directory / f"{name}{suffix}"
                if candidate.is_file():
                    return candidate
        return None

    def find_page(self, spec: str | Path) -> Optional[Path]:
        """Paths are taken as-is; string identifiers never consult the cwd."""
        direct = Path(spec)
        if isinstance(spec, Path) or direct.is_absolute():
            return direct if direct.is_file() else None
        for directory in (self.config.root / self.config.basepath, self.config.gui.pages):
            candidate = directory / direct
            if candidate.is_file():
                return candidate
        return None

    # -- rendering -----------------------------------------------------------

    def render(self, data: Mapping[str, Any]) -> str:
        """Register the current page as ``body`` and render the layout."""
        with self._lock:
            if self.page is None or self.page_source is None:
                raise TemplateError("No page template assigned")
            if self.layout is None:
                self.set_layout(self.config.gui.layout)
            self.partials.register(BODY_PARTIAL, self.page_source)
            self.uniqueids.reset()
            label = str(self.page_file or self.page_name)
            try:
                return self.layout.render(dict(data))
            except TemplateError:
                raise
            except jinja2.TemplateError as exc:
                raise TemplateError(f"Failed to render {label}: {exc}") from exc

    def render_string(self, source: str, data: Mapping[str, Any], *, origin: str = "<string>") -> str:
        """Render an ad-hoc template without touching the layout/page slots."""
        template = self._compile(source, origin)
        try:
            return template.render(dict(data))
        except TemplateError:
            raise
        except jinja2.TemplateError as exc:
            raise TemplateError(f"Failed to render {origin}: {exc}") from exc

    def _compile(self, source: str, label: str) -> Template:
        try:
            return self.environment.from_string(source)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateError(f"Failed to compile {label}: {exc.message} (line {exc.lineno})") from exc

    # -- helpers -------------------------------------------------------------

    def _install_helpers(self) -> None:
        env = self.environment
        config = self.config

        @pass_context
        def patternlink(context: Any, name: str) -> str:
            target = pluralize_name(str(name)).strip("/")
            root = context.get("patternsroot")
            if root:
                return f"{root}{target}/"
            return f"/{config.basepath}{config.patternspath}{target}/"

        @pass_context
        def categorylink(context: Any, slug: str) -> str:
            root = context.get("categoriesroot")
            if root:
                return f"{root}{slug}/"
            return f"/{config.basepath}{config.categoriespath}{slug}/"

        @pass_context
        def pattern(context: Any, name: str, **kwargs: Any) -> str:
            found = self._pattern_lookup(str(name)) if self._pattern_lookup else None
            if found is None:
                raise TemplateError(f"Pattern '{name}' not found")
            data = dict(context.get_all())
            data.update(found.to_dict())
            data.update(kwargs)
            return self.render_string(found.body, data, origin=found.filepath or found.name)

        env.globals["patternlink"] = patternlink
        env.globals["categorylink"] = categorylink
        env.globals["pattern"] = pattern
        env.globals["texthelper"] = texthelper
        env.globals["uniqueid"] = self.uniqueids
        env.globals["ifpage"] = ifpage
        env.globals["unlesspage"] = unlesspage
        env.filters["markdown"] = lambda text: self.markdown.render(str(text or ""))

    def register_helpers(self, helpers: Mapping[str, Callable[..., Any]]) -> None:
        """Expose project helpers as globals and filters; they shadow bundled ones."""
        with self._lock:
            for name, helper in helpers.items():
                self.environment.globals[name] = helper
                self.environment.filters[name] = helper


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"Unable to read template {path}: {exc}") from exc


__all__ = [
    "BODY_PARTIAL",
    "EMPTY_LAYOUT",
    "PartialLoader",
    "PartialTable",
    "TemplateCompositor",
]
