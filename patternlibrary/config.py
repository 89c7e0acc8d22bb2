"""Configuration loading for patternlibrary (.patternlibrary.yml)."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".patternlibrary.yml"

GUI_ROOT = Path(__file__).with_name("gui")

DEFAULT_OPTIONS: Dict[str, Any] = {
    # project templates, partials, target-dir, etc.
    "root": "src/pages/",
    "layouts": "src/layouts/",
    "partials": "src/partials/",
    "data": "src/data/",
    "helpers": "src/helpers/",
    "dest": "dist/",
    # URL sub-paths below dest
    "basepath": "pl/",
    "patternspath": "patterns/",
    "categoriespath": "categories/",
    "verbose": False,
    "pattern": {
        "source": "*.{html,hbs,handlebars,j2}",
        "readme": "{readme,info}.{md,markdown}",
        "searchpath": "**",
        "target": "index.html",
        "dirs": {
            "atoms": "atoms/",
            "molecules": "molecules/",
            "organisms": "organisms/",
            "templates": "templates/",
            "pages": "pages/",
        },
    },
    "gui": {
        "pages": str(GUI_ROOT / "pages"),
        "layouts": str(GUI_ROOT / "layouts"),
        "partials": str(GUI_ROOT / "partials"),
        "layout": "patternlibrary",
        "docpage": "patterndocs.html",
        "dashboard": "dashboard.html",
        "patternlist": "patterns/index.html",
        "categorylist": "categories/index.html",
    },
    "adapters": {},
}

_REQUIRED_PATHS = ("root", "partials", "layouts", "data", "dest")
_REQUIRED_SUBPATHS = ("basepath", "patternspath", "categoriespath")
_REQUIRED_PATTERN = ("source", "readme", "searchpath", "target", "dirs")
_REQUIRED_GUI = (
    "pages",
    "layouts",
    "partials",
    "layout",
    "docpage",
    "dashboard",
    "patternlist",
    "categorylist",
)


@dataclass(frozen=True)
class PatternOptions:
    """Where pattern partials and their documentation files live."""

    source: str
    readme: str
    searchpath: str
    target: str
    # pattern type directories, keyed by plural type name
    dirs: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GuiOptions:
    """Bundled default templates, the fallback tier for layouts and pages."""

    pages: Path
    layouts: Path
    partials: Path
    layout: str
    docpage: str
    dashboard: str
    patternlist: str
    categorylist: str


@dataclass(frozen=True)
class LibraryConfig:
    """Validated, immutable build configuration."""

    root: Path
    partials: Path
    layouts: Path
    data: Path
    dest: Path
    helpers: Optional[Path]
    basepath: str
    patternspath: str
    categoriespath: str
    pattern: PatternOptions
    gui: GuiOptions
    verbose: bool = False
    adapters: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    # unknown top-level options, exposed to templates through ``options``
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def base_dest(self) -> Path:
        """Directory holding the library pages and snapshots."""
        return self.dest / self.basepath

    @property
    def patterns_dest(self) -> Path:
        return self.dest / self.basepath / self.patternspath

    @property
    def categories_dest(self) -> Path:
        return self.dest / self.basepath / self.categoriespath

    def adapter_options(self, name: str) -> Dict[str, Any]:
        return dict(self.adapters.get(name) or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "partials": str(self.partials),
            "layouts": str(self.layouts),
            "data": str(self.data),
            "helpers": str(self.helpers) if self.helpers else None,
            "dest": str(self.dest),
            "basepath": self.basepath,
            "patternspath": self.patternspath,
            "categoriespath": self.categoriespath,
            "verbose": self.verbose,
            "pattern": {
                "source": self.pattern.source,
                "readme": self.pattern.readme,
                "searchpath": self.pattern.searchpath,
                "target": self.pattern.target,
                "dirs": dict(self.pattern.dirs),
            },
            "gui": {
                "pages": str(self.gui.pages),
                "layouts": str(self.gui.layouts),
                "partials": str(self.gui.partials),
                "layout": self.gui.layout,
                "docpage": self.gui.docpage,
                "dashboard": self.gui.dashboard,
                "patternlist": self.gui.patternlist,
                "categorylist": self.gui.categorylist,
            },
            "adapters": copy.deepcopy(self.adapters),
            **copy.deepcopy(self.extra),
        }


def build_config(
    options: Mapping[str, Any] | None = None, *, base_dir: Path | None = None
) -> LibraryConfig:
    """Merge options over the defaults, validate and freeze them."""
    merged = deep_merge(DEFAULT_OPTIONS, options or {})
    _validate(merged)

    base = (base_dir or Path.cwd()).expanduser()
    pattern = merged["pattern"]
    gui = merged["gui"]
    known = set(DEFAULT_OPTIONS)

    return LibraryConfig(
        root=_as_path(base, merged["root"]),
        partials=_as_path(base, merged["partials"]),
        layouts=_as_path(base, merged["layouts"]),
        data=_as_path(base, merged["data"]),
        helpers=None if _is_empty(merged.get("helpers")) else _as_path(base, merged["helpers"]),
        dest=_as_path(base, merged["dest"]),
        basepath=_as_subpath(merged["basepath"]),
        patternspath=_as_subpath(merged["patternspath"]),
        categoriespath=_as_subpath(merged["categoriespath"]),
        pattern=PatternOptions(
            source=str(pattern["source"]),
            readme=str(pattern["readme"]),
            searchpath=str(pattern["searchpath"]),
            target=str(pattern["target"]),
            dirs={str(key): str(value) for key, value in _as_dict(pattern["dirs"]).items()},
        ),
        gui=GuiOptions(
            pages=_as_path(base, gui["pages"]),
            layouts=_as_path(base, gui["layouts"]),
            partials=_as_path(base, gui["partials"]),
            layout=str(gui["layout"]),
            docpage=str(gui["docpage"]),
            dashboard=str(gui["dashboard"]),
            patternlist=str(gui["patternlist"]),
            categorylist=str(gui["categorylist"]),
        ),
        verbose=bool(merged.get("verbose")),
        adapters={
            str(name): dict(value)
            for name, value in _as_dict(merged.get("adapters")).items()
            if isinstance(value, Mapping)
        },
        extra={key: value for key, value in merged.items() if key not in known},
    )


def load_config(config_path: Path, overrides: Mapping[str, Any] | None = None) -> LibraryConfig:
    """Load configuration from disk; paths are relative to the config file."""
    config_file = _resolve_config_path(config_path)
    base_dir = config_file.parent

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
    if overrides:
        data = deep_merge(data, overrides)
    return build_config(data, base_dir=base_dir)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a new mapping with ``override`` merged recursively over ``base``."""
    result: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _validate(options: Mapping[str, Any]) -> None:
    for key in _REQUIRED_PATHS:
        if _is_empty(options.get(key)):
            raise ConfigError(f'A source/target path option "{key}" must be set.')
    for key in _REQUIRED_SUBPATHS:
        if _is_empty(options.get(key)):
            raise ConfigError(f'An URL sub-path option "{key}" must be set.')

    pattern = options.get("pattern")
    if not isinstance(pattern, Mapping) or not pattern:
        raise ConfigError('The "pattern" options must be defined.')
    for key in _REQUIRED_PATTERN:
        if _is_empty(pattern.get(key)):
            raise ConfigError(f'The pattern option "pattern.{key}" must be set.')

    gui = options.get("gui")
    if not isinstance(gui, Mapping) or not gui:
        raise ConfigError('The "gui" options must be defined.')
    for key in _REQUIRED_GUI:
        if _is_empty(gui.get(key)):
            raise ConfigError(f'The GUI option "gui.{key}" must be set.')


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, Mapping, list, tuple)) and not value:
        return True
    return False


def _as_path(base: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = base / path
    return path


def _as_subpath(value: Any) -> str:
    text = str(value).strip().strip("/")
    return f"{text}/" if text else ""


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_OPTIONS",
    "GuiOptions",
    "LibraryConfig",
    "PatternOptions",
    "build_config",
    "deep_merge",
    "load_config",
]
