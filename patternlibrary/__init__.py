"""Documentation-site builder for UI pattern libraries."""

from .config import LibraryConfig, build_config, load_config
from .errors import (
    AdapterError,
    AdapterRegistrationError,
    ConfigError,
    MarkdownError,
    PatternLibraryError,
    SourceError,
    TemplateError,
)
from .pipeline import BuildResult, PatternLibrary
from .registry import Registry

__version__ = "0.4.0"

__all__ = [
    "AdapterError",
    "AdapterRegistrationError",
    "BuildResult",
    "ConfigError",
    "LibraryConfig",
    "MarkdownError",
    "PatternLibrary",
    "PatternLibraryError",
    "Registry",
    "SourceError",
    "TemplateError",
    "build_config",
    "load_config",
]
