"""Exception hierarchy shared by the build stages."""

from __future__ import annotations


class PatternLibraryError(RuntimeError):
    """Base class for unrecoverable build failures."""


class ConfigError(PatternLibraryError):
    """Raised when a required configuration option is missing or empty."""


class SourceError(PatternLibraryError):
    """Raised when a content file cannot be parsed into metadata and body."""


class TemplateError(PatternLibraryError):
    """Raised when a layout or page template is missing or fails to compile/render."""


class MarkdownError(TemplateError):
    """Raised when the Markdown renderer fails; keeps the original message."""


class AdapterError(PatternLibraryError):
    """Raised when an adapter fails while processing a documentation file."""

    def __init__(self, adapter: str, doc_file: str, message: str) -> None:
        super().__init__(f"Adapter '{adapter}' failed for {doc_file}: {message}")
        self.adapter = adapter
        self.doc_file = doc_file


class AdapterRegistrationError(ValueError):
    """Raised for unknown, reserved or invalid adapter registrations."""


__all__ = [
    "AdapterError",
    "AdapterRegistrationError",
    "ConfigError",
    "MarkdownError",
    "PatternLibraryError",
    "SourceError",
    "TemplateError",
]
