"""Error taxonomy for site builds."""

from __future__ import annotations

from pathlib import Path


class SiteBuildError(Exception):
    """Base class for all build errors."""


class DiscoveryError(SiteBuildError):
    """Raised when the content root cannot be scanned. Aborts the build."""


class TemplateError(SiteBuildError):
    """Raised when the page template is missing, unparsable or incomplete. Aborts the build."""


class SourceReadError(SiteBuildError):
    """Raised when a discovered source file cannot be read or decoded."""


class RenderError(SiteBuildError):
    """Raised when a document body cannot be converted to HTML."""


class ComposeError(SiteBuildError):
    """Raised when a page cannot be rendered into the template."""


class WriteError(SiteBuildError):
    """Raised when a composed page cannot be persisted."""

    def __init__(self, destination: Path, cause: BaseException | str) -> None:
        self.destination = destination
        self.cause = cause
        super().__init__(f"Cannot write {destination}: {cause}")


class MetadataWarning(UserWarning):
    """Front matter was present but unusable; defaults were applied."""
