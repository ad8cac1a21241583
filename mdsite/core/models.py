"""Domain models for build configuration, documents and reports."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BuildConfig(BaseModel):
    """Resolved configuration for one build."""

    model_config = ConfigDict(frozen=True)

    content_root: Path = Field(..., description="Directory holding Markdown sources")
    output_root: Path = Field(..., description="Directory receiving generated HTML")
    template_path: Path = Field(..., description="Jinja2 page template")
    source_suffixes: tuple[str, ...] = Field(
        default=(".md",), min_length=1, description="Suffixes marking document sources"
    )
    file_mode: int = Field(default=0o644, description="File permissions (octal)")
    max_workers: int = Field(default=1, ge=1, description="Parallel transform workers")

    @field_validator("source_suffixes")
    @classmethod
    def _check_suffixes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for suffix in value:
            if not suffix.startswith(".") or len(suffix) < 2:
                raise ValueError(f"Suffix must look like '.md', got: {suffix!r}")
        return value


class SourceDocument(BaseModel):
    source_path: Path = Field(..., description="Path relative to the content root")
    raw_text: str


class DocumentMetadata(BaseModel):
    title: str | None = None
    date: str | None = None
    extra: dict[str, str] = Field(default_factory=dict)


class RenderedPage(BaseModel):
    destination_path: Path = Field(..., description="Path relative to the output root")
    html: str


class ErrorKind(str, Enum):
    READ = "read"
    RENDER = "render"
    COMPOSE = "compose"
    WRITE = "write"


class FailedEntry(BaseModel):
    source_path: Path
    kind: ErrorKind
    message: str


class BuildReport(BaseModel):
    """Outcome of a build: one entry per discovered source, in discovery order."""

    succeeded: list[Path] = Field(default_factory=list)
    failed: list[FailedEntry] = Field(default_factory=list)

    @property
    def discovered(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return f"{len(self.succeeded)} succeeded, {len(self.failed)} failed"
