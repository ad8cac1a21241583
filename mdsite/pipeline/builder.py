"""Build orchestration: one discovered source in, one report entry out."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterator

from ..content.frontmatter import derive_title, extract_front_matter
from ..content.markdown import render_markdown
from ..content.scanner import scan_sources
from ..core.errors import (
    ComposeError,
    RenderError,
    SiteBuildError,
    SourceReadError,
    WriteError,
)
from ..core.models import (
    BuildConfig,
    BuildReport,
    ErrorKind,
    FailedEntry,
    RenderedPage,
    SourceDocument,
)
from ..rendering.engine import PageTemplate, compose_page, load_template
from ..rendering.io import destination_for, write_page

Renderer = Callable[[str], str]

_ERROR_KINDS: dict[type[SiteBuildError], ErrorKind] = {
    SourceReadError: ErrorKind.READ,
    RenderError: ErrorKind.RENDER,
    ComposeError: ErrorKind.COMPOSE,
    WriteError: ErrorKind.WRITE,
}


class BuildPipeline:
    """Full, stateless site build.

    DiscoveryError and TemplateError propagate to the caller and abort the
    build. Every other failure is confined to its file and recorded in the
    returned BuildReport.
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        logger: logging.Logger | None = None,
        renderer: Renderer = render_markdown,
    ) -> None:
        self.config = config
        self.log = logger or logging.getLogger(__name__)
        self.renderer = renderer

    def run(self) -> BuildReport:
        config = self.config
        sources = scan_sources(
            config.content_root,
            suffixes=config.source_suffixes,
            exclude=[config.output_root],
        )
        page_template = load_template(config.template_path)
        self.log.info(f"Building {len(sources)} page(s) from {config.content_root}")

        report = BuildReport()
        claimed: dict[str, Path] = {}
        for source, outcome in self._transform_all(sources, page_template):
            if isinstance(outcome, SiteBuildError):
                self._record_failure(report, source, outcome)
                continue
            try:
                written = self._write(source, outcome, claimed)
            except WriteError as exc:
                self._record_failure(report, source, exc)
                continue
            self.log.info(f"Built {source.as_posix()} → {written}")
            report.succeeded.append(written)

        self.log.info(f"Build finished: {report.summary()}")
        return report

    def _record_failure(
        self, report: BuildReport, source: Path, exc: SiteBuildError
    ) -> None:
        kind = next(k for cls, k in _ERROR_KINDS.items() if isinstance(exc, cls))
        self.log.error(f"Failed {source.as_posix()} ({kind.value}): {exc}")
        report.failed.append(FailedEntry(source_path=source, kind=kind, message=str(exc)))

    def _transform_all(
        self, sources: list[Path], page_template: PageTemplate
    ) -> Iterator[tuple[Path, RenderedPage | SiteBuildError]]:
        """Yield (source, page-or-error) in discovery order."""
        if self.config.max_workers <= 1 or len(sources) <= 1:
            for source in sources:
                yield source, self._attempt(source, page_template)
            return

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            futures = [
                pool.submit(self._attempt, source, page_template) for source in sources
            ]
            for source, future in zip(sources, futures):
                yield source, future.result()

    def _attempt(
        self, source: Path, page_template: PageTemplate
    ) -> RenderedPage | SiteBuildError:
        try:
            return self.transform(self.read(source), page_template)
        except (SourceReadError, RenderError, ComposeError) as exc:
            return exc

    def read(self, source: Path) -> SourceDocument:
        path = self.config.content_root / source
        try:
            raw_text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"Cannot read {path}: {exc}") from exc
        return SourceDocument(source_path=source, raw_text=raw_text)

    def transform(self, document: SourceDocument, page_template: PageTemplate) -> RenderedPage:
        """Run extraction, rendering and composition for one document."""
        source = document.source_path
        front = extract_front_matter(
            document.raw_text,
            fallback_title=derive_title(source),
            source=source,
            log=self.log,
        )
        self.log.debug(f"{source.as_posix()}: metadata {front.metadata.model_dump()}")

        try:
            fragment = self.renderer(front.body)
        except Exception as exc:
            raise RenderError(f"Markdown conversion failed: {exc}") from exc

        return compose_page(
            page_template,
            front.metadata,
            fragment,
            destination_for(source),
            source_path=source,
        )

    def _write(self, source: Path, page: RenderedPage, claimed: dict[str, Path]) -> Path:
        # case-folded so a.md and A.md collide on case-insensitive filesystems too
        key = page.destination_path.as_posix().casefold()
        owner = claimed.get(key)
        if owner is not None:
            raise WriteError(
                self.config.output_root / page.destination_path,
                f"destination already produced by {owner.as_posix()}",
            )
        written = write_page(page, self.config.output_root, mode=self.config.file_mode)
        # only successful writes claim a destination
        claimed[key] = source
        return written


def build_site(config: BuildConfig, *, logger: logging.Logger | None = None) -> BuildReport:
    """Run a full build with the default Markdown renderer."""
    return BuildPipeline(config, logger=logger).run()
