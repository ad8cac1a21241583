"""Main CLI application."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from ..core.errors import DiscoveryError, TemplateError
from ..core.models import BuildConfig
from ..core.settings import Settings
from ..pipeline import BuildPipeline
from ..rendering.io import atomic_write_text, copy_static
from .parsers import parse_file_mode, parse_suffix

logger = logging.getLogger(__name__)

EXIT_PARTIAL = 1
EXIT_FATAL = 2

app = typer.Typer(
    name="mdsite",
    help="Build a static HTML site from a directory of Markdown documents.",
)


@app.command()
def build(
    content: Annotated[
        Optional[Path],
        typer.Option(
            "--content",
            help="Directory holding Markdown sources (default: $MDSITE_CONTENT_DIR or ./content).",
            metavar="DIR",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output directory (default: $MDSITE_OUTPUT_DIR or ./public).",
            metavar="DIR",
        ),
    ] = None,
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Jinja2 page template (default: $MDSITE_TEMPLATE or ./templates/page.html).",
            metavar="FILE",
        ),
    ] = None,
    suffixes: Annotated[
        Optional[list[str]],
        typer.Option(
            "--suffix",
            help="Source file suffix. Repeatable (default: .md).",
            metavar="SUFFIX",
        ),
    ] = None,
    file_mode: Annotated[
        Optional[str],
        typer.Option(
            "--mode",
            help="Output file permissions in octal (default: 0644).",
            metavar="OCTAL",
        ),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option(
            "--workers",
            "-j",
            help="Parallel workers for page transformation (default: 1).",
            min=1,
        ),
    ] = None,
    static_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--static",
            help="Copy this directory verbatim into the output root after the build.",
            metavar="DIR",
        ),
    ] = None,
    report_json: Annotated[
        Optional[Path],
        typer.Option(
            "--report-json",
            help="Write the build report as JSON to FILE.",
            metavar="FILE",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Convert every Markdown source into an HTML page."""
    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    settings = Settings()
    try:
        config = BuildConfig(
            content_root=content or settings.content_dir,
            output_root=output or settings.output_dir,
            template_path=template or settings.template,
            source_suffixes=tuple(parse_suffix(s) for s in (suffixes or settings.suffixes)),
            file_mode=parse_file_mode(file_mode or settings.file_mode),
            max_workers=workers or settings.workers,
        )
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    logger.debug(f"Config: {config.model_dump()}")

    try:
        report = BuildPipeline(config, logger=logger).run()
    except (DiscoveryError, TemplateError) as e:
        typer.echo(f"Build aborted: {e}", err=True)
        raise typer.Exit(code=EXIT_FATAL) from e

    if static_dir is not None:
        try:
            copy_static(static_dir, config.output_root)
        except OSError as e:
            typer.echo(f"Static copy failed: {e}", err=True)
            raise typer.Exit(code=EXIT_PARTIAL) from e

    if report_json is not None:
        try:
            atomic_write_text(report_json, report.model_dump_json(indent=2) + "\n")
        except OSError as e:
            typer.echo(f"Cannot write report {report_json}: {e}", err=True)
            raise typer.Exit(code=EXIT_PARTIAL) from e
        logger.debug(f"Report written to {report_json}")

    typer.echo(report.summary())
    for entry in report.failed:
        typer.echo(f"  {entry.source_path.as_posix()}: [{entry.kind.value}] {entry.message}", err=True)

    if not report.ok:
        raise typer.Exit(code=EXIT_PARTIAL)


@app.command("init-template")
def init_template(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the default page template.", metavar="PATH"),
    ] = Path("templates/page.html"),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing file."),
    ] = False,
) -> None:
    """Write the bundled default page template."""
    if path.exists() and not force:
        typer.echo(f"{path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=EXIT_PARTIAL)

    text = resources.files("mdsite").joinpath("templates").joinpath("page.html").read_text(encoding="utf-8")
    atomic_write_text(path, text)
    typer.echo(f"Wrote {path}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
