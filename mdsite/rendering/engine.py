"""Page template loading and composition."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, meta
from jinja2.exceptions import TemplateError as JinjaTemplateError
from markupsafe import Markup

from ..core.errors import ComposeError, TemplateError
from ..core.models import DocumentMetadata, RenderedPage

logger = logging.getLogger(__name__)

CONTENT_PLACEHOLDER = "content"
TITLE_PLACEHOLDER = "title"


@dataclass(frozen=True)
class PageTemplate:
    """A compiled page template and the placeholders it references."""

    path: Path
    template: Template
    placeholders: frozenset[str]


def _environment(search_path: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(search_path)),
        undefined=StrictUndefined,
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _collect_placeholders(env: Environment, name: str) -> frozenset[str]:
    """Undeclared variables of a template and every template it extends, includes or imports.

    Dynamic references (e.g. ``{% include some_var %}``) cannot be followed and are skipped.
    """
    found: set[str] = set()
    pending = [name]
    seen: set[str] = set()
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        source, _, _ = env.loader.get_source(env, current)
        ast = env.parse(source)
        found.update(meta.find_undeclared_variables(ast))
        pending.extend(ref for ref in meta.find_referenced_templates(ast) if ref is not None)
    return frozenset(found)


def load_template(template_path: Path) -> PageTemplate:
    """Load and validate the page template.

    Args:
        template_path: Path to the Jinja2 template file

    Returns:
        Compiled template with its referenced placeholders

    Raises:
        TemplateError: File missing or unreadable, syntax error, missing referenced
            template, or no content placeholder (searched through extended
            and included templates)
    """
    if not template_path.is_file():
        raise TemplateError(f"Template not found: {template_path}")

    env = _environment(template_path.parent)
    try:
        placeholders = _collect_placeholders(env, template_path.name)
        template = env.get_template(template_path.name)
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateError(f"Cannot read template {template_path}: {exc}") from exc
    except JinjaTemplateError as exc:
        raise TemplateError(f"Cannot parse template {template_path}: {exc}") from exc

    if CONTENT_PLACEHOLDER not in placeholders:
        raise TemplateError(
            f"Template {template_path} does not reference the "
            f"'{{{{ {CONTENT_PLACEHOLDER} }}}}' placeholder"
        )
    if TITLE_PLACEHOLDER not in placeholders:
        logger.warning(f"Template {template_path} does not reference '{TITLE_PLACEHOLDER}'")

    logger.debug(f"Loaded template {template_path} ({sorted(placeholders)})")
    return PageTemplate(path=template_path, template=template, placeholders=placeholders)


def relative_root(destination: Path) -> str:
    """Prefix leading from a page back to the output root, e.g. ``../`` for ``a/b.html``."""
    depth = len(PurePosixPath(destination.as_posix()).parent.parts)
    return "../" * depth


def compose_page(
    page_template: PageTemplate,
    metadata: DocumentMetadata,
    fragment: str,
    destination: Path,
    source_path: Path | None = None,
) -> RenderedPage:
    """Bind metadata and an HTML fragment into the page template.

    The fragment is inserted unescaped; every metadata value is escaped.

    Args:
        page_template: Template returned by load_template
        metadata: Document metadata
        fragment: HTML produced from the document body
        destination: Output path relative to the output root
        source_path: Source path relative to the content root

    Returns:
        The complete page
    """
    context = {
        "title": metadata.title or "",
        "date": metadata.date or "",
        "extra": dict(metadata.extra),
        "content": Markup(fragment),
        "source_path": source_path.as_posix() if source_path is not None else "",
        "root": relative_root(destination),
    }
    try:
        html = page_template.template.render(**context)
    except Exception as exc:
        raise ComposeError(f"Template rendering failed: {exc}") from exc

    return RenderedPage(destination_path=destination, html=html)
