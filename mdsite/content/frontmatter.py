"""Front matter extraction for Markdown sources."""

from __future__ import annotations

import datetime as dt
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict

from ..core.errors import MetadataWarning
from ..core.models import DocumentMetadata

logger = logging.getLogger(__name__)

_DELIMITER_LINE = re.compile(r"^---[ \t]*$")


class FrontMatter(BaseModel):
    """Result of splitting a document into metadata and body."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    metadata: DocumentMetadata
    body: str
    warning: MetadataWarning | None = None


def derive_title(source_path: Path) -> str:
    """Build a human title from a file name, e.g. ``getting-started.md`` -> ``Getting Started``."""
    stem = source_path.stem.replace("-", " ").replace("_", " ").strip()
    return stem.title() if stem else source_path.name


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return str(value)


def _split_block(text: str) -> tuple[str, str] | None:
    """Return (block, body) when text opens with a delimited block.

    Raises:
        ValueError: The opening delimiter has no matching closing line
    """
    lines = text.splitlines(keepends=True)
    if not lines or not _DELIMITER_LINE.match(lines[0].rstrip("\r\n")):
        return None
    for index in range(1, len(lines)):
        if _DELIMITER_LINE.match(lines[index].rstrip("\r\n")):
            return "".join(lines[1:index]), "".join(lines[index + 1 :])
    raise ValueError("front matter block is not terminated")


def _parse_block(block: str) -> dict[str, str]:
    data = yaml.safe_load(block)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"front matter must be a mapping, got {type(data).__name__}")

    flat: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, (dict, list, set, tuple)):
            raise ValueError(f"front matter key {key!r} is not a flat value")
        flat[str(key)] = _stringify(value)
    return flat


def extract_front_matter(
    text: str,
    *,
    fallback_title: str | None = None,
    source: Path | None = None,
    log: logging.Logger | None = None,
) -> FrontMatter:
    """Split raw document text into metadata and body.

    Never raises for malformed metadata: the whole text (minus a leading BOM)
    becomes the body, defaults are used and a MetadataWarning is attached
    and logged.

    Args:
        text: Raw document text
        fallback_title: Title applied when the block supplies none
        source: Source path, used in log messages only
        log: Logger receiving the malformed-metadata warning (default: module logger)

    Returns:
        FrontMatter with metadata, body and optional warning
    """
    trimmed = text[1:] if text.startswith("\ufeff") else text

    def _defaults() -> DocumentMetadata:
        return DocumentMetadata(title=fallback_title)

    try:
        split = _split_block(trimmed)
        if split is None:
            return FrontMatter(metadata=_defaults(), body=trimmed)
        block, body = split
        values = _parse_block(block)
    except (ValueError, RecursionError, yaml.YAMLError) as exc:
        where = f" in {source}" if source is not None else ""
        warning = MetadataWarning(f"Ignoring malformed front matter{where}: {exc}")
        (log or logger).warning(str(warning))
        return FrontMatter(metadata=_defaults(), body=trimmed, warning=warning)

    title = values.pop("title", "") or fallback_title
    date = values.pop("date", "") or None
    return FrontMatter(
        metadata=DocumentMetadata(title=title, date=date, extra=values),
        body=body,
    )
