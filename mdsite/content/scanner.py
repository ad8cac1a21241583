"""Discovery of Markdown sources under the content root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from ..core.errors import DiscoveryError

logger = logging.getLogger(__name__)


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def scan_sources(
    content_root: Path,
    *,
    suffixes: Iterable[str] = (".md",),
    exclude: Iterable[Path] = (),
) -> list[Path]:
    """Enumerate document sources below a content root.

    Args:
        content_root: Directory to walk
        suffixes: File suffixes that mark a document source
        exclude: Directories to skip (e.g. an output root nested in the content root)

    Returns:
        Paths relative to content_root, sorted by their POSIX form
    """
    if not content_root.exists():
        raise DiscoveryError(f"Content root not found: {content_root}")
    if not content_root.is_dir():
        raise DiscoveryError(f"Content root is not a directory: {content_root}")

    root = content_root.resolve()
    wanted = frozenset(suffixes)
    excluded = [Path(p).resolve() for p in exclude]

    def _on_error(exc: OSError) -> None:
        logger.warning(f"Skipping unreadable path: {exc.filename} ({exc.strerror})")

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        # prune in place so os.walk never descends into excluded trees
        dirnames[:] = [
            name
            for name in dirnames
            if not any(_is_within(current / name, ex) for ex in excluded)
        ]
        for name in filenames:
            candidate = current / name
            if candidate.suffix not in wanted or not candidate.is_file():
                continue
            found.append(candidate.relative_to(root))

    found.sort(key=lambda p: p.as_posix())
    logger.debug(f"Discovered {len(found)} source(s) under {content_root}")
    return found
