"""Output path mapping and file persistence."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from shutil import copytree

from ..core.errors import WriteError
from ..core.models import RenderedPage

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".html"


def destination_for(source_path: Path) -> Path:
    """Map a content-relative source path to its output-relative destination.

    ``a/b.md`` -> ``a/b.html``; the directory structure is kept as is.
    """
    return source_path.with_suffix(OUTPUT_SUFFIX)


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write text to a file atomically using a temporary file.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)
    """
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def resolve_destination(destination: Path, output_root: Path) -> Path:
    """Join a relative destination onto the output root, refusing escapes.

    Raises:
        WriteError: The destination is absolute or resolves outside output_root
    """
    target = output_root / destination
    root = output_root.resolve()
    if destination.is_absolute() or not target.resolve().is_relative_to(root):
        raise WriteError(target, "path escapes the output root")
    return target


def write_page(page: RenderedPage, output_root: Path, *, mode: int = 0o644) -> Path:
    """Persist a composed page below the output root.

    Args:
        page: Page with an output-relative destination
        output_root: Base output directory
        mode: File permissions (octal)

    Returns:
        The written file path

    Raises:
        WriteError: Path traversal, permission problems, full disk, ...
    """
    target = resolve_destination(page.destination_path, output_root)
    try:
        atomic_write_text(target, page.html, mode=mode)
    except OSError as exc:
        raise WriteError(target, exc) from exc

    logger.debug(f"Wrote {target}")
    return target


def copy_static(static_dir: Path, output_root: Path) -> None:
    """Copy a static asset directory verbatim into the output root."""
    if not static_dir.is_dir():
        raise FileNotFoundError(f"Static directory not found: {static_dir}")
    output_root.mkdir(parents=True, exist_ok=True)
    copytree(static_dir, output_root, dirs_exist_ok=True)
    logger.info(f"Copied static assets {static_dir} → {output_root}")
