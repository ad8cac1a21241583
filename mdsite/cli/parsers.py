"""CLI argument parsers and validators."""

from __future__ import annotations

import typer


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def parse_suffix(value: str) -> str:
    """Normalize a source suffix: ``md`` and ``.md`` both become ``.md``."""
    suffix = value.strip()
    if not suffix.startswith("."):
        suffix = f".{suffix}"
    if len(suffix) < 2 or "/" in suffix:
        raise typer.BadParameter(f"Invalid suffix: {value!r}")
    return suffix
