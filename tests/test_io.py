import os
import stat
from pathlib import Path

import pytest

from mdsite.core.errors import WriteError
from mdsite.core.models import RenderedPage
from mdsite.rendering.io import copy_static, destination_for, write_page

from .conftest import write


def test_destination_for_mirrors_structure() -> None:
    assert destination_for(Path("a/b.md")) == Path("a/b.html")
    assert destination_for(Path("index.md")) == Path("index.html")


def test_destination_for_is_injective_for_distinct_sources() -> None:
    sources = [Path("a.md"), Path("a/b.md"), Path("a/b/c.md"), Path("b/a.md")]

    destinations = {destination_for(source) for source in sources}

    assert len(destinations) == len(sources)


def test_write_page_creates_directories(tmp_path: Path) -> None:
    output_root = tmp_path / "public"
    page = RenderedPage(destination_path=Path("a/b/c.html"), html="<p>hi</p>\n")

    target = write_page(page, output_root)

    assert target == output_root / "a" / "b" / "c.html"
    assert target.read_text(encoding="utf-8") == "<p>hi</p>\n"
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o644


def test_write_page_replaces_existing_file(tmp_path: Path) -> None:
    output_root = tmp_path / "public"
    write(output_root / "index.html", "old")

    write_page(RenderedPage(destination_path=Path("index.html"), html="new"), output_root)

    assert (output_root / "index.html").read_text(encoding="utf-8") == "new"
    assert sorted(p.name for p in output_root.iterdir()) == ["index.html"]


def test_write_page_rejects_traversal(tmp_path: Path) -> None:
    output_root = tmp_path / "public"
    page = RenderedPage(destination_path=Path("../escape.html"), html="x")

    with pytest.raises(WriteError) as excinfo:
        write_page(page, output_root)

    assert excinfo.value.destination == output_root / "../escape.html"
    assert not (tmp_path / "escape.html").exists()


def test_write_page_wraps_os_errors(tmp_path: Path) -> None:
    output_root = tmp_path / "public"
    # a regular file where a directory is needed
    write(output_root / "blocked", "file")
    page = RenderedPage(destination_path=Path("blocked/page.html"), html="x")

    with pytest.raises(WriteError) as excinfo:
        write_page(page, output_root)

    assert isinstance(excinfo.value.cause, OSError)


def test_copy_static(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    write(static_dir / "style.css", "body {}")
    write(static_dir / "img" / "logo.svg", "<svg/>")

    copy_static(static_dir, tmp_path / "public")

    assert (tmp_path / "public" / "style.css").read_text() == "body {}"
    assert (tmp_path / "public" / "img" / "logo.svg").exists()
