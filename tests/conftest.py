from pathlib import Path

import pytest

from mdsite.core.models import BuildConfig

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>{{ title }}</title></head>
<body>
{% if date %}<time>{{ date }}</time>{% endif %}
{{ content }}
</body>
</html>
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    return write(tmp_path / "templates" / "page.html", PAGE_TEMPLATE)


@pytest.fixture
def config(tmp_path: Path, content_root: Path, template_path: Path) -> BuildConfig:
    return BuildConfig(
        content_root=content_root,
        output_root=tmp_path / "public",
        template_path=template_path,
    )
