"""Markdown to HTML fragment conversion."""

from __future__ import annotations

import markdown

EXTENSIONS = ["fenced_code", "tables", "sane_lists", "toc"]


def render_markdown(body: str) -> str:
    """Convert Markdown text into an HTML fragment (no document wrapper).

    Python-Markdown treats unclosed or unknown constructs as literal text,
    so malformed input yields output rather than an exception.
    """
    converter = markdown.Markdown(extensions=EXTENSIONS, output_format="html")
    return converter.convert(body)
