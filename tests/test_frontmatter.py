import logging
from pathlib import Path

from mdsite.content.frontmatter import derive_title, extract_front_matter
from mdsite.core.errors import MetadataWarning


def test_front_matter_promotes_title_and_date() -> None:
    text = "---\ntitle: Hello World\ndate: 2024-05-01\nauthor: Ada\ntags: intro\n---\n# Hi\n"

    front = extract_front_matter(text)

    assert front.metadata.title == "Hello World"
    assert front.metadata.date == "2024-05-01"
    assert front.metadata.extra == {"author": "Ada", "tags": "intro"}
    assert front.body == "# Hi\n"
    assert front.warning is None


def test_no_front_matter_keeps_whole_text() -> None:
    text = "# Just a heading\n\nSome text.\n"

    front = extract_front_matter(text, fallback_title="Page")

    assert front.body == text
    assert front.metadata.title == "Page"
    assert front.metadata.date is None
    assert front.metadata.extra == {}
    assert front.warning is None


def test_fallback_title_used_when_block_has_no_title() -> None:
    front = extract_front_matter("---\nauthor: Ada\n---\nbody", fallback_title="From File")

    assert front.metadata.title == "From File"
    assert front.metadata.extra == {"author": "Ada"}
    assert front.body == "body"


def test_unterminated_block_degrades_to_defaults(caplog) -> None:
    text = "---\ntitle: Broken\n# Hi\n"

    with caplog.at_level(logging.WARNING):
        front = extract_front_matter(text, fallback_title="Broken Page")

    assert front.body == text
    assert front.metadata.title == "Broken Page"
    assert isinstance(front.warning, MetadataWarning)
    assert "malformed front matter" in caplog.text


def test_invalid_yaml_degrades_to_defaults() -> None:
    text = "---\ntitle: [unclosed\n---\nbody\n"

    front = extract_front_matter(text)

    assert front.body == text
    assert front.metadata.title is None
    assert front.warning is not None


def test_nested_values_are_rejected() -> None:
    text = "---\ntitle: Ok\nauthor:\n  name: Ada\n---\nbody\n"

    front = extract_front_matter(text)

    assert front.body == text
    assert front.metadata.extra == {}
    assert front.warning is not None


def test_non_mapping_block_is_rejected() -> None:
    front = extract_front_matter("---\njust a sentence\n---\nbody\n")

    assert front.warning is not None
    assert front.body.startswith("---\n")


def test_empty_block_and_crlf_line_endings() -> None:
    front = extract_front_matter("---\r\n---\r\nbody\r\n", fallback_title="T")

    assert front.warning is None
    assert front.metadata.title == "T"
    assert front.body == "body\r\n"


def test_bom_before_delimiter_is_tolerated() -> None:
    front = extract_front_matter("\ufeff---\ntitle: Bom\n---\nbody")

    assert front.metadata.title == "Bom"
    assert front.body == "body"


def test_dashes_later_in_text_are_not_front_matter() -> None:
    text = "Intro\n---\ntitle: nope\n---\n"

    front = extract_front_matter(text)

    assert front.body == text
    assert front.metadata.extra == {}


def test_scalar_values_are_stringified() -> None:
    front = extract_front_matter("---\ndraft: true\nweight: 3\nempty:\n---\n")

    assert front.metadata.extra == {"draft": "true", "weight": "3", "empty": ""}


def test_derive_title() -> None:
    assert derive_title(Path("docs/getting-started.md")) == "Getting Started"
    assert derive_title(Path("release_notes.md")) == "Release Notes"


def test_deeply_nested_block_degrades_to_defaults() -> None:
    text = "---\nx: " + "[" * 5000 + "]" * 5000 + "\n---\n# Hi\n"

    front = extract_front_matter(text, fallback_title="Deep")

    assert isinstance(front.warning, MetadataWarning)
    assert front.metadata.title == "Deep"
    assert front.body == text


def test_bom_is_stripped_from_body_without_front_matter() -> None:
    front = extract_front_matter("\ufeff# Hi\n")

    assert front.body == "# Hi\n"
    assert front.warning is None


def test_bom_is_stripped_from_body_of_malformed_block() -> None:
    front = extract_front_matter("\ufeff---\ntitle: open\n")

    assert front.body == "---\ntitle: open\n"
    assert front.warning is not None
