import pytest

from marginalia.domain import EmptyContentError, ReadFailedError, UnsupportedFormatError
from marginalia.text_import import TextDocumentImporter


def test_imports_plain_text_with_hash_headings(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text(
        "# Intro\n\nAlpha beta gamma.\nDelta epsilon.\n\n# Two\n\nZeta eta.", encoding="utf-8"
    )

    imported = TextDocumentImporter().import_path(path)

    assert len(imported.sections) == 2
    assert imported.sections[0].title == "Intro"
    assert imported.sections[0].paragraphs[0] == "Alpha beta gamma. Delta epsilon."
    assert imported.sections[1].title == "Two"
    assert imported.sections[1].paragraphs == ["Zeta eta."]
    assert imported.title is None
    assert imported.source_path == path


def test_imports_markdown_headings_and_paragraphs(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text(
        "# Intro\n\nAlpha *beta* gamma.\n\n```rust\nlet hidden = true;\n```\n\n"
        "## Two\n\nDelta `epsilon` zeta.",
        encoding="utf-8",
    )

    imported = TextDocumentImporter().import_path(path)

    assert len(imported.sections) == 2
    assert imported.sections[0].title == "Intro"
    assert imported.sections[0].paragraphs == ["Alpha beta gamma."]
    assert imported.sections[1].title == "Two"
    assert imported.sections[1].paragraphs == ["Delta epsilon zeta."]


def test_section_anchors_are_sequential(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("# One\n\nFirst.\n\n# Two\n\nSecond.", encoding="utf-8")

    imported = TextDocumentImporter().import_path(path)

    assert [s.source_anchor for s in imported.sections] == ["section:0", "section:1"]


def test_markdown_extension_variant_and_case(tmp_path):
    path = tmp_path / "doc.MARKDOWN"
    path.write_text("Lone paragraph\nspanning lines.", encoding="utf-8")

    imported = TextDocumentImporter().import_path(path)

    assert len(imported.sections) == 1
    assert imported.sections[0].title == ""
    assert imported.sections[0].paragraphs == ["Lone paragraph spanning lines."]


def test_rejects_empty_files(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("   \n\n", encoding="utf-8")

    with pytest.raises(EmptyContentError) as info:
        TextDocumentImporter().import_path(path)

    assert info.value == EmptyContentError(path)


def test_rejects_unsupported_extensions(tmp_path):
    path = tmp_path / "doc.epub"
    path.write_text("placeholder", encoding="utf-8")

    with pytest.raises(UnsupportedFormatError) as info:
        TextDocumentImporter().import_path(path)

    assert info.value == UnsupportedFormatError(path)


def test_missing_file_is_read_failure(tmp_path):
    path = tmp_path / "missing.txt"

    with pytest.raises(ReadFailedError) as info:
        TextDocumentImporter().import_path(path)

    assert info.value.source_path == path