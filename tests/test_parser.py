"""Tests for FrontmatterParser class."""

import pytest

from notable_organizer.core.models import MalformedHeader, ParsedDocument, ParseFailure
from notable_organizer.core.parser import FrontmatterParser


class TestFrontmatterParser:
    """Tests for FrontmatterParser class."""

    @pytest.fixture
    def parser(self):
        return FrontmatterParser()

    def test_note_without_frontmatter(self, parser):
        raw = "# No Frontmatter\n\nJust plain content.\n"
        doc = parser.parse("note3.md", raw)

        assert isinstance(doc, ParsedDocument)
        assert doc.tags == ("untagged",)
        assert doc.title == "note3"  # Falls back to filename
        assert doc.header == {}
        assert doc.attachments == frozenset()
        assert doc.body == raw

    def test_full_frontmatter(self, parser):
        raw = """---
title: Test Note One
tags:
  - evergreen
  - domain/cs
attachments:
  - diagram.png
  - data.csv
created: 2024-01-01
---

# Test Note One

This is test content."""
        doc = parser.parse("note1.md", raw)

        assert doc.title == "Test Note One"
        assert doc.tags == ("evergreen", "domain/cs")
        assert doc.primary_tag == "evergreen"
        assert doc.secondary_tags == ("domain/cs",)
        assert doc.attachments == frozenset({"diagram.png", "data.csv"})
        assert doc.body == "\n# Test Note One\n\nThis is test content."
        # Other keys are kept as-is
        assert "created" in doc.header

    def test_string_tag_format(self, parser):
        doc = parser.parse("note4.md", "---\ntitle: Single Tag Note\ntags: evergreen\n---\nContent here.")

        assert doc.tags == ("evergreen",)

    def test_flow_style_tags(self, parser):
        doc = parser.parse("note.md", "---\ntags: [work, personal]\n---\nBody")

        assert doc.tags == ("work", "personal")

    def test_tags_keep_declaration_order(self, parser):
        doc = parser.parse("note.md", "---\ntags: [zeta, alpha, mid]\n---\n")

        assert doc.tags == ("zeta", "alpha", "mid")

    def test_non_string_tags_are_stringified(self, parser):
        doc = parser.parse("note.md", "---\ntags: [2024, 3.5]\n---\n")

        assert doc.tags == ("2024", "3.5")

    def test_missing_tags_default_to_untagged(self, parser):
        doc = parser.parse("note.md", "---\ntitle: Hello\n---\nBody")

        assert doc.tags == ("untagged",)
        assert doc.title == "Hello"

    def test_empty_tag_list_defaults_to_untagged(self, parser):
        doc = parser.parse("note.md", "---\ntags: []\n---\nBody")

        assert doc.tags == ("untagged",)

    def test_custom_default_tag(self):
        parser = FrontmatterParser(default_tag="inbox")
        doc = parser.parse("note.md", "plain text")

        assert doc.tags == ("inbox",)

    def test_scalar_attachment(self, parser):
        doc = parser.parse("note.md", "---\nattachments: diagram.png\n---\n")

        assert doc.attachments == frozenset({"diagram.png"})

    def test_empty_header_block(self, parser):
        doc = parser.parse("note.md", "---\n---\nBody")

        assert doc.tags == ("untagged",)
        assert doc.header == {}
        assert doc.body == "Body"

    def test_title_falls_back_to_filename(self, parser):
        doc = parser.parse("My Note.md", "---\ntags: work\n---\nBody")

        assert doc.title == "My Note"

    def test_crlf_delimiters(self, parser):
        doc = parser.parse("note.md", "---\r\ntags: work\r\n---\r\nBody\r\n")

        assert doc.tags == ("work",)
        assert doc.body == "Body\r\n"

    def test_delimiter_must_be_first_line(self, parser):
        raw = "Intro\n---\ntags: work\n---\n"
        doc = parser.parse("note.md", raw)

        assert doc.tags == ("untagged",)
        assert doc.body == raw

    def test_unclosed_header_fails(self, parser):
        result = parser.parse("broken.md", "---\ntags: work\nno closing delimiter")

        assert isinstance(result, ParseFailure)
        assert result.filename == "broken.md"
        assert "closing" in result.error

    def test_invalid_yaml_fails(self, parser):
        result = parser.parse("broken.md", "---\ntags: [work\n---\nBody")

        assert isinstance(result, ParseFailure)
        assert "Invalid YAML" in result.error

    def test_non_mapping_header_fails(self, parser):
        result = parser.parse("list.md", "---\n- a\n- b\n---\nBody")

        assert isinstance(result, ParseFailure)
        assert "mapping" in result.error

    def test_parse_strict_raises(self, parser):
        with pytest.raises(MalformedHeader):
            parser.parse_strict("broken.md", "---\ntitle: x\n")

    def test_header_text_is_kept(self, parser):
        doc = parser.parse("note.md", "---\ntitle: T\ntags: a\n---\nBody")

        assert doc.header_text == "title: T\ntags: a"

    def test_stem_and_extension(self, parser):
        doc = parser.parse("my.notes.md", "text")

        assert doc.stem == "my.notes"
        assert doc.extension == ".md"
        assert doc.title == "my.notes"
