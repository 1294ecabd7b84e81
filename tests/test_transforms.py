"""Tests for path helpers and attachment transforms."""

import posixpath

import pytest

from notable_organizer.transforms.attachments import canonical, find_references, link_stub, rewrite
from notable_organizer.transforms.paths import join_folder, join_relative, relative_path, sanitize_path


class TestSanitizePath:
    """Tests for sanitize_path."""

    def test_plain_tag_unchanged(self):
        assert sanitize_path("work") == "work"

    def test_hierarchical_tag_kept(self):
        assert sanitize_path("area/topic") == "area/topic"

    def test_invalid_characters_replaced(self):
        assert sanitize_path('a<b>c:d"e|f?g*h') == "a-b-c-d-e-f-g-h"

    def test_whitespace_collapsed_and_trimmed(self):
        assert sanitize_path("  my \t  tag \n") == "my tag"

    def test_trailing_slash_removed(self):
        assert sanitize_path("projects/") == "projects"

    def test_repeated_trailing_slashes_removed(self):
        assert sanitize_path("projects//") == "projects"
        assert sanitize_path("a/ /") == "a"

    def test_leading_slash_dropped(self):
        assert sanitize_path("/work") == "work"
        assert sanitize_path("/") == ""

    def test_inner_empty_segments_dropped(self):
        assert sanitize_path("a//b") == "a/b"
        assert sanitize_path("a / b") == "a/b"

    def test_dot_segments_dropped(self):
        assert sanitize_path("../up") == "up"
        assert sanitize_path("./x/../y") == "x/y"
        assert sanitize_path("..") == ""

    def test_empty_tag_is_root(self):
        assert sanitize_path("") == ""
        assert sanitize_path("   ") == ""

    @pytest.mark.parametrize("tag", [
        "work",
        "  spaced   out  ",
        'what?*"now"',
        "nested/path/",
        "trailing/ ",
        "a: b | c",
        "/lead//inner/../x",
        "../../up",
        "",
    ])
    def test_idempotent(self, tag):
        once = sanitize_path(tag)
        assert sanitize_path(once) == once

    @pytest.mark.parametrize("tag", ['<a>', 'x:y', '"q"', 'p|q', 'why?', 'star*'])
    def test_no_forbidden_characters(self, tag):
        result = sanitize_path(tag)
        assert not any(ch in result for ch in '<>:"|?*')


class TestRelativePath:
    """Tests for relative_path and the join helpers."""

    @pytest.mark.parametrize("path", ["", "a", "a/b", "x/y/z"])
    def test_same_folder_is_empty(self, path):
        assert relative_path(path, path) == ""

    def test_sibling_folders(self):
        assert relative_path("a/b", "a/c") == "../c"

    def test_descend_into_child(self):
        assert relative_path("a", "a/b/c") == "b/c"

    def test_climb_to_parent(self):
        assert relative_path("a/b/c", "a") == "../../"

    def test_unrelated_folders(self):
        assert relative_path("personal", "work") == "../work"

    def test_from_root(self):
        assert relative_path("", "work/notes") == "work/notes"

    def test_to_root(self):
        assert relative_path("personal", "") == "../"

    def test_empty_segments_ignored(self):
        assert relative_path("a//b", "a/c/") == "../c"

    def test_join_relative(self):
        assert join_relative("../c", "note.md") == "../c/note.md"
        assert join_relative("../", "note.md") == "../note.md"
        assert join_relative("", "note.md") == "./note.md"

    def test_join_folder(self):
        assert join_folder("work", "note.md") == "work/note.md"
        assert join_folder("", "note.md") == "note.md"

    @pytest.mark.parametrize("secondary,primary", [
        ("personal", "work"),
        ("a/b", "a/c"),
        ("a", "a/b/c"),
        ("a/b/c", "a"),
        ("x", ""),
        ("", "work"),
        ("same", "same"),
    ])
    def test_stub_reaches_canonical_copy(self, secondary, primary):
        rel = relative_path(secondary, primary)
        link = join_relative(rel, "note.md")
        reached = posixpath.normpath(join_folder(secondary, link))

        assert reached == join_folder(primary, "note.md")


class TestAttachmentTransforms:
    """Tests for attachment reference transforms."""

    def test_canonical_rewrite(self):
        text = "See ![diagram](@attachment/diagram.png) here."
        assert rewrite(text, canonical()) == "See ![diagram](./diagram.png) here."

    def test_link_stub_rewrite(self):
        text = "See ![diagram](@attachment/diagram.png) here."
        assert rewrite(text, link_stub("../design")) == "See ![diagram](../design/diagram.png) here."

    def test_link_stub_same_folder(self):
        assert rewrite("@attachment/a.png", link_stub("")) == "./a.png"

    def test_bare_reference(self):
        assert rewrite("file: @attachment/report.pdf done", canonical()) == "file: ./report.pdf done"

    def test_multiple_references(self):
        text = "@attachment/a.png and [b](@attachment/b.pdf)"
        assert rewrite(text, canonical()) == "./a.png and [b](./b.pdf)"

    def test_undeclared_names_still_rewritten(self):
        # Rewriting does not check the note's declared attachments
        assert rewrite("@attachment/unknown.bin", canonical()) == "./unknown.bin"

    def test_text_without_references_unchanged(self):
        text = "No attachments, just an email@example.com"
        assert rewrite(text, canonical()) == text

    def test_find_references(self):
        text = "![x](@attachment/x.png) then @attachment/y.csv"
        assert find_references(text) == ["x.png", "y.csv"]
