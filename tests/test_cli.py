"""Tests for the command-line interface."""

import zipfile

import pytest

from notable_organizer.cli import main


class TestCli:
    """Tests for the notable-organizer command."""

    @pytest.fixture
    def notes_dir(self, tmp_path):
        notes = tmp_path / "notes"
        notes.mkdir()
        (notes / "note.md").write_text("---\ntags: [work, personal]\n---\nBody\n", encoding="utf-8")
        (notes / "plain.md").write_text("Plain\n", encoding="utf-8")
        return notes

    def test_writes_archive(self, notes_dir, tmp_path, capsys):
        output = tmp_path / "out.zip"

        status = main([str(notes_dir), "-o", str(output), "-q"])

        assert status == 0
        with zipfile.ZipFile(output) as zf:
            names = set(zf.namelist())
        assert names == {"work/note.md", "personal/note - Link.md", "plain.md"}
        out = capsys.readouterr().out
        assert "3 folders created" in out
        assert "2 files organized" in out

    def test_url_shortcut_flag(self, notes_dir, tmp_path):
        output = tmp_path / "out.zip"

        main([str(notes_dir), "-o", str(output), "--url-shortcuts", "-q"])

        with zipfile.ZipFile(output) as zf:
            assert "personal/note - Link.url" in zf.namelist()

    def test_dry_run_writes_nothing(self, notes_dir, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        status = main([str(notes_dir), "--dry-run", "-q"])

        assert status == 0
        assert list(tmp_path.glob("*.zip")) == []
        assert "Archive written" not in capsys.readouterr().out

    def test_excluded_tag_flag(self, notes_dir, tmp_path, capsys):
        output = tmp_path / "out.zip"

        main([str(notes_dir), "-o", str(output), "--excluded-tag", "work", "-q"])

        with zipfile.ZipFile(output) as zf:
            assert zf.namelist() == ["plain.md"]
        assert "1 skipped by tag filters" in capsys.readouterr().out

    def test_no_documents_exit_status(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()

        assert main([str(empty), "-q"]) == 1

    def test_missing_input_exit_status(self, tmp_path):
        assert main([str(tmp_path / "missing.md"), "-q"]) == 1

    def test_config_file(self, notes_dir, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("untagged_to_root: false\n", encoding="utf-8")
        output = tmp_path / "out.zip"

        main([str(notes_dir), "-o", str(output), "-c", str(config), "-q"])

        with zipfile.ZipFile(output) as zf:
            assert "untagged/plain.md" in zf.namelist()
