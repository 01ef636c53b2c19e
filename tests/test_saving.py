"""Test loading and saving files."""

import os
import stat
import tempfile

import pytest

from tabula.editor import EditorError
from tabula.model import Document


def test_save_file_creates_file(editor, tmp_path):
    """Test that save_file creates a new file with content."""
    editor.document = Document(["First line", "Second line", "Third line"])
    editor.document.insert_char(0, 0, "#")
    target = tmp_path / "new.txt"

    assert editor.save_file(str(target)) is True

    assert target.read_bytes() == b"#First line\nSecond line\nThird line\n"
    assert editor.document.filename == str(target)
    assert not editor.document.dirty
    assert editor.status_message.text == "35 bytes written to disk"


def test_save_file_truncates_existing(editor, tmp_path):
    target = tmp_path / "old.txt"
    target.write_text("Old content that is much longer than the new content\n")
    editor.document = Document(["New"])

    assert editor.save_file(str(target)) is True
    assert target.read_text() == "New\n"


def test_save_creates_file_with_default_permissions(editor, tmp_path):
    old_umask = os.umask(0o022)
    try:
        target = tmp_path / "perm.txt"
        editor.document = Document(["x"])
        editor.save_file(str(target))
        assert stat.S_IMODE(target.stat().st_mode) == 0o644
    finally:
        os.umask(old_umask)


@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0,
                    reason="root ignores directory permissions")
def test_save_failure_keeps_dirty_flag(editor, tmp_path):
    read_only_dir = tmp_path / "ro"
    read_only_dir.mkdir()
    os.chmod(read_only_dir, 0o555)
    try:
        editor.document = Document(["data"])
        editor.document.insert_char(0, 0, "x")
        result = editor.save_file(str(read_only_dir / "test.txt"))

        assert result is False
        assert editor.document.dirty
        assert editor.status_message.text.startswith("Can't save! I/O error:")
        assert "Permission denied" in editor.status_message.text
    finally:
        os.chmod(read_only_dir, 0o755)


def test_save_to_directory_fails_gracefully(editor, tmp_path):
    editor.document = Document(["data"])
    editor.document.insert_char(0, 0, "x")
    assert editor.save_file(str(tmp_path)) is False
    assert editor.document.dirty
    assert editor.status_message.text.startswith("Can't save! I/O error:")


def test_save_uses_existing_filename(editor, tmp_path):
    target = tmp_path / "named.txt"
    editor.document = Document(["abc"], filename=str(target))
    assert editor.save() is True
    assert target.read_text() == "abc\n"


def test_load_file_sets_filename(editor):
    """Test that load_file sets the filename and loads content."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False, encoding='utf-8') as f:
        f.write("Line 1\r\nLine 2\n\tLine 3")
        temp_filename = f.name

    try:
        editor.load_file(temp_filename)
        assert editor.document.filename == temp_filename
        assert editor.document.lines == ["Line 1", "Line 2", "\tLine 3"]
        assert editor.document[2].render == "        Line 3"
        assert not editor.document.dirty
    finally:
        if os.path.exists(temp_filename):
            os.remove(temp_filename)


def test_load_nonexistent_file_starts_empty(editor, tmp_path):
    missing = str(tmp_path / "missing.txt")
    editor.load_file(missing)
    assert editor.document.filename == missing
    assert len(editor.document) == 0
    assert not editor.document.dirty


def test_load_unreadable_path_is_fatal(editor, tmp_path):
    with pytest.raises(EditorError):
        editor.load_file(str(tmp_path))


def test_load_save_round_trip(editor, tmp_path):
    lines = ["alpha", "", "\tbeta", "gamma  ", "café"]
    source = tmp_path / "source.txt"
    editor.document = Document(lines)
    assert editor.save_file(str(source))

    editor.load_file(str(source))
    assert editor.document.lines == lines


def test_control_characters_stay_inside_rows(editor, tmp_path):
    source = tmp_path / "controls.txt"
    source.write_bytes(b"a\x0cb\nc\x1cd\ne\rf\n")
    editor.load_file(str(source))
    assert editor.document.lines == ["a\x0cb", "c\x1cd", "e\rf"]

    target = tmp_path / "controls-copy.txt"
    assert editor.save_file(str(target))
    assert target.read_bytes() == b"a\x0cb\nc\x1cd\ne\rf\n"


def test_invalid_utf8_round_trips(editor, tmp_path):
    source = tmp_path / "binary.txt"
    source.write_bytes(b"ok\n\xff\xfe raw\n")
    editor.load_file(str(source))
    assert len(editor.document) == 2

    target = tmp_path / "copy.txt"
    assert editor.save_file(str(target))
    assert target.read_bytes() == b"ok\n\xff\xfe raw\n"
