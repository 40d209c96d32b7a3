# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "pytest",
#     "tqdm",
# ]
# ///
"""
Unit tests for stage1_encode.py and stage2_align.py.

Tests for:
- iter_tokens / create_hex_list_file: one token per byte, errors propagate
- parse_diff_line: the four `diff -y` shapes, malformed lines
- align_tokens: difflib alignment into records
- run_diff / align: engine dispatch, GNU diff end to end (when installed)
"""

import shutil
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from colorbindiff.config import ENGINES
from colorbindiff.records import AlignmentRecord, RecordKind
from colorbindiff.stage1_encode import create_hex_list_file, iter_tokens, read_hex_list
from colorbindiff.stage2_align import (
    ENGINE_RUNNERS,
    AlignmentEngineError,
    MalformedAlignmentError,
    align,
    align_tokens,
    parse_diff_line,
    run_diff,
)


needs_diff = pytest.mark.skipif(shutil.which("diff") is None, reason="diff not installed")


def tokens(data: bytes) -> list[str]:
    return [f"{b:02X}" for b in data]


# =============================================================================
# Encoder
# =============================================================================

class TestEncode:
    """Tests for the byte-stream encoder."""

    def test_tokens_per_byte(self, tmp_path):
        """Each byte becomes one uppercase two-digit token."""
        path = tmp_path / "in.bin"
        path.write_bytes(b"\x00\x0a\xffA")
        assert list(iter_tokens(path)) == ["00", "0A", "FF", "41"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")
        assert list(iter_tokens(path)) == []

    def test_hex_list_file(self, tmp_path):
        """The hex list has one token per line and reads back unchanged."""
        src = tmp_path / "in.bin"
        data = bytes(range(256)) * 3
        src.write_bytes(data)
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        hex_path = create_hex_list_file(src, out_dir)
        assert hex_path.parent == out_dir
        lines = hex_path.read_text().splitlines()
        assert len(lines) == len(data)
        assert read_hex_list(hex_path) == tokens(data)

    def test_same_name_inputs_get_distinct_lists(self, tmp_path):
        """Two inputs called the same don't overwrite each other's list."""
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "fw.bin").write_bytes(b"\x01")
        (tmp_path / "b" / "fw.bin").write_bytes(b"\x02")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        first = create_hex_list_file(tmp_path / "a" / "fw.bin", out_dir)
        second = create_hex_list_file(tmp_path / "b" / "fw.bin", out_dir)
        assert first != second
        assert read_hex_list(first) == ["01"]
        assert read_hex_list(second) == ["02"]

    def test_missing_file_raises(self, tmp_path):
        """Unreadable input is an error, not an empty stream."""
        with pytest.raises(FileNotFoundError):
            list(iter_tokens(tmp_path / "nope.bin"))

    def test_directory_raises(self, tmp_path):
        with pytest.raises(OSError):
            create_hex_list_file(tmp_path, tmp_path)


# =============================================================================
# diff -y line parsing
# =============================================================================

class TestParseDiffLine:
    """Tests for classifying `diff -y` output lines."""

    def test_unchanged(self):
        record = parse_diff_line("41\t\t\t\t\t\t\t\t41\n")
        assert record == AlignmentRecord.unchanged("41")

    def test_modified(self):
        record = parse_diff_line("42\t\t\t\t\t\t\t      |\t58\n")
        assert record.kind is RecordKind.MODIFIED
        assert (record.old_token, record.new_token) == ("42", "58")

    def test_deleted(self):
        record = parse_diff_line("43\t\t\t\t\t\t\t      <\n")
        assert record == AlignmentRecord.deleted("43")

    def test_added(self):
        record = parse_diff_line("\t\t\t\t\t\t\t      >\t44\n")
        assert record == AlignmentRecord.added("44")

    def test_lowercase_tokens_normalized(self):
        """Tokens come out uppercase whatever case diff printed."""
        record = parse_diff_line("ab\t\t\t\t\t\t\t      |\tcd\n")
        assert (record.old_token, record.new_token) == ("AB", "CD")

    @pytest.mark.parametrize("line", [
        "",
        "\n",
        "41\n",                          # one token, no marker
        "41\t\t\t\t42\n",                # unmarked but different
        "41\t\t|\n",                     # modified without new token
        "\t\t<\t41\n",                   # deleted marker on the wrong side
        "41\t\t>\t42\n",                 # added with an old token
        "\t\t\t\t\t\t\t      |\t58\n",   # modified without old token
        "Binary files differ\n",
        "411\t\t\t\t411\n",
    ])
    def test_malformed(self, line):
        """Anything else is rejected instead of guessed."""
        with pytest.raises(MalformedAlignmentError):
            parse_diff_line(line)


# =============================================================================
# difflib engine
# =============================================================================

class TestAlignTokens:
    """Tests for the in-process difflib engine."""

    def test_identical(self):
        records = list(align_tokens(tokens(b"ABCD"), tokens(b"ABCD")))
        assert all(r.kind is RecordKind.UNCHANGED for r in records)
        assert len(records) == 4

    def test_substitution(self):
        records = list(align_tokens(tokens(b"ABC"), tokens(b"AXC")))
        assert records == [
            AlignmentRecord.unchanged("41"),
            AlignmentRecord.modified("42", "58"),
            AlignmentRecord.unchanged("43"),
        ]

    def test_deletion(self):
        records = list(align_tokens(tokens(b"ABCD"), tokens(b"ABD")))
        assert [r.kind for r in records] == [
            RecordKind.UNCHANGED,
            RecordKind.UNCHANGED,
            RecordKind.DELETED,
            RecordKind.UNCHANGED,
        ]

    def test_insertion(self):
        records = list(align_tokens(tokens(b"AD"), tokens(b"ABCD")))
        assert [r.kind for r in records] == [
            RecordKind.UNCHANGED,
            RecordKind.ADDED,
            RecordKind.ADDED,
            RecordKind.UNCHANGED,
        ]

    def test_uneven_replace(self):
        """A longer replacement pairs what it can and adds the rest."""
        records = list(align_tokens(tokens(b"A\x01Z"), tokens(b"A\x02\x03\x04Z")))
        assert [r.kind for r in records] == [
            RecordKind.UNCHANGED,
            RecordKind.MODIFIED,
            RecordKind.ADDED,
            RecordKind.ADDED,
            RecordKind.UNCHANGED,
        ]

    def test_empty_sides(self):
        assert list(align_tokens([], [])) == []
        assert [r.kind for r in align_tokens(tokens(b"ab"), [])] == [RecordKind.DELETED] * 2
        assert [r.kind for r in align_tokens([], tokens(b"ab"))] == [RecordKind.ADDED] * 2


# =============================================================================
# Engine dispatch and GNU diff
# =============================================================================

def _hex_lists(tmp_path, old: bytes, new: bytes):
    (tmp_path / "old.bin").write_bytes(old)
    (tmp_path / "new.bin").write_bytes(new)
    return (
        create_hex_list_file(tmp_path / "old.bin", tmp_path),
        create_hex_list_file(tmp_path / "new.bin", tmp_path),
    )


class TestEngines:
    """Tests for align() and run_diff()."""

    def test_unknown_engine(self, tmp_path):
        old_hex, new_hex = _hex_lists(tmp_path, b"a", b"b")
        with pytest.raises(ValueError):
            align("bsdiff", old_hex, new_hex)

    def test_every_configured_engine_has_a_runner(self):
        """align() dispatches on exactly the names offered on the command line."""
        assert set(ENGINE_RUNNERS) == set(ENGINES)

    def test_difflib_engine(self, tmp_path):
        old_hex, new_hex = _hex_lists(tmp_path, b"ABC", b"AXC")
        records = list(align("difflib", old_hex, new_hex))
        assert [r.kind for r in records] == [
            RecordKind.UNCHANGED, RecordKind.MODIFIED, RecordKind.UNCHANGED,
        ]

    @needs_diff
    def test_diff_engine_reconstructs_inputs(self, tmp_path):
        """diff -y records rebuild both files exactly."""
        old = b"\x7fELF\x02\x01\x01\x00" + bytes(range(40)) + b"tail"
        new = b"\x7fELF\x02\x01\x00" + bytes(range(5, 45)) + b"\xde\xad" + b"tail!"
        old_hex, new_hex = _hex_lists(tmp_path, old, new)
        records = list(run_diff(old_hex, new_hex))

        rebuilt_old = bytes(int(r.old_token, 16) for r in records if r.old_token)
        rebuilt_new = bytes(int(r.new_token, 16) for r in records if r.new_token)
        assert rebuilt_old == old
        assert rebuilt_new == new

    @needs_diff
    def test_diff_engine_identical(self, tmp_path):
        """Identical inputs (exit status 0) are all unchanged."""
        old_hex, new_hex = _hex_lists(tmp_path, b"same", b"same")
        records = list(align("diff", old_hex, new_hex))
        assert [r.kind for r in records] == [RecordKind.UNCHANGED] * 4

    @needs_diff
    def test_diff_engine_failure(self, tmp_path):
        """A diff failure (exit status 2) raises AlignmentEngineError."""
        with pytest.raises(AlignmentEngineError):
            list(run_diff(tmp_path / "missing1.hex", tmp_path / "missing2.hex"))

    def test_missing_diff_command(self, tmp_path, monkeypatch):
        """No diff executable is an engine error."""
        monkeypatch.setattr(
            "colorbindiff.stage2_align.DIFF_COMMAND", "colorbindiff-no-such-diff"
        )
        old_hex, new_hex = _hex_lists(tmp_path, b"a", b"b")
        with pytest.raises(AlignmentEngineError):
            list(run_diff(old_hex, new_hex))
