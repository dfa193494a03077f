"""Tests for the line store and terminator handling."""

import pytest
from wrapedit.document import Document, terminator_length, visible_length, strip_terminator
from wrapedit.errors import ResourceExhaustion


def test_terminator_lengths():
    assert terminator_length(b"abc\r\n") == 2
    assert terminator_length(b"abc\n") == 1
    assert terminator_length(b"abc\r") == 1
    assert terminator_length(b"abc") == 0
    assert terminator_length(b"") == 0


def test_visible_length_excludes_terminator():
    assert visible_length(b"abc\r\n") == 3
    assert visible_length(b"abc\n") == 3
    assert visible_length(b"\r\n") == 0
    assert visible_length(b"xyz") == 3


def test_strip_terminator():
    assert strip_terminator(b"ab\r\n") == b"ab"
    assert strip_terminator(b"ab") == b"ab"


def test_commit_line_replaces_and_appends():
    doc = Document([b"one\r\n", b"two"])
    doc.commit_line(1, b"TWO\r\n")
    doc.commit_line(2, b"three")
    assert doc.lines == (b"one\r\n", b"TWO\r\n", b"three")


def test_commit_line_does_not_alias_buffer():
    doc = Document()
    buf = bytearray(b"hello")
    doc.commit_line(0, buf)
    buf[0:1] = b"J"
    assert doc[0] == b"hello"


def test_commit_line_past_end_is_rejected():
    doc = Document([b"a"])
    with pytest.raises(IndexError):
        doc.commit_line(3, b"x")


def test_insert_and_remove_shift_lines():
    doc = Document([b"a\r\n", b"c"])
    doc.insert_line_at(1, b"b\r\n")
    assert doc.lines == (b"a\r\n", b"b\r\n", b"c")
    removed = doc.remove_line_at(0)
    assert removed == b"a\r\n"
    assert doc.lines == (b"b\r\n", b"c")


def test_promote_virtual_line():
    doc = Document([b"a\r\n"])
    assert doc.promote_virtual(0) is False
    assert doc.promote_virtual(1) is True
    assert doc.lines == (b"a\r\n", b"")


def test_virtual_line_reads_empty():
    doc = Document([b"a\r\n"])
    assert doc.line(1) == b""
    assert doc.visible_length(1) == 0


def test_version_tracks_changes_only():
    doc = Document([b"a"])
    start = doc.version
    doc.commit_line(0, b"a")
    assert doc.version == start
    doc.commit_line(0, b"b")
    assert doc.version == start + 1
    doc.insert_line_at(0)
    doc.remove_line_at(0)
    assert doc.version == start + 3


def test_to_bytes_keeps_terminators():
    doc = Document([b"a\r\n", b"b\n", b"c"])
    assert doc.to_bytes() == b"a\r\nb\nc"


class _FullList(list):
    def append(self, value):
        raise MemoryError

    def insert(self, index, value):
        raise MemoryError


def test_storage_growth_failure_is_reported():
    doc = Document([b"a"])
    doc._lines = _FullList(doc._lines)
    with pytest.raises(ResourceExhaustion):
        doc.commit_line(1, b"b")
    with pytest.raises(ResourceExhaustion):
        doc.insert_line_at(0, b"b")
    assert doc.lines == (b"a",)
