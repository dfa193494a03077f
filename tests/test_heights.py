"""Tests for the visual height cache."""

import math

import pytest
from wrapedit.heights import VisualHeightCache, wrap_height


def test_wrap_height_long_line():
    # ceil(10 / 4) == 3
    assert wrap_height(b"abcdefghij", 4) == 3


def test_wrap_height_exact_fit_is_one_row():
    assert wrap_height(b"abcd", 4) == 1
    assert wrap_height(b"abcd\r\n", 4) == 1


def test_wrap_height_empty_line_takes_a_row():
    assert wrap_height(b"", 10) == 1
    assert wrap_height(b"\r\n", 10) == 1


def test_wrap_height_zero_width_disables_wrapping():
    assert wrap_height(b"x" * 500, 0) == 1


@pytest.mark.parametrize("width", [0, 1, 3, 7, 80])
@pytest.mark.parametrize("line", [b"", b"a", b"abc\r\n", b"x" * 23, b"y" * 80 + b"\n"])
def test_wrap_height_formula(line, width):
    visible = len(line.rstrip(b"\r\n"))
    expected = 1 if width == 0 else max(1, math.ceil(visible / width))
    assert wrap_height(line, width) == expected


def test_cache_built_from_lines():
    cache = VisualHeightCache(4, [b"ab\r\n", b"abcdefghij"])
    assert cache.heights == (1, 3)
    assert len(cache) == 2


def test_insert_recompute_remove():
    cache = VisualHeightCache(4, [b"a", b"b"])
    cache.insert_at(1, 2)
    assert cache.heights == (1, 2, 1)
    cache.recompute(0, b"123456789")
    assert cache.heights == (3, 2, 1)
    cache.remove_at(1)
    assert cache.heights == (3, 1)


def test_prefix_sums():
    cache = VisualHeightCache(4, [b"ab", b"abcdefghij", b""])
    assert cache.rebuild_prefix_sums() == [0, 1, 4, 5]
    assert cache.prefix == [0, 1, 4, 5]


def test_height_at_virtual_line():
    cache = VisualHeightCache(4, [b"abcdefgh"])
    assert cache.height_at(0) == 2
    assert cache.height_at(1) == 1


def test_span():
    cache = VisualHeightCache(2, [b"aaaa", b"a", b"aaaaaa"])
    assert cache.span(0, 3) == 6
    assert cache.span(1, 3) == 4
    assert cache.span(2, 2) == 0


def test_reflow_for_new_width():
    lines = [b"abcdefghij", b"abc"]
    cache = VisualHeightCache(4, lines)
    cache.reflow(lines, 10)
    assert cache.width == 10
    assert cache.heights == (1, 1)
