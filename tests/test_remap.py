"""Tests for citemark.remap module."""
from __future__ import annotations

import pytest

from citemark.remap import (
    OffsetTableRemapper,
    ScalarShiftRemapper,
    build_remapper,
    remap_offset,
)
from citemark.types import CleanedText


class TestScalarShift:
    def test_remap_offset(self) -> None:
        assert remap_offset(10, 3) == 7
        assert remap_offset(10, 0) == 10

    def test_remap_span(self) -> None:
        assert ScalarShiftRemapper(2).remap_span(5, 9) == (3, 7)

    def test_does_not_clip(self) -> None:
        assert ScalarShiftRemapper(4).remap_span(1, 2) == (-3, -2)


class TestOffsetTable:
    def test_lookup_inside_table(self) -> None:
        remapper = OffsetTableRemapper((0, 1, 1, 2))
        assert remapper.remap_span(1, 3) == (1, 2)

    def test_past_end_overshoots(self) -> None:
        remapper = OffsetTableRemapper((0, 1, 1, 2))
        assert remapper.remap_span(3, 5) == (2, 4)

    def test_negative_passes_through(self) -> None:
        remapper = OffsetTableRemapper((0, 1))
        assert remapper.remap_span(-1, 0) == (-1, 0)


class TestBuildRemapper:
    def test_scalar_uses_diff(self) -> None:
        cleaned = CleanedText(raw_text="a  b", text="a b")
        remapper = build_remapper(cleaned, "scalar")
        assert isinstance(remapper, ScalarShiftRemapper)
        assert remapper.diff == 1

    def test_table_requires_offsets(self) -> None:
        cleaned = CleanedText(raw_text="a  b", text="a b")
        with pytest.raises(ValueError, match="raw_to_cleaned"):
            build_remapper(cleaned, "table")

    def test_table(self) -> None:
        cleaned = CleanedText(raw_text="a  b", text="a b", raw_to_cleaned=(0, 1, 2, 2, 3))
        remapper = build_remapper(cleaned, "table")
        assert isinstance(remapper, OffsetTableRemapper)
        assert remapper.remap_span(3, 4) == (2, 3)

    def test_unknown_strategy(self) -> None:
        cleaned = CleanedText(raw_text="x", text="x")
        with pytest.raises(ValueError, match="Unknown remap strategy"):
            build_remapper(cleaned, "fuzzy")  # type: ignore[arg-type]
