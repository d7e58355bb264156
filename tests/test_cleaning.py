"""Tests for citemark.cleaning and citemark.filters."""
from __future__ import annotations

import pytest

from citemark.cleaning import clean_all_and_breaks
from citemark.filters import remove_invalid_xml_chars
from citemark.types import CleanedText


class TestCleanAllAndBreaks:
    def test_collapses_whitespace(self) -> None:
        cleaned = clean_all_and_breaks("Hello   world")
        assert cleaned.text == "Hello world"
        assert cleaned.diff == 2

    def test_offset_table(self) -> None:
        cleaned = clean_all_and_breaks("Hello   world")
        assert len(cleaned.raw_to_cleaned) == len("Hello   world") + 1
        assert cleaned.raw_to_cleaned[5] == 5
        assert cleaned.raw_to_cleaned[8] == 6
        assert cleaned.raw_to_cleaned[-1] == len(cleaned.text)

    def test_line_breaks_become_spaces(self) -> None:
        assert clean_all_and_breaks("line one\nline two").text == "line one line two"
        assert clean_all_and_breaks("a\r\nb").text == "a b"

    def test_dehyphenation(self) -> None:
        assert clean_all_and_breaks("inter-\nnational").text == "international"

    def test_plain_hyphen_kept(self) -> None:
        assert clean_all_and_breaks("well-known").text == "well-known"

    def test_hyphen_before_break_without_letter_kept(self) -> None:
        assert clean_all_and_breaks("1990-\n2000").text == "1990- 2000"

    def test_strips_edges(self) -> None:
        cleaned = clean_all_and_breaks("  padded  ")
        assert cleaned.text == "padded"
        assert cleaned.raw_to_cleaned == (0, 0, 0, 1, 2, 3, 4, 5, 6, 6, 6)

    def test_drops_control_chars(self) -> None:
        assert clean_all_and_breaks("a\x00b\x07c").text == "abc"

    def test_nbsp_is_space(self) -> None:
        assert clean_all_and_breaks("a\xa0b").text == "a b"

    def test_empty(self) -> None:
        cleaned = clean_all_and_breaks("")
        assert cleaned.text == ""
        assert cleaned.raw_to_cleaned == (0,)

    def test_never_longer_than_raw(self) -> None:
        for raw in ["x", " x ", "a\n\n\nb", "co-\noperate  now", "\t\t"]:
            cleaned = clean_all_and_breaks(raw)
            assert len(cleaned.text) <= len(raw)
            assert cleaned.diff >= 0

    def test_table_is_monotonic(self) -> None:
        cleaned = clean_all_and_breaks(" A  [1]\n\nand  B-\nC [2] ")
        table = cleaned.raw_to_cleaned
        assert list(table) == sorted(table)
        assert max(table) == len(cleaned.text)


class TestCleanedText:
    def test_longer_cleaned_rejected(self) -> None:
        with pytest.raises(ValueError, match="longer than raw"):
            CleanedText(raw_text="ab", text="abc")

    def test_table_length_checked(self) -> None:
        with pytest.raises(ValueError, match="raw_to_cleaned"):
            CleanedText(raw_text="ab", text="ab", raw_to_cleaned=(0, 1))


class TestRemoveInvalidXmlChars:
    def test_keeps_valid(self) -> None:
        assert remove_invalid_xml_chars("Tab\tNL\nOK é") == "Tab\tNL\nOK é"

    def test_removes_c0_controls(self) -> None:
        assert remove_invalid_xml_chars("a\x00b\x0bc\x1f") == "abc"

    def test_removes_noncharacters(self) -> None:
        assert remove_invalid_xml_chars("x" + chr(0xFFFE) + chr(0xFFFF) + "y") == "xy"

    def test_keeps_astral(self) -> None:
        text = "emoji " + chr(0x1F600)
        assert remove_invalid_xml_chars(text) == text

    def test_empty(self) -> None:
        assert remove_invalid_xml_chars("") == ""
