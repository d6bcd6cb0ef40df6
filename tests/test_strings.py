"""
Tests for utils/strings.py — newline normalization, blank rows, list splitting.
"""
import pytest

from utils.strings import is_blank_row, normalize_newlines, split_list


class TestNormalizeNewlines:
    @pytest.mark.parametrize("text,expected", [
        ("a\r\nb", "a\nb"),
        ("a\rb", "a\nb"),
        ("a\nb", "a\nb"),
        ("a\r\n\rb\n", "a\n\nb\n"),
    ])
    def test_normalize(self, text, expected):
        assert normalize_newlines(text) == expected


class TestIsBlankRow:
    def test_empty(self):
        assert is_blank_row([])

    def test_whitespace_only(self):
        assert is_blank_row(["", "  ", "\t"])

    def test_not_blank(self):
        assert not is_blank_row(["", "x"])


class TestSplitList:
    def test_trims_and_drops_empty(self):
        assert split_list(" records ; index ;") == ["records", "index"]

    def test_custom_separator(self):
        assert split_list("a|b", "|") == ["a", "b"]

    def test_empty(self):
        assert split_list("") == []
