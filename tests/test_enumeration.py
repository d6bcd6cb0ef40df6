"""
Tests for csvreport/enumeration.py — parsing "key=label;key=label" strings.
"""
import pytest

from csvreport.enumeration import parse_enumeration
from csvreport.errors import (
    DuplicateEnumerationKeyError,
    EnumerationError,
    MalformedEnumerationError,
    TemplateError,
)


class TestParseEnumeration:
    def test_pairs(self):
        assert parse_enumeration("hc=Hard cover;pb=Paperback") == {
            "hc": "Hard cover",
            "pb": "Paperback",
        }

    def test_whitespace_trimmed(self):
        assert parse_enumeration("  0 = off ;\t1= on ") == {"0": "off", "1": "on"}

    def test_empty_pairs_skipped(self):
        assert parse_enumeration(";a=b;;  ;c=d;") == {"a": "b", "c": "d"}

    @pytest.mark.parametrize("text", ["", "   ", ";;", None])
    def test_no_pairs_is_none(self, text):
        assert parse_enumeration(text) is None

    def test_empty_label_allowed(self):
        assert parse_enumeration("x=") == {"x": ""}

    def test_label_may_contain_equals(self):
        assert parse_enumeration("eq=a=b") == {"eq": "a=b"}

    def test_order_preserved(self):
        assert list(parse_enumeration("z=1;a=2;m=3")) == ["z", "a", "m"]


class TestEnumerationErrors:
    @pytest.mark.parametrize("text", ["novalue", "a=1;b", "=label"],
                             ids=["no equals", "second pair", "empty key"])
    def test_malformed(self, text):
        with pytest.raises(MalformedEnumerationError):
            parse_enumeration(text, line_num=5)

    def test_malformed_carries_line(self):
        with pytest.raises(MalformedEnumerationError) as exc:
            parse_enumeration("bad", line_num=5)
        assert exc.value.line_num == 5
        assert str(exc.value).startswith("line 5: ")

    def test_duplicate_key(self):
        with pytest.raises(DuplicateEnumerationKeyError, match="duplicate key in enumeration: a"):
            parse_enumeration("a=1;b=2; a =3")

    def test_hierarchy(self):
        assert issubclass(MalformedEnumerationError, EnumerationError)
        assert issubclass(DuplicateEnumerationKeyError, EnumerationError)
        assert issubclass(EnumerationError, TemplateError)
