"""
Tests for Cell Value Parsing
Locale numbers and collation keys
"""
import pytest

from materials_exchange.services.catalog import collation_key, parse_locale_int, parse_locale_number


class TestParseLocaleNumber:
    """Russian formatted amounts"""

    @pytest.mark.parametrize("text,expected", [
        ("12,5", 12.5),
        ("1 250,75", 1250.75),
        ("1\u00a0250,75", 1250.75),
        ("-3", -3.0),
        ("  7  ", 7.0),
        ("0", 0.0),
        (12, 12.0),
        (2.5, 2.5),
    ])
    def test_parses(self, text, expected):
        """Spaces removed, comma read as the decimal separator"""
        assert parse_locale_number(text) == expected

    @pytest.mark.parametrize("text", [None, "", "abc", "12abc", "1_000", "nan", "inf", True])
    def test_unparseable_is_none(self, text):
        """Anything that is not a finite number gives None"""
        assert parse_locale_number(text) is None


class TestParseLocaleInt:
    """Integer codes"""

    @pytest.mark.parametrize("text,expected", [
        ("101", 101),
        (" 500 001 ", 500001),
        ("12,0", 12),
        ("12,5", None),
        ("код", None),
    ])
    def test_parse_locale_int(self, text, expected):
        """Only integral values parse"""
        assert parse_locale_int(text) == expected


class TestCollationKey:
    """Text ordering"""

    def test_case_insensitive(self):
        """Upper and lower case sort together"""
        assert collation_key("Труба")[0] == collation_key("ТРУБА")[0]

    def test_accents_ignored_for_primary_order(self):
        """Marks only break ties"""
        assert collation_key("Ёж")[0] == collation_key("еж")[0]
        assert sorted(["ель", "Ёж", "еда"], key=collation_key) == ["еда", "Ёж", "ель"]
