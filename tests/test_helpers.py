"""
Tests for date formatting, tag parsing and slugs.
"""

from datetime import datetime, timedelta, timezone

import pytest

from wppost.helpers import format_php_date, parse_tag_list, sanitize_title

MOMENT = datetime(2024, 3, 1, 14, 5, 9, 123456)


class TestFormatPhpDate:
    """Test PHP date() format strings."""

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("F j, Y", "March 1, 2024"),
            ("Y-m-d", "2024-03-01"),
            ("d/m/y", "01/03/24"),
            ("l, jS F", "Friday, 1st March"),
            ("D M n", "Fri Mar 3"),
            ("g:i a", "2:05 pm"),
            ("h:i:s A", "02:05:09 PM"),
            ("G H", "14 14"),
            ("N w z", "5 5 60"),
            ("W o t L", "09 2024 31 1"),
            ("u v", "123456 123"),
        ],
    )
    def test_tokens(self, fmt, expected):
        """Test individual format characters."""
        assert format_php_date(MOMENT, fmt) == expected

    def test_escapes(self):
        """Test backslash escapes print the next character."""
        assert format_php_date(MOMENT, "\\Y\\e\\a\\r: Y") == "Year: 2024"

    def test_ordinal_suffixes(self):
        """Test st, nd, rd and th."""
        days = [format_php_date(datetime(2024, 1, day), "jS") for day in (1, 2, 3, 4, 11, 12, 13, 21, 22, 23)]

        assert days == ["1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st", "22nd", "23rd"]

    def test_midnight_and_noon(self):
        """Test 12-hour clock edges."""
        assert format_php_date(datetime(2024, 1, 1, 0, 0), "g a") == "12 am"
        assert format_php_date(datetime(2024, 1, 1, 12, 0), "g a") == "12 pm"

    def test_naive_is_utc(self):
        """Test naive datetimes render as UTC."""
        assert format_php_date(MOMENT, "e P O Z") == "UTC +00:00 +0000 0"
        assert format_php_date(datetime(1970, 1, 2), "U") == "86400"

    def test_aware_offsets(self):
        """Test timezone-aware values."""
        value = datetime(2024, 3, 1, 14, 5, tzinfo=timezone(timedelta(hours=-5, minutes=-30)))

        assert format_php_date(value, "P O Z") == "-05:30 -0530 -19800"

    def test_full_formats(self):
        """Test ISO 8601 and RFC 2822."""
        value = MOMENT.replace(microsecond=0)

        assert format_php_date(value, "c") == "2024-03-01T14:05:09+00:00"
        assert format_php_date(value, "r") == "Fri, 01 Mar 2024 14:05:09 +0000"

    def test_literal_characters(self):
        """Test non-token characters pass through."""
        assert format_php_date(MOMENT, "Y @ #") == "2024 @ #"


class TestParseTagList:
    """Test tag list normalization."""

    def test_string(self):
        assert parse_tag_list(" news, sports ,,weather") == ["news", "sports", "weather"]

    def test_sequence(self):
        assert parse_tag_list(["  a ", "", "b"]) == ["a", "b"]

    def test_empty(self):
        assert parse_tag_list(None) == []
        assert parse_tag_list("") == []
        assert parse_tag_list(" , ") == []


class TestSanitizeTitle:
    """Test slug generation."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Hello World", "hello-world"),
            ("  Hello   World  ", "hello-world"),
            ("Hello, Wörld!  Again", "hello-world-again"),
            ("Crème brûlée", "creme-brulee"),
            ("already-a-slug", "already-a-slug"),
            ("snake_case title", "snake_case-title"),
            ("--dashes--", "dashes"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_slugs(self, title, expected):
        assert sanitize_title(title) == expected
