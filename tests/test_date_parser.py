"""Tests for free-text date parsing."""

from datetime import date, timedelta

import pytest

from hotel_concierge.conversation.date_parser import format_display, parse_date


class TestNumericDates:
    @pytest.mark.parametrize("text", ["15/02/2026", "15-02-2026", "15.02.2026", "15/2/26"])
    def test_separators_and_short_year(self, text):
        parsed = parse_date(text)
        assert parsed.valid
        assert parsed.date == date(2026, 2, 15)
        assert parsed.canonical == "2026-02-15"

    def test_day_comes_first(self):
        assert parse_date("03/04/2026").date == date(2026, 4, 3)

    def test_surrounding_whitespace_ignored(self):
        assert parse_date("  10/02/2026 ").valid


class TestWordedDates:
    def test_short_month(self):
        parsed = parse_date("10 Feb 2026")
        assert parsed.date == date(2026, 2, 10)
        assert parsed.display == "10 Feb 2026"

    def test_full_month_any_case(self):
        assert parse_date("10 FEBRUARY 2026").date == date(2026, 2, 10)

    def test_ordinal_suffix_and_comma(self):
        assert parse_date("1st March, 2026").date == date(2026, 3, 1)

    def test_month_shorter_than_three_letters_rejected(self):
        assert not parse_date("10 fe 2026").valid

    def test_unknown_month_rejected(self):
        assert not parse_date("10 Foo 2026").valid


class TestRejection:
    @pytest.mark.parametrize("text", ["31/02/2026", "29/02/2025", "32/01/2026", "10/13/2026"])
    def test_impossible_dates(self, text):
        assert not parse_date(text).valid

    def test_leap_day_accepted(self):
        assert parse_date("29/02/2028").valid

    @pytest.mark.parametrize("text", ["tomorrow", "next friday", "", "on 10/02/2026", "2026-02-10"])
    def test_free_text_and_partial_matches(self, text):
        assert not parse_date(text).valid

    def test_invalid_result_has_no_date(self):
        parsed = parse_date("soon")
        assert parsed.date is None
        assert parsed.display == ""


class TestRoundTrip:
    def test_display_parses_back_to_same_day(self):
        day = date(2026, 1, 1)
        for offset in range(0, 730, 17):
            value = day + timedelta(days=offset)
            assert parse_date(format_display(value)).canonical == value.isoformat()

    def test_display_pads_day(self):
        assert format_display(date(2026, 2, 5)) == "05 Feb 2026"
