"""Unit tests for date, datetime and duration parsing."""

from datetime import date, datetime, time, timedelta

import pytest

from dynaform.utils.date_parsing import (
    format_duration,
    parse_date,
    parse_datetime,
    parse_duration,
)


# =============================================================================
# Dates
# =============================================================================


class TestParseDate:
    def test_iso(self):
        assert parse_date("2026-01-23") == date(2026, 1, 23)

    def test_iso_with_time_part(self):
        assert parse_date("2026-01-23T10:15:00") == date(2026, 1, 23)

    def test_dot_format(self):
        assert parse_date("23.01.2026") == date(2026, 1, 23)

    def test_slash_format(self):
        assert parse_date("19/01/2026") == date(2026, 1, 19)

    def test_invalid_day(self):
        assert parse_date("2026-02-30") is None

    def test_garbage(self):
        assert parse_date("next tuesday") is None

    def test_blank(self):
        assert parse_date("   ") is None

    def test_datetime_truncated(self):
        assert parse_date(datetime(2026, 3, 4, 12, 30)) == date(2026, 3, 4)

    def test_non_string(self):
        assert parse_date(20260123) is None


class TestParseDatetime:
    def test_iso_datetime(self):
        assert parse_datetime("2026-01-23T10:15:30") == datetime(2026, 1, 23, 10, 15, 30)

    def test_date_becomes_midnight(self):
        assert parse_datetime(date(2026, 1, 23)) == datetime(2026, 1, 23)

    def test_european_string_falls_back_to_date(self):
        assert parse_datetime("23.01.2026") == datetime(2026, 1, 23)

    def test_unparseable(self):
        assert parse_datetime("soon") is None


# =============================================================================
# Durations (canonical [-][d.]hh:mm:ss[.fffffff])
# =============================================================================


class TestParseDuration:
    def test_hours_minutes_seconds(self):
        assert parse_duration("01:30:00") == timedelta(hours=1, minutes=30)

    def test_hours_minutes_only(self):
        assert parse_duration("08:15") == timedelta(hours=8, minutes=15)

    def test_days(self):
        assert parse_duration("2.04:00:00") == timedelta(days=2, hours=4)

    def test_negative_with_fraction(self):
        assert parse_duration("-00:00:05.2500000") == -timedelta(seconds=5, milliseconds=250)

    def test_short_fraction_is_padded(self):
        assert parse_duration("00:00:01.5") == timedelta(seconds=1, milliseconds=500)

    def test_time_of_day(self):
        assert parse_duration(time(9, 45)) == timedelta(hours=9, minutes=45)

    def test_out_of_range_minutes(self):
        assert parse_duration("01:75:00") is None

    def test_out_of_range_hours(self):
        assert parse_duration("24:00:00") is None

    def test_garbage(self):
        assert parse_duration("an hour") is None


class TestFormatDuration:
    def test_plain(self):
        assert format_duration(timedelta(hours=1, minutes=30)) == "01:30:00"

    def test_days(self):
        assert format_duration(timedelta(days=2, hours=4)) == "2.04:00:00"

    def test_negative_fraction(self):
        assert format_duration(-timedelta(seconds=5, milliseconds=250)) == "-00:00:05.2500000"

    def test_zero(self):
        assert format_duration(timedelta(0)) == "00:00:00"

    @pytest.mark.parametrize(
        "span",
        [
            timedelta(hours=1, minutes=30),
            timedelta(days=3, hours=23, minutes=59, seconds=59),
            -timedelta(days=1, seconds=1),
            timedelta(microseconds=123456),
        ],
        ids=["hour-and-half", "almost-four-days", "negative-day", "sub-second"],
    )
    def test_canonical_text_parses_back_to_equal_span(self, span):
        assert parse_duration(format_duration(span)) == span
