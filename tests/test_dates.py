"""Tests for start date parsing."""

from datetime import date

import pytest

from mealmate.conversation import parse_start_date
from mealmate.conversation.dates import upcoming_weekday

TODAY = date(2025, 10, 8)  # Wednesday


class TestParseStartDate:
    """Tests for the forms people type."""

    @pytest.mark.parametrize("text, expected", [
        ("2025-11-03", date(2025, 11, 3)),
        ("Oct 10", date(2025, 10, 10)),
        ("October 10th", date(2025, 10, 10)),
        ("10 Oct", date(2025, 10, 10)),
        ("the 3rd November", date(2025, 11, 3)),
        ("Oct 10, 2026", date(2026, 10, 10)),
        ("12/24", date(2025, 12, 24)),
        ("12/24/2026", date(2026, 12, 24)),
        ("Dec 1st.", date(2025, 12, 1)),
        ("Oct 10 please", date(2025, 10, 10)),
    ])
    def test_calendar_dates(self, text, expected):
        assert parse_start_date(text, TODAY) == expected

    def test_missing_year_takes_reference_year(self):
        assert parse_start_date("Jan 5", TODAY) == date(2025, 1, 5)

    def test_relative_days(self):
        assert parse_start_date("today", TODAY) == TODAY
        assert parse_start_date("Tomorrow!", TODAY) == date(2025, 10, 9)

    def test_weekdays(self):
        assert parse_start_date("Friday", TODAY) == date(2025, 10, 10)
        assert parse_start_date("next monday", TODAY) == date(2025, 10, 13)
        assert parse_start_date("on Sunday", TODAY) == date(2025, 10, 12)

    def test_today_counts_as_upcoming(self):
        assert upcoming_weekday("Wednesday", TODAY) == TODAY

    def test_feb_29_outside_leap_year(self):
        assert parse_start_date("Feb 29", TODAY) is None
        assert parse_start_date("Feb 29", date(2028, 1, 1)) == date(2028, 2, 29)

    @pytest.mark.parametrize("text", [None, "", "whenever", "the weekend", "13/45"])
    def test_unrecognised(self, text):
        assert parse_start_date(text, TODAY) is None
