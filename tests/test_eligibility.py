"""Tests for the day-eligibility merger.

Calendar reference: 2013-09-01 and 2013-06-30 are Sundays, 2013-11-01 is a
Friday, 2013-06-01 and 2015-02-28 are Saturdays.
"""

import pytest

from croncalc.day_fields import parse_dom, parse_dow
from croncalc.eligibility import actual_days, cron_weekday, month_length, nearest_workday


def days(year, month, dom="*", dow="*"):
    return actual_days(year, month, parse_dom(dom), parse_dow(dow))


class TestCalendarHelpers:
    """Tests for calendar helpers."""

    def test_month_length(self):
        """Test month lengths including leap years."""
        assert month_length(2016, 2) == 29
        assert month_length(2015, 2) == 28
        assert month_length(2013, 9) == 30

    def test_cron_weekday(self):
        """Test Sunday is 0 and Saturday is 6."""
        assert cron_weekday(2013, 9, 1) == 0
        assert cron_weekday(2013, 11, 1) == 5
        assert cron_weekday(2013, 6, 1) == 6


class TestNearestWorkday:
    """Tests for the W modifier rule."""

    def test_weekday_unchanged(self):
        """Test a Monday-Friday day is its own nearest workday."""
        assert nearest_workday(2013, 9, 30) == 30

    def test_saturday_moves_back(self):
        """Test Saturday moves to Friday."""
        assert nearest_workday(2013, 3, 30) == 29

    def test_saturday_first_moves_forward(self):
        """Test Saturday the 1st moves to Monday the 3rd."""
        assert nearest_workday(2013, 6, 1) == 3

    def test_sunday_moves_forward(self):
        """Test Sunday moves to Monday."""
        assert nearest_workday(2013, 9, 1) == 2
        assert nearest_workday(2013, 4, 14) == 15

    def test_sunday_last_moves_back(self):
        """Test Sunday the last day moves to Friday."""
        assert nearest_workday(2013, 6, 30) == 28


class TestActualDays:
    """Tests for actual_days."""

    def test_both_unrestricted(self):
        """Test every day qualifies."""
        assert days(2013, 9) == tuple(range(1, 31))

    def test_question_mark_is_unrestricted(self):
        """Test ? behaves like *."""
        assert days(2016, 2, "?", "?") == tuple(range(1, 30))

    def test_day_of_month_only(self):
        """Test plain days of month."""
        assert days(2013, 9, "1,15") == (1, 15)

    def test_days_beyond_month_dropped(self):
        """Test the 31st does not exist in September."""
        assert days(2013, 9, "31") == ()
        assert days(2013, 9, "30,31") == (30,)

    def test_day_of_week_only(self):
        """Test plain weekdays."""
        assert days(2013, 9, "*", "MON") == (2, 9, 16, 23, 30)

    def test_union_of_both_fields(self):
        """Test restricted fields are OR-ed."""
        assert days(2013, 9, "1", "MON") == (1, 2, 9, 16, 23, 30)

    def test_question_mark_defers_to_other_field(self):
        """Test ? in day-of-month leaves only the weekday constraint."""
        assert days(2013, 9, "?", "1") == (2, 9, 16, 23, 30)

    def test_last_day(self):
        """Test L in leap and common Februaries."""
        assert days(2016, 2, "L") == (29,)
        assert days(2015, 2, "L") == (28,)

    def test_last_workday(self):
        """Test LW when the last day is a Saturday."""
        assert days(2015, 2, "LW") == (27,)

    def test_nearest_workday(self):
        """Test NW inside and outside the month."""
        assert days(2013, 4, "14W") == (15,)
        assert days(2013, 9, "31W") == ()

    def test_nth_weekday(self):
        """Test W#N."""
        assert days(2013, 9, "*", "2#1") == (3,)
        assert days(2013, 9, "*", "0#1") == (1,)
        assert days(2013, 11, "*", "6#5") == (30,)

    def test_missing_fifth_weekday(self):
        """Test a fifth Saturday that does not exist."""
        assert days(2013, 9, "*", "6#5") == ()

    @pytest.mark.parametrize(
        "year,month,dow,expected",
        [
            (2013, 11, "5L", (29,)),
            (2013, 9, "0L", (29,)),
            (2013, 9, "1L", (30,)),
            (2016, 2, "1L", (29,)),
        ],
    )
    def test_last_weekday(self, year, month, dow, expected):
        """Test WL."""
        assert days(year, month, "*", dow) == expected

    def test_weekday_wrap(self):
        """Test FRI-MON selects four weekdays."""
        assert days(2013, 9, "*", "5-1")[:4] == (1, 2, 6, 7)
