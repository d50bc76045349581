"""Tests for the next-occurrence calculator."""

from datetime import datetime, timedelta, timezone

import pytest

from croncalc import CronExpression, CronIterator, OccurrenceCursor, next_occurrence, next_occurrences
from croncalc.occurrence import is_zero_instant


def ts(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%d %H:%M:%S")


def expect_next(expression: str, cases: list[tuple[str, str]]) -> None:
    expr = CronExpression.parse(expression)
    for start, expected in cases:
        assert expr.next(ts(start)) == ts(expected), f"{expression!r} after {start}"


# =============================================================================
# Field Rollovers
# =============================================================================


class TestRollovers:
    """Tests for carrying into coarser fields."""

    def test_every_second(self):
        """Test every second, including day, month and leap boundaries."""
        expect_next(
            "* * * * * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 00:00:01"),
                ("2013-01-01 00:00:59", "2013-01-01 00:01:00"),
                ("2013-01-01 00:59:59", "2013-01-01 01:00:00"),
                ("2013-01-01 23:59:59", "2013-01-02 00:00:00"),
                ("2013-02-28 23:59:59", "2013-03-01 00:00:00"),
                ("2016-02-28 23:59:59", "2016-02-29 00:00:00"),
                ("2012-12-31 23:59:59", "2013-01-01 00:00:00"),
            ],
        )

    def test_every_fifth_second(self):
        """Test */5 in the seconds field."""
        expect_next(
            "*/5 * * * * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 00:00:05"),
                ("2013-01-01 00:00:59", "2013-01-01 00:01:00"),
                ("2013-01-01 00:59:59", "2013-01-01 01:00:00"),
                ("2013-01-01 23:59:59", "2013-01-02 00:00:00"),
                ("2013-02-28 23:59:59", "2013-03-01 00:00:00"),
                ("2016-02-28 23:59:59", "2016-02-29 00:00:00"),
                ("2012-12-31 23:59:59", "2013-01-01 00:00:00"),
            ],
        )

    def test_every_minute(self):
        """Test the five-field wildcard."""
        expect_next(
            "* * * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 00:01:00"),
                ("2013-01-01 00:00:59", "2013-01-01 00:01:00"),
                ("2013-01-01 00:59:00", "2013-01-01 01:00:00"),
                ("2013-01-01 23:59:00", "2013-01-02 00:00:00"),
                ("2013-02-28 23:59:00", "2013-03-01 00:00:00"),
                ("2016-02-28 23:59:00", "2016-02-29 00:00:00"),
                ("2012-12-31 23:59:00", "2013-01-01 00:00:00"),
            ],
        )

    def test_minutes_with_interval(self):
        """Test 17-43/5."""
        expect_next(
            "17-43/5 * * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 00:17:00"),
                ("2013-01-01 00:16:59", "2013-01-01 00:17:00"),
                ("2013-01-01 00:30:00", "2013-01-01 00:32:00"),
                ("2013-01-01 00:50:00", "2013-01-01 01:17:00"),
                ("2013-01-01 23:50:00", "2013-01-02 00:17:00"),
                ("2013-02-28 23:50:00", "2013-03-01 00:17:00"),
                ("2016-02-28 23:50:00", "2016-02-29 00:17:00"),
                ("2012-12-31 23:50:00", "2013-01-01 00:17:00"),
            ],
        )

    def test_minutes_interval_list(self):
        """Test 15-30/4,55."""
        expect_next(
            "15-30/4,55 * * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 00:15:00"),
                ("2013-01-01 00:16:00", "2013-01-01 00:19:00"),
                ("2013-01-01 00:30:00", "2013-01-01 00:55:00"),
                ("2013-01-01 00:55:00", "2013-01-01 01:15:00"),
                ("2013-01-01 23:55:00", "2013-01-02 00:15:00"),
                ("2013-02-28 23:55:00", "2013-03-01 00:15:00"),
                ("2016-02-28 23:55:00", "2016-02-29 00:15:00"),
                ("2012-12-31 23:54:00", "2012-12-31 23:55:00"),
                ("2012-12-31 23:55:00", "2013-01-01 00:15:00"),
            ],
        )


# =============================================================================
# Day Fields
# =============================================================================


class TestDaysOfWeek:
    """Tests for day-of-week schedules."""

    @pytest.mark.parametrize(
        "expression,cases",
        [
            (
                "0 0 * * MON",
                [
                    ("2013-01-01 00:00:00", "2013-01-07 00:00:00"),
                    ("2013-01-28 00:00:00", "2013-02-04 00:00:00"),
                    ("2013-12-30 00:30:00", "2014-01-06 00:00:00"),
                ],
            ),
            (
                "0 0 * * friday",
                [
                    ("2013-01-01 00:00:00", "2013-01-04 00:00:00"),
                    ("2013-01-28 00:00:00", "2013-02-01 00:00:00"),
                    ("2013-12-30 00:30:00", "2014-01-03 00:00:00"),
                ],
            ),
            (
                "0 0 * * 6,7",
                [
                    ("2013-01-01 00:00:00", "2013-01-05 00:00:00"),
                    ("2013-01-28 00:00:00", "2013-02-02 00:00:00"),
                    ("2013-12-30 00:30:00", "2014-01-04 00:00:00"),
                ],
            ),
        ],
    )
    def test_weekdays(self, expression, cases):
        """Test named and numeric weekdays."""
        expect_next(expression, cases)

    def test_fifth_saturday(self):
        """Test 6#5 skips months without a fifth Saturday."""
        expect_next("0 0 * * 6#5", [("2013-09-02 00:00:00", "2013-11-30 00:00:00")])

    def test_wrap_day_of_week_range(self):
        """Test FRI-MON as 5-1."""
        expect_next(
            "0 0 * * 5-1",
            [
                ("2013-01-01 00:00:00", "2013-01-04 00:00:00"),
                ("2013-01-04 00:00:00", "2013-01-05 00:00:00"),
                ("2013-01-05 00:00:00", "2013-01-06 00:00:00"),
                ("2013-01-06 00:00:00", "2013-01-07 00:00:00"),
                ("2013-01-07 00:00:00", "2013-01-11 00:00:00"),
            ],
        )

    def test_weekend_via_seven(self):
        """Test 5-7 runs Friday through Sunday."""
        expr = CronExpression.parse("0 0 * * 5-7")
        result = expr.next_n(3, ts("2013-01-01 00:00:00"))
        assert [d.day for d in result] == [4, 5, 6]

    def test_stepped_span_ending_in_seven(self):
        """Test 6-7/2 runs Saturday and Sunday."""
        expr = CronExpression.parse("0 0 * * 6-7/2")
        result = expr.next_n(4, ts("2013-01-01 00:00:00"))
        assert [d.day for d in result] == [5, 6, 12, 13]

    def test_zero_to_seven_is_sunday(self):
        """Test 0-7 collapses to Sunday."""
        expr = CronExpression.parse("0 0 * * 0-7")
        result = expr.next_n(3, ts("2013-01-01 00:00:00"))
        assert [d.day for d in result] == [6, 13, 20]


class TestDaysOfMonth:
    """Tests for day-of-month modifiers."""

    def test_work_day_14w(self):
        """Test 14W."""
        expect_next(
            "0 0 14W * *",
            [
                ("2013-03-31 00:00:00", "2013-04-15 00:00:00"),
                ("2013-08-31 00:00:00", "2013-09-13 00:00:00"),
            ],
        )

    def test_work_day_30w(self):
        """Test 30W at the end of the month."""
        expect_next(
            "0 0 30W * *",
            [
                ("2013-03-02 00:00:00", "2013-03-29 00:00:00"),
                ("2013-06-02 00:00:00", "2013-06-28 00:00:00"),
                ("2013-09-02 00:00:00", "2013-09-30 00:00:00"),
                ("2013-11-02 00:00:00", "2013-11-29 00:00:00"),
            ],
        )

    def test_last_day_of_month(self):
        """Test L."""
        expect_next(
            "0 0 L * *",
            [
                ("2013-09-02 00:00:00", "2013-09-30 00:00:00"),
                ("2014-01-01 00:00:00", "2014-01-31 00:00:00"),
                ("2014-02-01 00:00:00", "2014-02-28 00:00:00"),
                ("2016-02-15 00:00:00", "2016-02-29 00:00:00"),
            ],
        )

    def test_last_work_day_of_month(self):
        """Test LW."""
        expect_next(
            "0 0 LW * *",
            [
                ("2013-09-02 00:00:00", "2013-09-30 00:00:00"),
                ("2013-11-02 00:00:00", "2013-11-29 00:00:00"),
                ("2014-08-15 00:00:00", "2014-08-29 00:00:00"),
            ],
        )

    def test_skips_short_months(self):
        """Test the 31st skips 30-day months."""
        expect_next("0 0 31 * *", [("2013-04-01 00:00:00", "2013-05-31 00:00:00")])

    def test_day_and_weekday_union(self):
        """Test the 13th or any Friday."""
        expr = CronExpression.parse("0 0 13 * FRI")
        result = expr.next_n(3, ts("2013-09-01 00:00:00"))
        assert result == [
            ts("2013-09-06 00:00:00"),
            ts("2013-09-13 00:00:00"),
            ts("2013-09-20 00:00:00"),
        ]


# =============================================================================
# Wrap-around Ranges
# =============================================================================


class TestWrapRanges:
    """Tests for spans that wrap through the field maximum."""

    def test_wrap_hour_range(self):
        """Test 14-3 covers the afternoon and early morning."""
        expect_next(
            "0 14-3 * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 01:00:00"),
                ("2013-01-01 03:00:00", "2013-01-01 14:00:00"),
                ("2013-01-01 13:00:00", "2013-01-01 14:00:00"),
                ("2013-01-01 14:00:00", "2013-01-01 15:00:00"),
                ("2013-01-01 23:00:00", "2013-01-02 00:00:00"),
                ("2013-01-01 02:00:00", "2013-01-01 03:00:00"),
            ],
        )

    def test_wrap_hour_range_with_step(self):
        """Test 22-4/2 as 22, 0, 2, 4."""
        expect_next(
            "0 22-4/2 * * *",
            [
                ("2013-01-01 21:00:00", "2013-01-01 22:00:00"),
                ("2013-01-01 22:00:00", "2013-01-02 00:00:00"),
                ("2013-01-02 00:00:00", "2013-01-02 02:00:00"),
                ("2013-01-02 02:00:00", "2013-01-02 04:00:00"),
                ("2013-01-02 04:00:00", "2013-01-02 22:00:00"),
            ],
        )

    def test_wrap_minute_range(self):
        """Test 45-15 in the minute field."""
        expect_next(
            "45-15 * * * *",
            [
                ("2013-01-01 00:00:00", "2013-01-01 00:01:00"),
                ("2013-01-01 00:15:00", "2013-01-01 00:45:00"),
                ("2013-01-01 00:44:00", "2013-01-01 00:45:00"),
                ("2013-01-01 00:59:00", "2013-01-01 01:00:00"),
            ],
        )

    def test_wrap_month_range(self):
        """Test 10-2 in the month field."""
        expect_next(
            "0 0 1 10-2 *",
            [
                ("2013-01-01 00:00:00", "2013-02-01 00:00:00"),
                ("2013-02-01 00:00:00", "2013-10-01 00:00:00"),
                ("2013-10-01 00:00:00", "2013-11-01 00:00:00"),
                ("2013-12-01 00:00:00", "2014-01-01 00:00:00"),
            ],
        )


# =============================================================================
# Years and Exhaustion
# =============================================================================


class TestYears:
    """Tests for the year field and the empty result."""

    def test_past_year(self):
        """Test a year list entirely in the past."""
        expr = CronExpression.parse("0 0 0 * * * 1980")
        assert expr.next(datetime(2013, 8, 31)) is None

    def test_future_year(self):
        """Test a year list in the future."""
        expr = CronExpression.parse("0 0 0 * * * 2050")
        assert expr.next(datetime(2013, 8, 31)) == datetime(2050, 1, 1)

    def test_year_list(self):
        """Test skipping between listed years."""
        expr = CronExpression.parse("0 0 0 1 1 * 2013,2015")
        assert expr.next_n(3, datetime(2012, 6, 1)) == [
            datetime(2013, 1, 1),
            datetime(2015, 1, 1),
        ]

    def test_end_of_year_range(self):
        """Test nothing follows the last instant of 2099."""
        expr = CronExpression.parse("0 0 0 31 12 * *")
        assert expr.next(datetime(2099, 12, 31)) is None
        assert expr.next(datetime(2099, 12, 30)) == datetime(2099, 12, 31)

    def test_impossible_date(self):
        """Test February 30th never occurs."""
        expr = CronExpression.parse("0 0 30 2 *")
        assert expr.next(datetime(2013, 1, 1)) is None

    def test_zero_instant(self):
        """Test the zero instant yields no result."""
        expr = CronExpression.parse("0 0 0 * * * 2099")
        assert expr.next(datetime.min) is None
        assert is_zero_instant(datetime.min)
        assert is_zero_instant(datetime.min.replace(tzinfo=timezone.utc))
        assert not is_zero_instant(datetime(2013, 1, 1))


# =============================================================================
# Sequences
# =============================================================================


class TestNextN:
    """Tests for successive occurrences."""

    def test_fifth_saturday(self):
        """Test five successive fifth Saturdays."""
        expr = CronExpression.parse("0 0 * * 6#5")
        assert expr.next_n(5, ts("2013-09-02 08:44:30")) == [
            datetime(2013, 11, 30),
            datetime(2014, 3, 29),
            datetime(2014, 5, 31),
            datetime(2014, 8, 30),
            datetime(2014, 11, 29),
        ]

    def test_every_five_minutes(self):
        """Test */5 from an unaligned instant."""
        expr = CronExpression.parse("*/5 * * * *")
        assert expr.next_n(5, ts("2013-09-02 08:44:32")) == [
            ts("2013-09-02 08:45:00"),
            ts("2013-09-02 08:50:00"),
            ts("2013-09-02 08:55:00"),
            ts("2013-09-02 09:00:00"),
            ts("2013-09-02 09:05:00"),
        ]

    def test_zero_count(self):
        """Test n <= 0 returns an empty list."""
        expr = CronExpression.parse("* * * * *")
        assert next_occurrences(expr, ts("2013-01-01 00:00:00"), 0) == []
        assert next_occurrences(expr, ts("2013-01-01 00:00:00"), -1) == []

    def test_truncated_at_end_of_years(self):
        """Test fewer results when the year list runs out."""
        expr = CronExpression.parse("0 0 0 1 1 * 2098-2099")
        assert len(expr.next_n(5, datetime(2013, 1, 1))) == 2

    def test_strictly_increasing(self):
        """Test results are strictly increasing and all match."""
        expr = CronExpression.parse("*/7 13-2/3 L,15W * MON#2,5L")
        result = expr.next_n(50, datetime(2013, 1, 1))
        assert len(result) == 50
        assert all(a < b for a, b in zip(result, result[1:]))
        assert all(expr.matches(d) for d in result)

    def test_matches_next_chain(self):
        """Test next_n equals chained next calls."""
        expr = CronExpression.parse("0 */20 9-17 * * MON-FRI")
        start = datetime(2013, 9, 6, 16, 30)
        chained = []
        current = start
        for _ in range(6):
            current = expr.next(current)
            chained.append(current)
        assert expr.next_n(6, start) == chained


class TestInstantHandling:
    """Tests for timezone and sub-second handling."""

    def test_strictly_after(self):
        """Test a matching instant is not returned for itself."""
        expr = CronExpression.parse("0 0 * * *")
        assert expr.next(datetime(2013, 1, 1)) == datetime(2013, 1, 2)

    def test_microseconds_dropped(self):
        """Test results have zero microseconds."""
        expr = CronExpression.parse("* * * * * *")
        result = expr.next(datetime(2013, 1, 1, 0, 0, 0, 500000))
        assert result == datetime(2013, 1, 1, 0, 0, 1)
        assert result.microsecond == 0

    def test_tzinfo_preserved(self):
        """Test the reference instant's tzinfo is kept."""
        tz = timezone(timedelta(hours=-7))
        expr = CronExpression.parse("0 9 * * *")
        result = expr.next(datetime(2013, 1, 1, 12, 0, tzinfo=tz))
        assert result == datetime(2013, 1, 2, 9, 0, tzinfo=tz)
        assert result.tzinfo is tz


class TestCursorAndIterator:
    """Tests for the functional API, cursor and iterator."""

    def test_next_occurrence_function(self):
        """Test the functional API matches the method."""
        expr = CronExpression.parse("0 0 L * *")
        start = datetime(2016, 2, 15)
        assert next_occurrence(expr, start) == expr.next(start) == datetime(2016, 2, 29)

    def test_cursor_caches_current_month(self):
        """Test the cursor reuses the days of the last month resolved."""
        expr = CronExpression.parse("0 0 L * *")
        cursor = OccurrenceCursor(expr)
        first = cursor.days_of(2016, 2)
        assert cursor.days_of(2016, 2) is first
        assert cursor.days_of(2015, 2) == (28,)
        assert cursor.expression is expr

    def test_cursors_are_independent(self):
        """Test two cursors on one expression do not share state."""
        expr = CronExpression.parse("0 0 L * *")
        a = OccurrenceCursor(expr)
        b = OccurrenceCursor(expr)
        a.days_of(2016, 2)
        assert b.days_of(2015, 2) == (28,)
        assert a.days_of(2016, 2) == (29,)

    def test_iterator_limit(self):
        """Test iteration stops at the limit."""
        expr = CronExpression.parse("0 * * * *")
        result = list(CronIterator(expr, datetime(2013, 1, 1), limit=3))
        assert result == [
            datetime(2013, 1, 1, 1),
            datetime(2013, 1, 1, 2),
            datetime(2013, 1, 1, 3),
        ]

    def test_iterator_stops_when_exhausted(self):
        """Test unlimited iteration ends with the year list."""
        expr = CronExpression.parse("0 0 0 1 1,7 * 2099")
        assert list(expr.iter(datetime(2013, 1, 1))) == [
            datetime(2099, 1, 1),
            datetime(2099, 7, 1),
        ]
