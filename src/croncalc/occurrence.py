"""Occurrence calculator.

Finds the earliest instant strictly after a reference instant that matches
every field of a :class:`~croncalc.expression.CronExpression`.

The search walks the fields from year down to second, binary-searching each
field's sorted values. At the first field whose current value is not listed,
that field moves to its next listed value and every finer field restarts at
its minimum. When a field has no further values, the next coarser field
advances instead. Days are always looked up in the eligible-days list of the
candidate (year, month), never in the raw day-of-month field.

The eligible days of the (year, month) under consideration are cached on an
:class:`OccurrenceCursor`. A cursor is created per call (or per iterator), so
expressions stay immutable and can be shared between threads freely.

Returned datetimes carry the ``tzinfo`` of the reference instant and a zero
microsecond. Matching uses the wall-clock fields exactly as given.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from datetime import datetime
from typing import TYPE_CHECKING, Iterator

from croncalc.eligibility import actual_days

if TYPE_CHECKING:
    from croncalc.expression import CronExpression

logger = logging.getLogger(__name__)


def is_zero_instant(value: datetime) -> bool:
    """Check for the sentinel zero instant (``datetime.min``, any tzinfo)."""
    return value.replace(tzinfo=None) == datetime.min


class OccurrenceCursor:
    """Per-search state: the expression plus an eligible-days cache.

    The cache holds the days of the single (year, month) most recently
    resolved and is replaced whenever the search moves to another month.
    """

    __slots__ = ("_expr", "_days_key", "_days")

    def __init__(self, expression: "CronExpression") -> None:
        self._expr = expression
        self._days_key: tuple[int, int] | None = None
        self._days: tuple[int, ...] = ()

    @property
    def expression(self) -> "CronExpression":
        return self._expr

    def days_of(self, year: int, month: int) -> tuple[int, ...]:
        """Eligible days of ``year``/``month``, cached for the last pair."""
        key = (year, month)
        if key != self._days_key:
            self._days = actual_days(
                year, month, self._expr.day_of_month, self._expr.day_of_week
            )
            self._days_key = key
        return self._days

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def next_after(self, after: datetime) -> datetime | None:
        """Return the first matching instant strictly after ``after``."""
        if is_zero_instant(after):
            return None

        expr = self._expr

        i = bisect_left(expr.years, after.year)
        if i == len(expr.years):
            logger.debug("No year of %r at or after %d", expr, after.year)
            return None
        if expr.years[i] != after.year:
            return self._next_year(after)

        i = bisect_left(expr.months, after.month)
        if i == len(expr.months):
            return self._next_year(after)
        if expr.months[i] != after.month:
            return self._next_month(after)

        days = self.days_of(after.year, after.month)
        i = bisect_left(days, after.day)
        if i == len(days):
            return self._next_month(after)
        if days[i] != after.day:
            return self._next_day(after)

        i = bisect_left(expr.hours, after.hour)
        if i == len(expr.hours):
            return self._next_day(after)
        if expr.hours[i] != after.hour:
            return self._next_hour(after)

        i = bisect_left(expr.minutes, after.minute)
        if i == len(expr.minutes):
            return self._next_hour(after)
        if expr.minutes[i] != after.minute:
            return self._next_minute(after)

        i = bisect_left(expr.seconds, after.second)
        if i == len(expr.seconds):
            return self._next_minute(after)

        return self._next_second(after)

    def successor(self, current: datetime) -> datetime | None:
        """Return the occurrence following ``current``, itself an occurrence."""
        return self._next_second(current)

    # -------------------------------------------------------------------------
    # Field rollovers
    # -------------------------------------------------------------------------

    def _first_of_day(self, t: datetime, year: int, month: int, day: int) -> datetime:
        expr = self._expr
        return t.replace(
            year=year,
            month=month,
            day=day,
            hour=expr.hours[0],
            minute=expr.minutes[0],
            second=expr.seconds[0],
            microsecond=0,
        )

    def _roll_month(self, t: datetime, year: int, month: int) -> datetime | None:
        """First instant in an eligible month after ``year``/``month``.

        Months without any eligible day are skipped; the loop ends once the
        year list is exhausted.
        """
        months = self._expr.months
        years = self._expr.years
        while True:
            i = bisect_right(months, month)
            if i == len(months):
                j = bisect_right(years, year)
                if j == len(years):
                    logger.debug("Year list of %r exhausted after %d", self._expr, year)
                    return None
                year = years[j]
                i = 0
            month = months[i]
            days = self.days_of(year, month)
            if days:
                return self._first_of_day(t, year, month, days[0])

    def _next_year(self, t: datetime) -> datetime | None:
        return self._roll_month(t, t.year, 12)

    def _next_month(self, t: datetime) -> datetime | None:
        return self._roll_month(t, t.year, t.month)

    def _next_day(self, t: datetime) -> datetime | None:
        days = self.days_of(t.year, t.month)
        i = bisect_right(days, t.day)
        if i == len(days):
            return self._next_month(t)
        return self._first_of_day(t, t.year, t.month, days[i])

    def _next_hour(self, t: datetime) -> datetime | None:
        expr = self._expr
        i = bisect_right(expr.hours, t.hour)
        if i == len(expr.hours):
            return self._next_day(t)
        return t.replace(
            hour=expr.hours[i],
            minute=expr.minutes[0],
            second=expr.seconds[0],
            microsecond=0,
        )

    def _next_minute(self, t: datetime) -> datetime | None:
        expr = self._expr
        i = bisect_right(expr.minutes, t.minute)
        if i == len(expr.minutes):
            return self._next_hour(t)
        return t.replace(minute=expr.minutes[i], second=expr.seconds[0], microsecond=0)

    def _next_second(self, t: datetime) -> datetime | None:
        expr = self._expr
        i = bisect_right(expr.seconds, t.second)
        if i == len(expr.seconds):
            return self._next_minute(t)
        return t.replace(second=expr.seconds[i], microsecond=0)


# =============================================================================
# Cron Iterator
# =============================================================================


class CronIterator(Iterator[datetime]):
    """Iterator over matching datetimes.

    Successive occurrences share one cursor, so the eligible-days cache
    survives across steps within the same month.
    """

    def __init__(
        self,
        expression: "CronExpression",
        after: datetime | None = None,
        limit: int | None = None,
    ) -> None:
        """Initialize iterator.

        Args:
            expression: Cron expression.
            after: Start after this datetime (default: now).
            limit: Maximum matches.
        """
        self._cursor = OccurrenceCursor(expression)
        self._current = after if after is not None else datetime.now()
        self._limit = limit
        self._count = 0

    def __iter__(self) -> "CronIterator":
        return self

    def __next__(self) -> datetime:
        if self._current is None:
            raise StopIteration
        if self._limit is not None and self._count >= self._limit:
            raise StopIteration

        if self._count == 0:
            next_dt = self._cursor.next_after(self._current)
        else:
            next_dt = self._cursor.successor(self._current)

        self._current = next_dt
        if next_dt is None:
            raise StopIteration

        self._count += 1
        return next_dt


# =============================================================================
# Functional API
# =============================================================================


def next_occurrence(expression: "CronExpression", after: datetime) -> datetime | None:
    """Return the earliest occurrence strictly after ``after``, or None."""
    return OccurrenceCursor(expression).next_after(after)


def next_occurrences(
    expression: "CronExpression",
    after: datetime,
    n: int,
) -> list[datetime]:
    """Return up to ``n`` successive occurrences after ``after``.

    Fewer than ``n`` are returned when the schedule runs out of years.
    """
    if n <= 0:
        return []
    return list(CronIterator(expression, after, limit=n))
