"""Cron expression parser and parsed expression.

Design Principles:
    1. Immutable expressions: safe to share between threads
    2. Parse once, evaluate many times
    3. Per-call search state: the eligible-days cache lives on a cursor
       created for each search, never on the expression

Field layouts:
    5 fields    minute hour day-of-month month day-of-week
    6 fields    second minute hour day-of-month month day-of-week
    7 fields    second minute hour day-of-month month day-of-week year

Fields beyond the seventh are ignored. A missing second field means second
0; a missing year field means every year from 1970 to 2099.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable

from croncalc.day_fields import DomConstraints, DowConstraints, parse_cron_field
from croncalc.eligibility import actual_days
from croncalc.errors import CronParseError, MissingFieldsError
from croncalc.fields import FIELD_SPECS, CronFieldType
from croncalc.occurrence import CronIterator, next_occurrence, next_occurrences

if TYPE_CHECKING:
    from croncalc.builder import CronBuilder

logger = logging.getLogger(__name__)

MIN_FIELDS = 5
MAX_FIELDS = 7

# Field order for each supported field count.
FIELD_LAYOUTS: dict[int, tuple[CronFieldType, ...]] = {
    5: (
        CronFieldType.MINUTE,
        CronFieldType.HOUR,
        CronFieldType.DAY_OF_MONTH,
        CronFieldType.MONTH,
        CronFieldType.DAY_OF_WEEK,
    ),
    6: (
        CronFieldType.SECOND,
        CronFieldType.MINUTE,
        CronFieldType.HOUR,
        CronFieldType.DAY_OF_MONTH,
        CronFieldType.MONTH,
        CronFieldType.DAY_OF_WEEK,
    ),
    7: (
        CronFieldType.SECOND,
        CronFieldType.MINUTE,
        CronFieldType.HOUR,
        CronFieldType.DAY_OF_MONTH,
        CronFieldType.MONTH,
        CronFieldType.DAY_OF_WEEK,
        CronFieldType.YEAR,
    ),
}


# =============================================================================
# Cron Parser
# =============================================================================


class CronParser:
    """Turns expression text into a :class:`CronExpression`.

    The text is alias-expanded, split on whitespace, laid out by field count
    (see :data:`FIELD_LAYOUTS`) and each field is handed to the handler for
    its type.
    """

    # Predefined expression aliases, expanded to the 7-field form
    ALIASES: dict[str, str] = {
        "@yearly": "0 0 0 1 1 * *",
        "@annually": "0 0 0 1 1 * *",
        "@monthly": "0 0 0 1 * * *",
        "@weekly": "0 0 0 * * 0 *",
        "@daily": "0 0 0 * * * *",
        "@midnight": "0 0 0 * * * *",
        "@hourly": "0 0 * * * * *",
    }

    def __init__(self, expression: str) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression string.
        """
        self._original = expression.strip()
        self._expression = self._resolve_alias(self._original)

    @property
    def original(self) -> str:
        return self._original

    def _resolve_alias(self, expression: str) -> str:
        """Resolve predefined aliases."""
        alias = self.ALIASES.get(expression.lower())
        if alias is not None:
            logger.debug("Expanded alias %s to %r", expression, alias)
            return alias
        return expression

    def split(self) -> list[str]:
        """Split the (alias-expanded) expression into at most seven fields.

        Raises:
            MissingFieldsError: If fewer than five fields are present.
        """
        parts = self._expression.split()
        if len(parts) < MIN_FIELDS:
            raise MissingFieldsError(len(parts), self._original)
        if len(parts) > MAX_FIELDS:
            logger.debug(
                "Ignoring %d field(s) beyond the seventh in %r",
                len(parts) - MAX_FIELDS,
                self._original,
            )
        return parts[:MAX_FIELDS]

    def fields(self) -> dict[CronFieldType, str]:
        """Map each field present in the expression to its text, in order.

        Raises:
            MissingFieldsError: If fewer than five fields are present.
        """
        parts = self.split()
        return dict(zip(FIELD_LAYOUTS[len(parts)], parts))

    def parse(self) -> "CronExpression":
        """Parse the cron expression.

        Fields are parsed left to right and the first invalid one aborts the
        parse.

        Returns:
            Parsed CronExpression.

        Raises:
            CronParseError: If expression is invalid.
        """
        texts = self.fields()
        try:
            parsed = {
                field_type: parse_cron_field(field_type, text)
                for field_type, text in texts.items()
            }
        except CronParseError as e:
            e.with_expression(self._original)
            raise

        logger.debug("Parsed %r as %d fields", self._original, len(texts))
        return CronExpression(
            self._original,
            seconds=parsed.get(CronFieldType.SECOND, (0,)),
            minutes=parsed[CronFieldType.MINUTE],
            hours=parsed[CronFieldType.HOUR],
            day_of_month=parsed[CronFieldType.DAY_OF_MONTH],
            months=parsed[CronFieldType.MONTH],
            day_of_week=parsed[CronFieldType.DAY_OF_WEEK],
            years=parsed.get(
                CronFieldType.YEAR, FIELD_SPECS[CronFieldType.YEAR].default_values
            ),
            normalized=" ".join(texts.values()),
        )


# =============================================================================
# Cron Expression
# =============================================================================


class CronExpression:
    """A parsed schedule: sorted value tuples plus day-field constraints.

    Instances hold no search state, so one expression may be evaluated from
    many threads at once. Equality and hashing use the alias-expanded text.

    Example:
        >>> expr = CronExpression.parse("0 0 L * *")
        >>> expr.next(datetime(2016, 2, 15))
        datetime.datetime(2016, 2, 29, 0, 0)
        >>> expr.days_in(2015, 2)
        (28,)
    """

    __slots__ = (
        "_expression",
        "_normalized",
        "_seconds",
        "_minutes",
        "_hours",
        "_day_of_month",
        "_months",
        "_day_of_week",
        "_years",
    )

    def __init__(
        self,
        expression: str,
        *,
        seconds: Iterable[int],
        minutes: Iterable[int],
        hours: Iterable[int],
        day_of_month: DomConstraints,
        months: Iterable[int],
        day_of_week: DowConstraints,
        years: Iterable[int],
        normalized: str | None = None,
    ) -> None:
        """Initialize cron expression.

        Value lists are stored as sorted, deduplicated tuples.

        Args:
            expression: Original expression string.
            seconds: Matching seconds.
            minutes: Matching minutes.
            hours: Matching hours.
            day_of_month: Day-of-month constraints.
            months: Matching months.
            day_of_week: Day-of-week constraints.
            years: Matching years.
            normalized: Alias-expanded expression text.
        """
        self._expression = expression
        self._normalized = normalized if normalized is not None else expression
        self._seconds = tuple(sorted(set(seconds)))
        self._minutes = tuple(sorted(set(minutes)))
        self._hours = tuple(sorted(set(hours)))
        self._day_of_month = day_of_month
        self._months = tuple(sorted(set(months)))
        self._day_of_week = day_of_week
        self._years = tuple(sorted(set(years)))

    @classmethod
    def parse(cls, expression: str) -> "CronExpression":
        """Parse a cron expression.

        Args:
            expression: Cron expression string.

        Returns:
            Parsed CronExpression.

        Raises:
            CronParseError: If expression is invalid.
        """
        return CronParser(expression).parse()

    @classmethod
    def builder(cls) -> "CronBuilder":
        """Start a :class:`~croncalc.builder.CronBuilder`."""
        from croncalc.builder import CronBuilder

        return CronBuilder()

    @classmethod
    def from_alias(cls, name: str) -> "CronExpression":
        """Parse a predefined alias by name, with or without the ``@``.

        Raises:
            CronParseError: If ``name`` is not one of :attr:`CronParser.ALIASES`.
        """
        alias = "@" + name.strip().lstrip("@").lower()
        if alias not in CronParser.ALIASES:
            known = ", ".join(sorted(CronParser.ALIASES))
            raise CronParseError(f"unknown alias {name!r} (known: {known})", name)
        return cls.parse(alias)

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._expression

    @property
    def normalized(self) -> str:
        """Get the alias-expanded expression, limited to seven fields."""
        return self._normalized

    @property
    def field_count(self) -> int:
        return len(self._normalized.split())

    @property
    def has_seconds(self) -> bool:
        """Check if expression includes seconds."""
        return self.field_count >= 6

    @property
    def has_years(self) -> bool:
        """Check if expression includes years."""
        return self.field_count >= 7

    @property
    def seconds(self) -> tuple[int, ...]:
        return self._seconds

    @property
    def minutes(self) -> tuple[int, ...]:
        return self._minutes

    @property
    def hours(self) -> tuple[int, ...]:
        return self._hours

    @property
    def day_of_month(self) -> DomConstraints:
        return self._day_of_month

    @property
    def months(self) -> tuple[int, ...]:
        return self._months

    @property
    def day_of_week(self) -> DowConstraints:
        return self._day_of_week

    @property
    def years(self) -> tuple[int, ...]:
        return self._years

    def get_values(self, field_type: CronFieldType) -> tuple[int, ...]:
        """Get the plain values of a field.

        Day fields return only their plain values; ``L``/``W``/``#``
        modifiers are exposed through :attr:`day_of_month` and
        :attr:`day_of_week`.
        """
        if field_type is CronFieldType.DAY_OF_MONTH:
            return tuple(sorted(self._day_of_month.days))
        if field_type is CronFieldType.DAY_OF_WEEK:
            return tuple(sorted(self._day_of_week.days))
        return {
            CronFieldType.SECOND: self._seconds,
            CronFieldType.MINUTE: self._minutes,
            CronFieldType.HOUR: self._hours,
            CronFieldType.MONTH: self._months,
            CronFieldType.YEAR: self._years,
        }[field_type]

    def days_in(self, year: int, month: int) -> tuple[int, ...]:
        """Get the days of ``year``/``month`` on which the schedule fires."""
        return actual_days(year, month, self._day_of_month, self._day_of_week)

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime matches this expression.

        Microseconds are ignored.

        Args:
            dt: Datetime to check.

        Returns:
            True if datetime matches.
        """
        return (
            dt.year in self._years
            and dt.month in self._months
            and dt.hour in self._hours
            and dt.minute in self._minutes
            and dt.second in self._seconds
            and dt.day in self.days_in(dt.year, dt.month)
        )

    def next(self, after: datetime | None = None) -> datetime | None:
        """Get next matching datetime.

        Args:
            after: Start searching after this datetime (default: now).

        Returns:
            Next matching datetime, or None if the year range is exhausted.
        """
        if after is None:
            after = datetime.now()
        return next_occurrence(self, after)

    def next_n(self, n: int, after: datetime | None = None) -> list[datetime]:
        """Get next n matching datetimes.

        Args:
            n: Number of matches to find.
            after: Start searching after this datetime (default: now).

        Returns:
            List of at most n matching datetimes, ascending.
        """
        if after is None:
            after = datetime.now()
        return next_occurrences(self, after, n)

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
    ) -> CronIterator:
        """Create iterator over matching datetimes.

        Args:
            after: Start after this datetime (default: now).
            limit: Maximum number of matches.

        Returns:
            CronIterator.
        """
        return CronIterator(self, after, limit)

    def __repr__(self) -> str:
        return f"CronExpression({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronExpression):
            return self._normalized == other._normalized
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._normalized)


# =============================================================================
# Module-level API
# =============================================================================


def parse(expression: str) -> CronExpression:
    """Parse a cron expression.

    Raises:
        CronParseError: If expression is invalid.
    """
    return CronExpression.parse(expression)


def must_parse(expression: str) -> CronExpression:
    """Parse an expression known to be well-formed.

    Intended for module-level constants; a malformed expression is a
    programming error and is re-raised with the offending text.
    """
    try:
        return CronExpression.parse(expression)
    except CronParseError as e:
        logger.error("Invalid built-in cron expression %r: %s", expression, e)
        raise


def validate_expression(expression: str) -> list[dict[str, Any]]:
    """Check every field of an expression and report all problems.

    :func:`parse` stops at the first bad field; here each field is parsed on
    its own, so ``"61 24 * * *"`` reports both the minute and the hour.

    Args:
        expression: Cron expression to check.

    Returns:
        One :meth:`CronParseError.to_dict` record per problem, in field
        order. Empty if the expression is valid.
    """
    parser = CronParser(expression)
    try:
        texts = parser.fields()
    except CronParseError as e:
        return [e.to_dict()]

    problems: list[dict[str, Any]] = []
    for field_type, text in texts.items():
        try:
            parse_cron_field(field_type, text)
        except CronParseError as e:
            problems.append(e.with_expression(parser.original).to_dict())
    return problems


def is_valid_expression(expression: str) -> bool:
    """Check whether an expression parses without any problem."""
    return not validate_expression(expression)
