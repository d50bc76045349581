"""Day-of-month and day-of-week field handlers.

Both fields accept the generic grammar from :mod:`croncalc.fields` plus a few
modifiers that only make sense relative to a concrete month:

    Day of month    L     last day of the month
                    LW    last weekday (Mon-Fri) of the month
                    NW    weekday nearest to day N, within the month
    Day of week     WL    last weekday W of the month (5L = last Friday)
                    W#N   N-th weekday W of the month (1#2 = second Monday)

The handlers run the generic tokenizer first and reinterpret only the
entries it could not recognize.
"""

from __future__ import annotations

from dataclasses import dataclass

from croncalc.errors import CronSyntaxError
from croncalc.fields import (
    FIELD_SPECS,
    CronFieldType,
    Directive,
    expand,
    parse_directives,
    parse_field,
)

DAYS_PER_WEEK = 7

DOM_SPEC = FIELD_SPECS[CronFieldType.DAY_OF_MONTH]
DOW_SPEC = FIELD_SPECS[CronFieldType.DAY_OF_WEEK]


@dataclass(frozen=True)
class DomConstraints:
    """Parsed day-of-month field.

    Attributes:
        days: Plain day-of-month values.
        workdays: Days N from ``NW`` entries.
        last_day: ``L`` was given.
        last_workday: ``LW`` was given.
        restricted: False only when the field was a bare wildcard.
    """

    days: frozenset[int] = frozenset()
    workdays: frozenset[int] = frozenset()
    last_day: bool = False
    last_workday: bool = False
    restricted: bool = True

    @property
    def has_special(self) -> bool:
        return self.last_day or self.last_workday or bool(self.workdays)


@dataclass(frozen=True)
class DowConstraints:
    """Parsed day-of-week field.

    Attributes:
        days: Plain weekdays (0=Sunday).
        last_weekdays: Weekdays from ``WL`` entries.
        nth_weekdays: ``W#N`` entries encoded as ``(N - 1) * 7 + W``.
        restricted: False only when the field was a bare wildcard.
    """

    days: frozenset[int] = frozenset()
    last_weekdays: frozenset[int] = frozenset()
    nth_weekdays: frozenset[int] = frozenset()
    restricted: bool = True

    @property
    def has_special(self) -> bool:
        return bool(self.last_weekdays or self.nth_weekdays)

    def nth_pairs(self) -> list[tuple[int, int]]:
        """Decode ``nth_weekdays`` into sorted ``(weekday, nth)`` pairs."""
        return sorted(
            (code % DAYS_PER_WEEK, code // DAYS_PER_WEEK + 1)
            for code in self.nth_weekdays
        )


def _is_bare_wildcard(directives: list[Directive]) -> bool:
    return all(directive.is_all for directive in directives)


# =============================================================================
# Day of Month
# =============================================================================


def parse_dom(text: str) -> DomConstraints:
    """Parse the day-of-month field.

    Raises:
        CronSyntaxError: If an entry is neither generic syntax nor one of
            ``L``, ``LW``, ``NW``.
        InvalidIntervalError: If a step is out of range.
    """
    directives = parse_directives(text, DOM_SPEC)

    days: set[int] = set()
    workdays: set[int] = set()
    last_day = False
    last_workday = False

    for directive in directives:
        if not directive.is_unrecognized:
            days |= expand(directive, DOM_SPEC)
            continue

        entry = directive.text.lower()
        if entry == "l":
            last_day = True
        elif entry == "lw":
            last_workday = True
        elif entry.endswith("w") and DOM_SPEC.lookup(entry[:-1]) is not None:
            workdays.add(DOM_SPEC.lookup(entry[:-1]))
        else:
            raise CronSyntaxError(DOM_SPEC.name, directive.text)

    return DomConstraints(
        days=frozenset(days),
        workdays=frozenset(workdays),
        last_day=last_day,
        last_workday=last_workday,
        restricted=not _is_bare_wildcard(directives),
    )


# =============================================================================
# Day of Week
# =============================================================================


def _parse_nth(entry: str) -> int | None:
    weekday_text, _, nth_text = entry.partition("#")
    weekday = DOW_SPEC.lookup(weekday_text)
    if weekday is None or len(nth_text) != 1 or nth_text not in "12345":
        return None
    return (int(nth_text) - 1) * DAYS_PER_WEEK + weekday


def parse_dow(text: str) -> DowConstraints:
    """Parse the day-of-week field.

    Raises:
        CronSyntaxError: If an entry is neither generic syntax nor one of
            ``WL``, ``W#N``.
        InvalidIntervalError: If a step is out of range.
    """
    directives = parse_directives(text, DOW_SPEC)

    days: set[int] = set()
    last_weekdays: set[int] = set()
    nth_weekdays: set[int] = set()

    for directive in directives:
        if not directive.is_unrecognized:
            days |= expand(directive, DOW_SPEC)
            continue

        entry = directive.text.lower()
        if entry.endswith("l") and DOW_SPEC.lookup(entry[:-1]) is not None:
            last_weekdays.add(DOW_SPEC.lookup(entry[:-1]))
            continue
        if "#" in entry:
            code = _parse_nth(entry)
            if code is not None:
                nth_weekdays.add(code)
                continue
        raise CronSyntaxError(DOW_SPEC.name, directive.text)

    return DowConstraints(
        days=frozenset(days),
        last_weekdays=frozenset(last_weekdays),
        nth_weekdays=frozenset(nth_weekdays),
        restricted=not _is_bare_wildcard(directives),
    )


# =============================================================================
# Dispatch
# =============================================================================


def parse_cron_field(
    field_type: CronFieldType,
    text: str,
) -> tuple[int, ...] | DomConstraints | DowConstraints:
    """Parse the text of one field with the handler its type calls for.

    Day-of-month and day-of-week yield their constraint objects; every other
    field yields its sorted values.

    Raises:
        CronParseError: If the text is not valid for ``field_type``.
    """
    if field_type is CronFieldType.DAY_OF_MONTH:
        return parse_dom(text)
    if field_type is CronFieldType.DAY_OF_WEEK:
        return parse_dow(text)
    return parse_field(text, FIELD_SPECS[field_type])
