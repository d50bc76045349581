"""Generic cron field grammar.

A field is a comma-separated list of entries. Each entry is tokenized into a
:class:`Directive` by a small hand-written grammar with six fixed forms::

    *  ?          every value
    V             one value
    V-V           span
    */S           every S-th value
    V/S           from V to the field maximum, every S-th value
    V-V/S         span, every S-th value

``V`` is a number (optionally with one leading zero) or, for the month and
day-of-week fields, a case-insensitive English name. A span whose start
exceeds its end wraps through the field maximum back to the minimum, so the
hour span ``22-4/2`` is ``{22, 0, 2, 4}``.

Entries matching none of the forms become ``UNRECOGNIZED`` directives; the
day-of-month and day-of-week handlers get a chance to reinterpret them as
``L``/``W``/``#`` modifiers before they are reported as syntax errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping

from croncalc.errors import CronSyntaxError, InvalidIntervalError

MIN_YEAR = 1970
MAX_YEAR = 2099

_DIGITS = frozenset("0123456789")


# =============================================================================
# Field Types
# =============================================================================


class CronFieldType(Enum):
    """Types of cron fields."""

    SECOND = auto()
    MINUTE = auto()
    HOUR = auto()
    DAY_OF_MONTH = auto()
    MONTH = auto()
    DAY_OF_WEEK = auto()
    YEAR = auto()


def _number_tokens(min_value: int, max_value: int, padded: bool = True) -> dict[str, int]:
    tokens: dict[str, int] = {}
    for value in range(min_value, max_value + 1):
        tokens[str(value)] = value
        if padded and value < 10:
            tokens[f"0{value}"] = value
    return tokens


_MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_WEEKDAY_NAMES = (
    "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
)


def _name_tokens(names: tuple[str, ...], first: int) -> dict[str, int]:
    tokens: dict[str, int] = {}
    for offset, name in enumerate(names):
        tokens[name] = first + offset
        tokens[name[:3]] = first + offset
    return tokens


@dataclass(frozen=True)
class FieldSpec:
    """Static description of one cron field.

    Attributes:
        name: Field name used in error messages.
        min_value: Inclusive lower bound.
        max_value: Inclusive upper bound.
        tokens: Lower-case token text to value. Every value lies within
            the bounds; day-of-week ``7`` is simply another token for 0.
    """

    name: str
    min_value: int
    max_value: int
    tokens: Mapping[str, int] = field(default_factory=dict, repr=False)

    @property
    def default_values(self) -> tuple[int, ...]:
        return tuple(range(self.min_value, self.max_value + 1))

    def lookup(self, text: str) -> int | None:
        """Resolve a bare value or name, or None if it is not a token."""
        return self.tokens.get(text.lower())


FIELD_SPECS: dict[CronFieldType, FieldSpec] = {
    CronFieldType.SECOND: FieldSpec("second", 0, 59, _number_tokens(0, 59)),
    CronFieldType.MINUTE: FieldSpec("minute", 0, 59, _number_tokens(0, 59)),
    CronFieldType.HOUR: FieldSpec("hour", 0, 23, _number_tokens(0, 23)),
    CronFieldType.DAY_OF_MONTH: FieldSpec(
        "day-of-month", 1, 31, _number_tokens(1, 31)
    ),
    CronFieldType.MONTH: FieldSpec(
        "month",
        1, 12,
        {**_number_tokens(1, 12), **_name_tokens(_MONTH_NAMES, 1)},
    ),
    CronFieldType.DAY_OF_WEEK: FieldSpec(
        "day-of-week",
        0, 6,
        {**_number_tokens(0, 6), "7": 0, **_name_tokens(_WEEKDAY_NAMES, 0)},
    ),
    CronFieldType.YEAR: FieldSpec(
        "year", MIN_YEAR, MAX_YEAR, _number_tokens(MIN_YEAR, MAX_YEAR, padded=False)
    ),
}


# =============================================================================
# Directives
# =============================================================================


class DirectiveKind(Enum):
    """Kinds of parsed field entries."""

    ALL = auto()
    ONE = auto()
    SPAN = auto()
    UNRECOGNIZED = auto()


@dataclass(frozen=True)
class Directive:
    """The parsed meaning of one comma-separated entry.

    ``first``/``last``/``step`` are only meaningful for ONE (``first``) and
    SPAN. ``text`` is the entry exactly as written.
    """

    kind: DirectiveKind
    text: str
    first: int = 0
    last: int = 0
    step: int = 1

    @property
    def is_all(self) -> bool:
        return self.kind is DirectiveKind.ALL

    @property
    def is_unrecognized(self) -> bool:
        return self.kind is DirectiveKind.UNRECOGNIZED


def _is_number(text: str) -> bool:
    return bool(text) and all(c in _DIGITS for c in text)


def parse_entry(entry: str, spec: FieldSpec) -> Directive:
    """Tokenize one entry of a field.

    Raises:
        InvalidIntervalError: If the entry is well-formed but its step is
            outside ``[1, spec.max_value]``.
    """
    text = entry.lower()
    if text in ("*", "?"):
        return Directive(DirectiveKind.ALL, entry, spec.min_value, spec.max_value)

    unrecognized = Directive(DirectiveKind.UNRECOGNIZED, entry)
    base, slash, step_text = text.partition("/")

    if "-" in base:
        start_text, _, end_text = base.partition("-")
        first = spec.lookup(start_text)
        last = spec.lookup(end_text)
        if first is None or last is None:
            return unrecognized
    elif base == "*" and slash:
        first, last = spec.min_value, spec.max_value
    else:
        first = spec.lookup(base)
        if first is None:
            return unrecognized
        if not slash:
            return Directive(DirectiveKind.ONE, entry, first, first)
        last = spec.max_value

    if not slash:
        return Directive(DirectiveKind.SPAN, entry, first, last, 1)

    if not _is_number(step_text):
        return unrecognized
    step = int(step_text)
    if step < 1 or step > spec.max_value:
        raise InvalidIntervalError(spec.name, entry)
    return Directive(DirectiveKind.SPAN, entry, first, last, step)


def parse_directives(text: str, spec: FieldSpec) -> list[Directive]:
    """Split a field on commas and tokenize every entry.

    Empty entries (``1,,2``) are skipped; a field with no entries at all is
    a syntax error.
    """
    entries = [entry for entry in text.split(",") if entry]
    if not entries:
        raise CronSyntaxError(spec.name, text)
    return [parse_entry(entry, spec) for entry in entries]


def expand(directive: Directive, spec: FieldSpec) -> set[int]:
    """Expand a directive into the set of values it selects."""
    if directive.kind is DirectiveKind.ALL:
        return set(spec.default_values)
    if directive.kind is DirectiveKind.ONE:
        return {directive.first}
    if directive.kind is DirectiveKind.SPAN:
        first, last, step = directive.first, directive.last, directive.step
        if first <= last:
            raw = range(first, last + 1, step)
        else:
            # Two progressions stitched at the field boundary.
            raw = [
                *range(first, spec.max_value + 1, step),
                *range(spec.min_value, last + 1, step),
            ]
        return set(raw)
    raise CronSyntaxError(spec.name, directive.text)


def parse_field(text: str, spec: FieldSpec) -> tuple[int, ...]:
    """Parse a standard field into its sorted, deduplicated values.

    Raises:
        CronSyntaxError: If any entry is not recognized.
        InvalidIntervalError: If any step is out of range.
    """
    directives = parse_directives(text, spec)
    for directive in directives:
        if directive.is_unrecognized:
            raise CronSyntaxError(spec.name, directive.text)

    if any(directive.is_all for directive in directives):
        return spec.default_values

    values: set[int] = set()
    for directive in directives:
        values |= expand(directive, spec)
    return tuple(sorted(values))
