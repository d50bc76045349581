"""croncalc: cron expression parsing and next-occurrence calculation.

Features:
    - Standard 5-field cron (minute, hour, day, month, weekday)
    - Extended 6-field cron with seconds
    - Extended 7-field cron with years
    - Special characters: *, ?, /, -, ,, L, LW, W, #
    - Named months and weekdays
    - Predefined expressions (@yearly, @monthly, @weekly, etc.)
    - Wrap-around spans (22-4 in the hour field)
    - Binary-search next-occurrence calculation
    - Expression builder, presets and validator

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * / , -
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * ? / , - L LW W
    Month         1-12 or JAN-DEC * / , -
    Day of Week   0-7 or SUN-SAT  * ? / , - L #
    Year          1970-2099       * / , -

When both day fields are restricted, a day qualifies if either field
allows it.

Usage:
    >>> from croncalc import CronExpression
    >>>
    >>> expr = CronExpression.parse("0 9 * * MON-FRI")
    >>> next_run = expr.next()
    >>> next_5 = expr.next_n(5)
    >>>
    >>> expr = (CronExpression.builder()
    ...     .at(9)
    ...     .nth_weekday("MON", 1)
    ...     .build())
"""

from croncalc.errors import (
    CronParseError,
    CronSyntaxError,
    InvalidIntervalError,
    MissingFieldsError,
)

from croncalc.fields import (
    FIELD_SPECS,
    MAX_YEAR,
    MIN_YEAR,
    CronFieldType,
    Directive,
    DirectiveKind,
    FieldSpec,
    parse_field,
)

from croncalc.day_fields import (
    DomConstraints,
    DowConstraints,
    parse_cron_field,
    parse_dom,
    parse_dow,
)

from croncalc.eligibility import actual_days, nearest_workday

from croncalc.occurrence import (
    CronIterator,
    OccurrenceCursor,
    next_occurrence,
    next_occurrences,
)

from croncalc.expression import (
    FIELD_LAYOUTS,
    CronExpression,
    CronParser,
    is_valid_expression,
    must_parse,
    parse,
    validate_expression,
)

from croncalc.builder import CronBuilder

from croncalc.presets import (
    PRESETS,
    get_preset,
    list_presets,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "CronParseError",
    "CronSyntaxError",
    "InvalidIntervalError",
    "MissingFieldsError",
    # Fields
    "FIELD_SPECS",
    "MAX_YEAR",
    "MIN_YEAR",
    "CronFieldType",
    "Directive",
    "DirectiveKind",
    "FieldSpec",
    "parse_field",
    # Day fields
    "DomConstraints",
    "DowConstraints",
    "parse_cron_field",
    "parse_dom",
    "parse_dow",
    # Eligibility
    "actual_days",
    "nearest_workday",
    # Occurrences
    "CronIterator",
    "OccurrenceCursor",
    "next_occurrence",
    "next_occurrences",
    # Expression
    "FIELD_LAYOUTS",
    "CronExpression",
    "CronParser",
    "parse",
    "must_parse",
    "validate_expression",
    "is_valid_expression",
    # Builder
    "CronBuilder",
    # Presets
    "PRESETS",
    "get_preset",
    "list_presets",
]
