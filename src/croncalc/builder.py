"""Incremental construction of cron expressions.

Each setter parses the text it produces for its field at once, so a bad value
raises :class:`~croncalc.errors.CronParseError` (with ``field`` set) at the
call that introduced it rather than later in :meth:`CronBuilder.build`.

The rendered layout follows the fields that were set: seconds are emitted
only when a second or a year was given, and the year only when set.
"""

from __future__ import annotations

from croncalc.day_fields import parse_cron_field
from croncalc.expression import CronExpression
from croncalc.fields import CronFieldType

Value = int | str


class CronBuilder:
    """Chainable setters, one field at a time.

    Example:
        >>> (CronBuilder()
        ...     .minute("*/15")
        ...     .hour("9-17")
        ...     .weekday("MON-FRI")
        ...     .to_string())
        '*/15 9-17 * * MON-FRI'
    """

    __slots__ = ("_texts",)

    def __init__(self) -> None:
        self._texts: dict[CronFieldType, str] = {}

    def _set(self, field_type: CronFieldType, values: tuple[Value, ...]) -> "CronBuilder":
        text = ",".join(str(value) for value in values)
        parse_cron_field(field_type, text)
        self._texts[field_type] = text
        return self

    def text_of(self, field_type: CronFieldType) -> str | None:
        """Text set for a field so far, or None if it was left at its default."""
        return self._texts.get(field_type)

    # -------------------------------------------------------------------------
    # Plain fields
    # -------------------------------------------------------------------------

    def second(self, *values: Value) -> "CronBuilder":
        return self._set(CronFieldType.SECOND, values)

    def minute(self, *values: Value) -> "CronBuilder":
        return self._set(CronFieldType.MINUTE, values)

    def hour(self, *values: Value) -> "CronBuilder":
        return self._set(CronFieldType.HOUR, values)

    def day(self, *values: Value) -> "CronBuilder":
        """Set day-of-month entries (numbers, ``L``, ``LW``, ``15W``...)."""
        return self._set(CronFieldType.DAY_OF_MONTH, values)

    def month(self, *values: Value) -> "CronBuilder":
        return self._set(CronFieldType.MONTH, values)

    def weekday(self, *values: Value) -> "CronBuilder":
        """Set day-of-week entries (numbers, names, ``5L``, ``MON#2``...)."""
        return self._set(CronFieldType.DAY_OF_WEEK, values)

    def year(self, *values: Value) -> "CronBuilder":
        return self._set(CronFieldType.YEAR, values)

    # -------------------------------------------------------------------------
    # Shorthands
    # -------------------------------------------------------------------------

    def every(self, step: int, field_type: CronFieldType = CronFieldType.MINUTE) -> "CronBuilder":
        """Every ``step``-th value of a field, e.g. ``every(5)`` is ``*/5`` minutes."""
        return self._set(field_type, (f"*/{step}",))

    def span(
        self,
        field_type: CronFieldType,
        first: Value,
        last: Value,
        step: int | None = None,
    ) -> "CronBuilder":
        """Inclusive span; ``first`` after ``last`` wraps through the field maximum."""
        text = f"{first}-{last}" if step is None else f"{first}-{last}/{step}"
        return self._set(field_type, (text,))

    def at(self, hour: int, minute: int = 0, second: int | None = None) -> "CronBuilder":
        """Fire once a day at a wall-clock time."""
        self.hour(hour).minute(minute)
        if second is not None:
            self.second(second)
        return self

    def last_day(self) -> "CronBuilder":
        return self.day("L")

    def last_workday(self) -> "CronBuilder":
        return self.day("LW")

    def nearest_workday(self, day: int) -> "CronBuilder":
        return self.day(f"{day}W")

    def nth_weekday(self, weekday: Value, nth: int) -> "CronBuilder":
        return self.weekday(f"{weekday}#{nth}")

    def last_weekday(self, weekday: Value) -> "CronBuilder":
        return self.weekday(f"{weekday}L")

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def to_string(self) -> str:
        """Render the expression text."""
        texts = self._texts
        fields = [
            texts.get(CronFieldType.MINUTE, "*"),
            texts.get(CronFieldType.HOUR, "*"),
            texts.get(CronFieldType.DAY_OF_MONTH, "*"),
            texts.get(CronFieldType.MONTH, "*"),
            texts.get(CronFieldType.DAY_OF_WEEK, "*"),
        ]
        year = texts.get(CronFieldType.YEAR)
        if CronFieldType.SECOND in texts or year is not None:
            fields.insert(0, texts.get(CronFieldType.SECOND, "0"))
        if year is not None:
            fields.append(year)
        return " ".join(fields)

    def build(self) -> CronExpression:
        """Parse the rendered text into a :class:`CronExpression`."""
        return CronExpression.parse(self.to_string())
