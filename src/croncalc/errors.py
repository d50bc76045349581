"""Typed errors raised while parsing cron expressions.

Every failure is reported synchronously by the parser. There is no partial
parse: the first invalid field aborts construction of the expression. The
occurrence calculator has no error channel at all; "no further occurrence"
is returned as ``None``.

Hierarchy:
    CronParseError (ValueError)
        MissingFieldsError
        CronSyntaxError
        InvalidIntervalError
"""

from __future__ import annotations

from typing import Any


class CronParseError(ValueError):
    """Raised when cron expression parsing fails.

    Attributes:
        expression: The full expression being parsed, when known.
        field: Name of the offending field (e.g. ``"hour"``), when known.
        text: The offending substring, when known.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        *,
        field: str | None = None,
        text: str | None = None,
    ) -> None:
        self.expression = expression
        self.field = field
        self.text = text
        super().__init__(message)

    def with_expression(self, expression: str) -> "CronParseError":
        """Attach the full expression text and return self."""
        self.expression = expression
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error": type(self).__name__,
            "message": str(self),
            "expression": self.expression,
            "field": self.field,
            "text": self.text,
        }


class MissingFieldsError(CronParseError):
    """Fewer than five whitespace-separated fields were supplied."""

    def __init__(self, count: int, expression: str = "") -> None:
        self.count = count
        super().__init__(
            f"missing field(s): got {count}, expected 5 to 7",
            expression,
        )


class CronSyntaxError(CronParseError):
    """An entry matches no recognized directive."""

    def __init__(self, field: str, text: str, expression: str = "") -> None:
        super().__init__(
            f"syntax error in {field} field: '{text}'",
            expression,
            field=field,
            text=text,
        )


class InvalidIntervalError(CronParseError):
    """A step is outside ``[1, field maximum]``."""

    def __init__(self, field: str, text: str, expression: str = "") -> None:
        super().__init__(
            f"invalid interval in {field} field: '{text}'",
            expression,
            field=field,
            text=text,
        )
