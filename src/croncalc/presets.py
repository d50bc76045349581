"""Predefined cron expression presets.

This module provides commonly used cron expressions as constants
for easy reuse and readability.

Usage:
    >>> from croncalc.presets import DAILY, WEEKDAYS_9AM
    >>>
    >>> next_run = DAILY.next()
    >>> get_preset("last-workday").next_n(3)
"""

from croncalc.expression import CronExpression, must_parse


# =============================================================================
# Standard Intervals
# =============================================================================

# Every year on January 1st at midnight
YEARLY = must_parse("@yearly")
ANNUALLY = YEARLY

# First day of every month at midnight
MONTHLY = must_parse("@monthly")

# Every Sunday at midnight
WEEKLY = must_parse("@weekly")

# Every day at midnight
DAILY = must_parse("@daily")
MIDNIGHT = DAILY

# Every hour at minute 0
HOURLY = must_parse("@hourly")

# Every minute
EVERY_MINUTE = must_parse("* * * * *")

# Every second (6-field cron)
EVERY_SECOND = must_parse("* * * * * *")


# =============================================================================
# Business Schedule Presets
# =============================================================================

# Weekdays (Monday-Friday) at 9 AM
WEEKDAYS_9AM = must_parse("0 9 * * MON-FRI")

# Weekdays (Monday-Friday) at 6 PM
WEEKDAYS_6PM = must_parse("0 18 * * MON-FRI")

# Every 15 minutes during business hours (9 AM - 5 PM, weekdays)
BUSINESS_HOURS_15MIN = must_parse("*/15 9-17 * * MON-FRI")

# Every hour overnight, 10 PM through 4 AM
OVERNIGHT_HOURLY = must_parse("0 22-4 * * *")


# =============================================================================
# Month Boundary Presets
# =============================================================================

# First day of month at 6 AM
FIRST_OF_MONTH = must_parse("0 6 1 * *")

# Last day of month at 6 AM
LAST_OF_MONTH = must_parse("0 6 L * *")

# Last Monday-Friday of the month at 6 PM
LAST_WORKDAY = must_parse("0 18 LW * *")

# Weekday nearest the 15th (mid-month payroll) at 9 AM
MID_MONTH_WORKDAY = must_parse("0 9 15W * *")

# First Monday of month
FIRST_MONDAY = must_parse("0 9 * * MON#1")

# Last Friday of month
LAST_FRIDAY = must_parse("0 17 * * 5L")


# =============================================================================
# Quarter Presets
# =============================================================================

# First day of each quarter
QUARTERLY = must_parse("0 0 1 1,4,7,10 *")

# Last day of each quarter
END_OF_QUARTER = must_parse("0 0 L 3,6,9,12 *")


# =============================================================================
# Preset Registry
# =============================================================================

PRESETS: dict[str, CronExpression] = {
    # Standard
    "yearly": YEARLY,
    "annually": ANNUALLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "midnight": MIDNIGHT,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    "every_second": EVERY_SECOND,
    # Business
    "weekdays_9am": WEEKDAYS_9AM,
    "weekdays_6pm": WEEKDAYS_6PM,
    "business_hours_15min": BUSINESS_HOURS_15MIN,
    "overnight_hourly": OVERNIGHT_HOURLY,
    # Month boundaries
    "first_of_month": FIRST_OF_MONTH,
    "last_of_month": LAST_OF_MONTH,
    "last_workday": LAST_WORKDAY,
    "mid_month_workday": MID_MONTH_WORKDAY,
    "first_monday": FIRST_MONDAY,
    "last_friday": LAST_FRIDAY,
    # Quarter
    "quarterly": QUARTERLY,
    "end_of_quarter": END_OF_QUARTER,
}


def get_preset(name: str) -> CronExpression | None:
    """Get a preset cron expression by name.

    Args:
        name: Preset name (case-insensitive, ``-`` and ``_`` interchangeable).

    Returns:
        CronExpression or None if not found.
    """
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    """List all available preset names.

    Returns:
        List of preset names.
    """
    return list(PRESETS.keys())
