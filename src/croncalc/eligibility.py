"""Day-eligibility merger.

Turns the day-of-month and day-of-week constraints of an expression into the
concrete days of one (year, month). Following crontab, when both fields are
wildcards every day qualifies; otherwise each restricted field contributes
its days and the result is their union.

Weekdays are numbered cron-style: 0=Sunday ... 6=Saturday.
"""

from __future__ import annotations

import calendar

from croncalc.day_fields import DAYS_PER_WEEK, DomConstraints, DowConstraints

SATURDAY = 6
SUNDAY = 0


def month_length(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def cron_weekday(year: int, month: int, day: int) -> int:
    # Python weekday: Monday=0 ... Sunday=6
    return (calendar.weekday(year, month, day) + 1) % DAYS_PER_WEEK


def nearest_workday(year: int, month: int, day: int) -> int:
    """Return the Monday-Friday day nearest to ``day`` within the month.

    Saturday moves back to Friday unless that leaves the month (then the
    following Monday); Sunday moves forward to Monday unless that leaves the
    month (then the preceding Friday).
    """
    weekday = cron_weekday(year, month, day)
    if weekday == SATURDAY:
        return day - 1 if day > 1 else day + 2
    if weekday == SUNDAY:
        return day + 1 if day < month_length(year, month) else day - 2
    return day


def actual_days(
    year: int,
    month: int,
    dom: DomConstraints,
    dow: DowConstraints,
) -> tuple[int, ...]:
    """Compute the sorted days of ``year``/``month`` the constraints allow.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        dom: Day-of-month constraints.
        dow: Day-of-week constraints.

    Returns:
        Ascending day-of-month values; empty if no day qualifies.
    """
    first_weekday, last_day = calendar.monthrange(year, month)

    if not dom.restricted and not dow.restricted:
        return tuple(range(1, last_day + 1))

    days: set[int] = set()

    if dom.restricted:
        if dom.last_day:
            days.add(last_day)
        if dom.last_workday:
            days.add(nearest_workday(year, month, last_day))
        days.update(day for day in dom.days if day <= last_day)
        days.update(
            nearest_workday(year, month, day)
            for day in dom.workdays
            if day <= last_day
        )

    if dow.restricted:
        # Distance from the weekday of day 1 to the end of its week.
        offset = DAYS_PER_WEEK - (first_weekday + 1) % DAYS_PER_WEEK
        for weekday in dow.days:
            first = 1 + (offset + weekday) % DAYS_PER_WEEK
            days.update(range(first, last_day + 1, DAYS_PER_WEEK))

        for code in dow.nth_weekdays:
            day = 1 + DAYS_PER_WEEK * (code // DAYS_PER_WEEK) + (offset + code) % DAYS_PER_WEEK
            if day <= last_day:
                days.add(day)

        origin = last_day - DAYS_PER_WEEK + 1
        offset = DAYS_PER_WEEK - cron_weekday(year, month, origin)
        for weekday in dow.last_weekdays:
            days.add(origin + (offset + weekday) % DAYS_PER_WEEK)

    return tuple(sorted(days))
