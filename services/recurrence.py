from __future__ import annotations

from datetime import datetime
from typing import Any

from dateutil.rrule import DAILY, HOURLY, MINUTELY, MONTHLY, SECONDLY, WEEKLY, YEARLY, rrule

from core.models import Frequency, RecurrenceRule, RRULE_WEEKDAY, WeekDayEntry

FREQUENCY_MAP = {
    Frequency.SECONDLY: SECONDLY,
    Frequency.MINUTELY: MINUTELY,
    Frequency.HOURLY: HOURLY,
    Frequency.DAILY: DAILY,
    Frequency.WEEKLY: WEEKLY,
    Frequency.MONTHLY: MONTHLY,
    Frequency.YEARLY: YEARLY,
}


def rrule_kwargs(rule: RecurrenceRule) -> dict[str, Any]:
    """Translate a decoded rule into ``dateutil.rrule.rrule`` keyword arguments.

    Empty BY* sets are left out so dateutil derives them from ``dtstart``.
    """
    kwargs: dict[str, Any] = {
        "freq": FREQUENCY_MAP[rule.frequency],
        "interval": rule.interval or 1,
    }

    if rule.until is not None:
        kwargs["until"] = rule.until
    if rule.count is not None:
        kwargs["count"] = rule.count
    if rule.week_start is not None:
        kwargs["wkst"] = RRULE_WEEKDAY[rule.week_start]

    int_sets = {
        "bysecond": rule.by_seconds,
        "byminute": rule.by_minutes,
        "byhour": rule.by_hours,
        "bymonthday": rule.by_month_days,
        "byyearday": rule.by_year_days,
        "byweekno": rule.by_weeks,
        "bymonth": rule.by_months,
        "bysetpos": rule.by_set_positions,
    }
    for key, values in int_sets.items():
        if values:
            kwargs[key] = sorted(values)

    if rule.by_week_days:
        kwargs["byweekday"] = [
            entry.as_rrule_weekday() for entry in sorted(rule.by_week_days, key=WeekDayEntry.sort_key)
        ]

    return kwargs


def to_rrule(rule: RecurrenceRule, dtstart: datetime) -> rrule:
    """Hand a decoded rule to dateutil for occurrence expansion."""
    return rrule(dtstart=dtstart, **rrule_kwargs(rule))
