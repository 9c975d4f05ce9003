from __future__ import annotations

from datetime import date, datetime
import re

from icalendar import vDate, vDatetime

ICAL_DATE_PATTERN = re.compile(r"[0-9]{8}")
ICAL_DATETIME_PATTERN = re.compile(r"[0-9]{8}T[0-9]{6}")


def parse_ical_date(value: str) -> date:
    """Parse an RFC 5545 DATE (``YYYYMMDD``)."""
    if not ICAL_DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Wrong date format: {value!r}")
    return vDate.from_ical(value)


def parse_ical_datetime(value: str) -> datetime:
    """Parse a floating RFC 5545 DATE-TIME (``YYYYMMDDTHHMMSS``) into a naive datetime."""
    if not ICAL_DATETIME_PATTERN.fullmatch(value):
        raise ValueError(f"Wrong datetime format: {value!r}")
    return vDatetime.from_ical(value)


def parse_date_or_datetime(value: str) -> datetime | date:
    """Parse a DATE-TIME, falling back to a DATE."""
    if ICAL_DATETIME_PATTERN.fullmatch(value):
        return parse_ical_datetime(value)
    if ICAL_DATE_PATTERN.fullmatch(value):
        return parse_ical_date(value)
    raise ValueError(f"Cannot parse date or date-time: {value!r}")
