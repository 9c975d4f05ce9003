"""Tests for handing decoded rules to dateutil."""

from datetime import datetime

from dateutil.rrule import FR, MO, MONTHLY, WE, WEEKLY

from core.models import WeekDay, WeekDayEntry
from services.recurrence import rrule_kwargs, to_rrule
from services.rrule_decoder import decode_rrule


def test_weekly_by_day_with_count():
    rule = decode_rrule("RRULE:FREQ=WEEKLY;BYDAY=WE,MO;COUNT=4")
    occurrences = list(to_rrule(rule, datetime(2024, 1, 1, 9, 0)))
    assert occurrences == [
        datetime(2024, 1, 1, 9, 0),
        datetime(2024, 1, 3, 9, 0),
        datetime(2024, 1, 8, 9, 0),
        datetime(2024, 1, 10, 9, 0),
    ]


def test_monthly_last_friday():
    rule = decode_rrule("RRULE:FREQ=MONTHLY;BYDAY=-1FR;COUNT=2")
    occurrences = list(to_rrule(rule, datetime(2024, 1, 1)))
    assert occurrences == [datetime(2024, 1, 26), datetime(2024, 2, 23)]


def test_until_date_is_inclusive_of_day_start():
    rule = decode_rrule("RRULE:FREQ=DAILY;UNTIL=20240105")
    occurrences = list(to_rrule(rule, datetime(2024, 1, 1, 9, 0)))
    assert len(occurrences) == 4


def test_rrule_kwargs():
    rule = decode_rrule("RRULE:FREQ=MONTHLY;INTERVAL=2;BYMONTHDAY=15,1;BYDAY=-1FR,MO;WKST=WE")
    kwargs = rrule_kwargs(rule)
    assert kwargs["freq"] == MONTHLY
    assert kwargs["interval"] == 2
    assert kwargs["bymonthday"] == [1, 15]
    assert kwargs["byweekday"] == [MO, FR(-1)]
    assert kwargs["wkst"] == WE
    assert "count" not in kwargs
    assert "byhour" not in kwargs


def test_default_interval():
    assert rrule_kwargs(decode_rrule("RRULE:FREQ=WEEKLY"))["freq"] == WEEKLY
    assert rrule_kwargs(decode_rrule("RRULE:FREQ=WEEKLY"))["interval"] == 1


def test_as_rrule_weekday():
    assert WeekDayEntry(weekday=WeekDay.MONDAY).as_rrule_weekday() == MO
    assert WeekDayEntry(weekday=WeekDay.FRIDAY, occurrence=2).as_rrule_weekday() == FR(2)
