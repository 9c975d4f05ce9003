from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from dateutil import rrule
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class Frequency(str, Enum):
    SECONDLY = "SECONDLY"
    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class WeekDay(str, Enum):
    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"
    SUNDAY = "SU"

    def __str__(self) -> str:
        return self.value


FREQUENCY_VALUES: dict[str, Frequency] = {freq.value: freq for freq in Frequency}
WEEKDAY_VALUES: dict[str, WeekDay] = {day.value: day for day in WeekDay}

# Ordered Monday first, matching both WeekDay and dateutil
RRULE_WEEKDAY: dict[WeekDay, rrule.weekday] = dict(zip(WeekDay, rrule.weekdays))


class WeekDayEntry(BaseModel):
    """A BYDAY value: a day of the week and an optional signed ordinal.

    ``occurrence`` selects the nth such day within the MONTHLY or YEARLY
    period, counting from the end when negative (``-1FR`` is the last Friday).
    """

    model_config = ConfigDict(frozen=True)

    weekday: WeekDay
    occurrence: int | None = None

    @field_validator("occurrence")
    @classmethod
    def _check_occurrence(cls, value: int | None) -> int | None:
        if value is not None and not 1 <= abs(value) <= 53:
            raise ValueError("occurrence must be in range ±1–53")
        return value

    def as_rrule_weekday(self) -> rrule.weekday:
        """Convert to a dateutil weekday, carrying the occurrence as ``n``."""
        wd = RRULE_WEEKDAY[self.weekday]
        if self.occurrence is None:
            return wd
        return wd(self.occurrence)

    def sort_key(self) -> tuple[int, int]:
        return (list(WeekDay).index(self.weekday), self.occurrence or 0)


class RecurrenceRule(BaseModel):
    """Decoded RRULE value. Absent BY* parts are empty sets."""

    model_config = ConfigDict(frozen=True)

    frequency: Frequency
    until: datetime | date | None = None
    count: int | None = Field(default=None, ge=0)
    interval: int | None = Field(default=None, ge=1)
    by_seconds: frozenset[int] = frozenset()
    by_minutes: frozenset[int] = frozenset()
    by_hours: frozenset[int] = frozenset()
    by_week_days: frozenset[WeekDayEntry] = frozenset()
    by_month_days: frozenset[int] = frozenset()
    by_year_days: frozenset[int] = frozenset()
    by_weeks: frozenset[int] = frozenset()
    by_months: frozenset[int] = frozenset()
    by_set_positions: frozenset[int] = frozenset()
    week_start: WeekDay | None = None

    @model_validator(mode="after")
    def _check_until_count(self) -> "RecurrenceRule":
        if self.until is not None and self.count is not None:
            raise ValueError("only one of until and count may be set")
        return self

    @field_serializer(
        "by_seconds",
        "by_minutes",
        "by_hours",
        "by_month_days",
        "by_year_days",
        "by_weeks",
        "by_months",
        "by_set_positions",
        when_used="json",
    )
    def _serialize_int_set(self, values: frozenset[int]) -> list[int]:
        return sorted(values)

    @field_serializer("by_week_days", when_used="json")
    def _serialize_week_days(self, entries: frozenset[WeekDayEntry]) -> list[dict[str, Any]]:
        return [entry.model_dump(mode="json") for entry in sorted(entries, key=WeekDayEntry.sort_key)]


class DuplicatePartBehavior(str, Enum):
    """How a part that appears more than once in one RRULE is resolved."""

    ERROR = "error"
    TAKE_FIRST = "take-first"
    TAKE_LAST = "take-last"
    # list parts (like BYHOUR) are merged, single parts keep the last value
    MERGE_PREFER_LAST = "merge-prefer-last"


class DecoderOptions(BaseModel):
    """Decoder configuration. The defaults follow RFC 5545 strictly."""

    model_config = ConfigDict(frozen=True)

    duplicate_part_behavior: DuplicatePartBehavior = DuplicatePartBehavior.ERROR

    @classmethod
    def lenient(
        cls,
        duplicate_part_behavior: DuplicatePartBehavior = DuplicatePartBehavior.MERGE_PREFER_LAST,
    ) -> "DecoderOptions":
        return cls(duplicate_part_behavior=duplicate_part_behavior)
