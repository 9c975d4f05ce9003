"""Decoding of RFC 5545 ``RRULE`` content lines into :class:`RecurrenceRule` values.

Example::

    decoder = RecurrenceRuleDecoder(DecoderOptions.lenient())
    rule = decoder.decode("RRULE:FREQ=WEEKLY;BYDAY=MO,WE,FR;COUNT=10")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
import logging
import re
from typing import Callable, FrozenSet, TypeVar, Union

from core.errors import (
    ConflictingUntilCount,
    DuplicateField,
    InvalidEntry,
    MalformedField,
    MissingFrequency,
    NotARule,
    OrdinalOutOfRange,
    UnknownWeekDay,
    UnrecognizedToken,
)
from core.models import (
    FREQUENCY_VALUES,
    WEEKDAY_VALUES,
    DecoderOptions,
    DuplicatePartBehavior,
    RecurrenceRule,
    WeekDayEntry,
)
from core.time_utils import parse_date_or_datetime
from services.content_line import parse_property

logger = logging.getLogger(__name__)

T = TypeVar("T")

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
WEEKDAY_ENTRY_PATTERN = re.compile(r"(?:([+-])?([0-9]{1,2}))?([A-Za-z]{2})")


class RulePart(str, Enum):
    FREQ = "FREQ"
    UNTIL = "UNTIL"
    COUNT = "COUNT"
    INTERVAL = "INTERVAL"
    BYSECOND = "BYSECOND"
    BYMINUTE = "BYMINUTE"
    BYHOUR = "BYHOUR"
    BYDAY = "BYDAY"
    BYMONTHDAY = "BYMONTHDAY"
    BYYEARDAY = "BYYEARDAY"
    BYWEEKNO = "BYWEEKNO"
    BYMONTH = "BYMONTH"
    BYSETPOS = "BYSETPOS"
    WKST = "WKST"


@dataclass(frozen=True)
class IntRange:
    minimum: int
    maximum: int
    allow_negative: bool = True

    def __contains__(self, value: int) -> bool:
        checked = abs(value) if self.allow_negative else value
        return self.minimum <= checked <= self.maximum

    def describe(self) -> str:
        sign = "±" if self.allow_negative else ""
        return f"{sign}{self.minimum}–{self.maximum}"


INT_SET_RANGES: dict[RulePart, IntRange] = {
    # 60 is allowed for leap seconds
    RulePart.BYSECOND: IntRange(0, 60, allow_negative=False),
    RulePart.BYMINUTE: IntRange(0, 59, allow_negative=False),
    RulePart.BYHOUR: IntRange(0, 23, allow_negative=False),
    RulePart.BYMONTHDAY: IntRange(1, 31),
    RulePart.BYYEARDAY: IntRange(1, 366),
    RulePart.BYWEEKNO: IntRange(1, 53),
    RulePart.BYMONTH: IntRange(1, 12, allow_negative=False),
    RulePart.BYSETPOS: IntRange(1, 366),
}


@dataclass(frozen=True)
class Until:
    value: Union[datetime, date]


@dataclass(frozen=True)
class Count:
    value: int


UntilOrCount = Union[Until, Count]


def parse_int(token: str) -> int:
    """Parse a signed decimal integer, rejecting whitespace and underscores."""
    if not INTEGER_PATTERN.fullmatch(token):
        raise ValueError(f"not an integer: {token!r}")
    return int(token)


def apply_duplicate_policy(
    name: str,
    old_value: T | None,
    new_value: T,
    behavior: DuplicatePartBehavior,
    *,
    merge: bool = False,
) -> T:
    """Resolve a part that was already seen earlier in the same rule.

    ``merge`` marks set-valued parts, which are unioned under
    ``MERGE_PREFER_LAST``; single-valued parts keep the new value.
    """
    if old_value is None:
        return new_value

    if behavior is DuplicatePartBehavior.ERROR:
        if isinstance(old_value, (Until, Count)):
            raise ConflictingUntilCount(name)
        raise DuplicateField(name)
    if behavior is DuplicatePartBehavior.TAKE_FIRST:
        logger.debug("Keeping first value of duplicate RRULE part %s", name)
        return old_value
    if behavior is DuplicatePartBehavior.TAKE_LAST or not merge:
        logger.debug("Keeping last value of duplicate RRULE part %s", name)
        return new_value

    logger.debug("Merging values of duplicate RRULE part %s", name)
    return old_value | new_value


def parse_set_part(
    name: str,
    value: str,
    parse_entry: Callable[[str], T],
) -> FrozenSet[T]:
    entries = set()
    for token in value.split(","):
        try:
            entries.add(parse_entry(token))
        except InvalidEntry:
            raise
        except ValueError as exc:
            raise InvalidEntry(name, token, str(exc)) from exc
    return frozenset(entries)


def parse_int_set_part(name: str, value: str, valid: IntRange) -> FrozenSet[int]:
    def parse_entry(token: str) -> int:
        parsed = parse_int(token)
        if parsed not in valid:
            raise ValueError(f"value must be in range {valid.describe()}")
        return parsed

    return parse_set_part(name, value, parse_entry)


def parse_weekday_entry(token: str) -> WeekDayEntry:
    """Parse one BYDAY entry such as ``MO``, ``+2TU`` or ``-1FR``."""
    match = WEEKDAY_ENTRY_PATTERN.fullmatch(token)
    if match is None:
        raise InvalidEntry(RulePart.BYDAY.value, token, "expected [+|-][ordinal]<weekday>")
    sign, number, code = match.groups()

    occurrence = None
    if number is not None:
        occurrence = int(number)
        if not 1 <= occurrence <= 53:
            raise OrdinalOutOfRange(token)
        if sign == "-":
            occurrence = -occurrence

    weekday = WEEKDAY_VALUES.get(code.upper())
    if weekday is None:
        raise UnknownWeekDay(token, code, list(WEEKDAY_VALUES))

    return WeekDayEntry(weekday=weekday, occurrence=occurrence)


def _lookup(table: dict[str, T], name: str, value: str) -> T:
    try:
        return table[value]
    except KeyError:
        raise UnrecognizedToken(name, value, f"expected one of {','.join(table)}") from None


def _parse_until(value: str) -> Until:
    # Time zones are not interpreted; a UTC marker is dropped.
    normalized = value[:-1] if value.endswith("Z") else value
    try:
        return Until(parse_date_or_datetime(normalized))
    except ValueError as exc:
        raise UnrecognizedToken(RulePart.UNTIL.value, value, str(exc)) from exc


def _parse_count(value: str) -> Count:
    try:
        count = parse_int(value)
    except ValueError as exc:
        raise UnrecognizedToken(RulePart.COUNT.value, value, str(exc)) from exc
    if count < 0:
        raise UnrecognizedToken(RulePart.COUNT.value, value, "must not be negative")
    return Count(count)


def _parse_interval(value: str) -> int:
    try:
        interval = parse_int(value)
    except ValueError as exc:
        raise UnrecognizedToken(RulePart.INTERVAL.value, value, str(exc)) from exc
    if interval < 1:
        raise UnrecognizedToken(RulePart.INTERVAL.value, value, "must be positive")
    return interval


class RecurrenceRuleDecoder:
    """Decodes ``RRULE`` content lines.

    The decoder holds only its options, so one instance can be shared freely,
    including across threads.
    """

    def __init__(self, options: DecoderOptions | None = None) -> None:
        self.options = options or DecoderOptions()

    @property
    def behavior(self) -> DuplicatePartBehavior:
        return self.options.duplicate_part_behavior

    def __call__(self, text: str) -> RecurrenceRule:
        return self.decode(text)

    def decode(self, text: str) -> RecurrenceRule:
        name, value = parse_property(text)
        if name.upper() != "RRULE":
            raise NotARule(name)

        behavior = self.behavior
        draft: dict[RulePart, object] = {}

        for part in value.split(";"):
            if not part:
                continue
            if "=" not in part:
                raise MalformedField(part)

            part_name, part_value = part.split("=", 1)
            part_name = part_name.upper()
            try:
                key = RulePart(part_name)
            except ValueError:
                logger.debug("Ignoring unknown RRULE part %s", part_name)
                continue

            if key is RulePart.FREQ:
                parsed = _lookup(FREQUENCY_VALUES, part_name, part_value)
            elif key is RulePart.WKST:
                parsed = _lookup(WEEKDAY_VALUES, part_name, part_value)
            elif key is RulePart.INTERVAL:
                parsed = _parse_interval(part_value)
            elif key is RulePart.UNTIL:
                parsed = _parse_until(part_value)
            elif key is RulePart.COUNT:
                parsed = _parse_count(part_value)
            elif key is RulePart.BYDAY:
                parsed = parse_set_part(part_name, part_value, parse_weekday_entry)
            else:
                parsed = parse_int_set_part(part_name, part_value, INT_SET_RANGES[key])

            # UNTIL and COUNT share one slot
            slot = RulePart.UNTIL if key is RulePart.COUNT else key
            draft[slot] = apply_duplicate_policy(
                part_name,
                draft.get(slot),
                parsed,
                behavior,
                merge=key.value.startswith("BY"),
            )

        return self._assemble(draft)

    @staticmethod
    def _assemble(draft: dict[RulePart, object]) -> RecurrenceRule:
        frequency = draft.get(RulePart.FREQ)
        if frequency is None:
            raise MissingFrequency()

        until_or_count = draft.get(RulePart.UNTIL)
        empty: FrozenSet = frozenset()
        return RecurrenceRule(
            frequency=frequency,
            until=until_or_count.value if isinstance(until_or_count, Until) else None,
            count=until_or_count.value if isinstance(until_or_count, Count) else None,
            interval=draft.get(RulePart.INTERVAL),
            by_seconds=draft.get(RulePart.BYSECOND, empty),
            by_minutes=draft.get(RulePart.BYMINUTE, empty),
            by_hours=draft.get(RulePart.BYHOUR, empty),
            by_week_days=draft.get(RulePart.BYDAY, empty),
            by_month_days=draft.get(RulePart.BYMONTHDAY, empty),
            by_year_days=draft.get(RulePart.BYYEARDAY, empty),
            by_weeks=draft.get(RulePart.BYWEEKNO, empty),
            by_months=draft.get(RulePart.BYMONTH, empty),
            by_set_positions=draft.get(RulePart.BYSETPOS, empty),
            week_start=draft.get(RulePart.WKST),
        )


def decode_rrule(text: str, options: DecoderOptions | None = None) -> RecurrenceRule:
    """Decode a single ``RRULE`` content line."""
    return RecurrenceRuleDecoder(options).decode(text)

