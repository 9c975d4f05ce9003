"""Tests for resolving RRULE parts that appear more than once."""

from datetime import date

import pytest

from core.errors import ConflictingUntilCount, DuplicateField
from core.models import DuplicatePartBehavior, Frequency
from services.rrule_decoder import Count, Until, apply_duplicate_policy


@pytest.mark.parametrize("behavior", list(DuplicatePartBehavior))
def test_first_occurrence_is_always_stored(behavior):
    assert apply_duplicate_policy("FREQ", None, Frequency.DAILY, behavior) is Frequency.DAILY
    assert apply_duplicate_policy("BYHOUR", None, frozenset({1}), behavior, merge=True) == {1}


def test_error_policy_rejects_repeat():
    with pytest.raises(DuplicateField) as exc_info:
        apply_duplicate_policy("FREQ", Frequency.WEEKLY, Frequency.DAILY, DuplicatePartBehavior.ERROR)
    assert exc_info.value.field == "FREQ"
    assert not isinstance(exc_info.value, ConflictingUntilCount)


def test_error_policy_reports_until_count_conflict():
    with pytest.raises(ConflictingUntilCount) as exc_info:
        apply_duplicate_policy(
            "COUNT", Until(date(2020, 1, 1)), Count(3), DuplicatePartBehavior.ERROR
        )
    assert exc_info.value.field == "COUNT"
    assert "UNTIL" in str(exc_info.value) and "COUNT" in str(exc_info.value)


def test_error_policy_repeated_count_or_until_conflicts():
    with pytest.raises(ConflictingUntilCount) as exc_info:
        apply_duplicate_policy("COUNT", Count(1), Count(2), DuplicatePartBehavior.ERROR)
    assert exc_info.value.field == "COUNT"
    with pytest.raises(ConflictingUntilCount):
        apply_duplicate_policy(
            "UNTIL", Until(date(2020, 1, 1)), Until(date(2021, 1, 1)), DuplicatePartBehavior.ERROR
        )


@pytest.mark.parametrize(
    ("behavior", "merge", "expected"),
    [
        (DuplicatePartBehavior.TAKE_FIRST, False, frozenset({1, 2})),
        (DuplicatePartBehavior.TAKE_FIRST, True, frozenset({1, 2})),
        (DuplicatePartBehavior.TAKE_LAST, False, frozenset({2, 3})),
        (DuplicatePartBehavior.TAKE_LAST, True, frozenset({2, 3})),
        (DuplicatePartBehavior.MERGE_PREFER_LAST, False, frozenset({2, 3})),
        (DuplicatePartBehavior.MERGE_PREFER_LAST, True, frozenset({1, 2, 3})),
    ],
)
def test_lenient_policies(behavior, merge, expected):
    result = apply_duplicate_policy(
        "BYHOUR", frozenset({1, 2}), frozenset({2, 3}), behavior, merge=merge
    )
    assert result == expected


def test_scalar_merge_prefers_last():
    result = apply_duplicate_policy(
        "UNTIL", Count(3), Until(date(2021, 5, 1)), DuplicatePartBehavior.MERGE_PREFER_LAST
    )
    assert result == Until(date(2021, 5, 1))
