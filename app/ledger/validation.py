"""
Input validation primitives for ledger operations.

Every helper raises InvalidArgument with details naming the offending field
and the violated constraint, so the caller can correct and resubmit.

Usage:
    from ledger.validation import assert_positive_integer_amount, normalize_required_name

    assert_positive_integer_amount(amount, "amount")
    name = normalize_required_name(name, "name")
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ledger.constants import MAX_AMOUNT, MAX_NAME_LENGTH, MAX_TIMESTAMP_MS
from ledger.exceptions import InvalidArgument

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import TextChoices


def _is_integer(value: Any) -> bool:
    # bool is an int subclass but never a valid amount
    return isinstance(value, int) and not isinstance(value, bool)


def assert_integer_amount(value: Any, field: str) -> None:
    """
    Require an integer number of minor units.

    Raises:
        InvalidArgument: If value is not an int (bools and floats rejected)
            or its magnitude exceeds MAX_AMOUNT
    """
    if not _is_integer(value):
        raise InvalidArgument(
            f"{field} must be an integer",
            details={"field": field, "constraint": "integer"},
        )
    if abs(value) > MAX_AMOUNT:
        raise InvalidArgument(
            f"{field} must be between -{MAX_AMOUNT} and {MAX_AMOUNT}",
            details={
                "field": field,
                "constraint": "range",
                "min": -MAX_AMOUNT,
                "max": MAX_AMOUNT,
            },
        )


def assert_positive_integer_amount(value: Any, field: str) -> None:
    """
    Require an integer number of minor units greater than zero.

    Raises:
        InvalidArgument: If value is not an int or is <= 0
    """
    assert_integer_amount(value, field)
    if value <= 0:
        raise InvalidArgument(
            f"{field} must be greater than 0",
            details={"field": field, "constraint": "positive_integer"},
        )


def assert_non_negative_integer(value: Any, field: str) -> None:
    """Require an integer greater than or equal to zero."""
    assert_integer_amount(value, field)
    if value < 0:
        raise InvalidArgument(
            f"{field} must be greater than or equal to 0",
            details={"field": field, "constraint": "non_negative_integer"},
        )


def assert_timestamp(value: Any, field: str) -> None:
    """
    Require a positive epoch timestamp in milliseconds no later than the
    last millisecond of year 9999.

    Raises:
        InvalidArgument: If value is not a number or is out of range
    """
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or not 0 < value <= MAX_TIMESTAMP_MS
    ):
        raise InvalidArgument(
            f"{field} must be a valid timestamp",
            details={
                "field": field,
                "constraint": "timestamp",
                "max": MAX_TIMESTAMP_MS,
            },
        )


def assert_time_window(start: Any, end: Any) -> None:
    """
    Validate an inclusive [from, to] window where either bound may be None.

    Raises:
        InvalidArgument: If a bound is not a timestamp or from > to
    """
    if start is not None:
        assert_timestamp(start, "from")
    if end is not None:
        assert_timestamp(end, "to")
    if start is not None and end is not None and start > end:
        raise InvalidArgument(
            "from must be less than or equal to to",
            details={"field": "from", "constraint": "lte_to"},
        )


def normalize_required_name(
    value: Any, field: str, max_length: int = MAX_NAME_LENGTH
) -> str:
    """
    Trim a required name.

    Returns:
        The trimmed name

    Raises:
        InvalidArgument: If value is not a string, is empty after trimming,
            or is longer than max_length
    """
    trimmed = value.strip() if isinstance(value, str) else ""
    if not trimmed:
        raise InvalidArgument(
            f"{field} cannot be empty",
            details={"field": field, "constraint": "non_empty"},
        )
    if len(trimmed) > max_length:
        raise InvalidArgument(
            f"{field} must be at most {max_length} characters",
            details={"field": field, "constraint": "max_length", "max": max_length},
        )
    return trimmed


def normalize_optional_note(value: str | None) -> str | None:
    """Trim an optional note, returning None when absent or blank."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def assert_limit(value: Any, field: str, maximum: int, default: int) -> int:
    """
    Resolve a page size.

    Args:
        value: Requested limit, or None for the default
        field: Field name for error details
        maximum: Largest allowed limit
        default: Limit used when value is None

    Returns:
        The effective limit

    Raises:
        InvalidArgument: If value is not an integer in [1, maximum]
    """
    if value is None:
        return default
    if not _is_integer(value) or value < 1 or value > maximum:
        raise InvalidArgument(
            f"{field} must be an integer between 1 and {maximum}",
            details={"field": field, "constraint": "range", "min": 1, "max": maximum},
        )
    return value


def assert_choice(value: Any, choices: type[TextChoices], field: str) -> None:
    """
    Require one of a TextChoices enum's values.

    Raises:
        InvalidArgument: If value is not a valid choice
    """
    if value not in choices.values:
        raise InvalidArgument(
            f"{field} must be one of: {', '.join(choices.values)}",
            details={"field": field, "constraint": "choice"},
        )
