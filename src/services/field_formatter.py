"""Field formatter - render a sensitive listing value under its visibility level."""

import math
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Optional, Union

from src.models.visibility import (
    DATE_FIELDS,
    MONEY_FIELDS,
    TEXT_FIELDS,
    ListingField,
    ListingStatus,
    UserRole,
    VisibilityLevel,
    parse_field,
    parse_role,
    parse_status,
)
from src.services.visibility_policy import reachable_levels, resolve_visibility
from src.utils.errors import PolicyConfigurationError, TypeMismatchError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# Amounts are stored in units of 10,000 won (만원)
EOK = 10000   # 억
CHEONMAN = 1000  # 천만

SUMMARY_MAX_LENGTH = 32
SUMMARY_ELLIPSIS = "..."
CONTACT_MIN_DIGITS = 8
CONTACT_PLACEHOLDER = "010-****-****"
CLOSING_DATE_MASKED = "협의중"

_NON_DIGITS = re.compile(r"[^0-9]")


def _format_number(value: Union[int, float]) -> str:
    """Render a number without a trailing '.0' for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _floor_div(value: Union[int, float], unit: int) -> int:
    """Floor of value / unit, exact for ints of any size."""
    if isinstance(value, int):
        return value // unit
    return math.floor(value / unit)


def _one_decimal(value: float) -> str:
    """Round to one decimal place, ties away from zero, always keeping the decimal digit."""
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_money_full(value: Union[int, float]) -> str:
    """
    Render an exact amount in Korean units.

    12000 -> "1억2천", 10500 -> "1억500만", 3500 -> "3.5천만", 800 -> "800만".
    """
    if value >= EOK:
        eok = _floor_div(value, EOK)
        remainder = value % EOK
        if remainder == 0:
            return f"{eok}억"
        if remainder >= CHEONMAN:
            return f"{eok}억{_floor_div(remainder, CHEONMAN)}천"
        return f"{eok}억{_format_number(remainder)}만"
    if value >= CHEONMAN:
        return f"{_one_decimal(value / CHEONMAN)}천만"
    return f"{_format_number(value)}만"


def format_premium_masked(value: Union[int, float]) -> str:
    """Order-of-magnitude bucket for key money: 12000 -> "1.x억", 3500 -> "3천만대"."""
    if value >= EOK:
        return f"{_floor_div(value, EOK)}.x억"
    if value >= CHEONMAN:
        return f"{_floor_div(value, CHEONMAN)}천만대"
    return f"{_format_number(value)}만대"


def format_deposit_range(value: Union[int, float]) -> str:
    """Bucket without fractional precision: 12000 -> "1억대", 3500 -> "3천만대"."""
    if value >= EOK:
        return f"{_floor_div(value, EOK)}억대"
    return f"{_floor_div(value, CHEONMAN)}천만대"


def format_rent_range(value: Union[int, float]) -> str:
    """Round down to the nearest 100: 180 -> "100만대"."""
    bucket = _floor_div(value, 100) * 100
    return f"{bucket}만대"


def mask_contact(value: str) -> str:
    """Keep the first 3 and last 4 digits of a phone number: "010-1234-5678" -> "010-****-5678"."""
    digits = _NON_DIGITS.sub("", value.strip())
    if len(digits) < CONTACT_MIN_DIGITS:
        return CONTACT_PLACEHOLDER
    return f"{digits[:3]}-****-{digits[-4:]}"


def summarize_text(value: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """Truncate text to max_length characters, appending an ellipsis when cut."""
    if len(value) <= max_length:
        return value
    return f"{value[:max_length]}{SUMMARY_ELLIPSIS}"


def format_date_value(value: Union[date, datetime, str]) -> str:
    """Render a date as YYYY-MM-DD; unparseable strings are returned as given."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = value.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        return text


def _verbatim(value: str) -> str:
    return value


_FORMATTERS: dict[tuple[ListingField, VisibilityLevel], Callable[[Any], str]] = {
    (ListingField.PREMIUM, VisibilityLevel.FULL): format_money_full,
    (ListingField.PREMIUM, VisibilityLevel.MASKED): format_premium_masked,
    (ListingField.DEPOSIT, VisibilityLevel.FULL): format_money_full,
    (ListingField.DEPOSIT, VisibilityLevel.RANGE): format_deposit_range,
    (ListingField.MONTHLY_RENT, VisibilityLevel.FULL): format_money_full,
    (ListingField.MONTHLY_RENT, VisibilityLevel.RANGE): format_rent_range,
    (ListingField.OWNER_CONTACT, VisibilityLevel.FULL): _verbatim,
    (ListingField.OWNER_CONTACT, VisibilityLevel.MASKED): mask_contact,
    (ListingField.ADDRESS_DETAIL, VisibilityLevel.FULL): _verbatim,
    (ListingField.CONTRACT_NOTES, VisibilityLevel.FULL): _verbatim,
    (ListingField.CONTRACT_NOTES, VisibilityLevel.SUMMARY): summarize_text,
    (ListingField.CLOSING_DATE, VisibilityLevel.FULL): format_date_value,
    (ListingField.CLOSING_DATE, VisibilityLevel.MASKED): lambda value: CLOSING_DATE_MASKED,
}


def validate_formatter_coverage() -> None:
    """Fail fast if the policy can resolve a (field, level) pair with no formatter."""
    uncovered = [
        f"{field.value}/{level.value}"
        for field, levels in reachable_levels().items()
        for level in levels
        if level != VisibilityLevel.HIDDEN and (field, level) not in _FORMATTERS
    ]
    if uncovered:
        raise PolicyConfigurationError(f"No formatter for reachable combinations: {sorted(uncovered)}")


validate_formatter_coverage()


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _check_value_type(field: ListingField, value: Any) -> None:
    """Raise TypeMismatchError when value does not match the field's value type."""
    if field in MONEY_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeMismatchError(
                f"{field.value} expects a number, got {type(value).__name__}"
            )
        if (isinstance(value, float) and not math.isfinite(value)) or value < 0:
            raise TypeMismatchError(
                f"{field.value} expects a finite non-negative amount"
            )
    elif field in TEXT_FIELDS:
        if not isinstance(value, str):
            raise TypeMismatchError(
                f"{field.value} expects a string, got {type(value).__name__}"
            )
    elif field in DATE_FIELDS:
        if not isinstance(value, (date, str)):
            raise TypeMismatchError(
                f"{field.value} expects a date or date string, got {type(value).__name__}"
            )


def render_field(
    field: Union[ListingField, str],
    raw_value: Any,
    role: Union[UserRole, str],
    status: Union[ListingStatus, str]
) -> Optional[str]:
    """
    Render a sensitive field value for a role and lifecycle state.

    Returns None when there is no value or the field is hidden for the role.
    Unknown identifiers raise InvalidFieldError/InvalidRoleError/InvalidStateError;
    a value of the wrong type for the field raises TypeMismatchError.
    """
    field = parse_field(field)
    role = parse_role(role)
    status = parse_status(status)

    if _is_absent(raw_value):
        return None

    _check_value_type(field, raw_value)

    level = resolve_visibility(field, role, status)
    if level == VisibilityLevel.HIDDEN:
        return None

    formatter = _FORMATTERS.get((field, level))
    if formatter is None:
        logger.warning(
            "No formatter for field visibility, rendering nothing",
            field=field.value,
            role=role.value,
            visibility=level.value
        )
        return None

    return formatter(raw_value)
