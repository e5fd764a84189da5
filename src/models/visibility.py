"""Visibility enumerations shared by the policy table and the field formatter."""

from enum import Enum
from typing import Union

from src.utils.errors import InvalidFieldError, InvalidRoleError, InvalidStateError


class ListingField(str, Enum):
    """Sensitive listing attributes subject to visibility rules."""
    PREMIUM = "premium"
    DEPOSIT = "deposit"
    MONTHLY_RENT = "monthlyRent"
    OWNER_CONTACT = "ownerContact"
    ADDRESS_DETAIL = "addressDetail"
    CONTRACT_NOTES = "contractNotes"
    CLOSING_DATE = "closingDate"


class UserRole(str, Enum):
    """Caller trust tiers, lowest to highest."""
    GUEST = "guest"
    MEMBER = "member"
    PARTNER = "partner"
    STAFF = "staff"
    MASTER = "master"


class ListingStatus(str, Enum):
    """Listing lifecycle states."""
    ACTIVE = "active"            # 게시중
    NEGOTIATION = "negotiation"  # 예약/협의중
    COMPLETED = "completed"      # 계약완료
    ARCHIVED = "archived"        # 만료/비공개


class VisibilityLevel(str, Enum):
    """Fidelity at which a field value may be rendered."""
    FULL = "full"
    MASKED = "masked"
    RANGE = "range"
    SUMMARY = "summary"
    HIDDEN = "hidden"


MONEY_FIELDS = frozenset({
    ListingField.PREMIUM,
    ListingField.DEPOSIT,
    ListingField.MONTHLY_RENT,
})

TEXT_FIELDS = frozenset({
    ListingField.OWNER_CONTACT,
    ListingField.ADDRESS_DETAIL,
    ListingField.CONTRACT_NOTES,
})

DATE_FIELDS = frozenset({ListingField.CLOSING_DATE})

# full > masked/range/summary > hidden; the middle tier is not ordered internally
_OPENNESS = {
    VisibilityLevel.FULL: 2,
    VisibilityLevel.MASKED: 1,
    VisibilityLevel.RANGE: 1,
    VisibilityLevel.SUMMARY: 1,
    VisibilityLevel.HIDDEN: 0,
}


def openness(level: VisibilityLevel) -> int:
    """Return the openness tier of a visibility level (2=full, 1=partial, 0=hidden)."""
    return _OPENNESS[level]


def is_more_open(candidate: VisibilityLevel, reference: VisibilityLevel) -> bool:
    """
    Check whether candidate exposes more than reference.

    Two different partial levels (e.g. masked vs range) are not comparable,
    so neither is considered more open than the other.
    """
    return openness(candidate) > openness(reference)


def is_tightening(candidate: VisibilityLevel, reference: VisibilityLevel) -> bool:
    """Check that candidate equals reference or sits strictly below it."""
    return candidate == reference or openness(candidate) < openness(reference)


def parse_field(value: Union[ListingField, str]) -> ListingField:
    """Parse a caller-supplied field identifier."""
    try:
        return ListingField(value)
    except ValueError:
        raise InvalidFieldError(f"Unknown listing field: {value!r}") from None


def parse_role(value: Union[UserRole, str]) -> UserRole:
    """Parse a caller-supplied role identifier."""
    try:
        return UserRole(value)
    except ValueError:
        raise InvalidRoleError(f"Unknown user role: {value!r}") from None


def parse_status(value: Union[ListingStatus, str]) -> ListingStatus:
    """Parse a caller-supplied lifecycle state identifier."""
    try:
        return ListingStatus(value)
    except ValueError:
        raise InvalidStateError(f"Unknown listing status: {value!r}") from None
