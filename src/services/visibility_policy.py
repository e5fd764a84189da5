"""Field visibility policy table: (field, role, lifecycle state) -> visibility level."""

from types import MappingProxyType
from typing import Mapping, Union

from src.models.visibility import (
    ListingField,
    ListingStatus,
    UserRole,
    VisibilityLevel,
    is_tightening,
    parse_field,
    parse_role,
    parse_status,
)
from src.utils.errors import PolicyConfigurationError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

PolicyMatrix = Mapping[ListingField, Mapping[UserRole, VisibilityLevel]]

_F = VisibilityLevel.FULL
_M = VisibilityLevel.MASKED
_R = VisibilityLevel.RANGE
_S = VisibilityLevel.SUMMARY
_H = VisibilityLevel.HIDDEN

_BASE_VISIBILITY = {
    #                           guest member partner staff master
    ListingField.PREMIUM:        (_M, _M, _F, _F, _F),
    ListingField.DEPOSIT:        (_R, _R, _F, _F, _F),
    ListingField.MONTHLY_RENT:   (_R, _F, _F, _F, _F),
    ListingField.OWNER_CONTACT:  (_H, _H, _M, _F, _F),
    ListingField.ADDRESS_DETAIL: (_H, _H, _F, _F, _F),
    ListingField.CONTRACT_NOTES: (_S, _S, _F, _F, _F),
    ListingField.CLOSING_DATE:   (_H, _H, _M, _F, _F),
}

# Only partners are tightened while a listing is under negotiation.
_NEGOTIATION_OVERRIDES = {
    UserRole.PARTNER: {
        ListingField.PREMIUM: VisibilityLevel.MASKED,
        ListingField.OWNER_CONTACT: VisibilityLevel.HIDDEN,
        ListingField.CLOSING_DATE: VisibilityLevel.HIDDEN,
    },
}


def build_policy_matrix(rows: Mapping[ListingField, tuple]) -> PolicyMatrix:
    """Expand per-field rows (one level per role, in role order) into a read-only matrix."""
    roles = list(UserRole)
    matrix = {}
    for field, levels in rows.items():
        if len(levels) != len(roles):
            raise PolicyConfigurationError(
                f"Policy row for {field.value} defines {len(levels)} levels, expected {len(roles)}"
            )
        matrix[field] = MappingProxyType(dict(zip(roles, levels)))
    return MappingProxyType(matrix)


def validate_policy_matrix(matrix: PolicyMatrix) -> None:
    """Fail fast unless every field defines a valid level for every role."""
    missing_fields = [field.value for field in ListingField if field not in matrix]
    if missing_fields:
        raise PolicyConfigurationError(f"Policy matrix is missing fields: {missing_fields}")

    for field in ListingField:
        row = matrix[field]
        missing_roles = [role.value for role in UserRole if role not in row]
        if missing_roles:
            raise PolicyConfigurationError(
                f"Policy matrix row {field.value} is missing roles: {missing_roles}"
            )
        for role in UserRole:
            if not isinstance(row[role], VisibilityLevel):
                raise PolicyConfigurationError(
                    f"Policy matrix cell {field.value}/{role.value} is not a visibility level: {row[role]!r}"
                )


def validate_negotiation_overrides(
    overrides: Mapping[UserRole, Mapping[ListingField, VisibilityLevel]],
    matrix: PolicyMatrix,
) -> None:
    """Fail fast if any negotiation override would loosen the base level."""
    for role, fields in overrides.items():
        for field, level in fields.items():
            base_level = matrix[field][role]
            if not is_tightening(level, base_level):
                raise PolicyConfigurationError(
                    f"Negotiation override {field.value}/{role.value} loosens "
                    f"{base_level.value} to {level.value}"
                )


POLICY_MATRIX: PolicyMatrix = build_policy_matrix(_BASE_VISIBILITY)
NEGOTIATION_OVERRIDES = MappingProxyType({
    role: MappingProxyType(fields) for role, fields in _NEGOTIATION_OVERRIDES.items()
})

validate_policy_matrix(POLICY_MATRIX)
validate_negotiation_overrides(NEGOTIATION_OVERRIDES, POLICY_MATRIX)


def apply_negotiation_override(
    field: ListingField,
    role: UserRole,
    level: VisibilityLevel
) -> VisibilityLevel:
    """Tighten the base level for roles that have a negotiation override."""
    return NEGOTIATION_OVERRIDES.get(role, {}).get(field, level)


def resolve_visibility(
    field: Union[ListingField, str],
    role: Union[UserRole, str],
    status: Union[ListingStatus, str]
) -> VisibilityLevel:
    """
    Resolve the visibility level of a field for a role and lifecycle state.

    Raises InvalidFieldError, InvalidRoleError or InvalidStateError for
    identifiers outside the known enumerations.
    """
    field = parse_field(field)
    role = parse_role(role)
    status = parse_status(status)

    level = POLICY_MATRIX[field][role]
    if status == ListingStatus.NEGOTIATION:
        level = apply_negotiation_override(field, role, level)

    logger.debug(
        "Resolved field visibility",
        field=field.value,
        role=role.value,
        listing_status=status.value,
        visibility=level.value
    )
    return level


def reachable_levels() -> dict[ListingField, set[VisibilityLevel]]:
    """Collect every level each field can resolve to across roles and states."""
    reachable = {field: set(POLICY_MATRIX[field].values()) for field in ListingField}
    for fields in NEGOTIATION_OVERRIDES.values():
        for field, level in fields.items():
            reachable[field].add(level)
    return reachable
