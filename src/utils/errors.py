"""Error handling utilities."""


class ListingVisibilityError(Exception):
    """Base exception for the listing visibility service."""
    pass


class InvalidFieldError(ListingVisibilityError, ValueError):
    """Field identifier is not a known sensitive listing field."""
    pass


class InvalidRoleError(ListingVisibilityError, ValueError):
    """Role identifier is not a known user role."""
    pass


class InvalidStateError(ListingVisibilityError, ValueError):
    """Lifecycle state identifier is not a known listing status."""
    pass


class TypeMismatchError(ListingVisibilityError, TypeError):
    """Raw value type does not match the field's declared value type."""
    pass


class PolicyConfigurationError(ListingVisibilityError):
    """Policy matrix, override table or formatter table is malformed."""
    pass
