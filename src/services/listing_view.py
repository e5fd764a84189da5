"""Listing view service - render every sensitive field of a listing for a role."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from src.models.listing import STATUS_LABELS, Listing, VisibleListing
from src.models.visibility import ListingField, UserRole, parse_role
from src.services.field_formatter import render_field
from src.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)

PLACEHOLDER = "-"
NEW_LISTING_WINDOW = timedelta(days=7)


def is_new_listing(created_at: datetime, now: Optional[datetime] = None) -> bool:
    """Check whether a listing was registered within the last 7 days."""
    if now is None:
        now = datetime.now(timezone.utc) if created_at.tzinfo else datetime.now()
    return now - created_at <= NEW_LISTING_WINDOW


def render_listing_view(listing: Listing, role: Union[UserRole, str]) -> VisibleListing:
    """
    Render a listing for a role, using the listing's own lifecycle state.

    Money fields fall back to a "-" placeholder; personal fields are None
    when hidden or absent. Contract notes fall back to the public note.
    """
    role = parse_role(role)
    status = listing.status

    def render(field: ListingField, value):
        return render_field(field, value, role, status)

    if listing.contract_notes and listing.contract_notes.strip():
        contract_notes = render(ListingField.CONTRACT_NOTES, listing.contract_notes)
    else:
        contract_notes = listing.note

    return VisibleListing(
        id=listing.id,
        title=listing.title,
        dong=listing.dong,
        address=listing.address,
        category=listing.category,
        status=status,
        status_label=STATUS_LABELS[status],
        premium=render(ListingField.PREMIUM, listing.premium) or PLACEHOLDER,
        deposit=render(ListingField.DEPOSIT, listing.deposit) or PLACEHOLDER,
        monthly_rent=render(ListingField.MONTHLY_RENT, listing.monthly_rent) or PLACEHOLDER,
        owner_contact=render(ListingField.OWNER_CONTACT, listing.owner_contact),
        address_detail=render(ListingField.ADDRESS_DETAIL, listing.address_detail),
        contract_notes=contract_notes,
        closing_date=render(ListingField.CLOSING_DATE, listing.closing_date),
        area_m2=listing.area_m2,
        area_pyeong=listing.area_pyeong,
        thumbnail_url=listing.thumbnail_url,
        is_new=is_new_listing(listing.created_at),
    )


@timed("render_listing_views")
def render_listing_views(listings: Iterable[Listing], role: Union[UserRole, str]) -> list[VisibleListing]:
    """Render a collection of listings (list and backoffice table views)."""
    role = parse_role(role)
    views = [render_listing_view(listing, role) for listing in listings]
    logger.info("Rendered listing views", role=role.value, count=len(views))
    return views
