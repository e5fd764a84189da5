"""Tests for listing view rendering."""

from datetime import datetime, timezone

import pytest
from freezegun import freeze_time
from src.models.listing import Listing, VisibleListing
from src.models.visibility import ListingStatus
from src.services.listing_view import (
    PLACEHOLDER,
    is_new_listing,
    render_listing_view,
    render_listing_views,
)
from src.utils.errors import InvalidRoleError
from tests.utils.assertions import assert_valid_visible_listing
from tests.utils.factories import create_listing_data


@pytest.mark.unit
def test_guest_view(sample_listing, freeze_time_fixture):
    """Test guests get buckets and no personal data."""
    view = render_listing_view(sample_listing, "guest")

    assert isinstance(view, VisibleListing)
    assert view.premium == "1.x억"
    assert view.deposit == "3천만대"
    assert view.monthly_rent == "100만대"
    assert view.owner_contact is None
    assert view.address_detail is None
    assert view.closing_date is None
    assert view.contract_notes == sample_listing.contract_notes[:32] + "..."
    assert view.status_label == "게시중"


@pytest.mark.unit
def test_staff_view(sample_listing):
    """Test staff see every field in full."""
    view = render_listing_view(sample_listing, "staff")

    assert view.premium == "1억2천"
    assert view.deposit == "3.5천만"
    assert view.monthly_rent == "180만"
    assert view.owner_contact == "010-1234-5678"
    assert view.address_detail == "2층 201호"
    assert view.contract_notes == sample_listing.contract_notes
    assert view.closing_date == "2025-01-15"


@pytest.mark.unit
def test_partner_view_active(sample_listing):
    """Test partners see masked contact and a closing date placeholder."""
    view = render_listing_view(sample_listing, "partner")

    assert view.premium == "1억2천"
    assert view.owner_contact == "010-****-5678"
    assert view.closing_date == "협의중"


@pytest.mark.unit
def test_partner_view_negotiation(negotiation_listing):
    """Test negotiation tightens partner premium, contact and closing date."""
    view = render_listing_view(negotiation_listing, "partner")

    assert view.status == ListingStatus.NEGOTIATION
    assert view.status_label == "협의중"
    assert view.premium == "1.x억"
    assert view.deposit == "3.5천만"
    assert view.owner_contact is None
    assert view.closing_date is None
    assert view.address_detail == "2층 201호"


@pytest.mark.unit
def test_contract_notes_fall_back_to_note(sample_listing_data):
    """Test the public note is shown when there are no contract notes."""
    listing = Listing.model_validate({**sample_listing_data, "contractNotes": None})

    assert render_listing_view(listing, "guest").contract_notes == "주말 유동인구 많음"


@pytest.mark.unit
def test_blank_contract_notes_fall_back_to_note(sample_listing_data):
    """Test whitespace-only contract notes are treated as missing."""
    listing = Listing.model_validate({**sample_listing_data, "contractNotes": "   "})

    assert render_listing_view(listing, "staff").contract_notes == "주말 유동인구 많음"


@pytest.mark.unit
def test_missing_optional_fields(sample_listing_data):
    """Test missing personal fields render as None even for master."""
    data = {**sample_listing_data, "ownerContact": None, "closingDate": None, "note": None,
            "contractNotes": None, "addressDetail": None}
    view = render_listing_view(Listing.model_validate(data), "master")

    assert view.owner_contact is None
    assert view.closing_date is None
    assert view.contract_notes is None
    assert view.address_detail is None


@pytest.mark.unit
def test_zero_premium_is_not_placeholder(sample_listing_data):
    """Test a zero amount still renders rather than falling back."""
    listing = Listing.model_validate({**sample_listing_data, "premium": 0})

    assert render_listing_view(listing, "staff").premium == "0만"
    assert PLACEHOLDER == "-"


@pytest.mark.unit
def test_render_listing_view_rejects_unknown_role(sample_listing):
    """Test an unknown role is rejected instead of defaulting to guest."""
    with pytest.raises(InvalidRoleError):
        render_listing_view(sample_listing, "visitor")


@pytest.mark.unit
def test_is_new_listing_naive(freeze_time_fixture):
    """Test listings created within 7 days are new."""
    assert is_new_listing(datetime(2024, 12, 5, 9, 0)) is True
    assert is_new_listing(datetime(2024, 12, 2, 12, 0)) is True
    assert is_new_listing(datetime(2024, 12, 1, 12, 0)) is False


@pytest.mark.unit
@freeze_time("2024-12-09 12:00:00")
def test_is_new_listing_aware():
    """Test timezone-aware creation times are compared in UTC."""
    assert is_new_listing(datetime(2024, 12, 8, 0, 0, tzinfo=timezone.utc)) is True
    assert is_new_listing(datetime(2024, 11, 1, 0, 0, tzinfo=timezone.utc)) is False


@pytest.mark.unit
def test_view_marks_new_listing(sample_listing, freeze_time_fixture):
    """Test the rendered view carries the new-listing flag."""
    assert render_listing_view(sample_listing, "guest").is_new is True

    with freeze_time("2025-02-01 00:00:00"):
        assert render_listing_view(sample_listing, "guest").is_new is False


@pytest.mark.unit
@pytest.mark.parametrize("role", ["guest", "member", "partner", "staff", "master"])
def test_render_listing_views_for_each_role(role):
    """Test rendering a backoffice page of generated listings."""
    listings = [
        Listing.model_validate(create_listing_data(status=status))
        for status in ("active", "negotiation", "completed", "archived")
    ]

    views = render_listing_views(listings, role)

    assert len(views) == 4
    for view in views:
        assert_valid_visible_listing(view.model_dump())
