"""Listing models."""

from enum import Enum
from typing import Optional, Union
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field

from src.models.visibility import ListingStatus


class ListingCategory(str, Enum):
    """Business categories of a shop listing."""
    RESTAURANT = "음식점"
    CAFE = "카페"
    CONVENIENCE_STORE = "편의점"
    HAIR_SALON = "미용실"
    CLINIC = "병원"
    ACADEMY = "학원"
    OFFICE = "사무실"
    OTHER = "기타"


STATUS_LABELS: dict[ListingStatus, str] = {
    ListingStatus.ACTIVE: "게시중",
    ListingStatus.NEGOTIATION: "협의중",
    ListingStatus.COMPLETED: "계약완료",
    ListingStatus.ARCHIVED: "비공개",
}


class Listing(BaseModel):
    """Shop transfer listing. Money amounts are in units of 10,000 won (만원)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Listing ID")
    title: str = Field(..., description="Listing title")
    dong: str = Field(..., description="District and neighbourhood (e.g. 중구 동성로)")
    address: str = Field(..., description="Full street address")
    address_detail: Optional[str] = Field(
        None,
        alias="addressDetail",
        description="Floor/unit detail, exposure depends on role"
    )
    category: ListingCategory = Field(..., description="Business category")
    status: ListingStatus = Field(default=ListingStatus.ACTIVE, description="Lifecycle state")
    premium: float = Field(..., ge=0, description="Key money (만원)")
    deposit: float = Field(..., ge=0, description="Deposit (만원)")
    monthly_rent: float = Field(..., ge=0, alias="monthlyRent", description="Monthly rent (만원)")
    area_m2: float = Field(..., gt=0, alias="areaM2", description="Exclusive area (m2)")
    area_pyeong: float = Field(..., gt=0, alias="areaPyeong", description="Exclusive area (pyeong)")
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    thumbnail_url: str = Field(..., alias="thumbnailUrl")
    image_urls: list[str] = Field(default_factory=list, alias="imageUrls")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    owner_contact: Optional[str] = Field(None, alias="ownerContact", description="Owner phone number")
    contract_notes: Optional[str] = Field(None, alias="contractNotes", description="Internal contract notes")
    closing_date: Optional[Union[date, str]] = Field(None, alias="closingDate", description="Expected closing date")
    note: Optional[str] = Field(None, description="Public note shown when contract notes are absent")


class VisibleListing(BaseModel):
    """Listing as rendered for a specific role."""
    id: str
    title: str
    dong: str
    address: str
    category: ListingCategory
    status: ListingStatus
    status_label: str
    premium: str = Field(..., description="Rendered key money or placeholder")
    deposit: str = Field(..., description="Rendered deposit or placeholder")
    monthly_rent: str = Field(..., description="Rendered monthly rent or placeholder")
    owner_contact: Optional[str] = None
    address_detail: Optional[str] = None
    contract_notes: Optional[str] = None
    closing_date: Optional[str] = None
    area_m2: float
    area_pyeong: float
    thumbnail_url: str
    is_new: bool = Field(default=False, description="Registered within the last 7 days")
