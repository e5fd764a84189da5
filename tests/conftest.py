"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture
def sample_listing_data():
    """Sample listing payload using the camelCase wire names."""
    return {
        "id": "L-0001",
        "title": "동성로 대로변 카페 양도",
        "dong": "중구 동성로",
        "address": "대구 중구 동성로2가 123",
        "addressDetail": "2층 201호",
        "category": "카페",
        "status": "active",
        "premium": 12000,
        "deposit": 3500,
        "monthlyRent": 180,
        "areaM2": 66.0,
        "areaPyeong": 20.0,
        "lat": 35.8693,
        "lng": 128.5933,
        "thumbnailUrl": "https://cdn.example.com/listings/L-0001/thumb.jpg",
        "imageUrls": ["https://cdn.example.com/listings/L-0001/1.jpg"],
        "createdAt": "2024-12-05T09:00:00",
        "updatedAt": "2024-12-08T09:00:00",
        "ownerContact": "010-1234-5678",
        "contractNotes": "임대인 동의 완료, 잔금일 조율 중이며 시설 인수 목록은 별첨 참고 바랍니다.",
        "closingDate": "2025-01-15",
        "note": "주말 유동인구 많음",
    }


@pytest.fixture
def sample_listing(sample_listing_data):
    """Sample Listing model."""
    from src.models.listing import Listing

    return Listing.model_validate(sample_listing_data)


@pytest.fixture
def negotiation_listing(sample_listing_data):
    """Sample listing under negotiation."""
    from src.models.listing import Listing

    return Listing.model_validate({**sample_listing_data, "status": "negotiation"})


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def mock_vercel_request():
    """Mock Vercel serverless function request."""
    return {
        "method": "POST",
        "path": "/api/listings/visibility",
        "headers": {
            "content-type": "application/json"
        },
        "body": '{"role":"guest","field":"premium","value":3500,"status":"active"}',
        "query": {}
    }

