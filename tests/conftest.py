"""Shared pytest fixtures and configuration for all tests."""

import os

# main.py and lambda_handler.py wire real dependencies at import time outside test mode
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import UTC, datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from restaurant_menu_service.models.customer_models import Customer  # noqa: E402
from restaurant_menu_service.models.menu_models import MenuCategory, MenuItem  # noqa: E402


@pytest.fixture
def fixed_now() -> datetime:
    """Fixture providing a fixed UTC timestamp."""
    return datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def mock_menu_items(fixed_now: datetime) -> list[MenuItem]:
    """Fixture providing sample menu items across two categories."""
    return [
        MenuItem(
            id="item_1",
            name="Chicken Manchurian",
            description="Crispy chicken in manchurian sauce",
            price=Decimal("8.50"),
            category=MenuCategory.CHICKEN_STARTER,
            is_veg=False,
            created_at=fixed_now,
            updated_at=fixed_now,
        ),
        MenuItem(
            id="item_2",
            name="Veg Manchurian",
            description="Vegetable balls in manchurian sauce",
            price=Decimal("6.99"),
            category=MenuCategory.VEG_STARTER,
            is_veg=True,
            created_at=fixed_now,
            updated_at=fixed_now,
        ),
    ]


@pytest.fixture
def mock_customer_item() -> dict:
    """Fixture providing a customer record as stored in DynamoDB."""
    return {
        "phone_number": "1234567890",
        "id": "cust_1",
        "name": "John Doe",
        "visits": Decimal("3"),
        "date_of_birth": "1990-05-17",
        "created_at": "2024-01-15T10:30:00+00:00",
        "updated_at": "2024-01-20T18:00:00+00:00",
    }


@pytest.fixture
def mock_customer(mock_customer_item: dict) -> Customer:
    """Fixture providing the sample customer as a model."""
    return Customer.from_dynamodb_item(mock_customer_item)


@pytest.fixture
def mock_scheduled_event() -> dict:
    """Fixture providing a sample EventBridge scheduled event."""
    return {
        "version": "0",
        "id": "event_123",
        "detail-type": "Scheduled Event",
        "source": "aws.events",
        "account": "123456789012",
        "time": "2024-05-17T08:00:00Z",
        "region": "us-east-1",
        "resources": ["arn:aws:events:us-east-1:123456789012:rule/birthday-campaign"],
        "detail": {},
    }
