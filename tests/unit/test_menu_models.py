"""Unit tests for menu, cart and settings models."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from restaurant_menu_service.models.cart_models import CartItem, CartItemCreate
from restaurant_menu_service.models.menu_models import MenuCategory, MenuItem, MenuItemCreate
from restaurant_menu_service.models.settings_models import WhatsAppSettings, WhatsAppSettingsUpdate


@pytest.mark.unit
class TestMenuCategory:
    """Test suite for the fixed category set."""

    def test_category_set_is_complete(self) -> None:
        """Test that the category set matches the website exactly."""
        assert {c.value for c in MenuCategory} == {
            "new",
            "soups",
            "vegstarter",
            "chickenstarter",
            "prawnsstarter",
            "seafood",
            "springrolls",
            "momos",
            "gravies",
            "potrice",
            "rice",
            "ricewithgravy",
            "noodle",
            "noodlewithgravy",
            "thai",
            "chopsuey",
            "desserts",
            "beverages",
            "extra",
        }

    def test_parse_known_category(self) -> None:
        assert MenuCategory.parse("momos") is MenuCategory.MOMOS

    @pytest.mark.parametrize("value", ["pizza", "Momos", " momos", ""])
    def test_parse_requires_exact_match(self, value: str) -> None:
        """Test that parsing is case and whitespace sensitive."""
        assert MenuCategory.parse(value) is None


@pytest.mark.unit
class TestMenuItem:
    """Test suite for MenuItem."""

    def test_from_dynamodb_item(self) -> None:
        """Test parsing a stored menu item."""
        item = MenuItem.from_dynamodb_item(
            {
                "category": "momos",
                "id": "item_1",
                "name": "Veg Momos",
                "description": "Steamed dumplings",
                "price": Decimal("5.5"),
                "is_veg": True,
                "image": "https://example.com/momos.jpg",
                "created_at": "2024-01-15T10:30:00+00:00",
            }
        )

        assert item.category is MenuCategory.MOMOS
        assert item.price == Decimal("5.5")
        assert item.is_veg is True
        assert item.is_available is True
        assert item.updated_at is None

    def test_to_dynamodb_item_keeps_decimal_price(self) -> None:
        """Test that prices are written as Decimal, which DynamoDB requires."""
        item = MenuItem(
            id="item_1",
            name="Thai Curry",
            price=Decimal("9.25"),
            category=MenuCategory.THAI,
        )

        stored = item.to_dynamodb_item()

        assert stored["category"] == "thai"
        assert stored["price"] == Decimal("9.25")
        assert isinstance(stored["price"], Decimal)
        assert "image" not in stored

    def test_json_serialization(self) -> None:
        """Test the JSON shape returned to the website."""
        item = MenuItem(
            id="item_1",
            name="Thai Curry",
            price=Decimal("9.25"),
            category=MenuCategory.THAI,
            is_veg=True,
        )

        data = item.model_dump(mode="json", by_alias=True)

        assert data["price"] == 9.25
        assert data["isVeg"] is True
        assert data["isAvailable"] is True
        assert data["category"] == "thai"


@pytest.mark.unit
class TestMenuItemCreate:
    """Test suite for the add-dish payload."""

    def test_valid_payload(self) -> None:
        item = MenuItemCreate.model_validate(
            {
                "name": "Prawn Crackers",
                "description": "Crunchy",
                "price": 3.5,
                "category": "extra",
                "isVeg": False,
                "image": "https://example.com/crackers.jpg",
            }
        )

        assert item.category is MenuCategory.EXTRA
        assert item.is_available is True

    @pytest.mark.parametrize(
        "override",
        [
            {"price": 0},
            {"price": -1},
            {"category": "pizza"},
            {"description": "   "},
            {"image": "not a url"},
        ],
    )
    def test_invalid_payloads_rejected(self, override: dict) -> None:
        payload = {
            "name": "Prawn Crackers",
            "description": "Crunchy",
            "price": 3.5,
            "category": "extra",
            "isVeg": False,
            "image": "https://example.com/crackers.jpg",
        }
        payload.update(override)

        with pytest.raises(ValidationError):
            MenuItemCreate.model_validate(payload)


@pytest.mark.unit
class TestCartModels:
    """Test suite for cart models."""

    def test_cart_item_id_is_menu_item_id(self) -> None:
        """Test that the row id equals the referenced menu item id."""
        item = CartItem.from_dynamodb_item(
            {
                "cart_id": "cart_1",
                "menu_item_id": "item_7",
                "quantity": Decimal("2"),
                "created_at": "2024-01-15T10:30:00+00:00",
                "updated_at": "2024-01-15T10:31:00+00:00",
            }
        )

        assert item.id == "item_7"
        assert item.quantity == 2
        assert item.updated_at == datetime(2024, 1, 15, 10, 31, tzinfo=UTC)

    def test_cart_item_create_defaults_quantity(self) -> None:
        assert CartItemCreate.model_validate({"menuItemId": "item_1"}).quantity == 1

    @pytest.mark.parametrize("payload", [{}, {"menuItemId": ""}, {"menuItemId": "x", "quantity": 0}])
    def test_cart_item_create_rejects_invalid(self, payload: dict) -> None:
        with pytest.raises(ValidationError):
            CartItemCreate.model_validate(payload)


@pytest.mark.unit
class TestWhatsAppSettingsModels:
    """Test suite for WhatsApp settings models."""

    def test_from_dynamodb_item(self) -> None:
        settings = WhatsAppSettings.from_dynamodb_item(
            {
                "settings_key": "whatsapp",
                "api_key": "token",
                "phone_number_id": "1055",
                "created_at": "2024-01-15T10:30:00+00:00",
                "updated_at": "2024-02-01T09:00:00+00:00",
            }
        )

        assert settings.api_key == "token"
        assert settings.model_dump(by_alias=True)["phoneNumberId"] == "1055"

    def test_update_requires_both_fields(self) -> None:
        with pytest.raises(ValidationError):
            WhatsAppSettingsUpdate.model_validate({"apiKey": "token", "phoneNumberId": ""})
