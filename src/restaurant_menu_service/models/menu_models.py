"""Menu data models.

Menu items are stored one partition per category. The category set is fixed
and must match the client exactly, so it is modelled as an enumeration rather
than free text.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

# DynamoDB hands numbers back as Decimal; the UI expects plain JSON numbers
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class MenuCategory(str, Enum):
    """Enumeration of menu category partitions, in display order."""

    NEW = "new"
    SOUPS = "soups"
    VEG_STARTER = "vegstarter"
    CHICKEN_STARTER = "chickenstarter"
    PRAWNS_STARTER = "prawnsstarter"
    SEAFOOD = "seafood"
    SPRING_ROLLS = "springrolls"
    MOMOS = "momos"
    GRAVIES = "gravies"
    POT_RICE = "potrice"
    RICE = "rice"
    RICE_WITH_GRAVY = "ricewithgravy"
    NOODLE = "noodle"
    NOODLE_WITH_GRAVY = "noodlewithgravy"
    THAI = "thai"
    CHOP_SUEY = "chopsuey"
    DESSERTS = "desserts"
    BEVERAGES = "beverages"
    EXTRA = "extra"

    @classmethod
    def parse(cls, value: str) -> "MenuCategory | None":
        """Return the category for an exact value, or None if it is not a member."""
        try:
            return cls(value)
        except ValueError:
            return None


class MenuItem(BaseModel):
    """Menu item as stored in its category partition.

    Stored in DynamoDB with (category, id) as composite key.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Dish name")
    description: str = Field(default="", description="Dish description")
    price: Price = Field(..., description="Item price", gt=0)
    category: MenuCategory = Field(..., description="Category partition this item belongs to")
    is_veg: bool = Field(default=False, description="Whether the dish is vegetarian")
    image: str | None = Field(None, description="Image reference")
    is_available: bool = Field(default=True, description="Whether item is currently available")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "category": self.category.value,
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "is_veg": self.is_veg,
            "is_available": self.is_available,
        }

        if self.image is not None:
            item["image"] = self.image

        if self.created_at is not None:
            item["created_at"] = self.created_at.isoformat()

        if self.updated_at is not None:
            item["updated_at"] = self.updated_at.isoformat()

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "name": item["name"],
            "description": item.get("description", ""),
            "price": Decimal(str(item["price"])),
            "category": MenuCategory(item["category"]),
            "is_veg": bool(item.get("is_veg", False)),
            "is_available": bool(item.get("is_available", True)),
        }

        if "image" in item:
            data["image"] = item["image"]

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        if "updated_at" in item:
            data["updated_at"] = datetime.fromisoformat(item["updated_at"])

        return cls(**data)


class MenuItemCreate(BaseModel):
    """Payload for adding a dish to the catalog."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    category: MenuCategory
    is_veg: bool
    image: HttpUrl
    is_available: bool = True

    @field_validator("name", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject values made only of whitespace."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()
