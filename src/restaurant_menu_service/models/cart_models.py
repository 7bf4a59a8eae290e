"""Cart models.

A cart belongs to one session. Rows are keyed by (cart_id, menu_item_id), so a
cart can never hold two rows for the same menu item.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CartItem(BaseModel):
    """A menu item reference with a quantity."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Row identifier, equal to the menu item id")
    menu_item_id: str = Field(..., description="Referenced menu item")
    quantity: int = Field(default=1, description="Number of portions", ge=1)
    created_at: datetime | None = Field(None, description="When the item was first added")
    updated_at: datetime | None = Field(None, description="When the quantity last changed")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "CartItem":
        """Create CartItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            CartItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["menu_item_id"],
            "menu_item_id": item["menu_item_id"],
            "quantity": int(item.get("quantity", 1)),
        }

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        if "updated_at" in item:
            data["updated_at"] = datetime.fromisoformat(item["updated_at"])

        return cls(**data)


class CartItemCreate(BaseModel):
    """Payload for adding a menu item to the cart."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    menu_item_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, gt=0)
