"""Cart service for session-scoped carts."""

import logging
from datetime import UTC, datetime

from restaurant_menu_service.models.cart_models import CartItem, CartItemCreate
from restaurant_menu_service.repositories.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class CartService:
    """Service for the cart belonging to one session.

    Every operation takes the cart id of the calling session, so carts of
    different visitors never share rows.
    """

    def __init__(self, cart_repository: CartRepository) -> None:
        """Initialize the CartService.

        Args:
            cart_repository: Repository for cart rows
        """
        self.cart_repository = cart_repository

    async def list_items(self, cart_id: str) -> list[CartItem]:
        """List the items in a cart."""
        return self.cart_repository.list_items(cart_id)

    async def add_item(self, cart_id: str, cart_item: CartItemCreate) -> CartItem:
        """Add a menu item to the cart.

        Adding a menu item that is already in the cart increases its quantity.

        Args:
            cart_id: Session cart identifier
            cart_item: Menu item and quantity to add

        Returns:
            The cart row after the change
        """
        item = self.cart_repository.add_item(
            cart_id=cart_id,
            menu_item_id=cart_item.menu_item_id,
            quantity=cart_item.quantity,
            updated_at=datetime.now(UTC),
        )
        logger.debug(f"Cart {cart_id} now holds {item.quantity} x {item.menu_item_id}")
        return item

    async def remove_item(self, cart_id: str, item_id: str) -> None:
        """Remove a row from the cart."""
        self.cart_repository.remove_item(cart_id, item_id)

    async def clear(self, cart_id: str) -> int:
        """Empty the cart.

        Returns:
            Number of rows removed
        """
        removed = self.cart_repository.clear(cart_id)
        logger.debug(f"Cleared {removed} rows from cart {cart_id}")
        return removed
