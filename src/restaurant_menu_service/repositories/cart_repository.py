"""DynamoDB repository for session carts.

Partition key ``cart_id`` (one partition per session cart), sort key
``menu_item_id``. Adding an item is an ``ADD quantity`` upsert on that key, so
repeated adds accumulate on one row.
"""

import logging
from datetime import datetime

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_menu_service.models.cart_models import CartItem
from restaurant_menu_service.repositories.dynamodb_utils import DYNAMODB_ERRORS, query_all_pages
from restaurant_menu_service.repositories.errors import StorageError

logger = logging.getLogger(__name__)


class CartRepository:
    """Repository for cart rows keyed by (cart_id, menu_item_id)."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def list_items(self, cart_id: str) -> list[CartItem]:
        """List the rows of one cart.

        Args:
            cart_id: Session cart identifier

        Returns:
            list: Cart items (empty list for an unknown cart)

        Raises:
            StorageError: If the query fails
        """
        try:
            items = query_all_pages(
                self.table,
                KeyConditionExpression="cart_id = :cart_id",
                ExpressionAttributeValues={":cart_id": cart_id},
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to list cart items: {e}")
            raise StorageError("Failed to list cart items") from e

        return [CartItem.from_dynamodb_item(item) for item in items]

    def add_item(
        self, cart_id: str, menu_item_id: str, quantity: int, updated_at: datetime
    ) -> CartItem:
        """Add a quantity of a menu item, creating the row on first add.

        Args:
            cart_id: Session cart identifier
            menu_item_id: Menu item to add
            quantity: Portions to add
            updated_at: Timestamp of the change

        Returns:
            CartItem: The row after the update

        Raises:
            StorageError: If the update fails
        """
        timestamp = updated_at.isoformat()
        try:
            response = self.table.update_item(
                Key={"cart_id": cart_id, "menu_item_id": menu_item_id},
                UpdateExpression=(
                    "SET updated_at = :now, created_at = if_not_exists(created_at, :now) "
                    "ADD quantity :quantity"
                ),
                ExpressionAttributeValues={":now": timestamp, ":quantity": quantity},
                ReturnValues="ALL_NEW",
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to add item {menu_item_id} to cart: {e}")
            raise StorageError("Failed to add item to cart") from e

        return CartItem.from_dynamodb_item(response["Attributes"])

    def remove_item(self, cart_id: str, menu_item_id: str) -> None:
        """Remove one row from a cart. Removing a missing row is a no-op.

        Raises:
            StorageError: If the delete fails
        """
        try:
            self.table.delete_item(Key={"cart_id": cart_id, "menu_item_id": menu_item_id})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to remove item {menu_item_id} from cart: {e}")
            raise StorageError("Failed to remove item from cart") from e

    def clear(self, cart_id: str) -> int:
        """Remove every row of a cart.

        Returns:
            int: Number of rows removed

        Raises:
            StorageError: If the query or a delete fails
        """
        try:
            keys = query_all_pages(
                self.table,
                KeyConditionExpression="cart_id = :cart_id",
                ExpressionAttributeValues={":cart_id": cart_id},
                ProjectionExpression="cart_id, menu_item_id",
            )
            with self.table.batch_writer() as batch:
                for key in keys:
                    batch.delete_item(
                        Key={"cart_id": key["cart_id"], "menu_item_id": key["menu_item_id"]}
                    )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to clear cart: {e}")
            raise StorageError("Failed to clear cart") from e

        return len(keys)
