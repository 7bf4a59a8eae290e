"""DynamoDB repository for menu items.

The menu table is partitioned by category: partition key ``category``, sort key
``id``. Reading one category is a single-partition query.
"""

import logging

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_menu_service.models.menu_models import MenuCategory, MenuItem
from restaurant_menu_service.repositories.dynamodb_utils import DYNAMODB_ERRORS, query_all_pages
from restaurant_menu_service.repositories.errors import StorageError

logger = logging.getLogger(__name__)


class MenuItemRepository:
    """Repository for menu item reads and writes.

    Manages menu item records in DynamoDB with composite key (category, id).
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def list_by_category(self, category: MenuCategory) -> list[MenuItem]:
        """List every item stored in one category partition.

        Args:
            category: Category partition to read

        Returns:
            list: Menu items in storage order (unsorted). Records that do not
                parse as a MenuItem are logged and left out.

        Raises:
            StorageError: If the partition cannot be read
        """
        try:
            items = query_all_pages(
                self.table,
                KeyConditionExpression="category = :category",
                ExpressionAttributeValues={":category": category.value},
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to read menu category {category.value}: {e}")
            raise StorageError(f"Failed to read menu category {category.value}") from e

        menu_items: list[MenuItem] = []
        for item in items:
            try:
                menu_items.append(MenuItem.from_dynamodb_item(item))
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning(
                    f"Skipping malformed menu item {item.get('id')!r} "
                    f"in category {category.value}: {e!r}"
                )
        return menu_items

    def get_item(self, category: MenuCategory, item_id: str) -> MenuItem | None:
        """Retrieve a menu item from a category partition.

        Args:
            category: Category partition to look in
            item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise

        Raises:
            StorageError: If the lookup fails
        """
        try:
            response = self.table.get_item(Key={"category": category.value, "id": item_id})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to get menu item {item_id}: {e}")
            raise StorageError(f"Failed to get menu item {item_id}") from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def save_item(self, item: MenuItem) -> MenuItem:
        """Save a menu item into its category partition.

        Args:
            item: MenuItem to save

        Returns:
            MenuItem: The saved item

        Raises:
            StorageError: If the write fails
        """
        try:
            self.table.put_item(Item=item.to_dynamodb_item())
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to save menu item {item.id}: {e}")
            raise StorageError(f"Failed to save menu item {item.id}") from e

        return item
