"""Menu catalog reader.

Reads category partitions, merges them and applies the display order used
everywhere in the app: vegetarian dishes first, then dishes grouped by name
prefix (veg, chicken, prawn, everything else), then alphabetically.
"""

import logging
import uuid
from datetime import UTC, datetime

from pyuca import Collator

from restaurant_menu_service.models.menu_models import MenuCategory, MenuItem, MenuItemCreate
from restaurant_menu_service.observability import traced
from restaurant_menu_service.observability.metrics import record_menu_partition_failure
from restaurant_menu_service.repositories.errors import StorageError
from restaurant_menu_service.repositories.menu_repository import MenuItemRepository

logger = logging.getLogger(__name__)

# "prawn" also matches "prawns"
NAME_PREFIX_BUCKETS: tuple[str, ...] = ("veg", "chicken", "prawn")

# Unicode Collation Algorithm with the default table, independent of process locale
COLLATOR = Collator()


class InvalidCategoryError(ValueError):
    """The requested category is not part of the fixed category set."""

    def __init__(self, category: str) -> None:
        super().__init__(f"Invalid category: {category}")
        self.category = category


def name_bucket(name: str) -> int:
    """Return the prefix bucket of a dish name (0 veg, 1 chicken, 2 prawn, 3 other)."""
    lowered = name.lower()
    for index, prefix in enumerate(NAME_PREFIX_BUCKETS):
        if lowered.startswith(prefix):
            return index
    return len(NAME_PREFIX_BUCKETS)


def menu_sort_key(item: MenuItem) -> tuple[bool, int, tuple[int, ...], str, str]:
    """Sort key implementing the canonical menu order.

    The trailing lowercase name and id make the order total, so the result does
    not depend on the order partitions were merged in.
    """
    lowered = item.name.lower()
    return (not item.is_veg, name_bucket(lowered), COLLATOR.sort_key(lowered), lowered, item.id)


def sort_menu_items(items: list[MenuItem]) -> list[MenuItem]:
    """Return the items in canonical display order.

    Args:
        items: Menu items in any order

    Returns:
        list: A new, sorted list
    """
    return sorted(items, key=menu_sort_key)


class MenuCatalogService:
    """Service for reading and extending the menu catalog."""

    def __init__(self, menu_repository: MenuItemRepository) -> None:
        """Initialize the MenuCatalogService.

        Args:
            menu_repository: Repository for menu item partitions
        """
        self.menu_repository = menu_repository

    def categories(self) -> list[str]:
        """Category identifiers in display order."""
        return [category.value for category in MenuCategory]

    @traced("catalog.list_all")
    async def list_all(self) -> list[MenuItem]:
        """List every item across every category, sorted.

        A category that cannot be read is logged and contributes no items;
        the remaining categories are still returned.

        Returns:
            List of MenuItem in canonical order
        """
        merged: list[MenuItem] = []
        for category in MenuCategory:
            try:
                merged.extend(self.menu_repository.list_by_category(category))
            except StorageError as e:
                logger.warning(f"Skipping menu category {category.value}: {e}")
                record_menu_partition_failure(category.value)

        return sort_menu_items(merged)

    @traced("catalog.list_by_category")
    async def list_by_category(self, category: str) -> list[MenuItem]:
        """List the items of one category, sorted.

        Args:
            category: Category identifier, must match the category set exactly

        Returns:
            List of MenuItem in canonical order

        Raises:
            InvalidCategoryError: If the category is not in the category set
        """
        parsed = MenuCategory.parse(category)
        if parsed is None:
            logger.info(f"Rejected unknown menu category {category!r}")
            raise InvalidCategoryError(category)

        return sort_menu_items(self.menu_repository.list_by_category(parsed))

    async def get_item(self, item_id: str) -> MenuItem | None:
        """Find a menu item by id in any category.

        Args:
            item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        for category in MenuCategory:
            item = self.menu_repository.get_item(category, item_id)
            if item is not None:
                return item
        return None

    @traced("catalog.add_item")
    async def add_item(self, item_create: MenuItemCreate) -> MenuItem:
        """Add a dish to its category partition.

        Args:
            item_create: Validated dish details

        Returns:
            The stored MenuItem
        """
        now = datetime.now(UTC)
        item = MenuItem(
            id=uuid.uuid4().hex,
            name=item_create.name,
            description=item_create.description,
            price=item_create.price,
            category=item_create.category,
            is_veg=item_create.is_veg,
            image=str(item_create.image),
            is_available=item_create.is_available,
            created_at=now,
            updated_at=now,
        )
        saved = self.menu_repository.save_item(item)
        logger.info(f"Added menu item {saved.id} to category {saved.category.value}")
        return saved
