"""Unit tests for the menu catalog service and menu ordering."""

import random
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import EndpointConnectionError

from restaurant_menu_service.models.menu_models import MenuCategory, MenuItem, MenuItemCreate
from restaurant_menu_service.repositories.errors import StorageError
from restaurant_menu_service.repositories.menu_repository import MenuItemRepository
from restaurant_menu_service.services.catalog_service import (
    InvalidCategoryError,
    MenuCatalogService,
    name_bucket,
    sort_menu_items,
)


def make_item(
    name: str,
    is_veg: bool,
    item_id: str | None = None,
    category: MenuCategory = MenuCategory.NEW,
) -> MenuItem:
    return MenuItem(
        id=item_id or name.lower().replace(" ", "_"),
        name=name,
        price=Decimal("5.00"),
        category=category,
        is_veg=is_veg,
    )


@pytest.mark.unit
class TestMenuOrdering:
    """Test suite for the canonical menu order."""

    def test_veg_prefix_before_generic_names(self) -> None:
        """Test the documented example ordering."""
        items = [
            make_item("Veg Manchurian", is_veg=True),
            make_item("Chicken Manchurian", is_veg=False),
            make_item("Apple Dessert", is_veg=True),
        ]

        names = [item.name for item in sort_menu_items(items)]

        assert names == ["Veg Manchurian", "Apple Dessert", "Chicken Manchurian"]

    def test_prefix_buckets_within_non_veg(self) -> None:
        """Test chicken, then prawn, then everything else for non-veg dishes."""
        items = [
            make_item("Fish Fingers", is_veg=False),
            make_item("Prawns Tempura", is_veg=False),
            make_item("Chicken Lollipop", is_veg=False),
            make_item("Beef Chilli", is_veg=False),
        ]

        names = [item.name for item in sort_menu_items(items)]

        assert names == ["Chicken Lollipop", "Prawns Tempura", "Beef Chilli", "Fish Fingers"]

    def test_prefix_matching_is_case_insensitive(self) -> None:
        assert name_bucket("VEG Noodles") == 0
        assert name_bucket("chicken soup") == 1
        assert name_bucket("Prawn Rice") == 2
        assert name_bucket("Vegetable Rice") == 0
        assert name_bucket("Spring Roll") == 3

    def test_alphabetical_within_bucket_ignores_case(self) -> None:
        items = [
            make_item("chilli Paneer", is_veg=True),
            make_item("Baby Corn", is_veg=True),
            make_item("aloo Gobi", is_veg=True),
        ]

        names = [item.name for item in sort_menu_items(items)]

        assert names == ["aloo Gobi", "Baby Corn", "chilli Paneer"]

    def test_accented_names_collate_with_base_letter(self) -> None:
        """Test that accented names sort by letter, not by code point."""
        items = [
            make_item("Fudge", is_veg=True),
            make_item("Éclair", is_veg=True),
            make_item("Crème Brûlée", is_veg=True),
            make_item("Date Roll", is_veg=True),
        ]

        names = [item.name for item in sort_menu_items(items)]

        assert names == ["Crème Brûlée", "Date Roll", "Éclair", "Fudge"]

    def test_sort_is_idempotent(self) -> None:
        items = [
            make_item("Veg Momos", True),
            make_item("Chicken Momos", False),
            make_item("Prawn Momos", False),
            make_item("Paneer Momos", True),
            make_item("Mixed Momos", False),
        ]

        once = sort_menu_items(items)

        assert sort_menu_items(once) == once

    def test_sort_independent_of_merge_order(self) -> None:
        """Test that identical names with different ids still sort deterministically."""
        items = [
            make_item("Veg Momos", True, item_id="a", category=MenuCategory.MOMOS),
            make_item("Veg Momos", True, item_id="b", category=MenuCategory.NEW),
            make_item("Chicken Soup", False, category=MenuCategory.SOUPS),
            make_item("Hot And Sour Soup", True, category=MenuCategory.SOUPS),
            make_item("Prawn Crackers", False, category=MenuCategory.EXTRA),
        ]
        expected = [item.id for item in sort_menu_items(items)]

        shuffled = list(items)
        for seed in range(5):
            random.Random(seed).shuffle(shuffled)
            assert [item.id for item in sort_menu_items(shuffled)] == expected

    def test_sort_does_not_mutate_input(self) -> None:
        items = [make_item("Chicken Soup", False), make_item("Veg Soup", True)]

        sort_menu_items(items)

        assert [item.name for item in items] == ["Chicken Soup", "Veg Soup"]


@pytest.mark.unit
class TestMenuCatalogService:
    """Test suite for MenuCatalogService."""

    @pytest.fixture
    def mock_repository(self) -> MagicMock:
        """Create a mock menu repository."""
        return MagicMock(spec=MenuItemRepository)

    @pytest.fixture
    def service(self, mock_repository: MagicMock) -> MenuCatalogService:
        """Create a MenuCatalogService with mocked repository."""
        return MenuCatalogService(menu_repository=mock_repository)

    def test_categories_in_display_order(self, service: MenuCatalogService) -> None:
        categories = service.categories()

        assert categories[0] == "new"
        assert categories[-1] == "extra"
        assert len(categories) == 19

    @pytest.mark.asyncio
    async def test_list_all_merges_and_sorts_partitions(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        """Test that items of every category are merged into one sorted list."""
        partitions = {
            MenuCategory.CHICKEN_STARTER: [
                make_item("Chicken 65", False, category=MenuCategory.CHICKEN_STARTER)
            ],
            MenuCategory.VEG_STARTER: [
                make_item("Veg Spring Roll", True, category=MenuCategory.VEG_STARTER)
            ],
            MenuCategory.DESSERTS: [make_item("Apple Pie", True, category=MenuCategory.DESSERTS)],
        }
        mock_repository.list_by_category.side_effect = lambda category: partitions.get(category, [])

        items = await service.list_all()

        assert [item.name for item in items] == ["Veg Spring Roll", "Apple Pie", "Chicken 65"]
        assert mock_repository.list_by_category.call_count == len(MenuCategory)

    @pytest.mark.asyncio
    async def test_list_all_skips_failed_partition(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        """Test that a failing category contributes no items instead of failing the request."""

        def list_by_category(category: MenuCategory) -> list[MenuItem]:
            if category is MenuCategory.SOUPS:
                raise StorageError("Failed to read menu category soups")
            if category is MenuCategory.MOMOS:
                return [make_item("Veg Momos", True, category=MenuCategory.MOMOS)]
            return []

        mock_repository.list_by_category.side_effect = list_by_category

        items = await service.list_all()

        assert [item.name for item in items] == ["Veg Momos"]

    @pytest.mark.asyncio
    async def test_list_all_all_partitions_failing_returns_empty(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        mock_repository.list_by_category.side_effect = StorageError("down")

        assert await service.list_all() == []

    @pytest.mark.asyncio
    async def test_list_by_category_sorts(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        mock_repository.list_by_category.return_value = [
            make_item("Mixed Fried Rice", False, category=MenuCategory.RICE),
            make_item("Chicken Fried Rice", False, category=MenuCategory.RICE),
            make_item("Veg Fried Rice", True, category=MenuCategory.RICE),
        ]

        items = await service.list_by_category("rice")

        assert [item.name for item in items] == [
            "Veg Fried Rice",
            "Chicken Fried Rice",
            "Mixed Fried Rice",
        ]
        mock_repository.list_by_category.assert_called_once_with(MenuCategory.RICE)

    @pytest.mark.asyncio
    async def test_list_by_category_unknown_category(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        """Test that an unknown category is rejected without touching the store."""
        with pytest.raises(InvalidCategoryError) as exc_info:
            await service.list_by_category("pizza")

        assert exc_info.value.category == "pizza"
        mock_repository.list_by_category.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_by_category_propagates_storage_error(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        mock_repository.list_by_category.side_effect = StorageError("down")

        with pytest.raises(StorageError):
            await service.list_by_category("rice")

    @pytest.mark.asyncio
    async def test_get_item_searches_categories(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        target = make_item("Thai Green Curry", False, item_id="item_9", category=MenuCategory.THAI)
        mock_repository.get_item.side_effect = (
            lambda category, item_id: target if category is MenuCategory.THAI else None
        )

        item = await service.get_item("item_9")

        assert item == target

    @pytest.mark.asyncio
    async def test_get_item_not_found(
        self, service: MenuCatalogService, mock_repository: MagicMock
    ) -> None:
        mock_repository.get_item.return_value = None

        assert await service.get_item("missing") is None
        assert mock_repository.get_item.call_count == len(MenuCategory)

    @pytest.mark.asyncio
    async def test_add_item(self, service: MenuCatalogService, mock_repository: MagicMock) -> None:
        """Test that a new dish gets an id and timestamps before being saved."""
        mock_repository.save_item.side_effect = lambda item: item
        item_create = MenuItemCreate(
            name="Chicken Chop Suey",
            description="American chop suey",
            price=Decimal("11.00"),
            category=MenuCategory.CHOP_SUEY,
            is_veg=False,
            image="https://example.com/chopsuey.jpg",
        )

        item = await service.add_item(item_create)

        assert item.id
        assert item.category is MenuCategory.CHOP_SUEY
        assert item.image == "https://example.com/chopsuey.jpg"
        assert item.created_at == item.updated_at
        mock_repository.save_item.assert_called_once_with(item)


def partition_rows(**rows_by_category: Any) -> Any:
    """Build a Table.query side effect serving rows, or raising, per category partition."""

    def query(**kwargs: Any) -> dict[str, Any]:
        category = kwargs["ExpressionAttributeValues"][":category"]
        rows = rows_by_category.get(category, [])
        if isinstance(rows, Exception):
            raise rows
        return {"Items": rows}

    return query


@pytest.mark.unit
class TestMenuCatalogOverTable:
    """Catalog reads through a real MenuItemRepository over a mocked table."""

    @pytest.fixture
    def mock_table(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def service(self, mock_table: MagicMock) -> MenuCatalogService:
        dynamodb = MagicMock()
        dynamodb.Table.return_value = mock_table
        return MenuCatalogService(
            menu_repository=MenuItemRepository(dynamodb_resource=dynamodb, table_name="menu")
        )

    @pytest.mark.asyncio
    async def test_list_all_survives_connection_error(
        self, service: MenuCatalogService, mock_table: MagicMock
    ) -> None:
        """Test that an unreachable partition contributes no items."""
        mock_table.query.side_effect = partition_rows(
            momos=EndpointConnectionError(endpoint_url="http://localhost:8000"),
            soups=[
                {"category": "soups", "id": "s2", "name": "Tom Yum", "price": 5, "is_veg": False},
                {"category": "soups", "id": "s1", "name": "Veg Soup", "price": 4, "is_veg": True},
            ],
        )

        items = await service.list_all()

        assert [item.name for item in items] == ["Veg Soup", "Tom Yum"]

    @pytest.mark.asyncio
    async def test_list_all_skips_malformed_item(
        self, service: MenuCatalogService, mock_table: MagicMock
    ) -> None:
        """Test that a record missing its name does not hide the other items."""
        mock_table.query.side_effect = partition_rows(
            momos=[
                {"category": "momos", "id": "m1", "price": 6, "is_veg": True},
                {"category": "momos", "id": "m2", "name": "Veg Momos", "price": 6, "is_veg": True},
            ],
            soups=[
                {"category": "soups", "id": "s1", "name": "Chicken Soup", "price": 5},
            ],
        )

        items = await service.list_all()

        assert [item.name for item in items] == ["Veg Momos", "Chicken Soup"]

    @pytest.mark.asyncio
    async def test_list_by_category_connection_error_is_storage_error(
        self, service: MenuCatalogService, mock_table: MagicMock
    ) -> None:
        mock_table.query.side_effect = EndpointConnectionError(
            endpoint_url="http://localhost:8000"
        )

        with pytest.raises(StorageError):
            await service.list_by_category("soups")
