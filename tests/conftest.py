"""Shared pytest fixtures and configuration for all tests."""

from decimal import Decimal
from typing import Any

import pytest

from sales_tally_service.models.catalog_models import CatalogSnapshot, Category, Dish
from sales_tally_service.models.ledger_models import SaleLedger


class FakeStateTable:
    """In-memory stand-in for a DynamoDB table keyed by state_key."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}

    def get_item(self, Key: dict[str, str]) -> dict[str, Any]:  # noqa: N803
        item = self.items.get(Key["state_key"])
        return {"Item": dict(item)} if item is not None else {}

    def put_item(self, Item: dict[str, Any]) -> dict[str, Any]:  # noqa: N803
        self.items[Item["state_key"]] = dict(Item)
        return {}


class FakeDynamoDBResource:
    """In-memory stand-in for a boto3 DynamoDB resource."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeStateTable] = {}

    def Table(self, name: str) -> FakeStateTable:  # noqa: N802
        return self.tables.setdefault(name, FakeStateTable())


@pytest.fixture
def fake_dynamodb() -> FakeDynamoDBResource:
    """Fixture providing an in-memory DynamoDB resource."""
    return FakeDynamoDBResource()


@pytest.fixture
def lunch_category() -> Category:
    """Fixture providing a regular category."""
    return Category(id="menu_lunch", name="Lunch")


@pytest.fixture
def other_category() -> Category:
    """Fixture providing a special category."""
    return Category(id="menu_other", name="Other", is_special=True)


@pytest.fixture
def soup() -> Dish:
    """Fixture providing a regular dish."""
    return Dish(id="dish_soup", category_id="menu_lunch", name="Soup", price=Decimal("5000"))


@pytest.fixture
def ice() -> Dish:
    """Fixture providing a dish in the special category."""
    return Dish(id="dish_ice", category_id="menu_other", name="Ice", price=Decimal("2000"))


@pytest.fixture
def catalog(
    lunch_category: Category, other_category: Category, soup: Dish, ice: Dish
) -> CatalogSnapshot:
    """Fixture providing the Lunch/Other catalog."""
    return CatalogSnapshot(categories=[lunch_category, other_category], dishes=[soup, ice])


@pytest.fixture
def ledger() -> SaleLedger:
    """Fixture providing a ledger with Soup=3 and Ice=2."""
    return SaleLedger(quantities={"dish_soup": 3, "dish_ice": 2})


@pytest.fixture
def backup_payload() -> dict:
    """Fixture providing a backup file payload using persisted keys."""
    return {
        "menus": [
            {"id": "menu_lunch", "name": "Lunch"},
            {"id": "menu_other", "name": "Other", "isSpecial": True},
        ],
        "dishes": [
            {"id": "dish_soup", "menuId": "menu_lunch", "name": "Soup", "price": 5000},
            {
                "id": "dish_ice",
                "menuId": "menu_other",
                "name": "Ice",
                "price": 2000,
                "description": "Bag of ice",
            },
        ],
    }
