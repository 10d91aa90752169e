"""Catalog data models.

These models represent the menu categories and dishes configured by the operator.
Field aliases keep the JSON keys used by persisted state and backup files
(``menuId``, ``isSpecial``), while Python callers use snake_case names.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    """Menu category model.

    Special categories (e.g. miscellaneous "other sales") count toward grand
    totals but are excluded from the regular subtotal.
    """

    # Backups written by hand may carry numeric ids
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="Unique identifier for the category")
    name: str = Field(..., description="Category name")
    is_special: bool = Field(
        default=False,
        alias="isSpecial",
        description="Whether the category is excluded from regular subtotals",
    )


class Dish(BaseModel):
    """Sellable dish model."""

    # Backups written by hand may carry numeric ids
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="Unique identifier for the dish")
    category_id: str = Field(..., alias="menuId", description="Category this dish belongs to")
    name: str = Field(..., description="Dish name")
    price: Decimal = Field(..., description="Unit price", ge=0)
    description: str | None = Field(None, description="Dish description")


class CatalogSnapshot(BaseModel):
    """Read-only view of categories and dishes for a single evaluation.

    Lookups are built on each call so a snapshot never outlives the data it
    was created from.
    """

    categories: list[Category] = Field(default_factory=list)
    dishes: list[Dish] = Field(default_factory=list)

    def category_index(self) -> dict[str, Category]:
        """Map category id to category, first occurrence wins.

        Returns:
            dict: Category lookup keyed by id
        """
        index: dict[str, Category] = {}
        for category in self.categories:
            index.setdefault(category.id, category)
        return index

    def dish_index(self) -> dict[str, Dish]:
        """Map dish id to dish, first occurrence wins.

        Returns:
            dict: Dish lookup keyed by id
        """
        index: dict[str, Dish] = {}
        for dish in self.dishes:
            index.setdefault(dish.id, dish)
        return index

    def resolvable_dishes(self) -> list[tuple[Dish, Category]]:
        """Return dishes whose category exists, paired with that category.

        Orphaned dishes are skipped. Catalog order is preserved.

        Returns:
            list: (dish, category) pairs
        """
        categories = self.category_index()
        pairs = []
        for dish in self.dishes:
            category = categories.get(dish.category_id)
            if category is not None:
                pairs.append((dish, category))
        return pairs

    def dishes_in_category(self, category_id: str) -> list[Dish]:
        """Return the dishes filed under a category, in catalog order."""
        return [dish for dish in self.dishes if dish.category_id == category_id]
