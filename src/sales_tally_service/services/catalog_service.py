"""Dish lookup for the sales and checkout screens.

Both screens show either the dishes of the active category tab or, while the
operator is typing a search, every dish whose name matches.
"""

from sales_tally_service.models.catalog_models import CatalogSnapshot, Dish


def resolve_active_category(catalog: CatalogSnapshot, category_id: str | None) -> str | None:
    """Pick the category tab to show.

    Args:
        catalog: Current catalog snapshot
        category_id: Tab the operator had selected, if any

    Returns:
        str | None: The requested id if it still exists, otherwise the first
        category's id, or None for an empty catalog
    """
    if not catalog.categories:
        return None
    # Tab disappeared (e.g. after an import), fall back to the first one
    if category_id is None or category_id not in catalog.category_index():
        return catalog.categories[0].id
    return category_id


def filter_dishes(
    catalog: CatalogSnapshot, query: str = "", category_id: str | None = None
) -> list[Dish]:
    """Dishes to list for a search query or category tab.

    A non-empty query matches dish names case-insensitively across all
    categories and ignores the tab. Without a query only the dishes of the
    active category are returned.

    Args:
        catalog: Current catalog snapshot
        query: Search text as typed
        category_id: Selected category tab

    Returns:
        list: Matching dishes in catalog order
    """
    if query:
        needle = query.casefold()
        return [dish for dish in catalog.dishes if needle in dish.name.casefold()]

    active = resolve_active_category(catalog, category_id)
    if active is None:
        return []
    return [dish for dish in catalog.dishes if dish.category_id == active]
