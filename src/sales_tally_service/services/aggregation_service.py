"""Aggregations over a catalog snapshot and a sale ledger.

Every function here is total: missing ledger entries count as zero, dishes
whose category no longer exists are skipped, and empty inputs produce zero
totals and empty lists. Nothing is cached; each call recomputes from the
snapshot it is given.

Unit totals come in two flavours:

- grand_total_units sums every ledger entry, including ids that no longer
  match a dish.
- catalog_units only counts dishes that still resolve, matching what the
  money totals see.
"""

from decimal import Decimal

from sales_tally_service.models.catalog_models import CatalogSnapshot
from sales_tally_service.models.ledger_models import SaleLedger
from sales_tally_service.models.report_models import (
    BreakdownLine,
    CategoryBreakdown,
    ShiftSummary,
    Subtotal,
    TopSeller,
)

DEFAULT_TOP_SELLERS = 3


def grand_total_money(catalog: CatalogSnapshot, ledger: SaleLedger) -> Decimal:
    """Sum price x quantity over every resolvable dish.

    Args:
        catalog: Current catalog snapshot
        ledger: Shift sale ledger

    Returns:
        Decimal: Total revenue for the shift
    """
    total = Decimal("0")
    for dish, _category in catalog.resolvable_dishes():
        total += dish.price * ledger.quantity_for(dish.id)
    return total


def grand_total_units(ledger: SaleLedger) -> int:
    """Sum every quantity in the ledger, without catalog filtering."""
    return sum(ledger.quantities.values())


def catalog_units(catalog: CatalogSnapshot, ledger: SaleLedger) -> int:
    """Sum quantities for dishes that still resolve in the catalog."""
    return sum(ledger.quantity_for(dish.id) for dish, _category in catalog.resolvable_dishes())


def regular_subtotal(catalog: CatalogSnapshot, ledger: SaleLedger) -> Subtotal:
    """Money and units for dishes in non-special categories.

    Args:
        catalog: Current catalog snapshot
        ledger: Shift sale ledger

    Returns:
        Subtotal: Regular-category money and units
    """
    money = Decimal("0")
    units = 0
    for dish, category in catalog.resolvable_dishes():
        if category.is_special:
            continue
        qty = ledger.quantity_for(dish.id)
        money += dish.price * qty
        units += qty
    return Subtotal(money=money, units=units)


def category_breakdown(catalog: CatalogSnapshot, ledger: SaleLedger) -> list[CategoryBreakdown]:
    """Per-category sales, in category order, skipping categories with no sales.

    Args:
        catalog: Current catalog snapshot
        ledger: Shift sale ledger

    Returns:
        list: One CategoryBreakdown per category with at least one dish sold
    """
    breakdown = []
    seen: set[str] = set()
    for category in catalog.categories:
        # Duplicate ids resolve to the first category
        if category.id in seen:
            continue
        seen.add(category.id)

        lines = []
        for dish in catalog.dishes_in_category(category.id):
            qty = ledger.quantity_for(dish.id)
            if qty > 0:
                lines.append(BreakdownLine(dish=dish, qty=qty, subtotal=dish.price * qty))

        if not lines:
            continue

        breakdown.append(
            CategoryBreakdown(
                category=category,
                lines=lines,
                subtotal_money=sum((line.subtotal for line in lines), Decimal("0")),
                subtotal_units=sum(line.qty for line in lines),
            )
        )
    return breakdown


def top_sellers(
    catalog: CatalogSnapshot, ledger: SaleLedger, n: int = DEFAULT_TOP_SELLERS
) -> list[TopSeller]:
    """Rank dishes by units sold.

    Only dishes with a positive quantity are ranked. The sort is stable, so
    dishes with equal quantities keep their catalog order.

    Args:
        catalog: Current catalog snapshot
        ledger: Shift sale ledger
        n: Maximum number of dishes to return

    Returns:
        list: Up to n TopSeller entries, best first
    """
    if n <= 0:
        return []

    sold = [
        TopSeller(dish=dish, units_sold=ledger.quantity_for(dish.id))
        for dish, _category in catalog.resolvable_dishes()
        if ledger.quantity_for(dish.id) > 0
    ]
    sold.sort(key=lambda seller: seller.units_sold, reverse=True)
    return sold[:n]


def summarize_shift(
    catalog: CatalogSnapshot, ledger: SaleLedger, top_n: int = DEFAULT_TOP_SELLERS
) -> ShiftSummary:
    """Compute every headline aggregate in one pass of calls.

    Args:
        catalog: Current catalog snapshot
        ledger: Shift sale ledger
        top_n: Number of best sellers to include

    Returns:
        ShiftSummary: Grand totals, regular subtotal, breakdown and top sellers
    """
    return ShiftSummary(
        grand_total_money=grand_total_money(catalog, ledger),
        grand_total_units=grand_total_units(ledger),
        catalog_units=catalog_units(catalog, ledger),
        regular=regular_subtotal(catalog, ledger),
        breakdown=category_breakdown(catalog, ledger),
        top_sellers=top_sellers(catalog, ledger, top_n),
    )
