"""End-of-shift report assembly."""

import logging
from datetime import UTC, datetime

from sales_tally_service.models.catalog_models import CatalogSnapshot
from sales_tally_service.models.ledger_models import SaleLedger
from sales_tally_service.models.report_models import (
    ReportFooter,
    ReportHeader,
    ReportLine,
    ReportSection,
    ReportSubtotalRow,
    ShiftReport,
)
from sales_tally_service.observability import traced
from sales_tally_service.services.aggregation_service import (
    DEFAULT_TOP_SELLERS,
    category_breakdown,
    grand_total_money,
    grand_total_units,
    regular_subtotal,
    top_sellers,
)

logger = logging.getLogger(__name__)

REPORT_TITLE = "SALES REPORT"


@traced("build_shift_report", service_name="sales-tally-svc")
def build_report(
    catalog: CatalogSnapshot,
    ledger: SaleLedger,
    business_name: str = "",
    generated_at: datetime | None = None,
    top_n: int = DEFAULT_TOP_SELLERS,
) -> ShiftReport:
    """Build the ordered end-of-shift document.

    The document holds a header with grand and regular totals, then one
    section per category with sales (in catalog order) ending in a subtotal
    row, then a footer with grand totals.

    Args:
        catalog: Current catalog snapshot
        ledger: Shift sale ledger
        business_name: Name printed under the title
        generated_at: Report timestamp (defaults to now, UTC)
        top_n: Number of best sellers to include

    Returns:
        ShiftReport: Fully computed document model
    """
    total_units = grand_total_units(ledger)
    total_money = grand_total_money(catalog, ledger)
    regular = regular_subtotal(catalog, ledger)

    header = ReportHeader(
        title=REPORT_TITLE,
        business_name=business_name,
        generated_at=generated_at or datetime.now(UTC),
        total_units=total_units,
        total_money=total_money,
        regular_units=regular.units,
        regular_money=regular.money,
    )

    sections = []
    for entry in category_breakdown(catalog, ledger):
        sections.append(
            ReportSection(
                category_id=entry.category.id,
                title=entry.category.name.upper(),
                is_special=entry.category.is_special,
                lines=[
                    ReportLine(
                        name=line.dish.name,
                        unit_price=line.dish.price,
                        qty=line.qty,
                        subtotal=line.subtotal,
                    )
                    for line in entry.lines
                ],
                subtotal=ReportSubtotalRow(
                    label=f"Subtotal {entry.category.name}",
                    units=entry.subtotal_units,
                    money=entry.subtotal_money,
                ),
            )
        )

    logger.info(f"Built shift report with {len(sections)} sections and {total_units} units")

    return ShiftReport(
        header=header,
        sections=sections,
        footer=ReportFooter(total_units=total_units, total_money=total_money),
        top_sellers=top_sellers(catalog, ledger, top_n),
    )
