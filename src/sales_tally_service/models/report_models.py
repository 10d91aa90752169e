"""Aggregate and report view models.

These models are derived from a catalog snapshot and a sale ledger and are
never stored. All amounts are plain numbers; currency formatting is left to
whoever renders them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from sales_tally_service.models.catalog_models import Category, Dish


class Subtotal(BaseModel):
    """Money and unit totals for a subset of dishes."""

    money: Decimal = Field(default=Decimal("0"), description="Sum of price x quantity")
    units: int = Field(default=0, description="Sum of quantities", ge=0)


class BreakdownLine(BaseModel):
    """A single dish row inside a category breakdown."""

    dish: Dish
    qty: int = Field(..., ge=0)
    subtotal: Decimal


class CategoryBreakdown(BaseModel):
    """Sales for one category that has at least one dish sold."""

    category: Category
    lines: list[BreakdownLine] = Field(default_factory=list)
    subtotal_money: Decimal = Decimal("0")
    subtotal_units: int = 0


class TopSeller(BaseModel):
    """A dish ranked among the best sellers."""

    dish: Dish
    units_sold: int = Field(..., ge=0)


class ShiftSummary(BaseModel):
    """All headline aggregates for the current shift."""

    grand_total_money: Decimal
    grand_total_units: int
    # Units of dishes still in the catalog; grand_total_units also counts deleted ones
    catalog_units: int
    regular: Subtotal
    breakdown: list[CategoryBreakdown] = Field(default_factory=list)
    top_sellers: list[TopSeller] = Field(default_factory=list)


class ReportRowType(str, Enum):
    """Kinds of rows in a report section."""

    LINE = "line"
    SUBTOTAL = "subtotal"


class ReportLine(BaseModel):
    """A dish line in a report section."""

    row_type: ReportRowType = ReportRowType.LINE
    name: str
    unit_price: Decimal
    qty: int
    subtotal: Decimal


class ReportSubtotalRow(BaseModel):
    """Closing subtotal row of a report section."""

    row_type: ReportRowType = ReportRowType.SUBTOTAL
    label: str
    units: int
    money: Decimal


class ReportSection(BaseModel):
    """One category section of the shift report."""

    category_id: str
    title: str
    is_special: bool = False
    lines: list[ReportLine] = Field(default_factory=list)
    subtotal: ReportSubtotalRow


class ReportHeader(BaseModel):
    """Headline figures printed above the report table."""

    title: str
    business_name: str = ""
    generated_at: datetime
    total_units: int
    total_money: Decimal
    regular_units: int
    regular_money: Decimal


class ReportFooter(BaseModel):
    """Document-level totals printed after the last section."""

    total_units: int
    total_money: Decimal


class ShiftReport(BaseModel):
    """Ordered end-of-shift document ready for an external renderer."""

    header: ReportHeader
    sections: list[ReportSection] = Field(default_factory=list)
    footer: ReportFooter
    top_sellers: list[TopSeller] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether nothing was sold during the shift."""
        return self.footer.total_units == 0
