"""FastAPI application backing the point-of-sale screens."""

import logging
from datetime import date
from decimal import Decimal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from sales_tally_service.handlers.formatting import format_currency, report_filename
from sales_tally_service.models.catalog_models import CatalogSnapshot, Dish
from sales_tally_service.models.checkout_models import ChangeResult, ChangeStatusEnum, CheckoutQuote
from sales_tally_service.models.report_models import ShiftReport, ShiftSummary
from sales_tally_service.services.backup_service import backup_filename
from sales_tally_service.services.catalog_service import filter_dishes, resolve_active_category
from sales_tally_service.services.checkout_service import CheckoutSession
from sales_tally_service.services.shift_service import ShiftService

logger = logging.getLogger(__name__)

INSUFFICIENT_FUNDS_MESSAGE = "Insufficient funds"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class AdjustRequest(BaseModel):
    """Request body for unit adjustments."""

    delta: int = Field(default=1, description="Units to add (negative to remove)")


class SaleAdjustResponse(BaseModel):
    """Response model for a ledger adjustment."""

    dish_id: str
    quantity: int


class ResetRequest(BaseModel):
    """Request body for clearing the shift ledger."""

    confirm: bool = False


class ResetResponse(BaseModel):
    """Response model for a ledger reset."""

    success: bool
    message: str


class ImportResponse(BaseModel):
    """Response model for backup imports."""

    success: bool
    message: str
    category_count: int = 0
    dish_count: int = 0


class BusinessNameRequest(BaseModel):
    """Request body for the business name setting."""

    name: str = Field(..., max_length=80)


class DishListResponse(BaseModel):
    """Dishes listed for a search or category tab."""

    active_category_id: str | None
    query: str
    dishes: list[Dish]


class SummaryResponse(BaseModel):
    """Headline aggregates with display strings."""

    summary: ShiftSummary
    grand_total_display: str
    regular_total_display: str


class ReportResponse(BaseModel):
    """Report document with rendering hints."""

    report: ShiftReport
    filename: str
    total_display: str


class TenderRequest(BaseModel):
    """Request body for the tendered amount."""

    amount: str | int | float | Decimal | None = Field(
        None, description="Amount as typed, or a preset value"
    )


class CheckoutResponse(BaseModel):
    """Checkout quote with display strings."""

    quote: CheckoutQuote
    total_display: str
    change_display: str


def describe_change(change: ChangeResult) -> str:
    """Turn a change result into the text shown to the operator.

    Args:
        change: Result of the change calculation

    Returns:
        str: Formatted change, the insufficient-funds message, or "" without a tender
    """
    if change.status == ChangeStatusEnum.INSUFFICIENT_FUNDS:
        return INSUFFICIENT_FUNDS_MESSAGE
    if change.status == ChangeStatusEnum.OK and change.change is not None:
        return format_currency(change.change)
    return ""


def create_app(shift_service: ShiftService, checkout_session: CheckoutSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        shift_service: Service for the shift workflow
        checkout_session: In-memory checkout state (a new one is created if omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Sales Tally Service",
        description="Shift sales tally, end-of-shift reporting and checkout change calculation",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.shift_service = shift_service
    app.state.checkout_session = checkout_session or CheckoutSession()

    def checkout_response() -> CheckoutResponse:
        catalog: CatalogSnapshot = app.state.shift_service.get_catalog()
        quote = app.state.checkout_session.quote(catalog)
        return CheckoutResponse(
            quote=quote,
            total_display=format_currency(quote.total),
            change_display=describe_change(quote.change),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.get("/catalog", response_model=CatalogSnapshot, tags=["Catalog"])
    async def get_catalog() -> CatalogSnapshot:
        """Return the current categories and dishes."""
        catalog: CatalogSnapshot = app.state.shift_service.get_catalog()
        return catalog

    @app.get("/catalog/dishes", response_model=DishListResponse, tags=["Catalog"])
    async def list_dishes(
        q: str = Query("", description="Case-insensitive name search"),
        category_id: str | None = Query(None, description="Selected category tab"),
    ) -> DishListResponse:
        """List dishes matching a search, or the dishes of the active tab."""
        catalog: CatalogSnapshot = app.state.shift_service.get_catalog()
        return DishListResponse(
            # Stale tabs snap back to the first category
            active_category_id=resolve_active_category(catalog, category_id),
            query=q,
            dishes=filter_dishes(catalog, query=q, category_id=category_id),
        )

    @app.post("/catalog/import", response_model=ImportResponse, tags=["Catalog"])
    async def import_catalog(request: Request) -> ImportResponse | JSONResponse:
        """Replace the catalog with an uploaded backup file.

        The request body is the raw backup file contents.

        Returns:
            Confirmation with imported counts, or 422 with a rejection message
        """
        # The file is posted as-is; parsing belongs to the backup service
        raw = await request.body()
        result = app.state.shift_service.import_backup(raw)

        if not result.success or result.catalog is None:
            return JSONResponse(
                status_code=422,
                content=ImportResponse(success=False, message=result.message).model_dump(),
            )

        return ImportResponse(
            success=True,
            message=result.message,
            category_count=len(result.catalog.categories),
            dish_count=len(result.catalog.dishes),
        )

    @app.get("/catalog/export", tags=["Catalog"])
    async def export_catalog() -> Response:
        """Download the current catalog as a backup file."""
        content = app.state.shift_service.export_backup()
        filename = backup_filename(date.today())
        return Response(
            content=content,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/sales", response_model=dict[str, int], tags=["Sales"])
    async def get_sales() -> dict[str, int]:
        """Return units sold by dish id for the current shift."""
        ledger = app.state.shift_service.get_ledger()
        return ledger.to_storage_item()

    @app.post("/sales/{dish_id}/adjust", response_model=SaleAdjustResponse, tags=["Sales"])
    async def adjust_sale(dish_id: str, body: AdjustRequest) -> SaleAdjustResponse:
        """Add or remove units sold for a dish.

        Raises:
            HTTPException: 503 if the ledger could not be saved
        """
        adjustment = app.state.shift_service.record_sale(dish_id=dish_id, delta=body.delta)
        if not adjustment.persisted:
            raise HTTPException(status_code=503, detail="Sale could not be saved")
        return SaleAdjustResponse(dish_id=adjustment.dish_id, quantity=adjustment.quantity)

    @app.post("/sales/reset", response_model=ResetResponse, tags=["Sales"])
    async def reset_sales(body: ResetRequest) -> ResetResponse:
        """Clear the shift ledger.

        Raises:
            HTTPException: 409 without confirmation, 503 if the ledger could not be saved
        """
        if not body.confirm:
            raise HTTPException(status_code=409, detail="Reset must be confirmed")

        if not app.state.shift_service.reset_sales(confirmed=True):
            raise HTTPException(status_code=503, detail="Sales could not be reset")

        logger.info("Shift sales reset via API")
        return ResetResponse(success=True, message="Sales reset")

    @app.get("/summary", response_model=SummaryResponse, tags=["Reports"])
    async def get_summary() -> SummaryResponse:
        """Return grand totals, regular subtotal, breakdown and top sellers."""
        summary: ShiftSummary = app.state.shift_service.get_summary()
        return SummaryResponse(
            summary=summary,
            grand_total_display=format_currency(summary.grand_total_money),
            regular_total_display=format_currency(summary.regular.money),
        )

    @app.get("/report", response_model=ReportResponse, tags=["Reports"])
    async def get_report() -> ReportResponse:
        """Return the end-of-shift report document."""
        report: ShiftReport = app.state.shift_service.build_report()
        return ReportResponse(
            report=report,
            filename=report_filename(report.header.business_name, report.header.generated_at.date()),
            total_display=format_currency(report.footer.total_money),
        )

    @app.put("/settings/business-name", response_model=BusinessNameRequest, tags=["Settings"])
    async def set_business_name(body: BusinessNameRequest) -> BusinessNameRequest:
        """Store the business name printed on reports.

        Raises:
            HTTPException: 503 if the setting could not be saved
        """
        if not app.state.shift_service.set_business_name(body.name):
            raise HTTPException(status_code=503, detail="Business name could not be saved")
        return BusinessNameRequest(name=app.state.shift_service.get_business_name())

    @app.get("/checkout", response_model=CheckoutResponse, tags=["Checkout"])
    async def get_checkout() -> CheckoutResponse:
        """Return the current cart, total and change."""
        return checkout_response()

    @app.post("/checkout/items/{dish_id}", response_model=CheckoutResponse, tags=["Checkout"])
    async def update_checkout_item(dish_id: str, body: AdjustRequest) -> CheckoutResponse:
        """Add or remove a dish from the cart.

        Raises:
            HTTPException: 404 when adding a dish that is not in the catalog
        """
        catalog: CatalogSnapshot = app.state.shift_service.get_catalog()
        # Removals stay allowed so leftovers from a replaced menu can be dropped
        if body.delta > 0 and dish_id not in catalog.dish_index():
            raise HTTPException(status_code=404, detail=f"Dish {dish_id} not found")

        app.state.checkout_session.update(dish_id, body.delta)
        return checkout_response()

    @app.post("/checkout/tender", response_model=CheckoutResponse, tags=["Checkout"])
    async def set_tender(body: TenderRequest) -> CheckoutResponse:
        """Record the amount tendered by the customer."""
        app.state.checkout_session.set_tendered(body.amount)
        return checkout_response()

    @app.delete("/checkout", response_model=CheckoutResponse, tags=["Checkout"])
    async def clear_checkout() -> CheckoutResponse:
        """Complete or abandon the transaction, emptying the cart."""
        app.state.checkout_session.clear()
        return checkout_response()

    return app
