"""Shift service for recording sales and producing end-of-shift views."""

import logging
from dataclasses import dataclass

from sales_tally_service.models.catalog_models import CatalogSnapshot
from sales_tally_service.models.ledger_models import SaleLedger
from sales_tally_service.models.report_models import ShiftReport, ShiftSummary
from sales_tally_service.observability import traced
from sales_tally_service.observability.metrics import (
    record_backup_import,
    record_report_built,
    record_sale_adjustment,
    record_shift_reset,
)
from sales_tally_service.repositories.state_repository import ShiftStateRepository
from sales_tally_service.services.aggregation_service import DEFAULT_TOP_SELLERS, summarize_shift
from sales_tally_service.services.backup_service import BackupImportResult, export_backup, parse_backup
from sales_tally_service.services.report_service import build_report

logger = logging.getLogger(__name__)


@dataclass
class SaleAdjustment:
    """Result of adjusting a dish on the shift ledger.

    Attributes:
        dish_id: The dish that was adjusted
        quantity: Units sold after the adjustment
        persisted: Whether the ledger was saved
    """

    dish_id: str
    quantity: int
    persisted: bool


class ShiftService:
    """Service for the operator's shift workflow.

    Every operation loads the current catalog and ledger from the repository,
    so changes made elsewhere (e.g. a backup import) are always picked up.
    """

    def __init__(
        self,
        state_repository: ShiftStateRepository,
        top_sellers_limit: int = DEFAULT_TOP_SELLERS,
    ) -> None:
        """Initialize the ShiftService.

        Args:
            state_repository: Repository for catalog, ledger and settings
            top_sellers_limit: Number of best sellers shown in summaries and reports
        """
        self.state_repository = state_repository
        self.top_sellers_limit = top_sellers_limit

    def get_catalog(self) -> CatalogSnapshot:
        """Return the current catalog snapshot."""
        return self.state_repository.load_catalog()

    def get_ledger(self) -> SaleLedger:
        """Return the current shift ledger."""
        return self.state_repository.load_sale_ledger()

    @traced("record_sale", service_name="sales-tally-svc", attribute_args=("dish_id", "delta"))
    def record_sale(self, dish_id: str, delta: int) -> SaleAdjustment:
        """Add or remove units sold for a dish and persist the ledger.

        Args:
            dish_id: Dish to adjust
            delta: Units to add (negative to remove)

        Returns:
            SaleAdjustment with the new quantity
        """
        # Always start from the stored ledger
        ledger = self.state_repository.load_sale_ledger()
        quantity = ledger.increment(dish_id, delta)
        persisted = self.state_repository.save_sale_ledger(ledger)
        if not persisted:
            logger.error(f"Sale adjustment for {dish_id} was not persisted")

        record_sale_adjustment(delta)
        return SaleAdjustment(dish_id=dish_id, quantity=quantity, persisted=persisted)

    def reset_sales(self, confirmed: bool) -> bool:
        """Clear the shift ledger.

        The reset cannot be undone, so it only happens when the operator has
        explicitly confirmed it.

        Args:
            confirmed: Whether the operator confirmed the reset

        Returns:
            bool: True if the ledger was cleared and saved
        """
        if not confirmed:
            logger.info("Sales reset requested without confirmation, ignoring")
            return False

        # Save an empty ledger rather than deleting the key
        ledger = self.state_repository.load_sale_ledger()
        ledger.reset()
        if not self.state_repository.save_sale_ledger(ledger):
            return False

        record_shift_reset()
        logger.info("Shift sales ledger reset")
        return True

    def get_summary(self) -> ShiftSummary:
        """Compute the headline aggregates for the current shift."""
        return summarize_shift(self.get_catalog(), self.get_ledger(), self.top_sellers_limit)

    def build_report(self) -> ShiftReport:
        """Assemble the end-of-shift report document.

        Returns:
            ShiftReport ready for rendering
        """
        report = build_report(
            self.get_catalog(),
            self.get_ledger(),
            business_name=self.state_repository.load_business_name(),
            top_n=self.top_sellers_limit,
        )
        record_report_built(len(report.sections))
        return report

    def import_backup(self, raw: str | bytes) -> BackupImportResult:
        """Replace the catalog with the contents of a backup file.

        Args:
            raw: Backup file contents

        Returns:
            BackupImportResult with a user-facing message
        """
        result = parse_backup(raw)
        # Nothing is written unless the whole file validated
        if result.success and result.catalog is not None:
            if not self.state_repository.save_catalog(result.catalog):
                result = BackupImportResult(
                    success=False, message="The menu could not be saved. Try again."
                )
            else:
                logger.info(
                    f"Imported backup with {len(result.catalog.categories)} categories "
                    f"and {len(result.catalog.dishes)} dishes"
                )

        record_backup_import(result.success)
        return result

    def export_backup(self) -> str:
        """Serialize the current catalog to backup file contents."""
        return export_backup(self.get_catalog())

    def get_business_name(self) -> str:
        """Return the business name printed on reports."""
        return self.state_repository.load_business_name()

    def set_business_name(self, name: str) -> bool:
        """Store the business name printed on reports."""
        return self.state_repository.save_business_name(name.strip())
