"""Custom metrics for the sales tally service."""

from opentelemetry import metrics

meter = metrics.get_meter("sales-tally-svc")

sale_adjustment_counter = meter.create_counter(
    name="sale_adjustments_total",
    description="Unit adjustments recorded on the shift ledger by direction",
    unit="1",
)

shift_reset_counter = meter.create_counter(
    name="shift_resets_total",
    description="Number of times the shift ledger was cleared",
    unit="1",
)

report_counter = meter.create_counter(
    name="shift_reports_total",
    description="Number of end-of-shift reports built",
    unit="1",
)

backup_import_counter = meter.create_counter(
    name="backup_imports_total",
    description="Backup import attempts by outcome",
    unit="1",
)


def record_sale_adjustment(delta: int) -> None:
    """Record a ledger adjustment.

    Args:
        delta: Units added (positive) or removed (negative)
    """
    direction = "increment" if delta >= 0 else "decrement"
    sale_adjustment_counter.add(abs(delta), {"direction": direction})


def record_shift_reset() -> None:
    """Record that the shift ledger was cleared."""
    shift_reset_counter.add(1)


def record_report_built(section_count: int) -> None:
    """Record that a shift report was assembled.

    Args:
        section_count: Number of category sections in the report
    """
    report_counter.add(1, {"has_sales": section_count > 0})


def record_backup_import(success: bool) -> None:
    """Record a backup import attempt.

    Args:
        success: Whether the backup replaced the catalog
    """
    backup_import_counter.add(1, {"outcome": "accepted" if success else "rejected"})
