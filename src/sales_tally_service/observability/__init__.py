"""Logging, tracing and metrics for the sales tally service."""

from sales_tally_service.observability.config import configure_logging, setup_observability
from sales_tally_service.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
